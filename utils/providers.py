# utils/providers.py
import logging
from dataclasses import dataclass
from sqlalchemy.exc import SQLAlchemyError
from .errors import StoreFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerseSource:
    """One backing shape holding verse rows.

    Every shape exposes book_id, chapter and verse columns; the text
    expressions absorb the differences between them.
    """
    name: str
    table: str
    id_expr: str = 'id'
    raw_expr: str = "COALESCE(text, '')"
    plain_expr: str = "COALESCE(text_plain, text, '')"


# Consulted in this order; the first shape with a non-empty answer wins
DEFAULT_SOURCES = (
    VerseSource('verses_api', 'verses_api'),
    VerseSource('verses_with_book', 'verses_with_book'),
    VerseSource('verses', 'verses'),
)


def _is_empty(result):
    if result is None:
        return True
    if isinstance(result, (list, tuple)):
        return len(result) == 0
    return False


class ProviderChain:
    """Run the same lookup against each verse source until one answers."""

    def __init__(self, engine, sources=DEFAULT_SOURCES):
        if not sources:
            raise ValueError("at least one verse source is required")
        self._engine = engine
        self.sources = tuple(sources)

    def first_non_empty(self, label, fetch):
        """Call ``fetch(conn, source)`` per source and return the first non-empty result.

        A source that raises is skipped. An empty answer from a working
        source is remembered and returned if nothing better turns up; only
        when every source raised does the lookup fail.
        """
        failures = []
        answered = False
        empty = None
        for source in self.sources:
            try:
                # Fresh connection per attempt: a failed statement can poison the transaction
                with self._engine.connect() as conn:
                    result = fetch(conn, source)
            except SQLAlchemyError as e:
                logger.warning(f"{label}: provider '{source.name}' unavailable: {e}")
                failures.append(e)
                continue
            if not _is_empty(result):
                return result
            if not answered:
                answered = True
                empty = result
            logger.debug(f"{label}: provider '{source.name}' returned nothing, trying next")

        if not answered:
            cause = failures[-1] if failures else None
            logger.error(f"{label}: every verse provider failed")
            raise StoreFailure(f"{label}: no verse provider could be queried", cause=cause) from cause
        return empty
