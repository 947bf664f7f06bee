# utils/resolver.py
import logging
import math
import re

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r'^\d+$')


def _parse_number(raw):
    """Lenient numeric parse for forms like '+43', ' 43 ' or '43.0'."""
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    return int(value)


class BookResolver:
    """Turn a user supplied book identifier into a canonical book key.

    Strategies run in a fixed order and the first hit wins:

    1. all digits: exact book key
    2. short code (case-sensitive)
    3. display name, case-insensitive
    4. display name prefix, case-insensitive
    5. display name substring, case-insensitive
    6. anything else that parses as a number: exact book key

    When several books match a prefix or substring, the store's tie break
    decides (lowest ordinal by default).
    """

    def __init__(self, store):
        self.store = store

    def _strategies(self, raw):
        digits = bool(_DIGITS_RE.match(raw))
        if digits:
            yield 'key', lambda: self.store.find_book_by_key(int(raw))
        yield 'code', lambda: self.store.find_book_by_code(raw)
        yield 'name', lambda: self.store.find_book_by_name_exact(raw)
        yield 'prefix', lambda: self.store.find_book_by_name_prefix(raw)
        yield 'contains', lambda: self.store.find_book_by_name_contains(raw)
        # Plain digits were already tried as a key above
        number = None if digits else _parse_number(raw)
        if number is not None:
            yield 'numeric', lambda: self.store.find_book_by_key(number)

    def resolve_book(self, raw):
        """Return the matching Book, or None when nothing matches."""
        if not raw:
            return None
        for strategy, lookup in self._strategies(raw):
            book = lookup()
            if book is not None:
                logger.debug(f"Resolved book {raw!r} to {book.key} via {strategy}")
                return book
        logger.info(f"Book identifier {raw!r} did not match any book")
        return None

    def resolve(self, raw):
        book = self.resolve_book(raw)
        return book.key if book is not None else None
