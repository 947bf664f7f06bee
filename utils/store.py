# utils/store.py
import logging
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from models.corpus import Book, Direction, Hit, LexiconEntry, Token, Verse
from .errors import StoreFailure
from .providers import DEFAULT_SOURCES, ProviderChain
from .text import NORMALIZED_CHARS, escape_like
from .validation import fits_sql_int

logger = logging.getLogger(__name__)

TIE_BREAKS = {
    'ordinal': "CAST(book_id AS INTEGER)",
    'name': "LOWER(name), CAST(book_id AS INTEGER)",
}

_BOOK_SELECT = "SELECT CAST(book_id AS INTEGER) AS book_id, code, name FROM books"
_LIKE_ESCAPE = "ESCAPE '\\'"


def _book_from_row(row):
    key = int(row['book_id'])
    return Book(key=key, code=row['code'], name=row['name'], ordinal=key)


def _hit_from_row(row):
    return Hit(book=int(row['book_id']), chapter=int(row['chapter']),
               verse=int(row['verse']), text=row['text'] or '')


def _verse_from_row(row):
    return Verse(
        id=row['id'],
        book=int(row['book_id']),
        chapter=int(row['chapter']),
        verse=int(row['verse']),
        text=row['text'] or '',
        plain=row['plain'] or '',
    )


class CorpusStore:
    """Read access to the corpus tables.

    Book lookups go straight to the ``books`` table. Verse level lookups
    go through a ProviderChain so the precomputed views are preferred
    over the base table when they exist.
    """

    def __init__(self, engine, sources=DEFAULT_SOURCES, tie_break='ordinal', use_fts=True):
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"unknown tie break {tie_break!r}, expected one of {sorted(TIE_BREAKS)}")
        self.engine = engine
        self.providers = ProviderChain(engine, sources)
        self.tie_break = tie_break
        self.use_fts = use_fts

    # -- plumbing -----------------------------------------------------------

    def _query(self, label, sql, params=None):
        try:
            with self.engine.connect() as conn:
                return conn.execute(text(sql), params or {}).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"{label} failed: {e}", exc_info=True)
            raise StoreFailure(f"{label} failed", cause=e) from e

    def ping(self):
        self._query('ping', "SELECT 1")
        return True

    def list_tables(self):
        """Names of the tables and views present in the store."""
        try:
            inspector = inspect(self.engine)
            return sorted(inspector.get_table_names() + inspector.get_view_names())
        except SQLAlchemyError as e:
            raise StoreFailure("listing tables failed", cause=e) from e

    # -- books --------------------------------------------------------------

    def list_books(self):
        rows = self._query('list_books', f"{_BOOK_SELECT} ORDER BY CAST(book_id AS INTEGER), name")
        return [_book_from_row(r) for r in rows]

    def _find_book(self, label, where, params):
        sql = f"{_BOOK_SELECT} WHERE {where} ORDER BY {TIE_BREAKS[self.tie_break]} LIMIT 1"
        rows = self._query(label, sql, params)
        return _book_from_row(rows[0]) if rows else None

    def find_book_by_key(self, key):
        key = int(key)
        if not fits_sql_int(key):
            return None
        return self._find_book('find_book_by_key', "CAST(book_id AS INTEGER) = :key", {'key': key})

    def find_book_by_code(self, code):
        return self._find_book('find_book_by_code', "code = :code", {'code': code})

    # The name lookups compare against SQLite LOWER(name), which folds ASCII only.
    # Stored names with upper-case non-ASCII letters never match the lower-cased input.
    def find_book_by_name_exact(self, name):
        return self._find_book('find_book_by_name_exact', "LOWER(name) = :name", {'name': name.lower()})

    def find_book_by_name_prefix(self, name):
        pattern = escape_like(name.lower()) + '%'
        return self._find_book('find_book_by_name_prefix',
                               f"LOWER(name) LIKE :pattern {_LIKE_ESCAPE}", {'pattern': pattern})

    def find_book_by_name_contains(self, name):
        pattern = '%' + escape_like(name.lower()) + '%'
        return self._find_book('find_book_by_name_contains',
                               f"LOWER(name) LIKE :pattern {_LIKE_ESCAPE}", {'pattern': pattern})

    # -- chapters and verses ------------------------------------------------

    def list_chapters(self, book_key):
        def fetch(conn, source):
            rows = conn.execute(
                text(f"SELECT DISTINCT chapter FROM {source.table} WHERE book_id = :book ORDER BY chapter"),
                {'book': book_key},
            ).all()
            return [int(r[0]) for r in rows]

        return self.providers.first_non_empty('list_chapters', fetch)

    def _verse_sql(self, source, extra_where=''):
        return (
            f"SELECT {source.id_expr} AS id, book_id, chapter, verse, "
            f"{source.raw_expr} AS text, {source.plain_expr} AS plain "
            f"FROM {source.table} WHERE book_id = :book AND chapter = :chapter{extra_where} "
            f"ORDER BY verse"
        )

    def list_verses(self, book_key, chapter):
        def fetch(conn, source):
            rows = conn.execute(text(self._verse_sql(source)),
                                {'book': book_key, 'chapter': chapter}).mappings().all()
            return [_verse_from_row(r) for r in rows]

        return self.providers.first_non_empty('list_verses', fetch)

    def get_verse(self, book_key, chapter, verse):
        def fetch(conn, source):
            row = conn.execute(text(self._verse_sql(source, ' AND verse = :verse')),
                               {'book': book_key, 'chapter': chapter, 'verse': verse}).mappings().first()
            return _verse_from_row(row) if row else None

        return self.providers.first_non_empty('get_verse', fetch)

    def min_max_chapter(self, book_key, direction, pivot=None):
        """Nearest chapter past ``pivot`` in ``direction``, or the extreme chapter when no pivot.

        NEXT yields the minimum (of chapters above pivot), PREV the maximum
        (of chapters below pivot).
        """
        agg, op = ('MIN', '>') if direction is Direction.NEXT else ('MAX', '<')
        where = "book_id = :book"
        params = {'book': book_key}
        if pivot is not None:
            where += f" AND chapter {op} :pivot"
            params['pivot'] = pivot

        def fetch(conn, source):
            value = conn.execute(text(f"SELECT {agg}(chapter) FROM {source.table} WHERE {where}"), params).scalar()
            return int(value) if value is not None else None

        return self.providers.first_non_empty('min_max_chapter', fetch)

    def min_max_verse(self, book_key, chapter, direction, pivot=None):
        agg, op = ('MIN', '>') if direction is Direction.NEXT else ('MAX', '<')
        where = "book_id = :book AND chapter = :chapter"
        params = {'book': book_key, 'chapter': chapter}
        if pivot is not None:
            where += f" AND verse {op} :pivot"
            params['pivot'] = pivot

        def fetch(conn, source):
            value = conn.execute(text(f"SELECT {agg}(verse) FROM {source.table} WHERE {where}"), params).scalar()
            return int(value) if value is not None else None

        return self.providers.first_non_empty('min_max_verse', fetch)

    # -- search -------------------------------------------------------------

    def _has_table(self, name):
        try:
            return inspect(self.engine).has_table(name)
        except SQLAlchemyError as e:
            logger.warning(f"Could not check for table {name}: {e}")
            return False

    def _search_fts(self, query, limit):
        # Quoted as a phrase so user input never reaches the FTS query syntax.
        # The trailing * makes the last token a prefix, so "heaven" also finds "heavens".
        phrase = '"' + query.replace('"', '""') + '"*'
        sql = (
            "SELECT v.book_id, v.chapter, v.verse, COALESCE(v.text_plain, v.text, '') AS text "
            "FROM verses_fts f JOIN verses v ON v.id = f.rowid "
            "WHERE verses_fts MATCH :q LIMIT :limit"
        )
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(text(sql), {'q': phrase, 'limit': limit}).mappings().all()
        except SQLAlchemyError as e:
            logger.warning(f"Full-text search failed, falling back to LIKE: {e}")
            return []
        return [_hit_from_row(r) for r in rows]

    def search_substring(self, query, limit):
        """Verses whose plain text contains ``query``, case-insensitively.

        The full-text index, when present, only decides which matches come
        first. Its hits are re-checked as substrings and the LIKE scan fills
        the rest, so the set of matching verses is the same with or without it.
        """
        ranked = []
        if self.use_fts and self._has_table('verses_fts'):
            needle = query.lower()
            ranked = [h for h in self._search_fts(query, limit) if needle in h.text.lower()]
            if len(ranked) >= limit:
                return ranked[:limit]

        pattern = '%' + escape_like(query.lower()) + '%'

        def fetch(conn, source):
            sql = (
                f"SELECT book_id, chapter, verse, {source.plain_expr} AS text FROM {source.table} "
                f"WHERE LOWER({source.plain_expr}) LIKE :pattern {_LIKE_ESCAPE} "
                f"ORDER BY book_id, chapter, verse LIMIT :limit"
            )
            rows = conn.execute(text(sql), {'pattern': pattern, 'limit': limit}).mappings().all()
            return [_hit_from_row(r) for r in rows]

        scanned = self.providers.first_non_empty('search_substring', fetch)
        if not ranked:
            return scanned
        seen = {(h.book, h.chapter, h.verse) for h in ranked}
        rest = [h for h in scanned if (h.book, h.chapter, h.verse) not in seen]
        return (ranked + rest)[:limit]

    def search_normalized(self, normalized_pattern, limit):
        """Match an already normalized, space padded pattern against normalized verse text."""
        params = {'pattern': '%' + escape_like(normalized_pattern) + '%', 'limit': limit}
        params.update({f'c{i}': ch for i, ch in enumerate(NORMALIZED_CHARS)})

        def fetch(conn, source):
            expr = source.plain_expr
            for i in range(len(NORMALIZED_CHARS)):
                expr = f"REPLACE({expr}, :c{i}, ' ')"
            sql = (
                f"SELECT book_id, chapter, verse, {source.plain_expr} AS text FROM {source.table} "
                f"WHERE (' ' || LOWER({expr}) || ' ') LIKE :pattern {_LIKE_ESCAPE} "
                f"ORDER BY book_id, chapter, verse LIMIT :limit"
            )
            rows = conn.execute(text(sql), params).mappings().all()
            return [_hit_from_row(r) for r in rows]

        return self.providers.first_non_empty('search_normalized', fetch)

    # -- word study ---------------------------------------------------------

    def list_tokens(self, verse_id):
        rows = self._query(
            'list_tokens',
            "SELECT id, verse_id, word_index AS position, surface, strong "
            "FROM tokens WHERE verse_id = :verse_id ORDER BY word_index ASC",
            {'verse_id': verse_id},
        )
        return [Token(**dict(r)) for r in rows]

    def get_lexicon_entry(self, strong):
        rows = self._query(
            'get_lexicon_entry',
            "SELECT strong, language, lemma, transliteration, definition "
            "FROM lexicon WHERE strong = :strong LIMIT 1",
            {'strong': strong},
        )
        return LexiconEntry(**dict(rows[0])) if rows else None
