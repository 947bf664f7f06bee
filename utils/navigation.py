# utils/navigation.py
import logging
from models.corpus import Direction, Position

logger = logging.getLogger(__name__)


class NavigationEngine:
    """Prev/next movement over books, chapters and verses.

    Each step tries the current container first and only then falls
    through to the next level up: verse -> chapter -> book. A missing
    neighbour is reported as None, never raised. The book ordering is
    read once per engine, so create one engine per request.
    """

    def __init__(self, store):
        self.store = store
        self._books = None

    def _book_order(self):
        if self._books is None:
            self._books = self.store.list_books()
        return self._books

    def adjacent_book(self, book_key, direction):
        books = self._book_order()
        keys = [b.key for b in books]
        if book_key not in keys:
            return None
        idx = keys.index(book_key) + (1 if direction is Direction.NEXT else -1)
        if 0 <= idx < len(books):
            return books[idx]
        return None

    def adjacent_chapter(self, book_key, chapter, direction):
        if book_key not in {b.key for b in self._book_order()}:
            return None

        nearest = self.store.min_max_chapter(book_key, direction, pivot=chapter)
        if nearest is not None:
            return Position(book_key, nearest)

        neighbour = self.adjacent_book(book_key, direction)
        if neighbour is None:
            return None
        # First chapter of the next book, last chapter of the previous one
        extreme = self.store.min_max_chapter(neighbour.key, direction)
        if extreme is None:
            logger.info(f"Book {neighbour.key} has no chapters; stopping navigation at {book_key}:{chapter}")
            return None
        return Position(neighbour.key, extreme)

    def adjacent_verse(self, book_key, chapter, verse, direction):
        if book_key not in {b.key for b in self._book_order()}:
            return None

        nearest = self.store.min_max_verse(book_key, chapter, direction, pivot=verse)
        if nearest is not None:
            return Position(book_key, chapter, nearest)

        target = self.adjacent_chapter(book_key, chapter, direction)
        if target is None:
            return None
        extreme = self.store.min_max_verse(target.book, target.chapter, direction)
        if extreme is None:
            return None
        return Position(target.book, target.chapter, extreme)

    def neighbours(self, step, *args):
        """Run one of the adjacent_* methods both ways: {'prev': ..., 'next': ...}."""
        return {
            'prev': step(*args, Direction.PREV),
            'next': step(*args, Direction.NEXT),
        }
