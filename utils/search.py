# utils/search.py
import logging
from models.corpus import Hit, SearchMode
from .text import exact_pattern, sanitize

logger = logging.getLogger(__name__)


class BibleSearchEngine:
    def __init__(self, store, substring_limit=200, exact_limit=500):
        self.store = store
        self.limits = {
            SearchMode.SUBSTRING: substring_limit,
            SearchMode.EXACT: exact_limit,
        }

    def search(self, query, mode=SearchMode.SUBSTRING, limit=None):
        """Search verse text.

        SUBSTRING matches the query anywhere, case-insensitively. EXACT
        matches it only as a whole word: line breaks, tabs and the marks
        . , ; : ! ? ( are treated as spaces on the verse side, then the
        padded query must appear in the padded verse text.
        """
        query = (query or '').strip()
        if not query:
            return []

        cap = self.limits[mode]
        if limit is not None:
            cap = max(0, min(cap, limit))
        if cap == 0:
            return []

        if mode is SearchMode.EXACT:
            hits = self.store.search_normalized(exact_pattern(query), cap)
        else:
            hits = self.store.search_substring(query, cap)

        logger.info(f"Search {mode.value!r} for {query!r} returned {len(hits)} verses")
        return [Hit(h.book, h.chapter, h.verse, sanitize(h.text)) for h in hits]
