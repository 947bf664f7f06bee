# utils/text.py
import re

# Characters replaced by a single space before whole-word matching.
# Quotes, dashes and other punctuation are deliberately left alone.
NORMALIZED_CHARS = ('\n', '\r', '\t', '.', ',', ';', ':', '!', '?', '(')

_WHITESPACE_RE = re.compile(r'\s+')


def sanitize(text):
    """Clean verse text for display: drop pilcrows, unify spaces, trim."""
    if not text:
        return ''
    out = text.replace('\u00b6', '').replace('\u00a0', ' ')
    return _WHITESPACE_RE.sub(' ', out).strip()


def normalize_for_match(text):
    """Render text the way exact-mode search compares it.

    Mirrors the SQL expression built by the store, so matching in Python
    and in the database agree.
    """
    out = text or ''
    for ch in NORMALIZED_CHARS:
        out = out.replace(ch, ' ')
    return f" {out.lower()} "


def exact_pattern(query):
    return f" {query.lower()} "


def escape_like(value, escape='\\'):
    """Escape LIKE wildcards so user input is matched literally."""
    return (
        value.replace(escape, escape + escape)
        .replace('%', escape + '%')
        .replace('_', escape + '_')
    )


def format_chapter_lines(verses):
    return '\n'.join(f"{v.verse}. {sanitize(v.plain)}" for v in verses)


def format_search_lines(hits, book_names=None):
    book_names = book_names or {}
    lines = []
    for hit in hits:
        book = book_names.get(hit.book, hit.book)
        lines.append(f"{book} {hit.chapter}:{hit.verse}. {sanitize(hit.text)}")
    return '\n'.join(lines)
