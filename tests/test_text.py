from models.corpus import Hit, Verse
from utils.text import (
    escape_like,
    exact_pattern,
    format_chapter_lines,
    format_search_lines,
    normalize_for_match,
    sanitize,
)


def test_sanitize_strips_pilcrow_and_nbsp() -> None:
    raw = "\u00b6 And\u00a0God  said,\n\tLet there be light. "
    assert sanitize(raw) == "And God said, Let there be light."


def test_sanitize_handles_empty_values() -> None:
    assert sanitize("") == ""
    assert sanitize(None) == ""
    assert sanitize(" ¶   ") == ""


def test_sanitize_is_idempotent() -> None:
    samples = [
        "plain text",
        "  leading and trailing  ",
        "a¶b  c",
        "tabs\tand\nnewlines\r\nmixed",
        "¶",
        "quotes “stay” put",
    ]
    for sample in samples:
        once = sanitize(sample)
        assert sanitize(once) == once


def test_normalize_for_match_replaces_listed_punctuation() -> None:
    assert normalize_for_match("God.") == " god  "
    assert normalize_for_match("(God had") == "  god had "
    assert normalize_for_match("a,b;c:d!e?f\ng\rh\ti") == " a b c d e f g h i "


def test_normalize_for_match_keeps_quotes_and_dashes() -> None:
    normalized = normalize_for_match('saith "God"—amen')
    assert exact_pattern("god") not in normalized
    assert '"god"—amen' in normalized


def test_exact_pattern_is_padded_and_lowercased() -> None:
    assert exact_pattern("God") == " god "
    assert exact_pattern("god") in normalize_for_match("feared God, and")
    assert exact_pattern("god") not in normalize_for_match("called to be godly.")


def test_escape_like() -> None:
    assert escape_like("100%") == "100\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("back\\slash") == "back\\\\slash"


def test_format_chapter_lines() -> None:
    verses = [
        Verse(id=1, book=43, chapter=11, verse=35, text="Jesus wept.", plain="Jesus  wept.¶"),
        Verse(id=2, book=43, chapter=11, verse=36, text="x", plain="Then said the Jews,"),
    ]
    assert format_chapter_lines(verses) == "35. Jesus wept.\n36. Then said the Jews,"


def test_format_search_lines_uses_book_names() -> None:
    hits = [Hit(43, 11, 35, "Jesus wept."), Hit(99, 1, 1, "Unknown book")]
    out = format_search_lines(hits, {43: "John"})
    assert out.splitlines() == ["John 11:35. Jesus wept.", "99 1:1. Unknown book"]
