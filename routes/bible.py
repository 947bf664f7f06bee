# routes/bible.py
from flask import Blueprint, Response, current_app, jsonify, request
import logging
from utils.navigation import NavigationEngine
from utils.resolver import BookResolver
from utils.search import BibleSearchEngine
from utils.text import format_chapter_lines, format_search_lines
from utils.validation import parse_int, parse_search_mode

bible_bp = Blueprint('bible', __name__)

logger = logging.getLogger(__name__)


def get_store():
    return current_app.extensions['corpus_store']


def _wants_text():
    return request.args.get('format', '').lower() == 'text'


def _plain_text(body):
    return Response(body, content_type='text/plain; charset=utf-8')


def _not_found(what, **details):
    logger.info(f"{what} not found: {details}")
    return jsonify({"error": f"{what} not found", **details}), 404


def _resolve(ident):
    return BookResolver(get_store()).resolve_book(ident)


def _position_json(position):
    return position.to_json() if position is not None else None


@bible_bp.route('/books', methods=['GET'])
def get_books():
    books = get_store().list_books()
    logger.info(f"Returning {len(books)} books")
    return jsonify([b.to_json() for b in books])


@bible_bp.route('/books/<ident>', methods=['GET'])
def resolve_book(ident):
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)
    return jsonify(book.to_json())


@bible_bp.route('/chapters/<ident>', methods=['GET'])
def get_chapters(ident):
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)
    return jsonify(get_store().list_chapters(book.key))


@bible_bp.route('/verses/<ident>/<chapter>', methods=['GET'])
def get_verses(ident, chapter):
    chapter = parse_int(chapter, 'chapter', minimum=0)
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)

    verses = get_store().list_verses(book.key, chapter)
    if _wants_text():
        return _plain_text(format_chapter_lines(verses))
    return jsonify([v.to_json() for v in verses])


@bible_bp.route('/verse/<ident>/<chapter>/<verse>', methods=['GET'])
def get_single_verse(ident, chapter, verse):
    chapter = parse_int(chapter, 'chapter', minimum=0)
    verse = parse_int(verse, 'verse', minimum=0)
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)

    verse_obj = get_store().get_verse(book.key, chapter, verse)
    if verse_obj is None:
        return _not_found("Verse", bookId=book.key, chapter=chapter, verse=verse)

    return jsonify({
        "id": verse_obj.id,
        "bookId": book.key,
        "book": book.name,
        "chapter": verse_obj.chapter,
        "verse": verse_obj.verse,
        "text": verse_obj.plain,
    })


@bible_bp.route('/nav/book/<ident>', methods=['GET'])
def nav_book(ident):
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)

    engine = NavigationEngine(get_store())
    nav = engine.neighbours(engine.adjacent_book, book.key)
    return jsonify({k: v.to_json() if v else None for k, v in nav.items()})


@bible_bp.route('/nav/chapter/<ident>/<chapter>', methods=['GET'])
def nav_chapter(ident, chapter):
    chapter = parse_int(chapter, 'chapter', minimum=0)
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)

    engine = NavigationEngine(get_store())
    nav = engine.neighbours(engine.adjacent_chapter, book.key, chapter)
    return jsonify({k: _position_json(v) for k, v in nav.items()})


@bible_bp.route('/nav/verse/<ident>/<chapter>/<verse>', methods=['GET'])
def nav_verse(ident, chapter, verse):
    chapter = parse_int(chapter, 'chapter', minimum=0)
    verse = parse_int(verse, 'verse', minimum=0)
    book = _resolve(ident)
    if book is None:
        return _not_found("Book", book=ident)

    engine = NavigationEngine(get_store())
    nav = engine.neighbours(engine.adjacent_verse, book.key, chapter, verse)
    return jsonify({k: _position_json(v) for k, v in nav.items()})


@bible_bp.route('/search', methods=['GET'])
def search_bible():
    query_str = request.args.get('q', '')
    mode = parse_search_mode(request.args.get('mode'))
    limit = request.args.get('limit')
    limit = parse_int(limit, 'limit', minimum=0) if limit is not None else None

    store = get_store()
    engine = BibleSearchEngine(
        store,
        substring_limit=current_app.config['SEARCH_LIMIT'],
        exact_limit=current_app.config['EXACT_SEARCH_LIMIT'],
    )
    hits = engine.search(query_str, mode, limit=limit)

    if _wants_text():
        names = {b.key: b.name for b in store.list_books()} if hits else {}
        return _plain_text(format_search_lines(hits, names))
    return jsonify([h.to_json() for h in hits])


@bible_bp.route('/tokens/<verse_id>', methods=['GET'])
def get_tokens(verse_id):
    verse_id = parse_int(verse_id, 'verse_id', minimum=1)
    tokens = get_store().list_tokens(verse_id)
    return jsonify({"tokens": [t.to_json() for t in tokens]})


@bible_bp.route('/lexicon/<strong>', methods=['GET'])
def get_lexicon(strong):
    entry = get_store().get_lexicon_entry(strong)
    return jsonify(entry.to_json() if entry else None)
