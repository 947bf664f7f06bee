# scripts/import_kjv.py
import json
import sys
import logging
from pathlib import Path
from sqlalchemy import text

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
backend_dir = current_dir.parent
sys.path.insert(0, str(backend_dir))

from config import Config
from database import create_db_engine
from utils.text import sanitize

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# Canonical order; the position in this list becomes the book id
BOOKS = [
    ('Genesis', 'GEN'), ('Exodus', 'EXO'), ('Leviticus', 'LEV'), ('Numbers', 'NUM'),
    ('Deuteronomy', 'DEU'), ('Joshua', 'JOS'), ('Judges', 'JDG'), ('Ruth', 'RUT'),
    ('1 Samuel', 'SA1'), ('2 Samuel', 'SA2'), ('1 Kings', 'KI1'), ('2 Kings', 'KI2'),
    ('1 Chronicles', 'CH1'), ('2 Chronicles', 'CH2'), ('Ezra', 'EZR'), ('Nehemiah', 'NEH'),
    ('Esther', 'EST'), ('Job', 'JOB'), ('Psalms', 'PSA'), ('Proverbs', 'PRO'),
    ('Ecclesiastes', 'ECC'), ('Song of Solomon', 'SNG'), ('Isaiah', 'ISA'), ('Jeremiah', 'JER'),
    ('Lamentations', 'LAM'), ('Ezekiel', 'EZK'), ('Daniel', 'DAN'), ('Hosea', 'HOS'),
    ('Joel', 'JOL'), ('Amos', 'AMO'), ('Obadiah', 'OBA'), ('Jonah', 'JON'),
    ('Micah', 'MIC'), ('Nahum', 'NAH'), ('Habakkuk', 'HAB'), ('Zephaniah', 'ZEP'),
    ('Haggai', 'HAG'), ('Zechariah', 'ZEC'), ('Malachi', 'MAL'),
    ('Matthew', 'MAT'), ('Mark', 'MRK'), ('Luke', 'LUK'), ('John', 'JHN'),
    ('Acts', 'ACT'), ('Romans', 'ROM'), ('1 Corinthians', 'CO1'), ('2 Corinthians', 'CO2'),
    ('Galatians', 'GAL'), ('Ephesians', 'EPH'), ('Philippians', 'PHP'), ('Colossians', 'COL'),
    ('1 Thessalonians', 'TH1'), ('2 Thessalonians', 'TH2'), ('1 Timothy', 'TI1'), ('2 Timothy', 'TI2'),
    ('Titus', 'TIT'), ('Philemon', 'PHM'), ('Hebrews', 'HEB'), ('James', 'JAS'),
    ('1 Peter', 'PE1'), ('2 Peter', 'PE2'), ('1 John', 'JO1'), ('2 John', 'JO2'),
    ('3 John', 'JO3'), ('Jude', 'JUD'), ('Revelation', 'REV'),
]

BOOK_IDS = {name: idx for idx, (name, _) in enumerate(BOOKS, start=1)}
BOOK_ALIASES = {"Solomon's Song": 'Song of Solomon'}

SCHEMA = [
    """CREATE TABLE IF NOT EXISTS books (
        book_id INTEGER PRIMARY KEY,
        code TEXT,
        name TEXT NOT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS verses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        book_id INTEGER NOT NULL REFERENCES books (book_id),
        chapter INTEGER NOT NULL,
        verse INTEGER NOT NULL,
        text TEXT NOT NULL,
        text_plain TEXT,
        UNIQUE (book_id, chapter, verse)
    )""",
    """CREATE VIEW IF NOT EXISTS verses_with_book AS
        SELECT v.id, v.book_id, b.code AS book_code, b.name AS book_name,
               v.chapter, v.verse, v.text, v.text_plain
        FROM verses v JOIN books b ON b.book_id = v.book_id""",
]

FTS_SCHEMA = [
    "DROP TABLE IF EXISTS verses_fts",
    "CREATE VIRTUAL TABLE verses_fts USING fts5(text_plain, content='verses', content_rowid='id')",
    "INSERT INTO verses_fts(verses_fts) VALUES ('rebuild')",
]

BATCH_SIZE = 1000


def parse_reference(ref):
    """Parse a reference like 'Genesis 1:1' into (book_name, chapter, verse)"""
    book_chapter, verse = ref.rsplit(':', 1)
    book_name, chapter = book_chapter.rsplit(' ', 1)
    return BOOK_ALIASES.get(book_name, book_name), int(chapter), int(verse)


def clean_verse_text(text):
    """Clean verse text by removing any leading '#' and trimming whitespace"""
    return text.lstrip('#').strip()


def import_kjv_data(json_path, database_url):
    """Load a {"Book C:V": text} JSON dump into the corpus tables."""
    logger.info(f"Reading JSON file from: {json_path}")
    with open(json_path, 'r', encoding='utf-8') as f:
        verses_data = json.load(f)

    engine = create_db_engine(database_url)
    verse_count = 0
    skipped_verses = []
    insert_verse = text(
        "INSERT INTO verses (book_id, chapter, verse, text, text_plain) "
        "VALUES (:book_id, :chapter, :verse, :text, :text_plain)"
    )

    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
        conn.execute(text("DELETE FROM verses"))
        conn.execute(text("DELETE FROM books"))
        conn.execute(
            text("INSERT INTO books (book_id, code, name) VALUES (:book_id, :code, :name)"),
            [{'book_id': BOOK_IDS[name], 'code': code, 'name': name} for name, code in BOOKS],
        )
        logger.info("Cleared existing verses and loaded the book list")

        batch = []
        for ref, raw in verses_data.items():
            try:
                book_name, chapter, verse = parse_reference(ref)
            except ValueError as e:
                logger.warning(f"Error processing reference '{ref}': {e}")
                skipped_verses.append(ref)
                continue
            if book_name not in BOOK_IDS:
                logger.warning(f"Unknown book '{book_name}' in reference '{ref}'")
                skipped_verses.append(ref)
                continue

            clean_text = clean_verse_text(raw)
            batch.append({
                'book_id': BOOK_IDS[book_name],
                'chapter': chapter,
                'verse': verse,
                'text': clean_text,
                'text_plain': sanitize(clean_text),
            })
            verse_count += 1
            if len(batch) >= BATCH_SIZE:
                conn.execute(insert_verse, batch)
                batch = []
                logger.info(f"Processed {verse_count} verses...")

        if batch:
            conn.execute(insert_verse, batch)

        if engine.dialect.name == 'sqlite':
            for statement in FTS_SCHEMA:
                conn.execute(text(statement))
            logger.info("Built verses_fts full-text index")

    logger.info(f"Import complete: {verse_count} verses")
    if skipped_verses:
        logger.warning(f"Skipped {len(skipped_verses)} verses due to unknown book names")
    return verse_count


if __name__ == '__main__':
    if len(sys.argv) not in (2, 3):
        print("Usage: python scripts/import_kjv.py <path_to_kjv.json> [database_url]")
        sys.exit(1)

    json_path = sys.argv[1]
    database_url = sys.argv[2] if len(sys.argv) == 3 else Config.DATABASE_URL
    import_kjv_data(json_path, database_url)
