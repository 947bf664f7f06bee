import pytest
from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from app import create_app
from config import Config
from database import create_db_engine
from utils.store import CorpusStore

BOOKS = [
    (1, 'GEN', 'Genesis'),
    (18, 'JOB', 'Job'),
    (43, 'JHN', 'John'),
    (44, 'ACT', 'Acts'),  # listed, but has no verses
    (45, 'ROM', 'Romans'),
]

VERSES = {
    (1, 1, 1): "In the beginning God created the heaven and the earth.",
    (1, 1, 2): "And the earth was without form, and void;\u00a0 and darkness was upon\n the face of the deep.\u00b6",
    (1, 1, 3): "And God said, Let there be light: and there was light.",
    (1, 2, 1): "Thus the heavens and the earth were finished.",
    (1, 2, 2): "And on the seventh day God ended his work which he had made",
    (18, 1, 1): "There was a man in the land of Uz, whose name was Job; and that man "
                "was perfect and upright, and one that feared God, and eschewed evil.",
    (18, 42, 1): "Then Job answered the LORD, and said,",
    (18, 42, 2): 'I know that thou canst do every thing, saith the "God" of Job',
    (43, 4, 1): "When therefore the Lord knew how the Pharisees had heard",
    (43, 4, 2): "(Though Jesus himself baptized not, but his disciples,)",
    (43, 4, 3): "He left Judaea, and departed again into Galilee, to serve God.",
    (43, 11, 35): "Jesus wept.",
    (45, 1, 1): "Paul, a servant of Jesus Christ, called to be godly.",
    (45, 1, 2): "(God had promised afore by his prophets in the holy scriptures)",
}
for n in range(1, 37):
    VERSES.setdefault((43, 3, n), f"Verse {n} of the third chapter.")
VERSES[(43, 3, 16)] = ("For God so loved the world, that he gave his only begotten Son, "
                       "that whosoever believeth in him should not perish, but have everlasting life.")

# Genesis 1:2 only has raw text, to exercise the COALESCE fallback
NO_PLAIN = {(1, 1, 2)}

SCHEMA = [
    "CREATE TABLE books (book_id INTEGER PRIMARY KEY, code TEXT, name TEXT NOT NULL)",
    """CREATE TABLE verses (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        book_id INTEGER NOT NULL,
        chapter INTEGER NOT NULL,
        verse INTEGER NOT NULL,
        text TEXT NOT NULL,
        text_plain TEXT
    )""",
    """CREATE TABLE tokens (
        id INTEGER PRIMARY KEY, verse_id INTEGER NOT NULL, word_index INTEGER NOT NULL,
        surface TEXT NOT NULL, strong TEXT
    )""",
    """CREATE TABLE lexicon (
        strong TEXT PRIMARY KEY, language TEXT, lemma TEXT, transliteration TEXT, definition TEXT
    )""",
]


def build_corpus(engine):
    with engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
        conn.execute(
            text("INSERT INTO books (book_id, code, name) VALUES (:id, :code, :name)"),
            [{'id': i, 'code': c, 'name': n} for i, c, n in BOOKS],
        )
        conn.execute(
            text("INSERT INTO verses (book_id, chapter, verse, text, text_plain) "
                 "VALUES (:book, :chapter, :verse, :text, :plain)"),
            [
                {'book': b, 'chapter': c, 'verse': v, 'text': t,
                 'plain': None if (b, c, v) in NO_PLAIN else t}
                for (b, c, v), t in sorted(VERSES.items())
            ],
        )
        verse_id = conn.execute(
            text("SELECT id FROM verses WHERE book_id = 43 AND chapter = 11 AND verse = 35")
        ).scalar()
        conn.execute(
            text("INSERT INTO tokens (id, verse_id, word_index, surface, strong) "
                 "VALUES (:id, :verse_id, :idx, :surface, :strong)"),
            [
                {'id': 2, 'verse_id': verse_id, 'idx': 1, 'surface': 'wept', 'strong': 'G1145'},
                {'id': 1, 'verse_id': verse_id, 'idx': 0, 'surface': 'Jesus', 'strong': 'G2424'},
            ],
        )
        conn.execute(
            text("INSERT INTO lexicon VALUES ('G1145', 'greek', 'dakruo', 'dakrýō', 'to shed tears')")
        )


def make_engine():
    return create_db_engine('sqlite://', poolclass=StaticPool)


class TestConfig(Config):
    TESTING = True
    DATABASE_URL = 'sqlite://'
    SEARCH_USE_FTS = True
    BOOK_TIE_BREAK = 'ordinal'


@pytest.fixture
def engine():
    eng = make_engine()
    build_corpus(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    return CorpusStore(engine)


@pytest.fixture
def app(engine):
    return create_app(TestConfig, engine=engine)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def corpus_verses():
    return dict(VERSES)


@pytest.fixture
def bare_engine():
    """An engine over an empty database: no corpus tables at all."""
    eng = make_engine()
    yield eng
    eng.dispose()


@pytest.fixture
def make_app():
    """Build an app over a given engine with config overrides."""
    def factory(eng, **overrides):
        config = type('OverrideConfig', (TestConfig,), overrides)
        return create_app(config, engine=eng)
    return factory
