# scripts/inspect_db.py
import sys
from pathlib import Path
from pprint import pprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import Config
from database import create_db_engine
from utils.store import CorpusStore


def show(conn, title, sql, **params):
    print(f"=== {title} ===")
    try:
        pprint([dict(r) for r in conn.execute(text(sql), params).mappings()])
    except SQLAlchemyError as e:
        print(f"{title} error: {e}")


def inspect_db(database_url):
    engine = create_db_engine(database_url)
    store = CorpusStore(engine)
    print("=== tables/views ===")
    pprint(store.list_tables())

    with engine.connect() as conn:
        show(conn, "books sample", "SELECT book_id, code, name FROM books ORDER BY CAST(book_id AS INTEGER) LIMIT 120")
        show(conn, "find book 'john' by prefix", "SELECT book_id, code, name FROM books WHERE LOWER(name) LIKE 'john%'")
        show(conn, "find book 'john' by name", "SELECT book_id, code, name FROM books WHERE LOWER(name) = 'john'")
        show(conn, "chapters in verses (book_id=43)",
             "SELECT DISTINCT chapter FROM verses WHERE book_id = :book ORDER BY chapter", book=43)

    # Each backing shape gets its own connection so one missing view does not abort the rest
    for source in store.providers.sources:
        with engine.connect() as conn:
            show(conn, f"verses in {source.table} (book_id=43 chapter=3)",
                 f"SELECT {source.id_expr} AS id, verse, {source.plain_expr} AS text "
                 f"FROM {source.table} WHERE book_id = :book AND chapter = :chapter ORDER BY verse",
                 book=43, chapter=3)


if __name__ == '__main__':
    inspect_db(sys.argv[1] if len(sys.argv) > 1 else Config.DATABASE_URL)
