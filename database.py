import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

# ORM models (comments) register on this Base
Base = declarative_base()


def create_db_engine(database_url, **kwargs):
    """Create the SQLAlchemy engine for the corpus store.

    SQLite connections are shared across gunicorn threads, so the
    same-thread check is disabled for that dialect.
    """
    if database_url.startswith('sqlite'):
        connect_args = kwargs.pop('connect_args', {})
        connect_args.setdefault('check_same_thread', False)
        kwargs['connect_args'] = connect_args
    logger.info(f"Creating database engine for {database_url.split('://', 1)[0]}")
    return create_engine(database_url, **kwargs)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory):
    """Provide a transactional scope around a series of SQLAlchemy operations."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy Session Error: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"General Session Error: {e}")
        raise
    finally:
        db.close()
