# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv()


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    DATABASE_URL = os.getenv('DATABASE_URL', f"sqlite:///{BASE_DIR / 'eden_lite.db'}")

    # Result caps per search mode; substring and exact keep separate defaults
    SEARCH_LIMIT = int(os.getenv('SEARCH_LIMIT', 200))
    EXACT_SEARCH_LIMIT = int(os.getenv('EXACT_SEARCH_LIMIT', 500))
    SEARCH_USE_FTS = _env_flag('SEARCH_USE_FTS', True)

    # 'ordinal' (lowest book id wins) or 'name' (alphabetical)
    BOOK_TIE_BREAK = os.getenv('BOOK_TIE_BREAK', 'ordinal')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    PORT = int(os.getenv('PORT', 3000))
