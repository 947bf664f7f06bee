# utils/validation.py
from models.corpus import SearchMode
from .errors import InvalidInput

# SQLite binds integers as signed 64-bit
SQL_INT_MIN = -2 ** 63
SQL_INT_MAX = 2 ** 63 - 1


def fits_sql_int(number):
    return SQL_INT_MIN <= number <= SQL_INT_MAX


def parse_int(value, field, minimum=None, maximum=SQL_INT_MAX):
    """Parse a path or query argument that must be an integer."""
    if value is None or isinstance(value, bool):
        raise InvalidInput(field, "is required")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidInput(field, f"must be an integer, got {value!r}")
    if minimum is None:
        minimum = SQL_INT_MIN
    if number < minimum:
        raise InvalidInput(field, f"must be >= {minimum}")
    if maximum is not None and number > maximum:
        raise InvalidInput(field, f"must be <= {maximum}")
    return number


def parse_search_mode(value):
    if not value:
        return SearchMode.SUBSTRING
    try:
        return SearchMode(value.strip().lower())
    except ValueError:
        choices = ', '.join(m.value for m in SearchMode)
        raise InvalidInput('mode', f"must be one of {choices}")
