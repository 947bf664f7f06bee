# utils/errors.py


class CorpusError(Exception):
    """Base class for failures raised by the corpus core."""


class StoreFailure(CorpusError):
    """The backing store could not answer a query."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class InvalidInput(CorpusError, ValueError):
    """A caller-supplied argument was rejected before touching the store."""

    def __init__(self, field, message):
        super().__init__(f"{field}: {message}")
        self.field = field
