"""
Exceptions raised by the verbal engine services.

Routers translate these into HTTP responses:
    NotFoundError      -> 404
    InvalidInputError  -> 400
    StorageError       -> 503
    LemmatizerError    -> 503
"""


class VerbalEngineError(Exception):
    """Base exception for verbal engine errors."""
    pass


class NotFoundError(VerbalEngineError):
    """Raised when a requested user, word or question does not exist."""
    pass


class QuestionNotFoundError(NotFoundError):
    """Raised when no question matches a category/exclusion combination."""
    pass


class InvalidInputError(VerbalEngineError):
    """Raised for caller faults, before anything is written."""
    pass


class StorageError(VerbalEngineError):
    """Raised when the database cannot be read or written."""
    pass


class LemmatizerError(VerbalEngineError):
    """Raised when the lemmatizer cannot be built or fails on a word."""
    pass
