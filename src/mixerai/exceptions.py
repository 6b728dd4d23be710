"""
Domain exceptions raised by repositories and services.

Repositories translate store-specific failures (PostgREST error codes,
RPC exceptions) into these so routers can map them to HTTP statuses
without knowing which backend is in use.
"""

from typing import Optional

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NO_ROWS = "PGRST116"
RAISED_EXCEPTION = "P0001"


class RepositoryError(Exception):
    """Failure talking to the data store"""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class NotFoundError(RepositoryError):
    """Requested row does not exist"""


class ConflictError(RepositoryError):
    """Unique constraint violation"""


class ForeignKeyError(RepositoryError):
    """Referenced row does not exist"""


class AIServiceError(Exception):
    """AI completion provider failed or returned unusable output"""
