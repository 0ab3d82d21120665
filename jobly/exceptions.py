"""
Typed errors raised by the accessor layer.

Each error carries the HTTP status the router layer should answer with;
``jobly.main`` registers a single handler for ``JoblyError`` that renders
``{"detail": message}``.  Store failures that are not re-signalled as one
of these types propagate unchanged and surface as 500s.
"""
from sqlalchemy.exc import IntegrityError

# SQLSTATE codes (PostgreSQL) for the constraint violations we re-signal.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class JoblyError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(JoblyError):
    """Caller-correctable input problem (bad payload, bad filter bounds)."""

    status_code = 400


class NotFoundError(JoblyError):
    status_code = 404


class ConflictError(JoblyError):
    status_code = 409


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(exc.orig)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    if _sqlstate(exc) == FOREIGN_KEY_VIOLATION:
        return True
    return "FOREIGN KEY constraint failed" in str(exc.orig)
