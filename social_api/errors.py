"""
Error taxonomy shared by services and routers.

Services raise a ``ServiceError`` subclass; the handler registered in
``social_api.main`` turns it into ``{"detail": message}`` with the
matching status code.  Callers branch on ``ErrorKind`` (or the class),
never on message text.
"""
import enum

from sqlalchemy.exc import IntegrityError


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    INVALID_REFERENCE = "invalid_reference"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class ServiceError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(ServiceError):
    kind = ErrorKind.AUTHENTICATION
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found"


class InvalidReferenceError(ServiceError):
    kind = ErrorKind.INVALID_REFERENCE
    status_code = 400
    default_message = "Invalid comment or user reference"


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT
    status_code = 409
    default_message = "Conflicting concurrent update; retry the request"


class InternalError(ServiceError):
    kind = ErrorKind.INTERNAL
    status_code = 500
    default_message = "Internal Server Error"


# ---------------------------------------------------------------------------
# Driver error classification
# ---------------------------------------------------------------------------

# PostgreSQL SQLSTATE class 23 (integrity constraint violation)
_PG_FOREIGN_KEY_VIOLATION = "23503"
_PG_UNIQUE_VIOLATION = "23505"

# SQLite extended result codes
_SQLITE_CONSTRAINT_FOREIGNKEY = 787
_SQLITE_CONSTRAINT_PRIMARYKEY = 1555
_SQLITE_CONSTRAINT_UNIQUE = 2067


def _sqlstate(orig) -> str | None:
    """Return the SQLSTATE reported by asyncpg / psycopg, if any."""
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def classify_integrity_error(exc: IntegrityError) -> ErrorKind:
    """
    Map a SQLAlchemy ``IntegrityError`` onto an ``ErrorKind`` using the
    driver's error code.

    Foreign-key violations become ``INVALID_REFERENCE``; unique / primary
    key violations become ``CONFLICT``; anything else is ``INTERNAL``.
    """
    orig = exc.orig
    sqlstate = _sqlstate(orig)
    if sqlstate == _PG_FOREIGN_KEY_VIOLATION:
        return ErrorKind.INVALID_REFERENCE
    if sqlstate == _PG_UNIQUE_VIOLATION:
        return ErrorKind.CONFLICT

    sqlite_code = getattr(orig, "sqlite_errorcode", None)
    if sqlite_code == _SQLITE_CONSTRAINT_FOREIGNKEY:
        return ErrorKind.INVALID_REFERENCE
    if sqlite_code in (_SQLITE_CONSTRAINT_PRIMARYKEY, _SQLITE_CONSTRAINT_UNIQUE):
        return ErrorKind.CONFLICT

    return ErrorKind.INTERNAL


_ERRORS_BY_KIND: dict[ErrorKind, type[ServiceError]] = {
    ErrorKind.INVALID_REFERENCE: InvalidReferenceError,
    ErrorKind.CONFLICT: ConflictError,
    ErrorKind.INTERNAL: InternalError,
}


def error_from_integrity(exc: IntegrityError) -> ServiceError:
    return _ERRORS_BY_KIND[classify_integrity_error(exc)]()
