"""Typed failures of the shop data service.

Every operation fails with exactly one of the subclasses below. The ``kind``
tag is what travels over the wire; adapters map it to user-facing text.
"""
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)


class ShopError(Exception):
    """Base exception for all data service errors."""

    kind = 'StoreUnavailable'

    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['error'] = self.kind
        rv['status'] = 'error'
        return rv


class NotFoundError(ShopError):
    """No matching row (unknown user, product, session, ...)."""

    kind = 'NotFound'

    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class ConflictError(ShopError):
    """Constraint violation, e.g. a duplicate key."""

    kind = 'Conflict'

    def __init__(self, message="Conflicting data", payload=None):
        super().__init__(message, 409, payload)


class StoreUnavailableError(ShopError):
    """Connection or pool exhaustion."""

    kind = 'StoreUnavailable'

    def __init__(self, message="Store unavailable", payload=None):
        super().__init__(message, 503, payload)


class InvalidArgumentError(ShopError):
    """Malformed identifier or parameter."""

    kind = 'InvalidArgument'

    def __init__(self, message="Invalid argument", payload=None):
        super().__init__(message, 400, payload)


ERROR_KINDS = {
    cls.kind: cls
    for cls in (NotFoundError, ConflictError, StoreUnavailableError, InvalidArgumentError)
}


def translate_db_error(error: SQLAlchemyError) -> ShopError:
    """Convert a SQLAlchemy exception into the service's error taxonomy."""
    if isinstance(error, NoResultFound):
        return NotFoundError(str(error))
    if isinstance(error, IntegrityError):
        return ConflictError(str(error.orig) if error.orig is not None else str(error))
    if isinstance(error, (PoolTimeoutError, OperationalError, DisconnectionError)):
        return StoreUnavailableError(str(error))
    return StoreUnavailableError(str(error))
