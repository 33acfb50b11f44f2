from sqlalchemy import exc as sa_exc

from savings_service.domain.exceptions import (
    DataAccessError,
    DataIntegrityViolationError,
    PersistentDataAccessError,
    QueryTimeoutError,
    TransientDataAccessError,
)


def translate_sqlalchemy_error(error: BaseException) -> DataAccessError:
    """Map a SQLAlchemy or driver failure onto the data-access hierarchy.

    Callers raise the result ``from error`` so the driver exception stays in the chain.
    """
    if isinstance(error, sa_exc.TimeoutError | TimeoutError):
        return QueryTimeoutError(f"Database query timed out: {error}")
    if isinstance(error, sa_exc.IntegrityError):
        return DataIntegrityViolationError(f"Database constraint failed: {error.orig}")
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return TransientDataAccessError(f"Database connection lost: {error.orig}")
    if isinstance(error, sa_exc.OperationalError):
        return TransientDataAccessError(f"Database unavailable: {error.orig}")
    return PersistentDataAccessError(f"Database failure: {error}")
