from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from savings_service.domain.models import AccountNumber


class ErrorKind(Enum):
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    OPERATION_FAILED = "OPERATION_FAILED"


class DataAccessError(Exception):
    """Base exception for storage failures raised by repositories."""


class TransientDataAccessError(DataAccessError):
    """Storage failure that may succeed if the operation is repeated."""


class QueryTimeoutError(TransientDataAccessError):
    """Raised when a storage query does not complete in time."""


class PersistentDataAccessError(DataAccessError):
    """Storage failure that will not go away on retry."""


class DataIntegrityViolationError(PersistentDataAccessError):
    """Raised when a write violates a storage constraint."""


def is_transient(error: BaseException | None) -> bool:
    """Return True if any error in the cause chain is a transient data-access failure."""
    seen: set[int] = set()
    current = error
    while current is not None and id(current) not in seen:
        if isinstance(current, TransientDataAccessError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


class DomainError(Exception):
    """Base exception for domain errors."""

    kind: ErrorKind


class InvalidFormatError(DomainError, ValueError):
    """Raised when an account number is missing or malformed."""

    kind = ErrorKind.INVALID_FORMAT


class InvalidAmountError(DomainError, ValueError):
    """Raised when a money amount violates its precondition."""

    kind = ErrorKind.INVALID_AMOUNT


class AccountError(DomainError):
    """Raised for failures tied to a specific savings account."""

    def __init__(self, account_number: "AccountNumber", message: str) -> None:
        self.account_number = account_number
        super().__init__(message)


class AccountNotFoundError(AccountError):
    """Raised when an account cannot be found."""

    kind = ErrorKind.ACCOUNT_NOT_FOUND

    def __init__(self, account_number: "AccountNumber") -> None:
        super().__init__(account_number, f"The bank account number '{account_number}' does not exist!")


class InsufficientFundsError(AccountError):
    """Raised when account has insufficient funds for a withdrawal."""

    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, account_number: "AccountNumber", balance: float, requested: float) -> None:
        self.balance = balance
        self.requested = requested
        super().__init__(
            account_number,
            f"Insufficient funds in bank account {account_number}: "
            f"(balance ${balance:.2f}, withdrawal: ${requested:.2f}). "
            f"The account is short ${requested - balance:.2f}",
        )

    @property
    def shortfall(self) -> float:
        return self.requested - self.balance


class AccountOperationFailedError(AccountError):
    """Raised when the data store fails while operating on an account.

    The original failure is kept as ``__cause__``; ``transient`` tells callers
    whether repeating the request later may succeed.
    """

    kind = ErrorKind.OPERATION_FAILED

    def __init__(self, account_number: "AccountNumber", cause: BaseException) -> None:
        super().__init__(account_number, f"Failure to execute operation on account '{account_number}'")
        self.__cause__ = cause
        self.transient = is_transient(cause)
