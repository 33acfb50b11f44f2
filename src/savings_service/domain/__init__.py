"""Domain layer - savings accounts and their rules."""

from savings_service.domain.exceptions import (
    AccountError,
    AccountNotFoundError,
    AccountOperationFailedError,
    DataAccessError,
    DataIntegrityViolationError,
    DomainError,
    ErrorKind,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidFormatError,
    PersistentDataAccessError,
    QueryTimeoutError,
    TransientDataAccessError,
    is_transient,
)
from savings_service.domain.models import (
    AccountBalance,
    AccountNumber,
    SavingsAccount,
    require_positive_amount,
)
from savings_service.domain.repository import AccountRepository


__all__ = [
    "AccountBalance",
    "AccountError",
    "AccountNotFoundError",
    "AccountNumber",
    "AccountOperationFailedError",
    "AccountRepository",
    "DataAccessError",
    "DataIntegrityViolationError",
    "DomainError",
    "ErrorKind",
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidFormatError",
    "PersistentDataAccessError",
    "QueryTimeoutError",
    "SavingsAccount",
    "TransientDataAccessError",
    "is_transient",
    "require_positive_amount",
]
