"""Application layer - services and use cases."""

from savings_service.application.locks import AccountLocks
from savings_service.application.retry import retry_async
from savings_service.application.services import (
    SaveMoneyCommand,
    SavingsAccountService,
    WithdrawMoneyCommand,
)


__all__ = [
    "AccountLocks",
    "SaveMoneyCommand",
    "SavingsAccountService",
    "WithdrawMoneyCommand",
    "retry_async",
]
