from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog

from savings_service.application.locks import AccountLocks
from savings_service.application.retry import retry_async
from savings_service.domain.exceptions import (
    AccountNotFoundError,
    AccountOperationFailedError,
    DomainError,
    InvalidFormatError,
    is_transient,
)
from savings_service.domain.models import (
    AccountBalance,
    AccountNumber,
    SavingsAccount,
    require_positive_amount,
)
from savings_service.domain.repository import AccountRepository
from savings_service.infrastructure.metrics import (
    ACCOUNT_OPERATIONS_TOTAL,
    REPOSITORY_RETRIES_TOTAL,
    track_operation_duration,
)


logger = structlog.get_logger()

R = TypeVar("R")


@dataclass(frozen=True)
class _MoneyCommand:
    account_number: AccountNumber
    amount: float

    def __post_init__(self) -> None:
        if self.account_number is None:
            raise InvalidFormatError("The account number must not be null")
        object.__setattr__(self, "account_number", AccountNumber.parse(self.account_number))
        object.__setattr__(self, "amount", require_positive_amount(self.amount))


@dataclass(frozen=True)
class WithdrawMoneyCommand(_MoneyCommand):
    """Request to take ``amount`` out of an account."""


@dataclass(frozen=True)
class SaveMoneyCommand(_MoneyCommand):
    """Request to put ``amount`` into an account."""


class SavingsAccountService:
    """Savings account use cases on top of an ``AccountRepository``.

    Every repository call is retried up to ``max_attempts`` times while the
    failure is transient. Storage failures that survive the retries leave this
    layer as ``AccountOperationFailedError``; domain errors propagate unchanged.
    """

    def __init__(
        self,
        repository: AccountRepository,
        *,
        max_attempts: int = 3,
        base_delay: float = 0.0,
        max_delay: float = 0.0,
        locks: AccountLocks | None = None,
    ) -> None:
        self._repository = repository
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._locks = locks if locks is not None else AccountLocks()

    @track_operation_duration("withdraw")
    async def withdraw(self, command: WithdrawMoneyCommand) -> AccountBalance:
        if command is None:
            raise TypeError("The withdrawal request must not be null")
        return await self._change_balance(
            "withdraw",
            command.account_number,
            lambda account: account.withdraw(command.amount),
        )

    @track_operation_duration("deposit")
    async def deposit(self, command: SaveMoneyCommand) -> AccountBalance:
        if command is None:
            raise TypeError("The savings request must not be null")
        return await self._change_balance(
            "deposit",
            command.account_number,
            lambda account: account.deposit(command.amount),
        )

    @track_operation_duration("get_balance")
    async def get_balance(self, account_number: AccountNumber | str) -> AccountBalance:
        account_number = AccountNumber.parse(account_number)
        log = logger.bind(operation="get_balance", account_number=str(account_number))

        try:
            account = await self._find_account(account_number, "get_balance", log)
        except DomainError as e:
            ACCOUNT_OPERATIONS_TOTAL.labels(operation="get_balance", outcome=e.kind.value).inc()
            raise

        ACCOUNT_OPERATIONS_TOTAL.labels(operation="get_balance", outcome="OK").inc()
        balance = account.current_balance()
        log.info("get_balance", balance=balance.balance)
        return balance

    async def _change_balance(
        self,
        operation: str,
        account_number: AccountNumber,
        change: Callable[[SavingsAccount], AccountBalance],
    ) -> AccountBalance:
        log = logger.bind(operation=operation, account_number=str(account_number))

        try:
            async with self._locks.hold(account_number):
                account = await self._find_account(account_number, operation, log)
                balance = change(account)
                await self._call_repository(
                    lambda: self._repository.save(account),
                    account_number,
                    operation,
                    log,
                )
        except DomainError as e:
            ACCOUNT_OPERATIONS_TOTAL.labels(operation=operation, outcome=e.kind.value).inc()
            raise

        ACCOUNT_OPERATIONS_TOTAL.labels(operation=operation, outcome="OK").inc()
        return balance

    async def _find_account(
        self,
        account_number: AccountNumber,
        operation: str,
        log: structlog.stdlib.BoundLogger,
    ) -> SavingsAccount:
        account = await self._call_repository(
            lambda: self._repository.find_by_number(account_number),
            account_number,
            operation,
            log,
        )
        if account is None:
            log.info("account_not_found")
            raise AccountNotFoundError(account_number)
        return account

    async def _call_repository(
        self,
        call: Callable[[], Awaitable[R]],
        account_number: AccountNumber,
        operation: str,
        log: structlog.stdlib.BoundLogger,
    ) -> R:
        def on_retry(*, attempt: int, delay_seconds: float, exception: BaseException) -> None:
            REPOSITORY_RETRIES_TOTAL.labels(operation=operation).inc()
            log.warning(
                "repository_retry",
                attempt=attempt,
                max_attempts=self._max_attempts,
                delay_seconds=delay_seconds,
                error=str(exception),
            )

        try:
            return await retry_async(
                call,
                max_attempts=self._max_attempts,
                is_retryable=is_transient,
                base_delay=self._base_delay,
                max_delay=self._max_delay,
                on_retry=on_retry,
            )
        except DomainError:
            raise
        except Exception as e:
            failure = AccountOperationFailedError(account_number, e)
            if failure.transient:
                log.warning("repository_failed", transient=True, error=str(e))
            else:
                log.error("repository_failed", transient=False, error=str(e))
            raise failure from e
