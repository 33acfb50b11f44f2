import random
from collections.abc import Iterable

import structlog

from savings_service.domain.exceptions import QueryTimeoutError
from savings_service.domain.models import AccountNumber, SavingsAccount


logger = structlog.get_logger()


class InMemoryAccountRepository:
    """Process-local account store keyed by account number.

    ``failure_rate`` makes lookups fail with a simulated query timeout, which is
    how the retry path can be exercised without a real database.
    """

    def __init__(
        self,
        accounts: Iterable[SavingsAccount] = (),
        failure_rate: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self._accounts: dict[AccountNumber, SavingsAccount] = {}
        self._failure_rate = failure_rate
        self._rng = rng or random.Random()
        for account in accounts:
            self.add(account)

    @classmethod
    def seeded(cls, account_numbers: Iterable[str], failure_rate: float = 0.0) -> "InMemoryAccountRepository":
        return cls(
            (SavingsAccount(AccountNumber(number)) for number in account_numbers),
            failure_rate=failure_rate,
        )

    def add(self, account: SavingsAccount) -> None:
        self._accounts[account.account_number] = account

    async def find_by_number(self, account_number: AccountNumber) -> SavingsAccount | None:
        if account_number is None:
            raise TypeError("The account number must not be null")
        if self._failure_rate and self._rng.random() < self._failure_rate:
            logger.debug("simulated_query_timeout", account_number=str(account_number))
            raise QueryTimeoutError("Database query timed out!")
        return self._accounts.get(account_number)

    async def save(self, account: SavingsAccount) -> None:
        self._accounts[account.account_number] = account

    def __len__(self) -> int:
        return len(self._accounts)
