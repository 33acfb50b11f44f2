import asyncio
import contextlib
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from savings_service.domain.models import AccountNumber


@dataclass
class _HeldLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class AccountLocks:
    """One exclusive lock per account number.

    A withdraw or deposit holds its account's lock from lookup until the new
    balance is stored, so concurrent requests against one account cannot lose
    updates. With ``enabled=False`` requests run unguarded.

    Entries live only while some request holds or waits for them.
    """

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._locks: dict[AccountNumber, _HeldLock] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def __len__(self) -> int:
        return len(self._locks)

    @contextlib.asynccontextmanager
    async def hold(self, account_number: AccountNumber) -> AsyncIterator[None]:
        if not self._enabled:
            yield
            return

        held = self._locks.get(account_number)
        if held is None:
            held = self._locks[account_number] = _HeldLock()
        held.holders += 1
        try:
            async with held.lock:
                yield
        finally:
            held.holders -= 1
            if held.holders == 0:
                del self._locks[account_number]
