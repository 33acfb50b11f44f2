from typing import Protocol

from savings_service.domain.models import AccountNumber, SavingsAccount


class AccountRepository(Protocol):
    """Storage port for savings accounts.

    Implementations raise ``DataAccessError`` subclasses on storage failures:
    ``TransientDataAccessError`` when a retry may succeed, ``PersistentDataAccessError``
    otherwise.
    """

    async def find_by_number(self, account_number: AccountNumber) -> SavingsAccount | None: ...

    async def save(self, account: SavingsAccount) -> None: ...
