"""Shared pytest fixtures for savings service tests."""

from unittest.mock import AsyncMock

import pytest

from savings_service.application.locks import AccountLocks
from savings_service.application.services import SavingsAccountService
from savings_service.domain.models import AccountNumber, SavingsAccount
from savings_service.infrastructure.repositories.memory import InMemoryAccountRepository


@pytest.fixture
def account_number() -> AccountNumber:
    """Account number used across the deposit and withdrawal scenarios."""
    return AccountNumber("1-234-567-890")


@pytest.fixture
def unknown_account_number() -> AccountNumber:
    """Account number that no repository knows about."""
    return AccountNumber("9-999-999-999")


@pytest.fixture
def sample_account(account_number: AccountNumber) -> SavingsAccount:
    """Create sample account with a zero balance."""
    return SavingsAccount(account_number=account_number, balance=0.0)


@pytest.fixture
def funded_account(account_number: AccountNumber) -> SavingsAccount:
    """Create sample account holding $100.00."""
    return SavingsAccount(account_number=account_number, balance=100.0)


@pytest.fixture
def mock_account_repository() -> AsyncMock:
    """Create mock AccountRepository."""
    repo = AsyncMock()
    repo.find_by_number = AsyncMock(return_value=None)
    repo.save = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def memory_repository(sample_account: SavingsAccount) -> InMemoryAccountRepository:
    """Create in-memory repository holding the sample account."""
    return InMemoryAccountRepository([sample_account])


@pytest.fixture
def service(mock_account_repository: AsyncMock) -> SavingsAccountService:
    """Create SavingsAccountService over the mocked repository."""
    return SavingsAccountService(mock_account_repository, max_attempts=3, locks=AccountLocks())


@pytest.fixture
def memory_service(memory_repository: InMemoryAccountRepository) -> SavingsAccountService:
    """Create SavingsAccountService over the in-memory repository."""
    return SavingsAccountService(memory_repository, max_attempts=3)
