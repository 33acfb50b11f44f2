"""Repository implementations."""

from savings_service.infrastructure.repositories.account import SqlAccountRepository
from savings_service.infrastructure.repositories.memory import InMemoryAccountRepository


__all__ = [
    "InMemoryAccountRepository",
    "SqlAccountRepository",
]
