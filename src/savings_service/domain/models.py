import math
import re
from dataclasses import dataclass
from typing import Any, ClassVar

import structlog

from savings_service.domain.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidFormatError,
)


logger = structlog.get_logger()


@dataclass(frozen=True)
class AccountNumber:
    """Savings account identifier in the ``D-DDD-DDD-DDD`` format."""

    PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"\d-\d{3}-\d{3}-\d{3}", re.ASCII)

    number: str

    def __post_init__(self) -> None:
        if self.number is None:
            raise InvalidFormatError("The account number must not be null")
        if not isinstance(self.number, str) or not self.PATTERN.fullmatch(self.number):
            raise InvalidFormatError(f"Invalid savings account number format: {self.number}")

    def __str__(self) -> str:
        return self.number

    @classmethod
    def parse(cls, value: Any) -> "AccountNumber":
        if isinstance(value, cls):
            return value
        return cls(value)


def require_positive_amount(amount: float) -> float:
    if amount is None:
        raise InvalidAmountError("The amount must not be null")
    amount = float(amount)
    if not math.isfinite(amount):
        raise InvalidAmountError(f"The amount must be a finite number: {amount}")
    if amount <= 0:
        raise InvalidAmountError(f"The amount must be > 0: {amount}")
    return amount


@dataclass(frozen=True)
class AccountBalance:
    account_number: AccountNumber
    balance: float

    def __post_init__(self) -> None:
        if self.account_number is None:
            raise InvalidFormatError("The account number must not be null")
        if not math.isfinite(self.balance) or self.balance < 0:
            raise InvalidAmountError(f"The balance must be >= 0: {float(self.balance)}")


@dataclass
class SavingsAccount:
    """Savings account whose balance never drops below zero."""

    account_number: AccountNumber
    balance: float = 0.0

    def __post_init__(self) -> None:
        if self.account_number is None:
            raise InvalidFormatError("The account number must not be null")
        if not math.isfinite(self.balance) or self.balance < 0:
            raise InvalidAmountError(f"The balance must be >= 0: {float(self.balance)}")
        self.balance = float(self.balance)

    def withdraw(self, amount: float) -> AccountBalance:
        """Take ``amount`` out of the account.

        Raises:
            InvalidAmountError: if ``amount`` <= 0.
            InsufficientFundsError: if the balance is smaller than ``amount``.
        """
        amount = require_positive_amount(amount)
        if self.balance < amount:
            raise InsufficientFundsError(self.account_number, self.balance, amount)

        self.balance -= amount
        logger.info(
            "money_withdrawn",
            account_number=str(self.account_number),
            amount=amount,
            balance=self.balance,
        )
        return self.current_balance()

    def deposit(self, amount: float) -> AccountBalance:
        """Put ``amount`` into the account.

        Raises:
            InvalidAmountError: if ``amount`` <= 0.
        """
        amount = require_positive_amount(amount)
        if not math.isfinite(self.balance + amount):
            raise InvalidAmountError(f"The balance cannot hold a deposit of {amount}")
        self.balance += amount
        logger.info(
            "money_saved",
            account_number=str(self.account_number),
            amount=amount,
            balance=self.balance,
        )
        return self.current_balance()

    def current_balance(self) -> AccountBalance:
        return AccountBalance(self.account_number, self.balance)
