"""HTTP transport models.

Request fields are checked by the domain constructors, so a body that passes
validation always converts into a valid command.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from savings_service.application.services import SaveMoneyCommand, WithdrawMoneyCommand
from savings_service.domain.models import AccountBalance, AccountNumber, require_positive_amount


class MoneyMovementRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    account_number: str | None = Field(default=None, alias="accountNumber", validate_default=True)
    amount: float = Field(allow_inf_nan=False)

    @field_validator("account_number")
    @classmethod
    def _check_account_number(cls, value: str | None) -> str:
        return str(AccountNumber.parse(value))

    @field_validator("amount")
    @classmethod
    def _check_amount(cls, value: float) -> float:
        return require_positive_amount(value)

    def to_withdrawal(self) -> WithdrawMoneyCommand:
        return WithdrawMoneyCommand(AccountNumber(self.account_number), self.amount)

    def to_savings(self) -> SaveMoneyCommand:
        return SaveMoneyCommand(AccountNumber(self.account_number), self.amount)


class AccountBalanceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    account_number: str = Field(alias="accountNumber")
    balance: float

    @classmethod
    def from_balance(cls, balance: AccountBalance) -> "AccountBalanceResponse":
        return cls(account_number=str(balance.account_number), balance=balance.balance)


class ErrorModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    messages: tuple[str, ...]

    @classmethod
    def of(cls, *messages: str) -> "ErrorModel":
        return cls(messages=messages)
