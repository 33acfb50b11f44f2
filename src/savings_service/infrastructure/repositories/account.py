from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from savings_service.domain.models import AccountNumber, SavingsAccount
from savings_service.infrastructure.database import Database
from savings_service.infrastructure.errors import translate_sqlalchemy_error


class SqlAccountRepository:
    """PostgreSQL-backed account store; every call runs in its own session."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def find_by_number(self, account_number: AccountNumber) -> SavingsAccount | None:
        if account_number is None:
            raise TypeError("The account number must not be null")
        try:
            async with self._database.session() as session:
                result = await session.execute(
                    text("""
                        SELECT account_number, balance
                        FROM savings_accounts
                        WHERE account_number = :account_number
                    """),
                    {"account_number": str(account_number)},
                )
                row = result.fetchone()
        except (SQLAlchemyError, TimeoutError) as e:
            raise translate_sqlalchemy_error(e) from e

        if not row:
            return None
        return SavingsAccount(
            account_number=AccountNumber(row.account_number),
            balance=float(row.balance),
        )

    async def save(self, account: SavingsAccount) -> None:
        try:
            async with self._database.session() as session:
                await session.execute(
                    text("""
                        INSERT INTO savings_accounts (account_number, balance)
                        VALUES (:account_number, :balance)
                        ON CONFLICT (account_number)
                        DO UPDATE SET balance = EXCLUDED.balance, updated_at = NOW()
                    """),
                    {
                        "account_number": str(account.account_number),
                        "balance": account.balance,
                    },
                )
                await session.commit()
        except (SQLAlchemyError, TimeoutError) as e:
            raise translate_sqlalchemy_error(e) from e
