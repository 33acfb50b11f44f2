#!/usr/bin/env python3
"""Seed the savings_accounts table.

Creates every account listed in SEED_ACCOUNT_NUMBERS with a zero balance.
Accounts that already exist keep their balance.
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import structlog
from sqlalchemy import text

from savings_service.config import settings
from savings_service.domain.models import AccountNumber
from savings_service.infrastructure.database import Database
from savings_service.logging import configure_logging


logger = structlog.get_logger()


async def main() -> None:
    configure_logging(log_format="console")

    account_numbers = [AccountNumber(number) for number in settings.seed_account_numbers]
    logger.info(
        "seeding_accounts",
        database_url=settings.database_url.split("@")[-1],
        count=len(account_numbers),
    )

    database = Database(settings.database_url)
    try:
        async with database.session() as session:
            for account_number in account_numbers:
                await session.execute(
                    text("""
                        INSERT INTO savings_accounts (account_number, balance)
                        VALUES (:account_number, 0)
                        ON CONFLICT (account_number) DO NOTHING
                    """),
                    {"account_number": str(account_number)},
                )
            await session.commit()
    finally:
        await database.close()

    logger.info("seeding_complete", accounts=[str(number) for number in account_numbers])


if __name__ == "__main__":
    asyncio.run(main())
