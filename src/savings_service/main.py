import asyncio

import structlog

from savings_service.api.app import create_app
from savings_service.api.http_server import HttpServer
from savings_service.application.locks import AccountLocks
from savings_service.application.services import SavingsAccountService
from savings_service.config import Settings, settings
from savings_service.domain.repository import AccountRepository
from savings_service.infrastructure.database import Database
from savings_service.infrastructure.repositories import InMemoryAccountRepository, SqlAccountRepository
from savings_service.logging import configure_logging


logger = structlog.get_logger()


def build_repository(config: Settings, database: Database | None = None) -> AccountRepository:
    if config.repository_backend == "postgres":
        if database is None:
            raise ValueError("postgres backend requires a database")
        return SqlAccountRepository(database)
    return InMemoryAccountRepository.seeded(
        config.seed_account_numbers,
        failure_rate=config.memory_failure_rate,
    )


def build_service(config: Settings, repository: AccountRepository) -> SavingsAccountService:
    return SavingsAccountService(
        repository,
        max_attempts=config.retry_max_attempts,
        base_delay=config.retry_base_delay_seconds,
        max_delay=config.retry_max_delay_seconds,
        locks=AccountLocks(enabled=config.account_locking_enabled),
    )


async def main() -> None:
    configure_logging(
        level=settings.log_level,
        log_format=settings.log_format,
    )

    logger.info(
        "starting_savings_service",
        http_port=settings.http_port,
        log_level=settings.log_level,
        repository_backend=settings.repository_backend,
        retry_max_attempts=settings.retry_max_attempts,
        account_locking_enabled=settings.account_locking_enabled,
    )

    database: Database | None = None
    server: HttpServer | None = None

    try:
        if settings.repository_backend == "postgres":
            database = Database(
                settings.database_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_timeout=settings.database_pool_timeout_seconds,
            )
            await database.ping()
            logger.info("database_connected")

        service = build_service(settings, build_repository(settings, database))
        app = create_app(
            service,
            retry_after=settings.retry_after_hint,
            metrics_enabled=settings.metrics_enabled,
        )
        server = HttpServer(app, host=settings.http_host, port=settings.http_port)

        await server.start()
        await server.wait_for_termination()
    finally:
        logger.info("shutting_down")
        if server:
            await server.stop()
        if database:
            await database.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
