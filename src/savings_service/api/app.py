from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from savings_service.api.errors import DEFAULT_RETRY_AFTER, register_exception_handlers
from savings_service.api.middleware import MetricsMiddleware, RequestContextMiddleware
from savings_service.api.routes import router
from savings_service.application.services import SavingsAccountService


def create_app(
    service: SavingsAccountService,
    *,
    retry_after: int = DEFAULT_RETRY_AFTER,
    metrics_enabled: bool = True,
) -> FastAPI:
    """Create FastAPI application exposing the savings account endpoints."""
    app = FastAPI(title="Savings Account Service")
    app.state.account_service = service

    register_exception_handlers(app, retry_after)
    app.include_router(router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    if metrics_enabled:
        app.add_middleware(MetricsMiddleware)

        @app.get("/metrics", response_class=PlainTextResponse)
        async def metrics() -> PlainTextResponse:
            """Prometheus metrics endpoint."""
            return PlainTextResponse(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST,
            )

    app.add_middleware(RequestContextMiddleware)

    return app
