from dataclasses import dataclass, field
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from savings_service.api.schemas import ErrorModel
from savings_service.domain.exceptions import (
    AccountNotFoundError,
    AccountOperationFailedError,
    DomainError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidFormatError,
)


logger = structlog.get_logger()

DEFAULT_RETRY_AFTER = 5000


@dataclass(frozen=True)
class ErrorResponse:
    status_code: int
    body: ErrorModel
    headers: dict[str, str] = field(default_factory=dict)


def validation_messages(exc: RequestValidationError) -> list[str]:
    """Messages of a rejected request body, preferring the domain error behind each failure."""
    messages = []
    for error in exc.errors():
        cause = (error.get("ctx") or {}).get("error")
        if isinstance(cause, BaseException):
            messages.append(str(cause))
        else:
            messages.append(str(error.get("msg", "Invalid request")))
    return messages


def insufficient_funds_message(exc: InsufficientFundsError) -> str:
    return (
        f"The bank account {exc.account_number} has a balance of ${exc.balance:.2f}. "
        f"Therefore you cannot withdraw ${exc.requested:.2f} since you're short ${exc.shortfall:.2f}"
    )


def map_exception(exc: BaseException, retry_after: int = DEFAULT_RETRY_AFTER) -> ErrorResponse:
    """Translate a failure into the HTTP status, error body and headers returned to clients."""
    if isinstance(exc, RequestValidationError):
        return ErrorResponse(status.HTTP_400_BAD_REQUEST, ErrorModel.of(*validation_messages(exc)))

    if isinstance(exc, InvalidFormatError | InvalidAmountError):
        return ErrorResponse(status.HTTP_400_BAD_REQUEST, ErrorModel.of(str(exc)))

    if isinstance(exc, AccountNotFoundError):
        return ErrorResponse(status.HTTP_404_NOT_FOUND, ErrorModel.of(str(exc)))

    if isinstance(exc, InsufficientFundsError):
        return ErrorResponse(status.HTTP_400_BAD_REQUEST, ErrorModel.of(insufficient_funds_message(exc)))

    if isinstance(exc, AccountOperationFailedError):
        if exc.transient:
            return ErrorResponse(
                status.HTTP_503_SERVICE_UNAVAILABLE,
                ErrorModel.of(str(exc)),
                {"Retry-After": str(retry_after)},
            )
        return ErrorResponse(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorModel.of(str(exc)))

    return ErrorResponse(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorModel.of("Internal server error"))


def _log_failure(request: Request, exc: BaseException, response: ErrorResponse) -> None:
    log = logger.bind(method=request.method, path=request.url.path, status_code=response.status_code)
    account_number = getattr(exc, "account_number", None)
    if account_number is not None:
        log = log.bind(account_number=str(account_number))

    if isinstance(exc, InsufficientFundsError):
        log.warning("insufficient_funds", message=response.body.messages[0])
    elif isinstance(exc, AccountOperationFailedError):
        if exc.transient:
            log.warning("account_operation_failed", transient=True, exc_info=exc)
        else:
            log.error("account_operation_failed", transient=False, exc_info=exc)
    elif response.status_code >= 500:
        log.error("unhandled_error", exc_info=exc)
    else:
        log.info("request_rejected", messages=list(response.body.messages))


def register_exception_handlers(app: FastAPI, retry_after: int = DEFAULT_RETRY_AFTER) -> None:
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        response = map_exception(exc, retry_after)
        _log_failure(request, exc, response)
        return JSONResponse(
            status_code=response.status_code,
            content=response.body.model_dump(mode="json"),
            headers=response.headers,
        )

    handled: list[Any] = [RequestValidationError, DomainError, Exception]
    for exc_class in handled:
        app.add_exception_handler(exc_class, handle)
