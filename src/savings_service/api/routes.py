from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request

from savings_service.api.schemas import AccountBalanceResponse, ErrorModel, MoneyMovementRequest
from savings_service.application.services import SavingsAccountService


logger = structlog.get_logger()

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorModel},
    404: {"model": ErrorModel},
    500: {"model": ErrorModel},
    503: {"model": ErrorModel},
}

router = APIRouter(prefix="/accounts", tags=["accounts"], responses=ERROR_RESPONSES)


def get_account_service(request: Request) -> SavingsAccountService:
    service: SavingsAccountService = request.app.state.account_service
    return service


AccountService = Annotated[SavingsAccountService, Depends(get_account_service)]


@router.put("/withdraw", response_model=AccountBalanceResponse)
async def withdraw_money(body: MoneyMovementRequest, service: AccountService) -> AccountBalanceResponse:
    logger.info("request_received", method="withdraw_money", account_number=body.account_number)
    balance = await service.withdraw(body.to_withdrawal())
    return AccountBalanceResponse.from_balance(balance)


@router.put("/save", response_model=AccountBalanceResponse)
async def save_money(body: MoneyMovementRequest, service: AccountService) -> AccountBalanceResponse:
    logger.info("request_received", method="save_money", account_number=body.account_number)
    balance = await service.deposit(body.to_savings())
    return AccountBalanceResponse.from_balance(balance)


@router.get("/{account_number}", response_model=AccountBalanceResponse)
async def get_balance(account_number: str, service: AccountService) -> AccountBalanceResponse:
    logger.info("request_received", method="get_balance", account_number=account_number)
    balance = await service.get_balance(account_number)
    return AccountBalanceResponse.from_balance(balance)
