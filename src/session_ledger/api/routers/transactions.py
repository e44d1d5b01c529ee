"""Routes for recording and reading session-scoped transactions."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from ...core.session import require_session, resolve_session
from ...deps import DatabaseSessionDependency, SettingsDependency
from ...errors import ValidationError
from ...models import Transaction
from ...schemas import (
    ErrorResponse,
    SummaryAmount,
    SummaryResponse,
    TransactionListResponse,
    TransactionNotFoundResponse,
    TransactionRead,
    TransactionResponse,
)
from ...services import TransactionService
from ...validation import Invalid, validate_transaction_create, validate_transaction_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

_GUARDED_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Missing session cookie"},
}
_VALIDATED_RESPONSES: dict[int | str, dict[str, Any]] = {
    422: {"model": ErrorResponse, "description": "Invalid input"},
}


def _map_transaction(transaction: Transaction) -> TransactionRead:
    return TransactionRead.model_validate(transaction)


@router.get(
    "",
    response_model=TransactionListResponse,
    responses=_GUARDED_RESPONSES,
    summary="List the caller's transactions",
)
@router.get("/", response_model=TransactionListResponse, include_in_schema=False)
async def list_transactions(
    request: Request,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> TransactionListResponse:
    session_id = require_session(request.cookies, settings)
    service = TransactionService(session)
    transactions = await service.list_transactions(session_id)
    return TransactionListResponse(
        transactions=[_map_transaction(item) for item in transactions],
    )


@router.get(
    "/summary",
    response_model=SummaryResponse,
    responses=_GUARDED_RESPONSES,
    summary="Net balance of the caller's transactions",
)
async def read_summary(
    request: Request,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> SummaryResponse:
    session_id = require_session(request.cookies, settings)
    service = TransactionService(session)
    amount = await service.get_summary(session_id)
    return SummaryResponse(summary=SummaryAmount(amount=amount))


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse | TransactionNotFoundResponse,
    responses={**_GUARDED_RESPONSES, **_VALIDATED_RESPONSES},
    summary="Fetch one of the caller's transactions",
)
async def read_transaction(
    transaction_id: str,
    request: Request,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> TransactionResponse | TransactionNotFoundResponse:
    session_id = require_session(request.cookies, settings)
    result = validate_transaction_id(transaction_id)
    if isinstance(result, Invalid):
        raise ValidationError(result.errors)

    service = TransactionService(session)
    transaction = await service.get_transaction(result.value, session_id)
    if transaction is None:
        logger.debug("Transaction lookup missed", extra={"transaction_id": result.value})
        return TransactionNotFoundResponse()
    return TransactionResponse(transaction=_map_transaction(transaction))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses=_VALIDATED_RESPONSES,
    summary="Record a credit or debit transaction",
    description=(
        "Body: `{title: string, amount: number > 0, type: 'credit' | 'debit'}`. "
        "Starts a new session cookie when the caller has none."
    ),
)
@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    include_in_schema=False,
)
async def create_transaction(
    request: Request,
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> Response:
    result = validate_transaction_create(await request.body())
    if isinstance(result, Invalid):
        raise ValidationError(result.errors)

    response = Response(status_code=status.HTTP_201_CREATED)
    session_id = resolve_session(request.cookies, response, settings)
    service = TransactionService(session)
    await service.create_transaction(result.value, session_id)
    return response
