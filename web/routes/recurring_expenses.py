"""
고정지출 템플릿 API 라우터
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from web.dependencies import get_engine, get_read_engine
from web.errors import ledger_http_error
from web.models.requests import RecurringExpenseCreateRequest, RecurringExpenseUpdateRequest
from web.models.responses import RecurringExpenseResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recurring-expenses", tags=["Recurring Expenses"])


@router.get("", response_model=list[RecurringExpenseResponse])
async def list_recurring_expenses(
    active_only: bool = Query(default=False),
    engine: LedgerEngine = Depends(get_read_engine),
) -> list[dict[str, Any]]:
    expenses = await engine.recurring.list(active_only)
    return [expense.to_dict() for expense in expenses]


@router.post("", response_model=RecurringExpenseResponse, status_code=201)
async def create_recurring_expense(
    request: RecurringExpenseCreateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    try:
        expense = await engine.recurring.create(
            concept=request.concept,
            category_id=request.category_id,
            currency=request.currency,
            due_day=request.due_day,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return expense.to_dict()


@router.get("/{recurring_id}", response_model=RecurringExpenseResponse)
async def get_recurring_expense(
    recurring_id: str,
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    try:
        expense = await engine.recurring.get(recurring_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return expense.to_dict()


@router.patch("/{recurring_id}", response_model=RecurringExpenseResponse)
async def update_recurring_expense(
    recurring_id: str,
    request: RecurringExpenseUpdateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    try:
        expense = await engine.recurring.update(
            recurring_id,
            concept=request.concept,
            category_id=request.category_id,
            currency=request.currency,
            due_day=request.due_day,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return expense.to_dict()


@router.delete("/{recurring_id}", response_model=RecurringExpenseResponse)
async def deactivate_recurring_expense(
    recurring_id: str,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """템플릿 비활성화 (생성된 인스턴스는 유지)"""
    try:
        expense = await engine.recurring.deactivate(recurring_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return expense.to_dict()
