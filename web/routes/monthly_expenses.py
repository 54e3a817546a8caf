"""
월별 고정지출 API 라우터

결제 / 결제 수정 / 결제 취소 및 월별 목록, 인스턴스 생성.
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from core.ledger.models import MonthlyExpenseInstance
from web.dependencies import get_engine, get_read_engine
from web.errors import ledger_http_error
from web.models.requests import (
    GenerateMonthlyExpensesRequest,
    MonthlyExpensePayRequest,
    MonthlyExpenseUpdateRequest,
)
from web.models.responses import (
    GenerationResultResponse,
    MonthlyExpenseMutationResponse,
    MonthlyExpenseResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/monthly-expenses", tags=["Monthly Expenses"])


async def _mutation_result(
    engine: LedgerEngine,
    instance: MonthlyExpenseInstance,
    *account_ids: str | None,
) -> dict[str, Any]:
    warnings = await engine.accounts.negative_balance_warnings(*account_ids)
    return {"monthly_expense": instance.to_dict(), "warnings": warnings}


@router.get("", response_model=list[MonthlyExpenseResponse])
async def list_monthly_expenses(
    month: int | None = Query(default=None, ge=1, le=12, description="기본: 이번 달"),
    year: int | None = Query(default=None, ge=2000, le=2100, description="기본: 올해"),
    status: str | None = Query(default=None, description="pendiente / pagado"),
    engine: LedgerEngine = Depends(get_read_engine),
) -> list[dict[str, Any]]:
    """월별 고정지출 목록 (pendiente 우선)"""
    today = date.today()
    month = month or today.month
    year = year or today.year
    try:
        instances = await engine.monthly_expenses.list_monthly_expenses(month, year, status)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return [instance.to_dict() for instance in instances]


@router.post("/generate", response_model=GenerationResultResponse)
async def generate_monthly_expenses(
    request: GenerateMonthlyExpensesRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """활성 템플릿으로 해당 월 인스턴스 생성 (중복 생성 없음)"""
    try:
        result = await engine.recurring.generate_monthly_instances(request.month, request.year)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return result.to_dict()


@router.get("/{instance_id}", response_model=MonthlyExpenseResponse)
async def get_monthly_expense(
    instance_id: str,
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """월별 고정지출 조회"""
    try:
        instance = await engine.monthly_expenses.get_monthly_expense(instance_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return instance.to_dict()


@router.post("/{instance_id}/pay", response_model=MonthlyExpenseMutationResponse)
async def pay_monthly_expense(
    instance_id: str,
    request: MonthlyExpensePayRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """결제 처리 (계좌에 출금 거래 생성)"""
    try:
        instance = await engine.monthly_expenses.pay(
            instance_id,
            amount=request.amount,
            account_id=request.account_id,
            paid_date=request.paid_date,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, instance, instance.account_id)


@router.patch("/{instance_id}", response_model=MonthlyExpenseMutationResponse)
async def update_monthly_expense(
    instance_id: str,
    request: MonthlyExpenseUpdateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """결제 정보 수정 (pagado 상태만)"""
    try:
        instance = await engine.monthly_expenses.update(
            instance_id,
            amount=request.amount,
            account_id=request.account_id,
            paid_date=request.paid_date,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, instance, instance.account_id)


@router.post("/{instance_id}/undo", response_model=MonthlyExpenseMutationResponse)
async def undo_monthly_expense_payment(
    instance_id: str,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """결제 취소 (연결 거래 삭제)"""
    try:
        instance = await engine.monthly_expenses.undo_payment(instance_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, instance)
