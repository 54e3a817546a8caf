"""
거래 API 라우터

단일 레그 거래 생성/수정/삭제 및 목록 조회.
이체 레그는 /api/transfers에서만 변경 가능.
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from core.constants import Defaults
from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from web.dependencies import get_engine, get_read_engine
from web.errors import ledger_http_error
from web.models.requests import TransactionCreateRequest, TransactionUpdateRequest
from web.models.responses import (
    TransactionDeleteResponse,
    TransactionDetailResponse,
    TransactionListResponse,
    TransactionMutationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    account_id: str | None = Query(default=None),
    category_id: str | None = Query(default=None),
    type: str | None = Query(default=None, description="ingreso / egreso (이체 제외)"),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    limit: int = Query(default=Defaults.PAGE_LIMIT, ge=1, le=Defaults.MAX_PAGE_LIMIT),
    offset: int = Query(default=0, ge=0),
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """거래 목록 조회 (최신순, 합계는 이체 제외)"""
    try:
        page = await engine.transactions.list_transactions(
            account_id=account_id,
            category_id=category_id,
            movement_type=type,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return {
        "transactions": [tx.to_dict() for tx in page.items],
        "pagination": {
            "total": page.total,
            "limit": page.limit,
            "offset": page.offset,
            "has_more": page.has_more,
        },
        "totals": {
            "ingresos": str(page.total_ingresos),
            "egresos": str(page.total_egresos),
            "balance": str(page.balance),
        },
    }


@router.get("/{transaction_id}", response_model=TransactionDetailResponse)
async def get_transaction(
    transaction_id: str,
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """거래 조회 (이체인 경우 상대 레그 포함)"""
    try:
        tx, paired = await engine.transactions.get_transaction(transaction_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    result = tx.to_dict()
    result["paired_transaction"] = paired.to_dict() if paired else None
    return result


@router.post("", response_model=TransactionMutationResponse, status_code=201)
async def create_transaction(
    request: TransactionCreateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """거래 생성"""
    try:
        tx = await engine.transactions.create_transaction(
            account_id=request.account_id,
            category_id=request.category_id,
            movement_type=request.type,
            amount=request.amount,
            concept=request.concept,
            tx_date=request.date,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    warnings = await engine.accounts.negative_balance_warnings(tx.account_id)
    return {"transaction": tx.to_dict(), "warnings": warnings}


@router.patch("/{transaction_id}", response_model=TransactionMutationResponse)
async def update_transaction(
    transaction_id: str,
    request: TransactionUpdateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """거래 수정 (지정한 필드만)"""
    try:
        tx = await engine.transactions.update_transaction(
            transaction_id,
            amount=request.amount,
            category_id=request.category_id,
            concept=request.concept,
            tx_date=request.date,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    warnings = await engine.accounts.negative_balance_warnings(tx.account_id)
    return {"transaction": tx.to_dict(), "warnings": warnings}


@router.delete("/{transaction_id}", response_model=TransactionDeleteResponse)
async def delete_transaction(
    transaction_id: str,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """거래 삭제"""
    try:
        tx = await engine.transactions.delete_transaction(transaction_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    warnings = await engine.accounts.negative_balance_warnings(tx.account_id)
    return {"deleted_id": tx.id, "warnings": warnings}
