"""
계좌 API 라우터

계좌 생성/조회/수정/비활성화 및 잔액 검증.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from core.ledger.accounts import totals_by_currency
from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from web.dependencies import get_engine, get_read_engine
from web.errors import ledger_http_error
from web.models.requests import AccountCreateRequest, AccountUpdateRequest
from web.models.responses import (
    AccountDetailResponse,
    AccountListResponse,
    AccountResponse,
    BalanceAuditResponse,
    BalanceCheckResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    include_inactive: bool = Query(default=False),
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """계좌 목록 + 통화별 잔액 합계"""
    accounts = await engine.accounts.list_accounts(include_inactive)
    totals = totals_by_currency([a for a in accounts if a.is_active])

    return {
        "accounts": [account.to_dict() for account in accounts],
        "totals_by_currency": {currency: str(total) for currency, total in totals.items()},
    }


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: AccountCreateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """계좌 생성"""
    try:
        account = await engine.accounts.create_account(
            name=request.name,
            account_type=request.type,
            currency=request.currency,
            initial_balance=request.initial_balance,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return account.to_dict()


@router.get("/audit", response_model=BalanceAuditResponse)
async def audit_balances(
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """전체 계좌 잔액 점검 (수정하지 않음)"""
    drifts = await engine.accounts.audit_balances()
    return {
        "consistent": not drifts,
        "drifts": [drift.to_dict() for drift in drifts],
    }


@router.get("/{account_id}", response_model=AccountDetailResponse)
async def get_account(
    account_id: str,
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """계좌 조회 (입금/출금 합계, 거래 수, 최근 거래 포함)"""
    try:
        account = await engine.accounts.get_account(account_id)
        statistics = await engine.accounts.get_account_statistics(account_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return {**account.to_dict(), "statistics": statistics.to_dict()}


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    account_id: str,
    request: AccountUpdateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """계좌 수정"""
    try:
        account = await engine.accounts.update_account(
            account_id,
            name=request.name,
            initial_balance=request.initial_balance,
            currency=request.currency,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return account.to_dict()


@router.delete("/{account_id}", response_model=AccountResponse)
async def deactivate_account(
    account_id: str,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """계좌 비활성화 (거래가 없는 경우만)"""
    try:
        account = await engine.accounts.deactivate_account(account_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return account.to_dict()


@router.get("/{account_id}/verify", response_model=BalanceCheckResponse)
async def verify_balance(
    account_id: str,
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """계좌 잔액 검증 (불일치 시 500)"""
    try:
        balance = await engine.accounts.verify_balance(account_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return {"account_id": account_id, "balance": str(balance), "consistent": True}
