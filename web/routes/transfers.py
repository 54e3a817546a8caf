"""
이체 API 라우터

두 계좌 간 이체 (출금 레그 + 입금 레그) 생성/수정/삭제.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from core.ledger.models import Transfer
from web.dependencies import get_engine, get_read_engine
from web.errors import ledger_http_error
from web.models.requests import TransferCreateRequest, TransferUpdateRequest
from web.models.responses import TransferMutationResponse, TransferResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transfers", tags=["Transfers"])


async def _mutation_result(engine: LedgerEngine, transfer: Transfer) -> dict[str, Any]:
    warnings = await engine.accounts.negative_balance_warnings(
        transfer.from_account_id,
        transfer.to_account_id,
    )
    return {"transfer": transfer.to_dict(), "warnings": warnings}


@router.post("", response_model=TransferMutationResponse, status_code=201)
async def create_transfer(
    request: TransferCreateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """이체 생성

    잔액 부족은 거부하지 않고 warnings로 알림.
    """
    try:
        transfer = await engine.transfers.create_transfer(
            from_account_id=request.from_account_id,
            to_account_id=request.to_account_id,
            amount=request.amount,
            concept=request.concept,
            tx_date=request.date,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, transfer)


@router.get("/{transfer_pair_id}", response_model=TransferResponse)
async def get_transfer(
    transfer_pair_id: str,
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """이체 조회"""
    try:
        transfer = await engine.transfers.get_transfer(transfer_pair_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return transfer.to_dict()


@router.patch("/{transfer_pair_id}", response_model=TransferMutationResponse)
async def update_transfer(
    transfer_pair_id: str,
    request: TransferUpdateRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """이체 수정 (두 레그 함께)"""
    try:
        transfer = await engine.transfers.update_transfer(
            transfer_pair_id,
            amount=request.amount,
            concept=request.concept,
            tx_date=request.date,
            notes=request.notes,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, transfer)


@router.delete("/{transfer_pair_id}", response_model=TransferMutationResponse)
async def delete_transfer(
    transfer_pair_id: str,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """이체 삭제 (두 레그 함께)"""
    try:
        transfer = await engine.transfers.delete_transfer(transfer_pair_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, transfer)


@router.delete("/by-leg/{transaction_id}", response_model=TransferMutationResponse)
async def delete_transfer_by_leg(
    transaction_id: str,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """레그 ID로 이체 삭제"""
    try:
        transfer = await engine.transfers.delete_transfer_by_leg(transaction_id)
    except LedgerError as e:
        raise ledger_http_error(e) from e

    return await _mutation_result(engine, transfer)
