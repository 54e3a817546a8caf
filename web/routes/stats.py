"""
재무 통계 API 라우터
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from core.ledger.engine import LedgerEngine
from core.ledger.errors import LedgerError
from web.dependencies import get_read_engine
from web.errors import ledger_http_error
from web.models.responses import CategoryStatsResponse, FinanceStatsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["Stats"])


@router.get("", response_model=FinanceStatsResponse)
async def get_stats(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2000, le=2100),
    engine: LedgerEngine = Depends(get_read_engine),
) -> dict[str, Any]:
    """월별 합계, 카테고리별 지출, 6개월 추이, 계좌 요약"""
    try:
        return await engine.stats.get_stats(month, year)
    except LedgerError as e:
        raise ledger_http_error(e) from e


@router.get("/by-category", response_model=list[CategoryStatsResponse])
async def expenses_by_category(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    engine: LedgerEngine = Depends(get_read_engine),
) -> list[dict[str, Any]]:
    """카테고리별 지출 (금액 내림차순)"""
    try:
        return await engine.stats.expenses_by_category(month, year)
    except LedgerError as e:
        raise ledger_http_error(e) from e
