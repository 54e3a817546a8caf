"""
원장 예외 → HTTP 응답 변환

- ValidationError → 400
- NotFoundError → 404
- StateConflictError → 409
- ConsistencyViolation → 500 (ERROR 로그)
"""

import logging

from fastapi import HTTPException

from core.ledger.errors import (
    ConsistencyViolation,
    LedgerError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ledger_http_error(e: LedgerError) -> HTTPException:
    """LedgerError를 HTTPException으로 변환

    IncompleteTransferPair는 NotFound이면서 ConsistencyViolation이므로
    ConsistencyViolation을 먼저 확인.
    """
    detail = {"code": e.code, "message": e.message}

    if isinstance(e, ConsistencyViolation):
        logger.error(f"Ledger consistency violation: {e}", extra={"code": e.code})
        return HTTPException(status_code=500, detail=detail)
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=detail)
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=detail)
    if isinstance(e, StateConflictError):
        return HTTPException(status_code=409, detail=detail)

    logger.error(f"Unclassified ledger error: {e}")
    return HTTPException(status_code=500, detail=detail)
