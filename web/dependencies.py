"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import Settings, get_settings
from core.ledger.engine import LedgerEngine
from core.ledger.locks import AccountLocks


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (읽기 전용)

    목록/통계 조회에 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


async def get_db_write() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB 세션 반환 (쓰기 가능)

    거래/이체/결제 변경 시 사용.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=False) as db:
        yield db


# =========================================================================
# 계좌 잠금 (프로세스 전역)
# =========================================================================

# 요청마다 DB 연결은 새로 만들지만 잠금은 프로세스 전체에서 공유
_account_locks = AccountLocks()


def get_account_locks() -> AccountLocks:
    """프로세스 전역 AccountLocks 반환"""
    return _account_locks


def get_engine(
    db: SQLiteAdapter = Depends(get_db_write),
    locks: AccountLocks = Depends(get_account_locks),
) -> LedgerEngine:
    """쓰기용 LedgerEngine"""
    return LedgerEngine(db, locks)


def get_read_engine(
    db: SQLiteAdapter = Depends(get_db),
    locks: AccountLocks = Depends(get_account_locks),
) -> LedgerEngine:
    """조회용 LedgerEngine (읽기 전용 연결)"""
    return LedgerEngine(db, locks)
