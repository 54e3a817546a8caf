"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config.loader import get_settings
from core.logging import apply_log_levels, setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.routes import (
    accounts,
    health,
    monthly_expenses,
    recurring_expenses,
    stats,
    transactions,
    transfers,
)
from web.routes.health import APP_VERSION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema

    settings = get_settings()
    apply_log_levels(settings.console_log_level, settings.file_log_level)

    # 시작 시 - DB 스키마 자동 초기화
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

    logger.info(
        f"Web: 시작 (mode={settings.mode.value})",
        extra={"db_path": str(settings.db_path)},
    )

    yield

    logger.info("Web: 종료")


app = FastAPI(
    title="FinLedger API",
    description="개인 가계부 (계좌/거래/이체/고정지출) API",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS 설정 (개발용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(accounts.router)
app.include_router(transactions.router)
app.include_router(transfers.router)
app.include_router(monthly_expenses.router)
app.include_router(recurring_expenses.router)
app.include_router(stats.router)
