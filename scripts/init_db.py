"""
DB 스키마 초기화

사용법:
    python -m scripts.init_db
    python -m scripts.init_db --mode production
"""

import argparse
import asyncio
import logging
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path, init_schema
from core.logging import setup_logging
from core.types import AppMode

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "accounts",
    "transactions",
    "recurring_expenses",
    "monthly_expense_instances",
)


async def main(mode: str) -> None:
    """스키마 생성 및 검증

    Args:
        mode: production 또는 development
    """
    db_path = get_db_path(AppMode(mode.lower()))
    db_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"스키마 초기화 시작: {db_path}")

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)

        for table in REQUIRED_TABLES:
            if not await db.table_exists(table):
                logger.error(f"테이블 누락: {table}")
                raise RuntimeError(f"스키마 검증 실패: {table}")
            logger.info(f"테이블 확인: {table}")

    logger.info("스키마 초기화 완료")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="DB 스키마 초기화")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AppMode],
        default=AppMode.DEVELOPMENT.value,
        help="실행 모드 (기본: development)",
    )
    args = parser.parse_args()

    setup_logging("scripts")
    asyncio.run(main(args.mode))
