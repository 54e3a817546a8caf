"""
월별 고정지출 인스턴스 생성

활성 템플릿마다 해당 월 pendiente 인스턴스를 생성.
이미 생성된 달은 건너뛰므로 매일 실행해도 무방.

사용법:
    python -m scripts.generate_monthly_expenses
    python -m scripts.generate_monthly_expenses --month 3 --year 2026 --mode production
"""

import argparse
import asyncio
import logging
from datetime import date
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path, init_schema
from core.ledger.recurring import GenerationResult, RecurringExpenseService
from core.logging import setup_logging
from core.types import AppMode

logger = logging.getLogger(__name__)


async def main(mode: str, month: int, year: int) -> GenerationResult:
    """생성 실행

    Args:
        mode: production 또는 development
        month: 대상 월
        year: 대상 연도
    """
    db_path = get_db_path(AppMode(mode.lower()))
    logger.info(f"고정지출 생성 시작: {month}/{year} ({db_path})")

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        result = await RecurringExpenseService(db).generate_monthly_instances(month, year)

    if result.errors:
        logger.warning(f"고정지출 생성 중 오류 {result.errors}건")
    logger.info(
        f"고정지출 생성 완료: created={result.created}, "
        f"skipped={result.skipped}, errors={result.errors}"
    )
    return result


if __name__ == "__main__":
    today = date.today()

    parser = argparse.ArgumentParser(description="월별 고정지출 인스턴스 생성")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AppMode],
        default=AppMode.DEVELOPMENT.value,
        help="실행 모드 (기본: development)",
    )
    parser.add_argument("--month", type=int, default=today.month, help="대상 월 (기본: 이번 달)")
    parser.add_argument("--year", type=int, default=today.year, help="대상 연도 (기본: 올해)")
    args = parser.parse_args()

    setup_logging("scripts")
    result = asyncio.run(main(args.mode, args.month, args.year))
    sys.exit(1 if result.errors else 0)
