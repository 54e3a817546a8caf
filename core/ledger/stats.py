"""
Finance Stats

월별 수입/지출 합계, 카테고리별 지출, 최근 6개월 추이, 계좌 요약.
읽기 전용. 이체 레그는 합계에서 제외.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.ledger.store import LedgerStore, TransactionFilter
from core.ledger.validation import require_month_year
from core.types import MovementType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


def month_range(month: int, year: int) -> tuple[date, date]:
    """해당 월의 (첫날, 마지막 날)"""
    start = date(year, month, 1)
    if month == 12:
        next_start = date(year + 1, 1, 1)
    else:
        next_start = date(year, month + 1, 1)
    return start, date.fromordinal(next_start.toordinal() - 1)


def shift_month(month: int, year: int, offset: int) -> tuple[int, int]:
    """month/year에서 offset개월 이동"""
    index = year * 12 + (month - 1) + offset
    return index % 12 + 1, index // 12


class StatsService:
    """재무 통계

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def _month_movements(self, month: int, year: int) -> list[tuple[str, str, Decimal]]:
        start, end = month_range(month, year)
        return await self.store.fetch_movements(
            TransactionFilter(date_from=start, date_to=end, exclude_transfers=True)
        )

    @staticmethod
    def _sum(movements: list[tuple[str, str, Decimal]]) -> tuple[Decimal, Decimal]:
        ingresos = Decimal("0")
        egresos = Decimal("0")
        for movement_type, _category, amount in movements:
            if movement_type == MovementType.INGRESO.value:
                ingresos += amount
            else:
                egresos += amount
        return ingresos, egresos

    async def expenses_by_category(self, month: int, year: int) -> list[dict[str, Any]]:
        """카테고리별 지출 (금액 내림차순)

        percentage는 해당 월 전체 지출 대비 비율 (소수 2자리).
        """
        require_month_year(month, year)
        movements = await self._month_movements(month, year)
        return self._by_category(movements)

    def _by_category(self, movements: list[tuple[str, str, Decimal]]) -> list[dict[str, Any]]:
        totals: dict[str, Decimal] = {}
        for movement_type, category_id, amount in movements:
            if movement_type == MovementType.EGRESO.value:
                totals[category_id] = totals.get(category_id, Decimal("0")) + amount

        total_egresos = sum(totals.values(), Decimal("0"))

        rows = []
        for category_id, amount in sorted(totals.items(), key=lambda item: item[1], reverse=True):
            if total_egresos > 0:
                percentage = (amount / total_egresos * 100).quantize(_CENT, rounding=ROUND_HALF_UP)
            else:
                percentage = Decimal("0")
            rows.append({
                "category_id": category_id,
                "total_amount": str(amount),
                "percentage": str(percentage),
            })
        return rows

    async def get_stats(
        self,
        month: int | None = None,
        year: int | None = None,
        today: date | None = None,
    ) -> dict[str, Any]:
        """재무 통계 조회

        Args:
            month: 월 (기본: 이번 달)
            year: 연도 (기본: 올해)
            today: 기준일 (테스트용)

        Returns:
            period, totals, por_categoria, evolucion_mensual, cuentas_resumen
        """
        today = today or date.today()
        month = month or today.month
        year = year or today.year
        require_month_year(month, year)

        movements = await self._month_movements(month, year)
        total_ingresos, total_egresos = self._sum(movements)

        evolution = []
        for offset in range(-(Defaults.STATS_EVOLUTION_MONTHS - 1), 1):
            m, y = shift_month(month, year, offset)
            ingresos, egresos = self._sum(await self._month_movements(m, y))
            evolution.append({
                "month": m,
                "year": y,
                "ingresos": str(ingresos),
                "egresos": str(egresos),
                "balance": str(ingresos - egresos),
            })

        accounts = await self.store.list_accounts(include_inactive=False)
        accounts.sort(key=lambda a: a.current_balance, reverse=True)

        return {
            "period": {"month": month, "year": year},
            "totals": {
                "ingresos": str(total_ingresos),
                "egresos": str(total_egresos),
                "balance": str(total_ingresos - total_egresos),
            },
            "por_categoria": self._by_category(movements),
            "evolucion_mensual": evolution,
            "cuentas_resumen": [
                {
                    "account_id": account.id,
                    "name": account.name,
                    "type": account.account_type.value,
                    "current_balance": str(account.current_balance),
                    "currency": account.currency,
                }
                for account in accounts
            ],
        }
