"""
고정지출 템플릿 및 월별 인스턴스 생성

템플릿 CRUD (비활성화는 soft delete)와
활성 템플릿마다 해당 월 pendiente 인스턴스를 만드는 생성 작업.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import aiosqlite

from core.constants import LedgerLimits
from core.ledger.errors import InvalidField, LedgerError, RecurringExpenseNotFound
from core.ledger.models import MonthlyExpenseInstance, RecurringExpense
from core.ledger.store import LedgerStore
from core.ledger.validation import (
    optional_text,
    require_currency,
    require_month_year,
    require_text,
)
from core.types import ExpenseStatus

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """월별 인스턴스 생성 결과"""

    created: int
    skipped: int
    errors: int
    month: int
    year: int

    def to_dict(self) -> dict[str, int]:
        return {
            "created": self.created,
            "skipped": self.skipped,
            "errors": self.errors,
            "month": self.month,
            "year": self.year,
        }


def previous_period(month: int, year: int) -> tuple[int, int]:
    """직전 월 (1월 → 전년도 12월)"""
    if month == 1:
        return 12, year - 1
    return month - 1, year


def _check_due_day(due_day: int | None) -> int | None:
    if due_day is None:
        return None
    if not 1 <= due_day <= 31:
        raise InvalidField("due_day", "must be between 1 and 31")
    return due_day


class RecurringExpenseService:
    """고정지출 템플릿 관리

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self.store = LedgerStore(db)

    async def _get_or_raise(self, recurring_id: str) -> RecurringExpense:
        expense = await self.store.get_recurring_expense(recurring_id)
        if expense is None:
            raise RecurringExpenseNotFound(recurring_id)
        return expense

    async def create(
        self,
        concept: str,
        category_id: str,
        currency: str,
        due_day: int | None = None,
        notes: str | None = None,
    ) -> RecurringExpense:
        """템플릿 생성"""
        expense = RecurringExpense(
            id=str(uuid.uuid4()),
            concept=require_text("concept", concept, LedgerLimits.MAX_CONCEPT_LENGTH),
            category_id=require_text("category_id", category_id, LedgerLimits.MAX_CONCEPT_LENGTH),
            currency=require_currency(currency),
            due_day=_check_due_day(due_day),
            notes=optional_text("notes", notes, LedgerLimits.MAX_NOTES_LENGTH),
        )

        async with self.db.transaction():
            await self.store.insert_recurring_expense(expense)

        logger.info(
            f"Recurring expense created: {expense.id}",
            extra={"concept": expense.concept, "currency": expense.currency},
        )
        return await self._get_or_raise(expense.id)

    async def get(self, recurring_id: str) -> RecurringExpense:
        return await self._get_or_raise(recurring_id)

    async def list(self, active_only: bool = False) -> list[RecurringExpense]:
        return await self.store.list_recurring_expenses(active_only)

    async def update(
        self,
        recurring_id: str,
        concept: str | None = None,
        category_id: str | None = None,
        currency: str | None = None,
        due_day: int | None = None,
        notes: str | None = None,
    ) -> RecurringExpense:
        """템플릿 수정 (이미 생성된 인스턴스에는 영향 없음)"""
        fields: dict[str, Any] = {}
        if concept is not None:
            fields["concept"] = require_text("concept", concept, LedgerLimits.MAX_CONCEPT_LENGTH)
        if category_id is not None:
            fields["category_id"] = require_text(
                "category_id", category_id, LedgerLimits.MAX_CONCEPT_LENGTH
            )
        if currency is not None:
            fields["currency"] = require_currency(currency)
        if due_day is not None:
            fields["due_day"] = _check_due_day(due_day)
        if notes is not None:
            fields["notes"] = optional_text("notes", notes, LedgerLimits.MAX_NOTES_LENGTH)

        async with self.db.transaction():
            await self._get_or_raise(recurring_id)
            await self.store.update_recurring_expense(recurring_id, fields)

        logger.info(f"Recurring expense updated: {recurring_id}", extra={"fields": list(fields)})
        return await self._get_or_raise(recurring_id)

    async def deactivate(self, recurring_id: str) -> RecurringExpense:
        """템플릿 비활성화 (soft delete)"""
        async with self.db.transaction():
            await self._get_or_raise(recurring_id)
            await self.store.update_recurring_expense(recurring_id, {"is_active": False})

        logger.info(f"Recurring expense deactivated: {recurring_id}")
        return await self._get_or_raise(recurring_id)

    # =========================================================================
    # 월별 인스턴스 생성
    # =========================================================================

    async def generate_monthly_instances(self, month: int, year: int) -> GenerationResult:
        """활성 템플릿마다 해당 월 인스턴스 생성

        여러 번 실행해도 중복 생성하지 않음 (이미 있으면 skipped).
        previous_amount는 직전 월 pagado 인스턴스의 금액 (없으면 0).
        템플릿 하나의 실패는 errors로 집계하고 다음 템플릿 계속 처리.
        """
        require_month_year(month, year)
        prev_month, prev_year = previous_period(month, year)

        templates = await self.store.list_recurring_expenses(active_only=True)
        logger.info(
            f"Generating monthly expenses for {month}/{year}: "
            f"{len(templates)} active template(s)"
        )

        created = 0
        skipped = 0
        errors = 0

        for template in templates:
            try:
                async with self.db.transaction():
                    existing = await self.store.find_instance(template.id, month, year)
                    if existing is not None:
                        skipped += 1
                        continue

                    previous = await self.store.find_instance(
                        template.id, prev_month, prev_year, ExpenseStatus.PAGADO
                    )
                    previous_amount = (
                        previous.amount
                        if previous is not None and previous.amount is not None
                        else Decimal("0")
                    )

                    instance = MonthlyExpenseInstance(
                        id=str(uuid.uuid4()),
                        recurring_expense_id=template.id,
                        month=month,
                        year=year,
                        concept=template.concept,
                        category_id=template.category_id,
                        previous_amount=previous_amount,
                    )
                    await self.store.insert_instance(instance)
                created += 1
                logger.debug(
                    f"Monthly expense instance created: {instance.id}",
                    extra={
                        "recurring_expense_id": template.id,
                        "previous_amount": str(previous_amount),
                    },
                )
            except (aiosqlite.Error, LedgerError) as e:
                errors += 1
                logger.error(
                    f"Failed to generate monthly expense for {template.id} "
                    f"({template.concept}): {e}"
                )

        result = GenerationResult(
            created=created,
            skipped=skipped,
            errors=errors,
            month=month,
            year=year,
        )
        logger.info(
            f"Monthly expense generation finished for {month}/{year}: "
            f"{created} created, {skipped} skipped, {errors} errors"
        )
        return result
