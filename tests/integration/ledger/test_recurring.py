"""RecurringExpenseService 통합 테스트"""

from decimal import Decimal

import pytest

from core.ledger.engine import LedgerEngine
from core.ledger.errors import InvalidField, RecurringExpenseNotFound
from core.ledger.models import Account
from core.ledger.recurring import GenerationResult, previous_period
from core.types import ExpenseStatus


class TestPreviousPeriod:
    def test_regular_month(self) -> None:
        assert previous_period(5, 2026) == (4, 2026)

    def test_january(self) -> None:
        """1월의 직전 월은 전년도 12월"""
        assert previous_period(1, 2026) == (12, 2025)


class TestTemplates:
    """템플릿 CRUD"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, engine: LedgerEngine) -> None:
        created = await engine.recurring.create(
            " Alquiler ", "vivienda", "ars", due_day=5, notes="depto"
        )

        fetched = await engine.recurring.get(created.id)

        assert fetched.concept == "Alquiler"
        assert fetched.currency == "ARS"
        assert fetched.due_day == 5
        assert fetched.notes == "depto"
        assert fetched.is_active is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("due_day", [0, 32])
    async def test_invalid_due_day(self, engine: LedgerEngine, due_day: int) -> None:
        with pytest.raises(InvalidField, match="due_day"):
            await engine.recurring.create("Luz", "servicios", "ARS", due_day=due_day)

    @pytest.mark.asyncio
    async def test_update(self, engine: LedgerEngine) -> None:
        created = await engine.recurring.create("Luz", "servicios", "ARS")

        updated = await engine.recurring.update(created.id, concept="Electricidad", due_day=20)

        assert updated.concept == "Electricidad"
        assert updated.due_day == 20
        assert updated.category_id == "servicios"

    @pytest.mark.asyncio
    async def test_deactivate_and_list(self, engine: LedgerEngine) -> None:
        luz = await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.create("Gas", "servicios", "ARS")

        deactivated = await engine.recurring.deactivate(luz.id)

        assert deactivated.is_active is False
        assert len(await engine.recurring.list()) == 2
        assert [e.concept for e in await engine.recurring.list(active_only=True)] == ["Gas"]

    @pytest.mark.asyncio
    async def test_not_found(self, engine: LedgerEngine) -> None:
        with pytest.raises(RecurringExpenseNotFound):
            await engine.recurring.get("missing")
        with pytest.raises(RecurringExpenseNotFound):
            await engine.recurring.update("missing", concept="x")
        with pytest.raises(RecurringExpenseNotFound):
            await engine.recurring.deactivate("missing")


class TestGenerateMonthlyInstances:
    """월별 인스턴스 생성"""

    @pytest.mark.asyncio
    async def test_creates_pending_instances(self, engine: LedgerEngine) -> None:
        await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.create("Gas", "servicios", "ARS")

        result = await engine.recurring.generate_monthly_instances(3, 2026)

        assert result == GenerationResult(created=2, skipped=0, errors=0, month=3, year=2026)
        instances = await engine.monthly_expenses.list_monthly_expenses(3, 2026)
        assert len(instances) == 2
        for instance in instances:
            assert instance.status == ExpenseStatus.PENDIENTE
            assert instance.previous_amount == Decimal("0")
            assert instance.amount is None

    @pytest.mark.asyncio
    async def test_idempotent(self, engine: LedgerEngine) -> None:
        await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.generate_monthly_instances(3, 2026)

        second = await engine.recurring.generate_monthly_instances(3, 2026)

        assert second.created == 0
        assert second.skipped == 1
        assert len(await engine.monthly_expenses.list_monthly_expenses(3, 2026)) == 1

    @pytest.mark.asyncio
    async def test_skips_inactive_templates(self, engine: LedgerEngine) -> None:
        luz = await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.deactivate(luz.id)

        result = await engine.recurring.generate_monthly_instances(3, 2026)

        assert result.created == 0
        assert result.skipped == 0

    @pytest.mark.asyncio
    async def test_previous_amount_from_paid_month(
        self, engine: LedgerEngine, account_a: Account
    ) -> None:
        """직전 월 pagado 금액을 previous_amount로 사용 (연도 경계 포함)"""
        await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.generate_monthly_instances(12, 2025)
        december = (await engine.monthly_expenses.list_monthly_expenses(12, 2025))[0]
        await engine.monthly_expenses.pay(december.id, "321.50", account_a.id)

        await engine.recurring.generate_monthly_instances(1, 2026)
        january = (await engine.monthly_expenses.list_monthly_expenses(1, 2026))[0]

        assert january.previous_amount == Decimal("321.50")

    @pytest.mark.asyncio
    async def test_unpaid_previous_month(self, engine: LedgerEngine) -> None:
        await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.generate_monthly_instances(2, 2026)

        await engine.recurring.generate_monthly_instances(3, 2026)
        march = (await engine.monthly_expenses.list_monthly_expenses(3, 2026))[0]

        assert march.previous_amount == Decimal("0")

    @pytest.mark.asyncio
    async def test_template_edit_does_not_touch_instances(self, engine: LedgerEngine) -> None:
        luz = await engine.recurring.create("Luz", "servicios", "ARS")
        await engine.recurring.generate_monthly_instances(3, 2026)

        await engine.recurring.update(luz.id, concept="Electricidad")

        instance = (await engine.monthly_expenses.list_monthly_expenses(3, 2026))[0]
        assert instance.concept == "Luz"

    @pytest.mark.asyncio
    async def test_invalid_period(self, engine: LedgerEngine) -> None:
        with pytest.raises(InvalidField):
            await engine.recurring.generate_monthly_instances(0, 2026)

    @pytest.mark.asyncio
    async def test_result_to_dict(self, engine: LedgerEngine) -> None:
        result = await engine.recurring.generate_monthly_instances(3, 2026)

        assert result.to_dict() == {
            "created": 0,
            "skipped": 0,
            "errors": 0,
            "month": 3,
            "year": 2026,
        }
