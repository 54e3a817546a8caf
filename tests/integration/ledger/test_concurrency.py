"""동시 실행 통합 테스트

같은 이벤트 루프에서 asyncio.gather로 겹치는 작업을 실행해도
잔액과 거래 내역이 일치하는지 확인.
TestConcurrentConnections는 같은 DB 파일에 연결을 두 개 열어
웹 쓰기 연결이 여러 개인 경우를 재현.
"""

import asyncio
from decimal import Decimal

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.ledger.engine import LedgerEngine
from core.ledger.errors import AlreadyPaid
from core.ledger.locks import AccountLocks
from core.ledger.models import Account, MonthlyExpenseInstance


class TestConcurrentLedger:

    @pytest.mark.asyncio
    async def test_opposite_transfers(
        self, engine: LedgerEngine, account_a: Account, account_b: Account, today
    ) -> None:
        """A→B, B→A 동시 이체 (교착 상태 없음)"""
        jobs = []
        for _ in range(10):
            jobs.append(engine.transfers.create_transfer(account_a.id, account_b.id, "10", "ida", today))
            jobs.append(engine.transfers.create_transfer(account_b.id, account_a.id, "5", "vuelta", today))

        await asyncio.wait_for(asyncio.gather(*jobs), timeout=10)

        assert await engine.accounts.verify_balance(account_a.id) == Decimal("950")
        assert await engine.accounts.verify_balance(account_b.id) == Decimal("550")

    @pytest.mark.asyncio
    async def test_parallel_transactions_same_account(
        self, engine: LedgerEngine, account_a: Account, today
    ) -> None:
        await asyncio.gather(*(
            engine.transactions.create_transaction(
                account_a.id, "comida", "egreso", "1.10", f"#{i}", today
            )
            for i in range(20)
        ))

        assert await engine.accounts.verify_balance(account_a.id) == Decimal("978.00")

    @pytest.mark.asyncio
    async def test_double_pay_only_once(
        self,
        engine: LedgerEngine,
        account_a: Account,
        pending_instance: MonthlyExpenseInstance,
    ) -> None:
        """동시 결제 요청 중 하나만 성공"""
        results = await asyncio.gather(
            engine.monthly_expenses.pay(pending_instance.id, "100", account_a.id),
            engine.monthly_expenses.pay(pending_instance.id, "100", account_a.id),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], AlreadyPaid)
        assert await engine.accounts.verify_balance(account_a.id) == Decimal("900")

    @pytest.mark.asyncio
    async def test_update_and_undo_race(
        self,
        engine: LedgerEngine,
        account_a: Account,
        account_b: Account,
        pending_instance: MonthlyExpenseInstance,
    ) -> None:
        """결제 계좌 변경과 취소가 겹쳐도 잔액 일치"""
        await engine.monthly_expenses.pay(pending_instance.id, "100", account_a.id)

        await asyncio.gather(
            engine.monthly_expenses.update(pending_instance.id, account_id=account_b.id),
            engine.monthly_expenses.undo_payment(pending_instance.id),
            return_exceptions=True,
        )

        assert await engine.accounts.audit_balances() == []
        assert await engine.accounts.verify_balance(account_a.id) == Decimal("1000")


@pytest_asyncio.fixture
async def second_connection(db: SQLiteAdapter) -> SQLiteAdapter:
    """같은 DB 파일에 대한 두 번째 연결"""
    adapter = SQLiteAdapter(db.db_path)
    await adapter.connect()
    yield adapter
    await adapter.close()


class TestConcurrentConnections:
    """연결 두 개, 엔진 두 개가 같은 DB에 동시에 쓰는 경우"""

    @pytest.fixture
    def engines(
        self, db: SQLiteAdapter, second_connection: SQLiteAdapter
    ) -> tuple[LedgerEngine, LedgerEngine]:
        locks = AccountLocks()
        return LedgerEngine(db, locks), LedgerEngine(second_connection, locks)

    @pytest.mark.asyncio
    async def test_opposite_transfers(
        self, engines, account_a: Account, account_b: Account, today
    ) -> None:
        """연결마다 반대 방향 이체 (교착 상태 없음)"""
        first, second = engines
        jobs = []
        for _ in range(10):
            jobs.append(first.transfers.create_transfer(account_a.id, account_b.id, "10", "ida", today))
            jobs.append(second.transfers.create_transfer(account_b.id, account_a.id, "5", "vuelta", today))

        await asyncio.wait_for(asyncio.gather(*jobs), timeout=30)

        assert await first.accounts.audit_balances() == []
        assert await second.accounts.verify_balance(account_a.id) == Decimal("950")
        assert await second.accounts.verify_balance(account_b.id) == Decimal("550")

    @pytest.mark.asyncio
    async def test_double_pay_only_once(
        self,
        engines,
        account_a: Account,
        account_b: Account,
        pending_instance: MonthlyExpenseInstance,
    ) -> None:
        """연결마다 같은 인스턴스 결제 요청, 하나만 성공"""
        first, second = engines

        results = await asyncio.gather(
            first.monthly_expenses.pay(pending_instance.id, "100", account_a.id),
            second.monthly_expenses.pay(pending_instance.id, "100", account_b.id),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], AlreadyPaid)
        assert await first.accounts.audit_balances() == []

        row = await first.db.fetchone(
            "SELECT COUNT(*) FROM transactions WHERE concept = ?",
            ("Internet - Marzo 2026",),
        )
        assert row[0] == 1

    @pytest.mark.asyncio
    async def test_separate_lock_registries(
        self,
        db: SQLiteAdapter,
        second_connection: SQLiteAdapter,
        account_a: Account,
        today,
    ) -> None:
        """잠금 레지스트리를 공유하지 않아도 BEGIN IMMEDIATE로 직렬화"""
        first = LedgerEngine(db)
        second = LedgerEngine(second_connection)

        await asyncio.wait_for(
            asyncio.gather(*(
                engine.transactions.create_transaction(
                    account_a.id, "comida", "egreso", "2.50", f"#{i}", today
                )
                for i in range(10)
                for engine in (first, second)
            )),
            timeout=30,
        )

        assert await first.accounts.audit_balances() == []
        assert await second.accounts.verify_balance(account_a.id) == Decimal("950.00")
