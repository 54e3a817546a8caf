"""
Ledger 저장소

accounts / transactions / recurring_expenses / monthly_expense_instances
테이블 SQL 처리.

트랜잭션 경계는 호출하는 서비스가 관리 (db.transaction()).
이 클래스는 commit하지 않음.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from core.ledger.models import (
    Account,
    MonthlyExpenseInstance,
    RecurringExpense,
    Transaction,
)
from core.types import ExpenseStatus, MovementType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """현재 UTC 시각 (ISO 8601)"""
    return datetime.now(timezone.utc).isoformat()


def _to_db(value: Any) -> Any:
    """Python 값 → SQLite 저장값"""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


class TransactionFilter:
    """거래 목록 조회 조건"""

    def __init__(
        self,
        account_id: str | None = None,
        category_id: str | None = None,
        movement_type: MovementType | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        exclude_transfers: bool = False,
    ):
        self.account_id = account_id
        self.category_id = category_id
        self.movement_type = movement_type
        self.date_from = date_from
        self.date_to = date_to
        # 유형 필터는 이체 레그 제외
        self.exclude_transfers = exclude_transfers or movement_type is not None

    def to_where(self) -> tuple[str, list[Any]]:
        """WHERE 절과 파라미터 생성"""
        clauses: list[str] = []
        params: list[Any] = []

        if self.account_id:
            clauses.append("account_id = ?")
            params.append(self.account_id)
        if self.category_id:
            clauses.append("category_id = ?")
            params.append(self.category_id)
        if self.movement_type is not None:
            clauses.append("movement_type = ?")
            params.append(self.movement_type.value)
        if self.date_from:
            clauses.append("tx_date >= ?")
            params.append(self.date_from.isoformat())
        if self.date_to:
            clauses.append("tx_date <= ?")
            params.append(self.date_to.isoformat())
        if self.exclude_transfers:
            clauses.append("is_transfer = 0")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params


class LedgerStore:
    """Ledger 저장소

    Args:
        db: SQLite 어댑터
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def _update_row(
        self,
        table: str,
        row_id: str,
        fields: dict[str, Any],
    ) -> None:
        """단일 행 부분 업데이트 (updated_at 자동 갱신)"""
        if not fields:
            return

        assignments = ", ".join(f"{column} = ?" for column in fields)
        params = [_to_db(v) for v in fields.values()]
        params.extend([utc_now_iso(), row_id])

        await self.db.execute(
            f"UPDATE {table} SET {assignments}, updated_at = ? WHERE id = ?",
            tuple(params),
        )

    # =========================================================================
    # accounts
    # =========================================================================

    async def get_account(self, account_id: str) -> Account | None:
        row = await self.db.fetchone_dict(
            "SELECT * FROM accounts WHERE id = ?",
            (account_id,),
        )
        return Account.from_row(row) if row else None

    async def list_accounts(self, include_inactive: bool = False) -> list[Account]:
        sql = "SELECT * FROM accounts"
        if not include_inactive:
            sql += " WHERE is_active = 1"
        sql += " ORDER BY created_at, name"

        rows = await self.db.fetchall_dicts(sql)
        return [Account.from_row(row) for row in rows]

    async def insert_account(self, account: Account) -> None:
        now = utc_now_iso()
        await self.db.execute(
            """
            INSERT INTO accounts (
                id, name, account_type, currency,
                initial_balance, current_balance, is_active,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                account.id,
                account.name,
                account.account_type.value,
                account.currency,
                str(account.initial_balance),
                str(account.current_balance),
                int(account.is_active),
                now,
                now,
            ),
        )

    async def update_account(self, account_id: str, fields: dict[str, Any]) -> None:
        await self._update_row("accounts", account_id, fields)

    async def apply_delta(self, account_id: str, delta: Decimal) -> Decimal:
        """계좌 잔액에 변화량 반영

        old balance + delta 로 O(1) 갱신.

        Args:
            account_id: 계좌 ID
            delta: 변화량 (입금 +, 출금 -)

        Returns:
            갱신된 잔액
        """
        row = await self.db.fetchone(
            "SELECT current_balance FROM accounts WHERE id = ?",
            (account_id,),
        )
        if row is None:
            raise LookupError(f"account row missing: {account_id}")

        current_balance = Decimal(row[0])
        new_balance = current_balance + delta

        await self.db.execute(
            "UPDATE accounts SET current_balance = ?, updated_at = ? WHERE id = ?",
            (str(new_balance), utc_now_iso(), account_id),
        )
        return new_balance

    async def count_account_transactions(self, account_id: str) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM transactions WHERE account_id = ?",
            (account_id,),
        )
        return int(row[0]) if row else 0

    async def sum_account_movements(self, account_id: str) -> tuple[Decimal, Decimal]:
        """계좌의 (Σ입금, Σ출금) 합계 (이체 레그 포함)

        금액이 TEXT이므로 SQL SUM 대신 Decimal로 합산.
        """
        rows = await self.db.fetchall(
            "SELECT movement_type, amount FROM transactions WHERE account_id = ?",
            (account_id,),
        )

        ingresos = Decimal("0")
        egresos = Decimal("0")
        for movement_type, amount in rows:
            if movement_type == MovementType.INGRESO.value:
                ingresos += Decimal(amount)
            else:
                egresos += Decimal(amount)
        return ingresos, egresos

    async def last_account_transaction(self, account_id: str) -> Transaction | None:
        """계좌의 가장 최근 거래 (거래일, 생성시각 순)"""
        row = await self.db.fetchone_dict(
            """
            SELECT * FROM transactions WHERE account_id = ?
            ORDER BY tx_date DESC, created_at DESC
            LIMIT 1
            """,
            (account_id,),
        )
        return Transaction.from_row(row) if row else None

    # =========================================================================
    # transactions
    # =========================================================================

    async def get_transaction(self, transaction_id: str) -> Transaction | None:
        row = await self.db.fetchone_dict(
            "SELECT * FROM transactions WHERE id = ?",
            (transaction_id,),
        )
        return Transaction.from_row(row) if row else None

    async def insert_transaction(self, tx: Transaction) -> None:
        now = utc_now_iso()
        await self.db.execute(
            """
            INSERT INTO transactions (
                id, account_id, category_id, movement_type, amount,
                concept, tx_date, notes,
                is_transfer, target_account_id, transfer_pair_id,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                tx.id,
                tx.account_id,
                tx.category_id,
                tx.movement_type.value,
                str(tx.amount),
                tx.concept,
                tx.tx_date.isoformat(),
                tx.notes,
                int(tx.is_transfer),
                tx.target_account_id,
                tx.transfer_pair_id,
                now,
                now,
            ),
        )

    async def update_transaction(self, transaction_id: str, fields: dict[str, Any]) -> None:
        await self._update_row("transactions", transaction_id, fields)

    async def delete_transaction(self, transaction_id: str) -> None:
        await self.db.execute(
            "DELETE FROM transactions WHERE id = ?",
            (transaction_id,),
        )

    async def get_transfer_legs(self, transfer_pair_id: str) -> list[Transaction]:
        """같은 transfer_pair_id를 가진 레그 조회"""
        rows = await self.db.fetchall_dicts(
            "SELECT * FROM transactions WHERE transfer_pair_id = ? ORDER BY movement_type",
            (transfer_pair_id,),
        )
        return [Transaction.from_row(row) for row in rows]

    async def list_transactions(
        self,
        tx_filter: TransactionFilter,
        limit: int,
        offset: int,
    ) -> tuple[list[Transaction], int]:
        """거래 목록 조회 (최신 날짜순)

        Returns:
            (거래 목록, 전체 개수)
        """
        where, params = tx_filter.to_where()

        count_row = await self.db.fetchone(
            f"SELECT COUNT(*) FROM transactions {where}",
            tuple(params),
        )
        total = int(count_row[0]) if count_row else 0

        rows = await self.db.fetchall_dicts(
            f"""
            SELECT * FROM transactions {where}
            ORDER BY tx_date DESC, created_at DESC
            LIMIT ? OFFSET ?
            """,
            tuple(params + [limit, offset]),
        )
        return [Transaction.from_row(row) for row in rows], total

    async def fetch_movements(
        self,
        tx_filter: TransactionFilter,
    ) -> list[tuple[str, str, Decimal]]:
        """합계 계산용 (movement_type, category_id, amount) 목록"""
        where, params = tx_filter.to_where()
        rows = await self.db.fetchall(
            f"SELECT movement_type, category_id, amount FROM transactions {where}",
            tuple(params),
        )
        return [(row[0], row[1], Decimal(row[2])) for row in rows]

    # =========================================================================
    # recurring_expenses
    # =========================================================================

    async def get_recurring_expense(self, recurring_id: str) -> RecurringExpense | None:
        row = await self.db.fetchone_dict(
            "SELECT * FROM recurring_expenses WHERE id = ?",
            (recurring_id,),
        )
        return RecurringExpense.from_row(row) if row else None

    async def list_recurring_expenses(self, active_only: bool = False) -> list[RecurringExpense]:
        sql = "SELECT * FROM recurring_expenses"
        if active_only:
            sql += " WHERE is_active = 1"
        sql += " ORDER BY created_at DESC"

        rows = await self.db.fetchall_dicts(sql)
        return [RecurringExpense.from_row(row) for row in rows]

    async def insert_recurring_expense(self, expense: RecurringExpense) -> None:
        now = utc_now_iso()
        await self.db.execute(
            """
            INSERT INTO recurring_expenses (
                id, concept, category_id, currency, due_day, notes, is_active,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                expense.id,
                expense.concept,
                expense.category_id,
                expense.currency,
                expense.due_day,
                expense.notes,
                int(expense.is_active),
                now,
                now,
            ),
        )

    async def update_recurring_expense(self, recurring_id: str, fields: dict[str, Any]) -> None:
        await self._update_row("recurring_expenses", recurring_id, fields)

    # =========================================================================
    # monthly_expense_instances
    # =========================================================================

    async def get_instance(self, instance_id: str) -> MonthlyExpenseInstance | None:
        row = await self.db.fetchone_dict(
            "SELECT * FROM monthly_expense_instances WHERE id = ?",
            (instance_id,),
        )
        return MonthlyExpenseInstance.from_row(row) if row else None

    async def find_instance(
        self,
        recurring_id: str,
        month: int,
        year: int,
        status: ExpenseStatus | None = None,
    ) -> MonthlyExpenseInstance | None:
        sql = """
            SELECT * FROM monthly_expense_instances
            WHERE recurring_expense_id = ? AND month = ? AND year = ?
        """
        params: list[Any] = [recurring_id, month, year]
        if status is not None:
            sql += " AND status = ?"
            params.append(status.value)

        row = await self.db.fetchone_dict(sql, tuple(params))
        return MonthlyExpenseInstance.from_row(row) if row else None

    async def find_instance_by_transaction(
        self,
        transaction_id: str,
    ) -> MonthlyExpenseInstance | None:
        row = await self.db.fetchone_dict(
            "SELECT * FROM monthly_expense_instances WHERE linked_transaction_id = ?",
            (transaction_id,),
        )
        return MonthlyExpenseInstance.from_row(row) if row else None

    async def list_instances(
        self,
        month: int,
        year: int,
        status: ExpenseStatus | None = None,
    ) -> list[MonthlyExpenseInstance]:
        """월별 인스턴스 목록 (pendiente 우선, concept 순)"""
        sql = "SELECT * FROM monthly_expense_instances WHERE month = ? AND year = ?"
        params: list[Any] = [month, year]
        if status is not None:
            sql += " AND status = ?"
            params.append(status.value)
        sql += " ORDER BY CASE status WHEN 'pendiente' THEN 0 ELSE 1 END, concept"

        rows = await self.db.fetchall_dicts(sql, tuple(params))
        return [MonthlyExpenseInstance.from_row(row) for row in rows]

    async def insert_instance(self, instance: MonthlyExpenseInstance) -> None:
        now = utc_now_iso()
        await self.db.execute(
            """
            INSERT INTO monthly_expense_instances (
                id, recurring_expense_id, month, year, concept, category_id,
                status, amount, account_id, paid_date, previous_amount,
                linked_transaction_id, notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                instance.id,
                instance.recurring_expense_id,
                instance.month,
                instance.year,
                instance.concept,
                instance.category_id,
                instance.status.value,
                _to_db(instance.amount),
                instance.account_id,
                _to_db(instance.paid_date),
                str(instance.previous_amount),
                instance.linked_transaction_id,
                instance.notes,
                now,
                now,
            ),
        )

    async def update_instance(self, instance_id: str, fields: dict[str, Any]) -> None:
        await self._update_row("monthly_expense_instances", instance_id, fields)
