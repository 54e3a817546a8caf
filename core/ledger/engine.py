"""
LedgerEngine

원장 서비스 묶음. 하나의 DB 연결과 잠금 레지스트리를 공유.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.ledger.accounts import AccountService
from core.ledger.locks import AccountLocks
from core.ledger.monthly_expenses import MonthlyExpenseTracker
from core.ledger.recurring import RecurringExpenseService
from core.ledger.stats import StatsService
from core.ledger.transactions import TransactionLedger
from core.ledger.transfers import TransferCoordinator

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter


class LedgerEngine:
    """원장 엔진

    Args:
        db: 연결된 SQLiteAdapter
        locks: 잠금 레지스트리 (None이면 새로 생성)

    사용 예시:
    ```python
    engine = LedgerEngine(db)
    transfer = await engine.transfers.create_transfer(
        from_account_id, to_account_id, Decimal("100"), "Ahorro", date.today()
    )
    ```
    """

    def __init__(self, db: SQLiteAdapter, locks: AccountLocks | None = None):
        self.db = db
        self.locks = locks or AccountLocks()

        self.accounts = AccountService(db, self.locks)
        self.transactions = TransactionLedger(db, self.locks)
        self.transfers = TransferCoordinator(db, self.locks, self.transactions)
        self.monthly_expenses = MonthlyExpenseTracker(db, self.locks, self.transactions)
        self.recurring = RecurringExpenseService(db)
        self.stats = StatsService(db)
