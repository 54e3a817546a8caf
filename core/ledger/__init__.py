"""
개인 재무 원장 (Account Ledger & Transfer Engine)

거래에 따라 계좌 잔액을 갱신하고
이체 쌍과 월별 고정지출 결제가 원장을 불일치 상태로 남기지 않도록 보장.

사용 예시:
```python
from core.ledger import LedgerEngine

engine = LedgerEngine(db)

account = await engine.accounts.create_account("Banco", "banco", "ARS", Decimal("1000"))
tx = await engine.transactions.create_transaction(
    account.id, "comida", "egreso", Decimal("250"), "Supermercado", date.today()
)
await engine.monthly_expenses.pay(instance_id, Decimal("500"), account.id)
```
"""

from core.ledger.accounts import AccountService, AccountStatistics, BalanceDrift
from core.ledger.engine import LedgerEngine
from core.ledger.errors import (
    ConsistencyViolation,
    LedgerError,
    NotFoundError,
    StateConflictError,
    ValidationError,
)
from core.ledger.locks import AccountLocks
from core.ledger.models import (
    Account,
    MonthlyExpenseInstance,
    RecurringExpense,
    Transaction,
    Transfer,
)
from core.ledger.monthly_expenses import MonthlyExpenseTracker
from core.ledger.recurring import GenerationResult, RecurringExpenseService
from core.ledger.stats import StatsService
from core.ledger.store import LedgerStore
from core.ledger.transactions import TransactionLedger, TransactionPage
from core.ledger.transfers import TransferCoordinator

__all__ = [
    # 핵심 클래스
    "LedgerEngine",
    "LedgerStore",
    "AccountLocks",
    "AccountService",
    "TransactionLedger",
    "TransferCoordinator",
    "MonthlyExpenseTracker",
    "RecurringExpenseService",
    "StatsService",
    # 모델
    "Account",
    "Transaction",
    "Transfer",
    "RecurringExpense",
    "MonthlyExpenseInstance",
    "TransactionPage",
    "GenerationResult",
    "BalanceDrift",
    "AccountStatistics",
    # 예외 계열
    "LedgerError",
    "ValidationError",
    "NotFoundError",
    "StateConflictError",
    "ConsistencyViolation",
]
