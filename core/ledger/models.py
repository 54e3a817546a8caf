"""
원장 데이터 모델

DB 행 ↔ 도메인 객체 변환.
금액은 모두 Decimal (DB에는 TEXT로 저장).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from core.types import AccountType, ExpenseStatus, MovementType


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _parse_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class Account:
    """계좌

    Attributes:
        id: 계좌 ID
        name: 계좌명
        account_type: 계좌 유형
        currency: 통화 (ISO 4217)
        initial_balance: 초기 잔액
        current_balance: 현재 잔액 (= 초기 잔액 + Σ입금 - Σ출금)
        is_active: 활성 여부
    """

    id: str
    name: str
    account_type: AccountType
    currency: str
    initial_balance: Decimal
    current_balance: Decimal
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Account":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            name=row["name"],
            account_type=AccountType(row["account_type"]),
            currency=row["currency"],
            initial_balance=Decimal(str(row["initial_balance"])),
            current_balance=Decimal(str(row["current_balance"])),
            is_active=bool(row["is_active"]),
            created_at=_parse_ts(row.get("created_at")),
            updated_at=_parse_ts(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.account_type.value,
            "currency": self.currency,
            "initial_balance": str(self.initial_balance),
            "current_balance": str(self.current_balance),
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class Transaction:
    """거래 (단일 레그)

    이체 레그인 경우 is_transfer=True이며
    target_account_id(상대 계좌)와 transfer_pair_id(쌍 ID)를 가짐.
    """

    id: str
    account_id: str
    category_id: str
    movement_type: MovementType
    amount: Decimal
    concept: str
    tx_date: date
    notes: str | None = None
    is_transfer: bool = False
    target_account_id: str | None = None
    transfer_pair_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def delta(self) -> Decimal:
        """계좌 잔액 변화량 (입금 +, 출금 -)"""
        if self.movement_type == MovementType.INGRESO:
            return self.amount
        return -self.amount

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Transaction":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            account_id=row["account_id"],
            category_id=row["category_id"],
            movement_type=MovementType(row["movement_type"]),
            amount=Decimal(str(row["amount"])),
            concept=row["concept"],
            tx_date=date.fromisoformat(row["tx_date"]),
            notes=row.get("notes"),
            is_transfer=bool(row.get("is_transfer")),
            target_account_id=row.get("target_account_id"),
            transfer_pair_id=row.get("transfer_pair_id"),
            created_at=_parse_ts(row.get("created_at")),
            updated_at=_parse_ts(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "account_id": self.account_id,
            "category_id": self.category_id,
            "type": self.movement_type.value,
            "amount": str(self.amount),
            "concept": self.concept,
            "date": self.tx_date.isoformat(),
            "notes": self.notes,
            "is_transfer": self.is_transfer,
            "target_account_id": self.target_account_id,
            "transfer_pair_id": self.transfer_pair_id,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class Transfer:
    """이체 (출금 레그 + 입금 레그)

    레그 수정/삭제는 항상 이 단위로 처리.
    """

    transfer_pair_id: str
    egreso: Transaction
    ingreso: Transaction

    @property
    def amount(self) -> Decimal:
        return self.egreso.amount

    @property
    def from_account_id(self) -> str:
        return self.egreso.account_id

    @property
    def to_account_id(self) -> str:
        return self.ingreso.account_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "transfer_pair_id": self.transfer_pair_id,
            "from_account_id": self.from_account_id,
            "to_account_id": self.to_account_id,
            "amount": str(self.amount),
            "egreso": self.egreso.to_dict(),
            "ingreso": self.ingreso.to_dict(),
        }


@dataclass
class RecurringExpense:
    """고정지출 템플릿"""

    id: str
    concept: str
    category_id: str
    currency: str
    due_day: int | None = None
    notes: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "RecurringExpense":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            concept=row["concept"],
            category_id=row["category_id"],
            currency=row["currency"],
            due_day=row.get("due_day"),
            notes=row.get("notes"),
            is_active=bool(row["is_active"]),
            created_at=_parse_ts(row.get("created_at")),
            updated_at=_parse_ts(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "concept": self.concept,
            "category_id": self.category_id,
            "currency": self.currency,
            "due_day": self.due_day,
            "notes": self.notes,
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class MonthlyExpenseInstance:
    """월별 고정지출 인스턴스

    pagado 상태이면 linked_transaction_id가 가리키는 출금 거래가 존재하고
    amount / account_id / paid_date가 그 거래와 일치함.
    pendiente 상태이면 위 필드는 모두 None.
    """

    id: str
    recurring_expense_id: str
    month: int
    year: int
    concept: str
    category_id: str
    status: ExpenseStatus = ExpenseStatus.PENDIENTE
    amount: Decimal | None = None
    account_id: str | None = None
    paid_date: date | None = None
    previous_amount: Decimal = field(default_factory=lambda: Decimal("0"))
    linked_transaction_id: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == ExpenseStatus.PAGADO

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "MonthlyExpenseInstance":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            recurring_expense_id=row["recurring_expense_id"],
            month=row["month"],
            year=row["year"],
            concept=row["concept"],
            category_id=row["category_id"],
            status=ExpenseStatus(row["status"]),
            amount=_parse_decimal(row.get("amount")),
            account_id=row.get("account_id"),
            paid_date=(
                date.fromisoformat(row["paid_date"])
                if row.get("paid_date")
                else None
            ),
            previous_amount=_parse_decimal(row.get("previous_amount")) or Decimal("0"),
            linked_transaction_id=row.get("linked_transaction_id"),
            notes=row.get("notes"),
            created_at=_parse_ts(row.get("created_at")),
            updated_at=_parse_ts(row.get("updated_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "recurring_expense_id": self.recurring_expense_id,
            "month": self.month,
            "year": self.year,
            "concept": self.concept,
            "category_id": self.category_id,
            "status": self.status.value,
            "amount": str(self.amount) if self.amount is not None else None,
            "account_id": self.account_id,
            "paid_date": _iso(self.paid_date),
            "previous_amount": str(self.previous_amount),
            "linked_transaction_id": self.linked_transaction_id,
            "notes": self.notes,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
