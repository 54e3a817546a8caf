"""
Recurring Expense Payment Tracker

월별 고정지출 인스턴스의 결제 / 결제 수정 / 결제 취소.

상태 전이 (MonthlyExpenseStateMachine):
- pendiente → pagado: pay
- pagado → pagado: update
- pagado → pendiente: undo_payment

pagado 인스턴스는 항상 연결된 egreso 거래 하나를 가지며
결제 취소 시 그 거래를 삭제하여 잔액 효과를 제거 (보정 거래를 만들지 않음).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

from core.constants import MONTH_NAMES, LedgerLimits
from core.domain.state_machines import MonthlyExpenseStateMachine
from core.ledger.errors import (
    AlreadyPaid,
    InstanceNotFound,
    InvalidField,
    LinkedTransactionMissing,
    NotPaid,
)
from core.ledger.locks import AccountLocks
from core.ledger.models import MonthlyExpenseInstance, Transaction
from core.ledger.store import LedgerStore
from core.ledger.transactions import TransactionLedger, new_transaction_id
from core.ledger.validation import (
    optional_text,
    require_date,
    require_month_year,
    require_positive_amount,
)
from core.types import ExpenseStatus, MovementType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def payment_concept(instance: MonthlyExpenseInstance) -> str:
    """결제 거래 concept: "<concept> - <Mes> <año>" """
    return f"{instance.concept} - {MONTH_NAMES[instance.month - 1]} {instance.year}"


class MonthlyExpenseTracker:
    """월별 고정지출 결제 관리

    잠금 키: 인스턴스 ID + 관련 계좌 ID (정렬 순서로 획득).

    Args:
        db: SQLite 어댑터
        locks: 잠금 레지스트리
        ledger: 연결 거래 처리에 사용하는 TransactionLedger
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        locks: AccountLocks,
        ledger: TransactionLedger | None = None,
    ):
        self.db = db
        self.locks = locks
        self.ledger = ledger or TransactionLedger(db, locks)
        self.store = LedgerStore(db)

    async def _get_or_raise(self, instance_id: str) -> MonthlyExpenseInstance:
        instance = await self.store.get_instance(instance_id)
        if instance is None:
            raise InstanceNotFound(instance_id)
        return instance

    async def _run_locked(
        self,
        instance_id: str,
        account_id: str | None,
        operation: Callable[[MonthlyExpenseInstance], Awaitable[T]],
    ) -> T:
        """인스턴스 + 계좌 잠금 후 DB 트랜잭션 안에서 operation 실행

        잠금 대상 계좌는 잠금 전에 읽은 인스턴스 기준이므로
        잠금 획득 사이에 결제 계좌가 바뀌었으면 다시 시도.
        """
        while True:
            peeked = await self._get_or_raise(instance_id)

            async with self.locks.hold(instance_id, peeked.account_id, account_id):
                async with self.db.transaction():
                    instance = await self._get_or_raise(instance_id)
                    if instance.account_id == peeked.account_id:
                        return await operation(instance)

            logger.debug(f"Monthly expense {instance_id} account changed while locking, retrying")

    async def _load_linked(self, instance: MonthlyExpenseInstance) -> Transaction:
        linked = None
        if instance.linked_transaction_id:
            linked = await self.store.get_transaction(instance.linked_transaction_id)

        if linked is None:
            logger.error(
                f"Linked transaction missing for paid monthly expense: {instance.id}",
                extra={
                    "instance_id": instance.id,
                    "linked_transaction_id": instance.linked_transaction_id,
                },
            )
            raise LinkedTransactionMissing(instance.id, instance.linked_transaction_id)
        return linked

    # =========================================================================
    # 결제
    # =========================================================================

    async def pay(
        self,
        instance_id: str,
        amount: Any,
        account_id: str,
        paid_date: date | None = None,
        notes: str | None = None,
    ) -> MonthlyExpenseInstance:
        """결제 처리

        계좌에 egreso 거래를 만들고 인스턴스를 pagado로 전환.

        Args:
            instance_id: 인스턴스 ID
            amount: 결제 금액 (0 초과)
            account_id: 결제 계좌
            paid_date: 결제일 (기본: 오늘)
            notes: 메모

        Raises:
            InstanceNotFound, AlreadyPaid, InvalidAmount, InvalidField,
            AccountNotFound, AccountInactive
        """
        amount = require_positive_amount(amount)
        notes = optional_text("notes", notes, LedgerLimits.MAX_PAYMENT_NOTES_LENGTH)
        paid_on = require_date("paid_date", paid_date or date.today())

        async def _pay(instance: MonthlyExpenseInstance) -> None:
            machine = MonthlyExpenseStateMachine(instance.status)
            if machine.is_paid:
                raise AlreadyPaid(instance.id)

            await self.ledger.load_active_account(account_id)
            machine.transition(ExpenseStatus.PAGADO)

            tx = Transaction(
                id=new_transaction_id(),
                account_id=account_id,
                category_id=instance.category_id,
                movement_type=MovementType.EGRESO,
                amount=amount,
                concept=payment_concept(instance),
                tx_date=paid_on,
                notes=notes,
            )
            await self.ledger.insert_in_tx(tx)

            fields: dict[str, Any] = {
                "status": machine.state,
                "amount": amount,
                "account_id": account_id,
                "paid_date": paid_on,
                "linked_transaction_id": tx.id,
            }
            if notes is not None:
                fields["notes"] = notes
            await self.store.update_instance(instance.id, fields)

        await self._run_locked(instance_id, account_id, _pay)

        logger.info(
            f"Monthly expense paid: {instance_id}",
            extra={"account_id": account_id, "amount": str(amount)},
        )
        return await self._get_or_raise(instance_id)

    async def update(
        self,
        instance_id: str,
        amount: Any = None,
        account_id: str | None = None,
        paid_date: date | None = None,
        notes: str | None = None,
    ) -> MonthlyExpenseInstance:
        """결제 정보 수정

        연결 거래를 함께 수정하여 잔액 변화는 한 번만 반영.
        계좌가 바뀌면 기존 계좌에서 되돌리고 새 계좌에 다시 반영.

        Raises:
            InstanceNotFound, NotPaid, InvalidAmount,
            AccountNotFound, AccountInactive, LinkedTransactionMissing
        """
        if amount is not None:
            amount = require_positive_amount(amount)
        if paid_date is not None:
            paid_date = require_date("paid_date", paid_date)
        notes = optional_text("notes", notes, LedgerLimits.MAX_PAYMENT_NOTES_LENGTH)

        async def _update(instance: MonthlyExpenseInstance) -> None:
            machine = MonthlyExpenseStateMachine(instance.status)
            if not machine.is_paid:
                raise NotPaid(instance.id)

            if account_id is not None and account_id != instance.account_id:
                await self.ledger.load_active_account(account_id)

            linked = await self._load_linked(instance)
            machine.transition(ExpenseStatus.PAGADO)

            updated = replace(
                linked,
                amount=amount if amount is not None else linked.amount,
                account_id=account_id if account_id is not None else linked.account_id,
                tx_date=paid_date if paid_date is not None else linked.tx_date,
                notes=notes if notes is not None else linked.notes,
            )
            await self.ledger.change_in_tx(linked, updated)

            fields: dict[str, Any] = {
                "amount": updated.amount,
                "account_id": updated.account_id,
                "paid_date": updated.tx_date,
            }
            if notes is not None:
                fields["notes"] = notes
            await self.store.update_instance(instance.id, fields)

        await self._run_locked(instance_id, account_id, _update)

        logger.info(
            f"Monthly expense payment updated: {instance_id}",
            extra={
                "account_id": account_id,
                "amount": str(amount) if amount is not None else None,
            },
        )
        return await self._get_or_raise(instance_id)

    async def undo_payment(self, instance_id: str) -> MonthlyExpenseInstance:
        """결제 취소

        연결 거래를 삭제(잔액 역반영)하고 인스턴스를 pendiente로 되돌림.

        Raises:
            InstanceNotFound, NotPaid, LinkedTransactionMissing
        """

        async def _undo(instance: MonthlyExpenseInstance) -> Transaction:
            machine = MonthlyExpenseStateMachine(instance.status)
            if not machine.is_paid:
                raise NotPaid(instance.id)

            linked = await self._load_linked(instance)
            machine.transition(ExpenseStatus.PENDIENTE)

            await self.ledger.remove_in_tx(linked)
            await self.store.update_instance(
                instance.id,
                {
                    "status": machine.state,
                    "amount": None,
                    "account_id": None,
                    "paid_date": None,
                    "linked_transaction_id": None,
                },
            )
            return linked

        removed = await self._run_locked(instance_id, None, _undo)

        logger.info(
            f"Monthly expense payment undone: {instance_id}",
            extra={"account_id": removed.account_id, "amount": str(removed.amount)},
        )
        return await self._get_or_raise(instance_id)

    # =========================================================================
    # 조회
    # =========================================================================

    async def get_monthly_expense(self, instance_id: str) -> MonthlyExpenseInstance:
        return await self._get_or_raise(instance_id)

    async def list_monthly_expenses(
        self,
        month: int,
        year: int,
        status: ExpenseStatus | str | None = None,
    ) -> list[MonthlyExpenseInstance]:
        """월별 고정지출 목록 (pendiente 우선, concept 순)"""
        require_month_year(month, year)

        status_filter = None
        if status is not None:
            try:
                status_filter = ExpenseStatus(status)
            except ValueError as e:
                raise InvalidField("status", f"unknown status {status!r}") from e

        return await self.store.list_instances(month, year, status_filter)
