"""
Transaction Ledger

단일 레그 입금/출금 거래 생성, 수정, 삭제.
거래 쓰기와 계좌 잔액 반영은 항상 같은 DB 트랜잭션에서 처리.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import Defaults, LedgerLimits
from core.ledger.errors import (
    AccountInactive,
    AccountNotFound,
    CannotDeleteTransferLeg,
    CannotEditTransferLeg,
    IncompleteTransferPair,
    InvalidField,
    TransactionLinkedToPayment,
    TransactionNotFound,
    TransferNotFound,
)
from core.ledger.locks import AccountLocks
from core.ledger.models import Account, Transaction, Transfer
from core.ledger.store import LedgerStore, TransactionFilter
from core.ledger.validation import (
    optional_text,
    require_date,
    require_movement_type,
    require_positive_amount,
    require_text,
)
from core.types import MovementType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


def new_transaction_id() -> str:
    return str(uuid.uuid4())


async def load_transfer_pair(store: LedgerStore, transfer_pair_id: str) -> Transfer:
    """이체 쌍 조회 (두 레그가 모두 있어야 함)

    Raises:
        TransferNotFound: 레그 없음
        IncompleteTransferPair: 레그가 한쪽만 있거나 방향이 맞지 않음
    """
    legs = await store.get_transfer_legs(transfer_pair_id)
    if not legs:
        raise TransferNotFound(transfer_pair_id)

    egreso = next((leg for leg in legs if leg.movement_type == MovementType.EGRESO), None)
    ingreso = next((leg for leg in legs if leg.movement_type == MovementType.INGRESO), None)

    if len(legs) != 2 or egreso is None or ingreso is None:
        logger.error(
            f"Incomplete transfer pair detected: {transfer_pair_id}",
            extra={
                "transfer_pair_id": transfer_pair_id,
                "leg_ids": [leg.id for leg in legs],
            },
        )
        raise IncompleteTransferPair(transfer_pair_id, len(legs))

    return Transfer(transfer_pair_id=transfer_pair_id, egreso=egreso, ingreso=ingreso)


@dataclass
class TransactionPage:
    """거래 목록 조회 결과"""

    items: list[Transaction]
    total: int
    limit: int
    offset: int
    total_ingresos: Decimal
    total_egresos: Decimal

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total

    @property
    def balance(self) -> Decimal:
        return self.total_ingresos - self.total_egresos


class TransactionLedger:
    """단일 레그 거래 관리

    공개 메서드는 계좌 잠금 → DB 트랜잭션 순으로 진입.
    `*_in_tx` 메서드는 이미 열린 트랜잭션 안에서만 호출
    (이체 / 고정지출 결제에서 재사용).

    Args:
        db: SQLite 어댑터
        locks: 계좌 잠금 레지스트리
    """

    def __init__(self, db: SQLiteAdapter, locks: AccountLocks):
        self.db = db
        self.locks = locks
        self.store = LedgerStore(db)

    # =========================================================================
    # 트랜잭션 내부 헬퍼
    # =========================================================================

    async def load_active_account(self, account_id: str) -> Account:
        """활성 계좌 조회

        Raises:
            AccountNotFound: 계좌 없음
            AccountInactive: 비활성 계좌
        """
        account = await self.store.get_account(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        if not account.is_active:
            raise AccountInactive(account_id)
        return account

    async def _apply(self, tx: Transaction, delta: Decimal) -> Decimal:
        new_balance = await self.store.apply_delta(tx.account_id, delta)
        if delta < 0 and new_balance < 0:
            logger.warning(
                f"Account {tx.account_id} balance is negative: {new_balance}",
                extra={"account_id": tx.account_id, "balance": str(new_balance)},
            )
        return new_balance

    async def insert_in_tx(self, tx: Transaction) -> None:
        """거래 저장 + 잔액 반영"""
        await self.store.insert_transaction(tx)
        await self._apply(tx, tx.delta)

    async def remove_in_tx(self, tx: Transaction) -> None:
        """잔액 역반영 + 거래 삭제"""
        await self.store.apply_delta(tx.account_id, -tx.delta)
        await self.store.delete_transaction(tx.id)

    async def change_in_tx(self, old: Transaction, new: Transaction) -> None:
        """거래 수정

        old의 효과를 되돌리고 new의 효과를 적용 (계좌가 같으면 차액만 반영).
        """
        if old.account_id == new.account_id:
            delta = new.delta - old.delta
            if delta != 0:
                await self._apply(new, delta)
        else:
            await self.store.apply_delta(old.account_id, -old.delta)
            await self._apply(new, new.delta)

        await self.store.update_transaction(
            old.id,
            {
                "account_id": new.account_id,
                "category_id": new.category_id,
                "amount": new.amount,
                "concept": new.concept,
                "tx_date": new.tx_date,
                "notes": new.notes,
                "target_account_id": new.target_account_id,
            },
        )

    async def _get_or_raise(self, transaction_id: str) -> Transaction:
        tx = await self.store.get_transaction(transaction_id)
        if tx is None:
            raise TransactionNotFound(transaction_id)
        return tx

    async def _ensure_not_linked(self, tx: Transaction) -> None:
        instance = await self.store.find_instance_by_transaction(tx.id)
        if instance is not None:
            raise TransactionLinkedToPayment(tx.id, instance.id)

    # =========================================================================
    # 공개 API
    # =========================================================================

    async def create_transaction(
        self,
        account_id: str,
        category_id: str,
        movement_type: MovementType | str,
        amount: Any,
        concept: str,
        tx_date: date,
        notes: str | None = None,
    ) -> Transaction:
        """거래 생성

        Args:
            account_id: 계좌 ID
            category_id: 카테고리 ID
            movement_type: ingreso / egreso
            amount: 금액 (0 초과)
            concept: 내용
            tx_date: 거래일
            notes: 메모

        Returns:
            생성된 거래

        Raises:
            InvalidAmount, InvalidTransactionType, InvalidField,
            AccountNotFound, AccountInactive
        """
        amount = require_positive_amount(amount)
        movement_type = require_movement_type(movement_type)
        concept = require_text("concept", concept, LedgerLimits.MAX_CONCEPT_LENGTH)
        notes = optional_text("notes", notes, LedgerLimits.MAX_NOTES_LENGTH)
        category_id = require_text("category_id", category_id, LedgerLimits.MAX_CONCEPT_LENGTH)
        tx_date = require_date("date", tx_date)

        tx = Transaction(
            id=new_transaction_id(),
            account_id=account_id,
            category_id=category_id,
            movement_type=movement_type,
            amount=amount,
            concept=concept,
            tx_date=tx_date,
            notes=notes,
        )

        async with self.locks.hold(account_id):
            async with self.db.transaction():
                await self.load_active_account(account_id)
                await self.insert_in_tx(tx)

        logger.info(
            f"Transaction created: {tx.id}",
            extra={
                "account_id": account_id,
                "type": movement_type.value,
                "amount": str(amount),
            },
        )
        return await self._get_or_raise(tx.id)

    async def update_transaction(
        self,
        transaction_id: str,
        amount: Any = None,
        category_id: str | None = None,
        concept: str | None = None,
        tx_date: date | None = None,
        notes: str | None = None,
    ) -> Transaction:
        """거래 수정

        None인 필드는 변경하지 않음.
        금액 변경 시 잔액에 (새 변화량 - 기존 변화량)을 한 번에 반영.

        Raises:
            TransactionNotFound, InvalidAmount, CannotEditTransferLeg,
            TransactionLinkedToPayment
        """
        if amount is not None:
            amount = require_positive_amount(amount)
        if concept is not None:
            concept = require_text("concept", concept, LedgerLimits.MAX_CONCEPT_LENGTH)
        if category_id is not None:
            category_id = require_text(
                "category_id", category_id, LedgerLimits.MAX_CONCEPT_LENGTH
            )
        if tx_date is not None:
            tx_date = require_date("date", tx_date)
        notes = optional_text("notes", notes, LedgerLimits.MAX_NOTES_LENGTH)

        peeked = await self._get_or_raise(transaction_id)

        async with self.locks.hold(peeked.account_id):
            async with self.db.transaction():
                old = await self._get_or_raise(transaction_id)
                if old.is_transfer:
                    raise CannotEditTransferLeg(transaction_id)
                await self._ensure_not_linked(old)

                new = replace(
                    old,
                    amount=amount if amount is not None else old.amount,
                    category_id=category_id if category_id is not None else old.category_id,
                    concept=concept if concept is not None else old.concept,
                    tx_date=tx_date if tx_date is not None else old.tx_date,
                    notes=notes if notes is not None else old.notes,
                )
                await self.change_in_tx(old, new)

        logger.info(
            f"Transaction updated: {transaction_id}",
            extra={"account_id": peeked.account_id, "amount": str(new.amount)},
        )
        return await self._get_or_raise(transaction_id)

    async def delete_transaction(self, transaction_id: str) -> Transaction:
        """거래 삭제 (잔액 역반영)

        Returns:
            삭제된 거래

        Raises:
            TransactionNotFound, CannotDeleteTransferLeg, TransactionLinkedToPayment
        """
        peeked = await self._get_or_raise(transaction_id)

        async with self.locks.hold(peeked.account_id):
            async with self.db.transaction():
                tx = await self._get_or_raise(transaction_id)
                if tx.is_transfer:
                    raise CannotDeleteTransferLeg(transaction_id)
                await self._ensure_not_linked(tx)
                await self.remove_in_tx(tx)

        logger.info(
            f"Transaction deleted: {transaction_id}",
            extra={"account_id": tx.account_id, "amount": str(tx.amount)},
        )
        return tx

    # =========================================================================
    # 조회
    # =========================================================================

    async def get_transaction(self, transaction_id: str) -> tuple[Transaction, Transaction | None]:
        """거래 조회

        Returns:
            (거래, 이체인 경우 상대 레그 또는 None)

        Raises:
            TransactionNotFound: 거래 없음
            IncompleteTransferPair: 이체 레그인데 상대 레그가 없음
        """
        tx = await self._get_or_raise(transaction_id)

        if not tx.is_transfer:
            return tx, None

        if not tx.transfer_pair_id:
            raise IncompleteTransferPair(tx.id, 1)
        transfer = await load_transfer_pair(self.store, tx.transfer_pair_id)
        paired = transfer.ingreso if transfer.egreso.id == tx.id else transfer.egreso
        return tx, paired

    async def list_transactions(
        self,
        account_id: str | None = None,
        category_id: str | None = None,
        movement_type: MovementType | str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int = Defaults.PAGE_LIMIT,
        offset: int = 0,
    ) -> TransactionPage:
        """거래 목록 조회

        유형 필터를 지정하면 이체 레그는 제외.
        합계(total_ingresos / total_egresos)는 이체를 제외하고 필터 전체 기준으로 계산.
        """
        if not 1 <= limit <= Defaults.MAX_PAGE_LIMIT:
            raise InvalidField("limit", f"must be between 1 and {Defaults.MAX_PAGE_LIMIT}")
        if offset < 0:
            raise InvalidField("offset", "must be >= 0")

        tx_filter = TransactionFilter(
            account_id=account_id,
            category_id=category_id,
            movement_type=(
                require_movement_type(movement_type) if movement_type is not None else None
            ),
            date_from=date_from,
            date_to=date_to,
        )
        items, total = await self.store.list_transactions(tx_filter, limit, offset)

        totals_filter = TransactionFilter(
            account_id=account_id,
            category_id=category_id,
            movement_type=tx_filter.movement_type,
            date_from=date_from,
            date_to=date_to,
            exclude_transfers=True,
        )
        total_ingresos = Decimal("0")
        total_egresos = Decimal("0")
        for movement, _category, amount in await self.store.fetch_movements(totals_filter):
            if movement == MovementType.INGRESO.value:
                total_ingresos += amount
            else:
                total_egresos += amount

        return TransactionPage(
            items=items,
            total=total,
            limit=limit,
            offset=offset,
            total_ingresos=total_ingresos,
            total_egresos=total_egresos,
        )
