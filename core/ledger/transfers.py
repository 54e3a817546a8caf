"""
Transfer Coordinator

두 계좌 간 이체를 출금 레그 + 입금 레그 한 쌍으로 관리.
쌍은 항상 함께 생성/수정/삭제되며 한쪽만 남는 상태를 만들지 않음.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any

from core.constants import LedgerLimits
from core.ledger.errors import (
    CurrencyMismatch,
    SameAccount,
    TransactionNotFound,
    TransferNotFound,
)
from core.ledger.locks import AccountLocks
from core.ledger.models import Transaction, Transfer
from core.ledger.store import LedgerStore
from core.ledger.transactions import TransactionLedger, load_transfer_pair, new_transaction_id
from core.ledger.validation import (
    optional_text,
    require_date,
    require_positive_amount,
    require_text,
)
from core.types import MovementType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


class TransferCoordinator:
    """이체 관리

    Args:
        db: SQLite 어댑터
        locks: 계좌 잠금 레지스트리
        ledger: 레그 저장에 사용하는 TransactionLedger
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

    async def _load_pair(self, transfer_pair_id: str) -> Transfer:
        return await load_transfer_pair(self.store, transfer_pair_id)

    async def get_transfer(self, transfer_pair_id: str) -> Transfer:
        """이체 조회"""
        return await self._load_pair(transfer_pair_id)

    async def create_transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Any,
        concept: str,
        tx_date: date,
        notes: str | None = None,
    ) -> Transfer:
        """이체 생성

        출금 계좌에 egreso, 입금 계좌에 ingreso를 같은 transfer_pair_id로 저장.
        잔액 부족 여부는 검사하지 않음 (음수 잔액 허용, WARNING 로그).

        Raises:
            SameAccount, CurrencyMismatch, InvalidAmount,
            AccountNotFound, AccountInactive
        """
        if from_account_id == to_account_id:
            raise SameAccount(from_account_id)
        amount = require_positive_amount(amount)
        concept = require_text("concept", concept, LedgerLimits.MAX_CONCEPT_LENGTH)
        tx_date = require_date("date", tx_date)
        notes = optional_text("notes", notes, LedgerLimits.MAX_NOTES_LENGTH)

        transfer_pair_id = str(uuid.uuid4())
        egreso = Transaction(
            id=new_transaction_id(),
            account_id=from_account_id,
            category_id=LedgerLimits.TRANSFER_CATEGORY_ID,
            movement_type=MovementType.EGRESO,
            amount=amount,
            concept=concept,
            tx_date=tx_date,
            notes=notes,
            is_transfer=True,
            target_account_id=to_account_id,
            transfer_pair_id=transfer_pair_id,
        )
        ingreso = replace(
            egreso,
            id=new_transaction_id(),
            account_id=to_account_id,
            movement_type=MovementType.INGRESO,
            target_account_id=from_account_id,
        )

        async with self.locks.hold(from_account_id, to_account_id):
            async with self.db.transaction():
                source = await self.ledger.load_active_account(from_account_id)
                destination = await self.ledger.load_active_account(to_account_id)
                if source.currency != destination.currency:
                    raise CurrencyMismatch(source.currency, destination.currency)

                await self.ledger.insert_in_tx(egreso)
                await self.ledger.insert_in_tx(ingreso)

        logger.info(
            f"Transfer created: {transfer_pair_id}",
            extra={
                "from_account_id": from_account_id,
                "to_account_id": to_account_id,
                "amount": str(amount),
            },
        )
        return await self._load_pair(transfer_pair_id)

    async def update_transfer(
        self,
        transfer_pair_id: str,
        amount: Any = None,
        concept: str | None = None,
        tx_date: date | None = None,
        notes: str | None = None,
    ) -> Transfer:
        """이체 수정

        두 레그에 같은 값을 적용하고 두 계좌 잔액을 함께 재계산.

        Raises:
            TransferNotFound, IncompleteTransferPair, InvalidAmount
        """
        if amount is not None:
            amount = require_positive_amount(amount)
        if concept is not None:
            concept = require_text("concept", concept, LedgerLimits.MAX_CONCEPT_LENGTH)
        if tx_date is not None:
            tx_date = require_date("date", tx_date)
        notes = optional_text("notes", notes, LedgerLimits.MAX_NOTES_LENGTH)

        peeked = await self._load_pair(transfer_pair_id)

        async with self.locks.hold(peeked.from_account_id, peeked.to_account_id):
            async with self.db.transaction():
                transfer = await self._load_pair(transfer_pair_id)

                for leg in (transfer.egreso, transfer.ingreso):
                    updated = replace(
                        leg,
                        amount=amount if amount is not None else leg.amount,
                        concept=concept if concept is not None else leg.concept,
                        tx_date=tx_date if tx_date is not None else leg.tx_date,
                        notes=notes if notes is not None else leg.notes,
                    )
                    await self.ledger.change_in_tx(leg, updated)

        logger.info(
            f"Transfer updated: {transfer_pair_id}",
            extra={"amount": str(amount) if amount is not None else None},
        )
        return await self._load_pair(transfer_pair_id)

    async def delete_transfer(self, transfer_pair_id: str) -> Transfer:
        """이체 삭제 (두 레그 잔액 역반영 후 삭제)

        Returns:
            삭제된 이체

        Raises:
            TransferNotFound, IncompleteTransferPair
        """
        peeked = await self._load_pair(transfer_pair_id)

        async with self.locks.hold(peeked.from_account_id, peeked.to_account_id):
            async with self.db.transaction():
                transfer = await self._load_pair(transfer_pair_id)
                await self.ledger.remove_in_tx(transfer.egreso)
                await self.ledger.remove_in_tx(transfer.ingreso)

        logger.info(
            f"Transfer deleted: {transfer_pair_id}",
            extra={
                "from_account_id": transfer.from_account_id,
                "to_account_id": transfer.to_account_id,
                "amount": str(transfer.amount),
            },
        )
        return transfer

    async def delete_transfer_by_leg(self, transaction_id: str) -> Transfer:
        """레그 ID로 이체 삭제

        Raises:
            TransactionNotFound: 거래 없음
            TransferNotFound: 이체 레그가 아닌 거래
        """
        tx = await self.store.get_transaction(transaction_id)
        if tx is None:
            raise TransactionNotFound(transaction_id)
        if not tx.is_transfer or not tx.transfer_pair_id:
            raise TransferNotFound(
                transaction_id,
                f"Transaction {transaction_id} is not a transfer leg",
            )
        return await self.delete_transfer(tx.transfer_pair_id)
