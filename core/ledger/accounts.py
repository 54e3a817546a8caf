"""
Account Service

계좌 생성 / 조회 / 수정 / 비활성화 및 잔액 검증.

현재 잔액은 원장 서비스만 변경하며,
초기 잔액 수정 시에는 같은 차이만큼 현재 잔액도 이동.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.constants import LedgerLimits
from core.ledger.errors import (
    AccountHasTransactions,
    AccountNotFound,
    BalanceMismatch,
    InvalidField,
)
from core.ledger.locks import AccountLocks
from core.ledger.models import Account, Transaction
from core.ledger.store import LedgerStore
from core.ledger.validation import require_currency, require_money, require_text
from core.types import AccountType

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass
class BalanceDrift:
    """저장 잔액과 재계산 잔액의 차이"""

    account_id: str
    stored: Decimal
    expected: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored - self.expected

    def to_dict(self) -> dict[str, str]:
        return {
            "account_id": self.account_id,
            "stored": str(self.stored),
            "expected": str(self.expected),
            "difference": str(self.difference),
        }


@dataclass
class AccountStatistics:
    """계좌별 통계 (이체 레그 포함)"""

    account_id: str
    total_income: Decimal
    total_expenses: Decimal
    transaction_count: int
    last_transaction: Transaction | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_income": str(self.total_income),
            "total_expenses": str(self.total_expenses),
            "transaction_count": self.transaction_count,
            "last_transaction": (
                self.last_transaction.to_dict() if self.last_transaction else None
            ),
        }


def totals_by_currency(accounts: list[Account]) -> dict[str, Decimal]:
    """통화별 현재 잔액 합계"""
    totals: dict[str, Decimal] = {}
    for account in accounts:
        totals[account.currency] = totals.get(account.currency, Decimal("0")) + account.current_balance
    return totals


class AccountService:
    """계좌 관리

    Args:
        db: SQLite 어댑터
        locks: 계좌 잠금 레지스트리
    """

    def __init__(self, db: SQLiteAdapter, locks: AccountLocks):
        self.db = db
        self.locks = locks
        self.store = LedgerStore(db)

    async def _get_or_raise(self, account_id: str) -> Account:
        account = await self.store.get_account(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        return account

    async def create_account(
        self,
        name: str,
        account_type: AccountType | str,
        currency: str,
        initial_balance: Any = Decimal("0"),
    ) -> Account:
        """계좌 생성 (현재 잔액 = 초기 잔액)"""
        name = require_text("name", name, LedgerLimits.MAX_ACCOUNT_NAME_LENGTH)
        try:
            account_type = AccountType(account_type)
        except ValueError as e:
            raise InvalidField("type", f"unknown account type {account_type!r}") from e
        currency = require_currency(currency)
        balance = require_money(initial_balance)

        account = Account(
            id=str(uuid.uuid4()),
            name=name,
            account_type=account_type,
            currency=currency,
            initial_balance=balance,
            current_balance=balance,
        )

        async with self.db.transaction():
            await self.store.insert_account(account)

        logger.info(
            f"Account created: {account.id}",
            extra={"currency": currency, "initial_balance": str(balance)},
        )
        return await self._get_or_raise(account.id)

    async def get_account(self, account_id: str) -> Account:
        return await self._get_or_raise(account_id)

    async def get_account_statistics(self, account_id: str) -> AccountStatistics:
        """계좌별 입금/출금 합계, 거래 수, 최근 거래

        Raises:
            AccountNotFound: 계좌 없음
        """
        await self._get_or_raise(account_id)
        ingresos, egresos = await self.store.sum_account_movements(account_id)
        return AccountStatistics(
            account_id=account_id,
            total_income=ingresos,
            total_expenses=egresos,
            transaction_count=await self.store.count_account_transactions(account_id),
            last_transaction=await self.store.last_account_transaction(account_id),
        )

    async def list_accounts(self, include_inactive: bool = False) -> list[Account]:
        return await self.store.list_accounts(include_inactive)

    async def update_account(
        self,
        account_id: str,
        name: str | None = None,
        initial_balance: Any = None,
        currency: str | None = None,
    ) -> Account:
        """계좌 수정

        초기 잔액 변경 시 현재 잔액도 같은 차이만큼 이동.
        거래가 있는 계좌의 통화는 변경 불가.

        Raises:
            AccountNotFound, AccountHasTransactions, InvalidField, InvalidAmount
        """
        if name is not None:
            name = require_text("name", name, LedgerLimits.MAX_ACCOUNT_NAME_LENGTH)
        if currency is not None:
            currency = require_currency(currency)
        new_initial = require_money(initial_balance) if initial_balance is not None else None

        async with self.locks.hold(account_id):
            async with self.db.transaction():
                account = await self._get_or_raise(account_id)

                fields: dict[str, Any] = {}
                if name is not None:
                    fields["name"] = name

                if currency is not None and currency != account.currency:
                    if await self.store.count_account_transactions(account_id) > 0:
                        raise AccountHasTransactions(account_id, "change currency of")
                    fields["currency"] = currency

                if new_initial is not None and new_initial != account.initial_balance:
                    difference = new_initial - account.initial_balance
                    fields["initial_balance"] = new_initial
                    fields["current_balance"] = account.current_balance + difference

                await self.store.update_account(account_id, fields)

        logger.info(f"Account updated: {account_id}", extra={"fields": list(fields)})
        return await self._get_or_raise(account_id)

    async def deactivate_account(self, account_id: str) -> Account:
        """계좌 비활성화

        Raises:
            AccountNotFound, AccountHasTransactions
        """
        async with self.locks.hold(account_id):
            async with self.db.transaction():
                await self._get_or_raise(account_id)
                if await self.store.count_account_transactions(account_id) > 0:
                    raise AccountHasTransactions(account_id, "deactivate")
                await self.store.update_account(account_id, {"is_active": False})

        logger.info(f"Account deactivated: {account_id}")
        return await self._get_or_raise(account_id)

    # =========================================================================
    # 잔액 검증
    # =========================================================================

    async def expected_balance(self, account: Account) -> Decimal:
        """초기 잔액 + Σ입금 - Σ출금"""
        ingresos, egresos = await self.store.sum_account_movements(account.id)
        return account.initial_balance + ingresos - egresos

    async def verify_balance(self, account_id: str) -> Decimal:
        """저장 잔액이 거래 내역과 일치하는지 확인

        Returns:
            확인된 잔액

        Raises:
            AccountNotFound: 계좌 없음
            BalanceMismatch: 불일치 (자동 수정하지 않음)
        """
        account = await self._get_or_raise(account_id)
        expected = await self.expected_balance(account)

        if account.current_balance != expected:
            logger.error(
                f"Balance mismatch on account {account_id}",
                extra={
                    "stored": str(account.current_balance),
                    "expected": str(expected),
                },
            )
            raise BalanceMismatch(account_id, account.current_balance, expected)
        return expected

    async def audit_balances(self) -> list[BalanceDrift]:
        """모든 계좌 잔액 점검 (읽기 전용)"""
        drifts: list[BalanceDrift] = []

        for account in await self.store.list_accounts(include_inactive=True):
            expected = await self.expected_balance(account)
            if account.current_balance != expected:
                drifts.append(BalanceDrift(account.id, account.current_balance, expected))

        if drifts:
            logger.error(
                f"Balance audit found {len(drifts)} inconsistent account(s)",
                extra={"account_ids": [d.account_id for d in drifts]},
            )
        else:
            logger.info("Balance audit passed")
        return drifts

    async def negative_balance_warnings(self, *account_ids: str | None) -> list[str]:
        """음수 잔액 계좌 경고 메시지"""
        warnings: list[str] = []
        for account_id in dict.fromkeys(a for a in account_ids if a):
            account = await self.store.get_account(account_id)
            if account is not None and account.current_balance < 0:
                warnings.append(
                    f"Account {account.name} ({account.id}) balance is negative: "
                    f"{account.current_balance} {account.currency}"
                )
        return warnings
