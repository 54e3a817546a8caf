#!/usr/bin/env python3
"""DB 상태 확인 및 계좌 잔액 점검 스크립트"""

import argparse
import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path
from core.ledger.engine import LedgerEngine
from core.types import AppMode


async def main(mode: str) -> int:
    db_path = get_db_path(AppMode(mode))

    async with SQLiteAdapter(db_path, readonly=True) as db:
        engine = LedgerEngine(db)
        accounts = await engine.accounts.list_accounts(include_inactive=True)
        drifts = await engine.accounts.audit_balances()

        print(f"DB Path: {db_path}")
        print(f"Accounts: {len(accounts)}")
        for account in accounts:
            state = "" if account.is_active else " (inactive)"
            print(f"  - {account.name}: {account.current_balance} {account.currency}{state}")

        if not drifts:
            print("\nBalance audit: OK")
            return 0

        print(f"\nBalance audit: {len(drifts)} mismatch(es)")
        for drift in drifts:
            print(
                f"  - {drift.account_id}: stored={drift.stored}, "
                f"expected={drift.expected}, diff={drift.difference}"
            )
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="DB 상태 확인")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in AppMode],
        default=AppMode.DEVELOPMENT.value,
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(main(args.mode)))
