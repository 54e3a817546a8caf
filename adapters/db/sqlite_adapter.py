"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
Web과 스크립트가 동시에 접근 가능하도록 설정.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Paths
from core.types import AppMode

logger = logging.getLogger(__name__)


def get_db_path(mode: AppMode | str) -> Path:
    """모드에 따른 DB 경로 반환

    Args:
        mode: 실행 모드 (PRODUCTION/DEVELOPMENT)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if isinstance(mode, str):
        mode = AppMode(mode.lower())

    if mode == AppMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEV_DB


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    # pathlib.Path를 문자열로 변환
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    # 연결 생성
    if readonly:
        # 읽기 전용 모드
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        conn = await aiosqlite.connect(db_path_str)

    # WAL 모드 설정
    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    하나의 연결에서 트랜잭션은 asyncio.Lock으로 직렬화되며
    BEGIN IMMEDIATE로 시작하여 다른 연결의 쓰기와도 직렬화됨.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (조회용)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("INSERT INTO ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._tx_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """트랜잭션 진행 중 여부"""
        return self._conn is not None and self._conn.in_transaction

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchall()

    async def fetchone_dict(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> dict[str, Any] | None:
        """단일 행 조회 (컬럼명 → 값 dict)"""
        cursor = await self.execute(sql, parameters)
        row = await cursor.fetchone()

        if not row:
            return None

        # row를 dict로 변환
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))

    async def fetchall_dicts(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[dict[str, Any]]:
        """전체 행 조회 (컬럼명 → 값 dict 리스트)"""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()

        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        BEGIN IMMEDIATE로 쓰기 잠금을 먼저 확보한 뒤 실행.
        성공 시 자동 커밋, 예외 시 자동 롤백.
        중첩 호출 불가 (같은 연결의 Lock은 재진입 불가).

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        async with self._tx_lock:
            # 이전 암묵적 트랜잭션이 남아 있으면 먼저 정리
            if self._conn.in_transaction:
                await self._conn.commit()

            await self._conn.execute("BEGIN IMMEDIATE")
            try:
                yield self._conn
                await self._conn.commit()
            except BaseException:
                await self._conn.rollback()
                raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def get_table_info(self, table_name: str) -> list[dict[str, Any]]:
        """테이블 정보 조회"""
        rows = await self.fetchall(f"PRAGMA table_info({table_name})")

        columns = []
        for row in rows:
            columns.append({
                "cid": row[0],
                "name": row[1],
                "type": row[2],
                "notnull": bool(row[3]),
                "default_value": row[4],
                "pk": bool(row[5]),
            })

        return columns

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    금액 컬럼은 모두 TEXT (Decimal 문자열)로 저장.
    여러 번 호출해도 안전함 (IF NOT EXISTS).

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # accounts
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS accounts (
            id               TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            account_type     TEXT NOT NULL,
            currency         TEXT NOT NULL,
            initial_balance  TEXT NOT NULL DEFAULT '0',
            current_balance  TEXT NOT NULL DEFAULT '0',
            is_active        INTEGER NOT NULL DEFAULT 1,

            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # transactions (이체 레그는 transfer_pair_id로 연결)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id                TEXT PRIMARY KEY,
            account_id        TEXT NOT NULL,
            category_id       TEXT NOT NULL,
            movement_type     TEXT NOT NULL CHECK (movement_type IN ('ingreso', 'egreso')),
            amount            TEXT NOT NULL,
            concept           TEXT NOT NULL,
            tx_date           TEXT NOT NULL,
            notes             TEXT,

            is_transfer       INTEGER NOT NULL DEFAULT 0,
            target_account_id TEXT,
            transfer_pair_id  TEXT,

            created_at        TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at        TEXT NOT NULL DEFAULT (datetime('now')),

            FOREIGN KEY (account_id) REFERENCES accounts(id),
            FOREIGN KEY (target_account_id) REFERENCES accounts(id)
        )
    """)

    # recurring_expenses (고정지출 템플릿)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS recurring_expenses (
            id               TEXT PRIMARY KEY,
            concept          TEXT NOT NULL,
            category_id      TEXT NOT NULL,
            currency         TEXT NOT NULL,
            due_day          INTEGER,
            notes            TEXT,
            is_active        INTEGER NOT NULL DEFAULT 1,

            created_at       TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at       TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # monthly_expense_instances (월별 고정지출)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS monthly_expense_instances (
            id                    TEXT PRIMARY KEY,
            recurring_expense_id  TEXT NOT NULL,
            month                 INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
            year                  INTEGER NOT NULL,
            concept               TEXT NOT NULL,
            category_id           TEXT NOT NULL,
            status                TEXT NOT NULL DEFAULT 'pendiente'
                                  CHECK (status IN ('pendiente', 'pagado')),
            amount                TEXT,
            account_id            TEXT,
            paid_date             TEXT,
            previous_amount       TEXT,
            linked_transaction_id TEXT,
            notes                 TEXT,

            created_at            TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at            TEXT NOT NULL DEFAULT (datetime('now')),

            UNIQUE(recurring_expense_id, month, year),
            FOREIGN KEY (recurring_expense_id) REFERENCES recurring_expenses(id),
            FOREIGN KEY (account_id) REFERENCES accounts(id)
        )
    """)

    # 인덱스 생성
    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_account
        ON transactions(account_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_date
        ON transactions(tx_date)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_transactions_pair
        ON transactions(transfer_pair_id)
    """)

    await adapter.execute("""
        CREATE INDEX IF NOT EXISTS ix_monthly_expense_period
        ON monthly_expense_instances(year, month)
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
