"""
SQLite 어댑터 테스트

SQLiteAdapter 및 관련 함수 테스트.
"""

import asyncio
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    get_db_path,
    init_schema,
)
from core.constants import Paths
from core.types import AppMode


class TestGetDbPath:
    """get_db_path 테스트"""

    def test_production_mode(self) -> None:
        """Production 모드"""
        path = get_db_path(AppMode.PRODUCTION)

        assert path == Paths.PROD_DB
        assert isinstance(path, Path)

    def test_development_mode(self) -> None:
        """Development 모드"""
        assert get_db_path(AppMode.DEVELOPMENT) == Paths.DEV_DB

    def test_string_mode(self) -> None:
        """문자열 모드 (대소문자 무시)"""
        assert get_db_path("production") == Paths.PROD_DB
        assert get_db_path("DEVELOPMENT") == Paths.DEV_DB


class TestCreateConnection:
    """create_connection 테스트"""

    @pytest.mark.asyncio
    async def test_create_connection(self, tmp_path: Path) -> None:
        """연결 생성 (WAL, 외래 키)"""
        conn = await create_connection(tmp_path / "test.db")

        cursor = await conn.execute("PRAGMA journal_mode")
        row = await cursor.fetchone()
        assert row[0].upper() == "WAL"

        cursor = await conn.execute("PRAGMA foreign_keys")
        row = await cursor.fetchone()
        assert row[0] == 1

        await conn.close()

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """부모 디렉토리 생성"""
        db_path = tmp_path / "subdir" / "test.db"

        conn = await create_connection(db_path)

        assert db_path.parent.exists()

        await conn.close()


class TestSQLiteAdapter:
    """SQLiteAdapter 테스트"""

    @pytest_asyncio.fixture
    async def adapter(self, tmp_path: Path) -> SQLiteAdapter:
        """어댑터 픽스처"""
        adapter = SQLiteAdapter(tmp_path / "test.db")
        await adapter.connect()
        yield adapter
        await adapter.close()

    @pytest.mark.asyncio
    async def test_connect_and_close(self, tmp_path: Path) -> None:
        """연결 및 종료"""
        adapter = SQLiteAdapter(tmp_path / "test.db")

        assert adapter.is_connected is False

        await adapter.connect()
        assert adapter.is_connected is True

        await adapter.close()
        assert adapter.is_connected is False

    @pytest.mark.asyncio
    async def test_execute_not_connected(self, tmp_path: Path) -> None:
        adapter = SQLiteAdapter(tmp_path / "test.db")

        with pytest.raises(RuntimeError, match="Not connected"):
            await adapter.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_fetch_dicts(self, adapter: SQLiteAdapter) -> None:
        """dict 조회"""
        await adapter.execute("CREATE TABLE items (id INTEGER, value TEXT)")
        await adapter.execute("INSERT INTO items VALUES (1, 'A')")
        await adapter.execute("INSERT INTO items VALUES (2, 'B')")
        await adapter.commit()

        row = await adapter.fetchone_dict("SELECT * FROM items WHERE id = ?", (1,))
        rows = await adapter.fetchall_dicts("SELECT * FROM items ORDER BY id")
        missing = await adapter.fetchone_dict("SELECT * FROM items WHERE id = ?", (99,))

        assert row == {"id": 1, "value": "A"}
        assert [r["value"] for r in rows] == ["A", "B"]
        assert missing is None

    @pytest.mark.asyncio
    async def test_transaction_commit(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 커밋"""
        await adapter.execute("CREATE TABLE tx_test (id INTEGER)")
        await adapter.commit()

        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO tx_test (id) VALUES (1)")
            await conn.execute("INSERT INTO tx_test (id) VALUES (2)")

        assert adapter.in_transaction is False
        rows = await adapter.fetchall("SELECT id FROM tx_test")
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_transaction_rollback(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 롤백"""
        await adapter.execute("CREATE TABLE tx_test2 (id INTEGER)")
        await adapter.commit()

        with pytest.raises(ValueError):
            async with adapter.transaction() as conn:
                await conn.execute("INSERT INTO tx_test2 (id) VALUES (1)")
                raise ValueError("의도적 에러")

        rows = await adapter.fetchall("SELECT id FROM tx_test2")
        assert len(rows) == 0

    @pytest.mark.asyncio
    async def test_transactions_serialized(self, adapter: SQLiteAdapter) -> None:
        """같은 연결의 트랜잭션은 순서대로 실행"""
        await adapter.execute("CREATE TABLE seq (step TEXT)")
        await adapter.commit()

        async def work(name: str) -> None:
            async with adapter.transaction() as conn:
                await conn.execute("INSERT INTO seq VALUES (?)", (f"{name}-1",))
                await asyncio.sleep(0.01)
                await conn.execute("INSERT INTO seq VALUES (?)", (f"{name}-2",))

        await asyncio.gather(work("a"), work("b"))

        steps = [r[0] for r in await adapter.fetchall("SELECT step FROM seq ORDER BY rowid")]
        assert steps in (["a-1", "a-2", "b-1", "b-2"], ["b-1", "b-2", "a-1", "a-2"])

    @pytest.mark.asyncio
    async def test_table_exists(self, adapter: SQLiteAdapter) -> None:
        """테이블 존재 확인"""
        assert await adapter.table_exists("nonexistent") is False

        await adapter.execute("CREATE TABLE existing (id INTEGER)")
        await adapter.commit()

        assert await adapter.table_exists("existing") is True

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path) -> None:
        """컨텍스트 매니저"""
        async with SQLiteAdapter(tmp_path / "ctx_test.db") as adapter:
            assert adapter.is_connected is True
            await adapter.execute("CREATE TABLE ctx (id INTEGER)")

        # 컨텍스트 종료 후 연결 해제 확인
        assert adapter.is_connected is False


class TestInitSchema:
    """init_schema 테스트"""

    @pytest.mark.asyncio
    async def test_init_schema_creates_tables(self, tmp_path: Path) -> None:
        """스키마 초기화 - 테이블 생성"""
        async with SQLiteAdapter(tmp_path / "schema_test.db") as adapter:
            await init_schema(adapter)

            for table in (
                "accounts",
                "transactions",
                "recurring_expenses",
                "monthly_expense_instances",
            ):
                assert await adapter.table_exists(table) is True

    @pytest.mark.asyncio
    async def test_init_schema_idempotent(self, tmp_path: Path) -> None:
        """스키마 초기화 멱등성 (여러 번 실행 가능)"""
        async with SQLiteAdapter(tmp_path / "idempotent_test.db") as adapter:
            await init_schema(adapter)
            await init_schema(adapter)

            assert await adapter.table_exists("transactions") is True

    @pytest.mark.asyncio
    async def test_transactions_schema(self, tmp_path: Path) -> None:
        """transactions 스키마 확인"""
        async with SQLiteAdapter(tmp_path / "tx_schema_test.db") as adapter:
            await init_schema(adapter)

            columns = {c["name"]: c for c in await adapter.get_table_info("transactions")}

            for name in ("amount", "movement_type", "is_transfer", "transfer_pair_id", "tx_date"):
                assert name in columns
            assert columns["amount"]["type"] == "TEXT"
            assert columns["id"]["pk"] is True

    @pytest.mark.asyncio
    async def test_movement_type_check(self, tmp_path: Path) -> None:
        """movement_type CHECK 제약조건"""
        async with SQLiteAdapter(tmp_path / "check_test.db") as adapter:
            await init_schema(adapter)
            await adapter.execute(
                "INSERT INTO accounts (id, name, account_type, currency) "
                "VALUES ('a1', 'A', 'banco', 'ARS')"
            )

            with pytest.raises(aiosqlite.IntegrityError):
                await adapter.execute(
                    "INSERT INTO transactions "
                    "(id, account_id, category_id, movement_type, amount, concept, tx_date) "
                    "VALUES ('t1', 'a1', 'c', 'transfer', '10', 'x', '2026-01-01')"
                )

    @pytest.mark.asyncio
    async def test_instance_period_unique(self, tmp_path: Path) -> None:
        """(템플릿, 월, 연도) UNIQUE 제약조건"""
        async with SQLiteAdapter(tmp_path / "unique_test.db") as adapter:
            await init_schema(adapter)
            await adapter.execute(
                "INSERT INTO recurring_expenses (id, concept, category_id, currency) "
                "VALUES ('r1', 'Luz', 'servicios', 'ARS')"
            )
            insert = (
                "INSERT INTO monthly_expense_instances "
                "(id, recurring_expense_id, month, year, concept, category_id) "
                "VALUES (?, 'r1', 3, 2026, 'Luz', 'servicios')"
            )
            await adapter.execute(insert, ("i1",))

            with pytest.raises(aiosqlite.IntegrityError):
                await adapter.execute(insert, ("i2",))
