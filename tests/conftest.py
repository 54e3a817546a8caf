"""
pytest 공통 fixture 정의

설정 파일, 임시 DB, LedgerEngine fixture
"""

import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings
from core.ledger.engine import LedgerEngine
from core.ledger.models import Account, MonthlyExpenseInstance
from web.app import app
from web.dependencies import get_app_settings, get_db, get_db_write


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
mode: development
db_path: {temp_dir / "ledger_test.db"}

web:
  host: 0.0.0.0
  port: 9000

logging:
  console_level: debug
  file_level: warning
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_production(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성 (production 모드, 기본값 사용)"""
    settings_path = temp_dir / "settings_prod.yaml"
    settings_path.write_text("mode: production\n", encoding="utf-8")
    return settings_path


@pytest.fixture
def temp_settings_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 settings.yaml 파일 생성"""
    settings_path = temp_dir / "settings_invalid.yaml"
    settings_path.write_text("mode: invalid_mode\n", encoding="utf-8")
    return settings_path


# =========================================================================
# DB / 원장 fixture
# =========================================================================


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> SQLiteAdapter:
    """스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "ledger.db")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def engine(db: SQLiteAdapter) -> LedgerEngine:
    """임시 DB 기반 LedgerEngine"""
    return LedgerEngine(db)


@pytest.fixture
def today() -> date:
    return date(2026, 3, 15)


@pytest_asyncio.fixture
async def account_a(engine: LedgerEngine) -> Account:
    """ARS 계좌 (초기 잔액 1000)"""
    return await engine.accounts.create_account("Cuenta A", "banco", "ARS", Decimal("1000"))


@pytest_asyncio.fixture
async def account_b(engine: LedgerEngine) -> Account:
    """ARS 계좌 (초기 잔액 500)"""
    return await engine.accounts.create_account("Cuenta B", "efectivo", "ARS", Decimal("500"))


@pytest_asyncio.fixture
async def account_usd(engine: LedgerEngine) -> Account:
    """USD 계좌 (초기 잔액 100)"""
    return await engine.accounts.create_account("Cuenta USD", "billetera_digital", "USD", Decimal("100"))


@pytest_asyncio.fixture
async def pending_instance(engine: LedgerEngine) -> MonthlyExpenseInstance:
    """pendiente 상태 월별 고정지출 (2026년 3월, 전월 결제액 150)"""
    template = await engine.recurring.create("Internet", "servicios", "ARS", due_day=10)

    await engine.recurring.generate_monthly_instances(2, 2026)
    february = (await engine.monthly_expenses.list_monthly_expenses(2, 2026))[0]
    account = await engine.accounts.create_account("Pago", "banco", "ARS", Decimal("1000"))
    await engine.monthly_expenses.pay(february.id, Decimal("150"), account.id, date(2026, 2, 10))

    await engine.recurring.generate_monthly_instances(3, 2026)
    instances = await engine.monthly_expenses.list_monthly_expenses(3, 2026)
    return next(i for i in instances if i.recurring_expense_id == template.id)


# =========================================================================
# Web API fixture
# =========================================================================


@pytest_asyncio.fixture
async def api_client(db: SQLiteAdapter, temp_settings_file: Path):
    """테스트 DB를 사용하는 API 클라이언트

    ASGITransport는 lifespan을 실행하지 않으므로 DB 의존성을 직접 교체.
    """

    async def _override_db():
        yield db

    Settings.reset()
    settings = Settings(temp_settings_file)

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_db_write] = _override_db
    app.dependency_overrides[get_app_settings] = lambda: settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    Settings.reset()
