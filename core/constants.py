"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → finledger/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # 거래 내역 페이지네이션
    PAGE_LIMIT: int = 50
    MAX_PAGE_LIMIT: int = 100

    # 통계 추이 개월 수
    STATS_EVOLUTION_MONTHS: int = 6


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    SCRIPTS_LOGS_DIR: Path = LOGS_DIR / "scripts"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "finledger_prod.db"
    DEV_DB: Path = DATA_DIR / "finledger_dev.db"


class LedgerLimits:
    """원장 입력 제한값

    금액은 항상 Decimal로 비교 (부동소수점 오차 방지)
    """

    MIN_AMOUNT: Decimal = Decimal("0")  # 초과해야 함 (amount > 0)
    # 금액은 소수점 2자리까지, 절댓값 상한 (잔액 합산 시 Decimal 정밀도 28자리 이내 유지)
    AMOUNT_QUANTUM: Decimal = Decimal("0.01")
    MAX_AMOUNT: Decimal = Decimal("999999999999.99")
    MAX_CONCEPT_LENGTH: int = 200
    MAX_NOTES_LENGTH: int = 1000
    MAX_ACCOUNT_NAME_LENGTH: int = 100
    MAX_PAYMENT_NOTES_LENGTH: int = 500
    # 거래일/결제일은 오늘로부터 최대 1년 뒤까지
    MAX_FUTURE_YEARS: int = 1

    # 이체 레그에 사용하는 예약 카테고리
    TRANSFER_CATEGORY_ID: str = "transferencias"


# 결제 거래 concept에 사용하는 월 이름 (1월=인덱스 0)
MONTH_NAMES: tuple[str, ...] = (
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
)

# 지원 통화 (ISO 4217)
SUPPORTED_CURRENCIES: tuple[str, ...] = (
    "ARS", "USD", "EUR", "BRL", "CLP", "COP", "MXN", "UYU", "PEN",
    "GBP", "JPY", "CNY", "CHF", "CAD", "AUD", "NZD", "INR", "RUB",
)
