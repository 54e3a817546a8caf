"""
입력값 검증

쓰기 전에 호출하여 잘못된 입력은 DB에 닿기 전에 거부.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from core.constants import SUPPORTED_CURRENCIES, LedgerLimits
from core.ledger.errors import InvalidAmount, InvalidField, InvalidTransactionType
from core.types import MovementType


def to_decimal(value: Any) -> Decimal:
    """숫자/문자열 → Decimal (float은 문자열을 거쳐 변환)"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"not a number: {value!r}")
    return Decimal(str(value))


def require_money(value: Any) -> Decimal:
    """금액 검증 (부호 무관)

    소수점 2자리 이하, 절댓값 LedgerLimits.MAX_AMOUNT 이하.

    Raises:
        InvalidAmount: 숫자가 아니거나 범위/자릿수 초과
    """
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise InvalidAmount(value) from e

    if not amount.is_finite() or abs(amount) > LedgerLimits.MAX_AMOUNT:
        raise InvalidAmount(value)
    if amount != amount.quantize(LedgerLimits.AMOUNT_QUANTUM):
        raise InvalidAmount(value)
    return amount


def require_positive_amount(value: Any) -> Decimal:
    """0 초과 금액 검증

    Raises:
        InvalidAmount: 숫자가 아니거나 0 이하, 범위/자릿수 초과
    """
    amount = require_money(value)
    if amount <= 0:
        raise InvalidAmount(value)
    return amount


def require_movement_type(value: Any) -> MovementType:
    """ingreso / egreso 검증"""
    try:
        return MovementType(value)
    except ValueError as e:
        raise InvalidTransactionType(value) from e


def require_text(field: str, value: Any, max_length: int) -> str:
    """필수 문자열 (앞뒤 공백 제거 후 1자 이상)"""
    if not isinstance(value, str) or not value.strip():
        raise InvalidField(field, "required")

    text = value.strip()
    if len(text) > max_length:
        raise InvalidField(field, f"must be at most {max_length} characters")
    return text


def optional_text(field: str, value: Any, max_length: int) -> str | None:
    """선택 문자열 (None 허용)"""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidField(field, "must be a string")
    if len(value) > max_length:
        raise InvalidField(field, f"must be at most {max_length} characters")
    return value


def require_currency(value: Any) -> str:
    """ISO 4217 통화 코드 검증 (대문자로 정규화)"""
    if not isinstance(value, str):
        raise InvalidField("currency", "must be a 3-letter code")

    currency = value.strip().upper()
    if currency not in SUPPORTED_CURRENCIES:
        raise InvalidField("currency", f"unsupported currency {value!r}")
    return currency


def require_month_year(month: int, year: int) -> None:
    """월(1-12), 연도(2000-2100) 검증"""
    if not 1 <= month <= 12:
        raise InvalidField("month", "must be between 1 and 12")
    if not 2000 <= year <= 2100:
        raise InvalidField("year", "must be between 2000 and 2100")


def latest_allowed_date(today: date | None = None) -> date:
    """허용되는 가장 늦은 거래일 (오늘 + LedgerLimits.MAX_FUTURE_YEARS년)"""
    today = today or date.today()
    year = today.year + LedgerLimits.MAX_FUTURE_YEARS
    try:
        return today.replace(year=year)
    except ValueError:
        # 2월 29일
        return today.replace(year=year, day=28)


def require_date(field: str, value: Any, today: date | None = None) -> date:
    """거래일 검증 (1년 넘게 미래인 날짜 거부)"""
    if not isinstance(value, date) or isinstance(value, datetime):
        raise InvalidField(field, "must be a date")
    if value > latest_allowed_date(today):
        raise InvalidField(field, "cannot be more than 1 year in the future")
    return value
