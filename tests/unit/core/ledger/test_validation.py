"""
core/ledger/validation.py 테스트
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from core.ledger.errors import InvalidAmount, InvalidField, InvalidTransactionType
from core.ledger.validation import (
    latest_allowed_date,
    optional_text,
    require_currency,
    require_date,
    require_money,
    require_month_year,
    require_movement_type,
    require_positive_amount,
    require_text,
    to_decimal,
)
from core.types import MovementType


class TestToDecimal:
    def test_float_goes_through_str(self) -> None:
        """float은 문자열을 거쳐 정확히 변환"""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_decimal_passthrough(self) -> None:
        value = Decimal("12.34")
        assert to_decimal(value) is value


class TestRequirePositiveAmount:
    @pytest.mark.parametrize("value", ["100", 100, Decimal("0.01"), "1e3"])
    def test_valid(self, value: object) -> None:
        assert require_positive_amount(value) > 0

    @pytest.mark.parametrize("value", [0, "0", -5, "-0.01", "abc", None, True, "NaN", "Infinity"])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(InvalidAmount):
            require_positive_amount(value)

    @pytest.mark.parametrize("value", ["999999999999.99", "1.10", Decimal("7.5")])
    def test_within_limits(self, value: object) -> None:
        assert require_positive_amount(value) == Decimal(str(value))

    @pytest.mark.parametrize(
        "value", ["0.001", "10.005", "1000000000000", "123456789012345678901234567.5"]
    )
    def test_precision_and_range(self, value: str) -> None:
        """소수점 3자리 이상, 상한 초과 금액 거부"""
        with pytest.raises(InvalidAmount):
            require_positive_amount(value)


class TestRequireMoney:
    @pytest.mark.parametrize("value", ["0", "-250.50", "1000"])
    def test_sign_agnostic(self, value: str) -> None:
        assert require_money(value) == Decimal(value)

    @pytest.mark.parametrize("value", ["-0.005", "-1000000000000", "abc"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(InvalidAmount):
            require_money(value)


class TestRequireMovementType:
    def test_valid(self) -> None:
        assert require_movement_type("ingreso") == MovementType.INGRESO
        assert require_movement_type(MovementType.EGRESO) == MovementType.EGRESO

    def test_invalid(self) -> None:
        with pytest.raises(InvalidTransactionType):
            require_movement_type("transferencia")


class TestTextFields:
    def test_require_text_strips(self) -> None:
        assert require_text("concept", "  Alquiler ", 200) == "Alquiler"

    def test_require_text_empty(self) -> None:
        with pytest.raises(InvalidField, match="required"):
            require_text("concept", "   ", 200)

    def test_require_text_too_long(self) -> None:
        with pytest.raises(InvalidField, match="at most 5"):
            require_text("concept", "x" * 6, 5)

    def test_optional_text(self) -> None:
        assert optional_text("notes", None, 10) is None
        assert optional_text("notes", "ok", 10) == "ok"

        with pytest.raises(InvalidField):
            optional_text("notes", "x" * 11, 10)


class TestRequireCurrency:
    def test_normalizes_case(self) -> None:
        assert require_currency(" usd ") == "USD"

    def test_unsupported(self) -> None:
        with pytest.raises(InvalidField, match="currency"):
            require_currency("XYZ")


class TestRequireMonthYear:
    def test_valid(self) -> None:
        require_month_year(1, 2000)
        require_month_year(12, 2100)

    @pytest.mark.parametrize("month, year", [(0, 2026), (13, 2026), (5, 1999), (5, 2101)])
    def test_invalid(self, month: int, year: int) -> None:
        with pytest.raises(InvalidField):
            require_month_year(month, year)


class TestRequireDate:
    TODAY = date(2026, 3, 15)

    def test_up_to_one_year_ahead(self) -> None:
        assert require_date("date", date(2027, 3, 15), self.TODAY) == date(2027, 3, 15)
        assert require_date("date", date(2020, 1, 1), self.TODAY) == date(2020, 1, 1)

    def test_more_than_one_year_ahead(self) -> None:
        with pytest.raises(InvalidField, match="1 year"):
            require_date("date", date(2027, 3, 16), self.TODAY)

    def test_leap_day(self) -> None:
        assert latest_allowed_date(date(2028, 2, 29)) == date(2029, 2, 28)

    @pytest.mark.parametrize("value", ["2026-03-10", None, datetime(2026, 3, 10, 12, 0)])
    def test_not_a_date(self, value: object) -> None:
        with pytest.raises(InvalidField):
            require_date("paid_date", value, self.TODAY)
