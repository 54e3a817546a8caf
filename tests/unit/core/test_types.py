"""
core/types.py 테스트

모든 Enum이 문자열 직렬화 가능한지 확인
"""

import pytest

from core.types import AccountType, AppMode, ExpenseStatus, MovementType


class TestAppMode:
    """AppMode 테스트"""

    def test_values(self) -> None:
        """값 확인"""
        assert AppMode.PRODUCTION.value == "production"
        assert AppMode.DEVELOPMENT.value == "development"

    def test_from_string(self) -> None:
        """문자열에서 생성"""
        assert AppMode("production") == AppMode.PRODUCTION
        assert AppMode("development") == AppMode.DEVELOPMENT


class TestMovementType:
    """MovementType 테스트"""

    def test_values(self) -> None:
        assert MovementType.INGRESO.value == "ingreso"
        assert MovementType.EGRESO.value == "egreso"

    def test_string_comparison(self) -> None:
        """Enum은 문자열과 == 비교 가능 (str 상속)"""
        assert MovementType.EGRESO == "egreso"

    def test_invalid_value(self) -> None:
        with pytest.raises(ValueError):
            MovementType("transfer")


class TestAccountType:
    """AccountType 테스트"""

    def test_values(self) -> None:
        assert {t.value for t in AccountType} == {
            "efectivo",
            "banco",
            "billetera_digital",
            "tarjeta",
        }


class TestExpenseStatus:
    """ExpenseStatus 테스트"""

    def test_values(self) -> None:
        assert ExpenseStatus.PENDIENTE.value == "pendiente"
        assert ExpenseStatus.PAGADO.value == "pagado"
        assert f"{ExpenseStatus.PAGADO.value}" == "pagado"
