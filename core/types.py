"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AppMode(str, Enum):
    """실행 모드 (운영 / 개발)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class MovementType(str, Enum):
    """거래 유형

    ingreso: 입금 (잔액 증가)
    egreso: 출금 (잔액 감소)
    """

    INGRESO = "ingreso"
    EGRESO = "egreso"


class AccountType(str, Enum):
    """계좌 유형"""

    EFECTIVO = "efectivo"  # 현금
    BANCO = "banco"  # 은행 계좌
    BILLETERA_DIGITAL = "billetera_digital"  # 전자지갑
    TARJETA = "tarjeta"  # 카드


class ExpenseStatus(str, Enum):
    """월별 고정지출 인스턴스 상태"""

    PENDIENTE = "pendiente"
    PAGADO = "pagado"
