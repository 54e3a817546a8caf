"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
금액 범위(0 초과) 검증은 원장에서 처리하여 400으로 응답.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AccountCreateRequest(BaseModel):
    """계좌 생성 요청"""

    name: str = Field(..., description="계좌명")
    type: str = Field(..., description="계좌 유형 (efectivo/banco/billetera_digital/tarjeta)")
    currency: str = Field(..., description="통화 (ISO 4217)")
    initial_balance: Decimal = Field(default=Decimal("0"), description="초기 잔액")


class AccountUpdateRequest(BaseModel):
    """계좌 수정 요청"""

    name: str | None = Field(default=None, description="계좌명")
    initial_balance: Decimal | None = Field(default=None, description="초기 잔액")
    currency: str | None = Field(default=None, description="통화 (거래가 없는 경우만)")


class TransactionCreateRequest(BaseModel):
    """거래 생성 요청"""

    account_id: str = Field(..., description="계좌 ID")
    category_id: str = Field(..., description="카테고리 ID")
    type: str = Field(..., description="거래 유형 (ingreso/egreso)")
    amount: Decimal = Field(..., description="금액 (0 초과)")
    concept: str = Field(..., description="내용")
    date: datetime.date = Field(..., description="거래일")
    notes: str | None = Field(default=None, description="메모")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "account_id": "0b6c1c5e-...",
                    "category_id": "comida",
                    "type": "egreso",
                    "amount": "250.00",
                    "concept": "Supermercado",
                    "date": "2026-03-10",
                },
            ]
        }
    }


class TransactionUpdateRequest(BaseModel):
    """거래 수정 요청 (지정한 필드만 변경)"""

    amount: Decimal | None = Field(default=None, description="금액")
    category_id: str | None = Field(default=None, description="카테고리 ID")
    concept: str | None = Field(default=None, description="내용")
    date: datetime.date | None = Field(default=None, description="거래일")
    notes: str | None = Field(default=None, description="메모")


class TransferCreateRequest(BaseModel):
    """이체 생성 요청"""

    from_account_id: str = Field(..., description="출금 계좌 ID")
    to_account_id: str = Field(..., description="입금 계좌 ID")
    amount: Decimal = Field(..., description="금액 (0 초과)")
    concept: str = Field(..., description="내용")
    date: datetime.date = Field(..., description="이체일")
    notes: str | None = Field(default=None, description="메모")


class TransferUpdateRequest(BaseModel):
    """이체 수정 요청 (두 레그에 함께 적용)"""

    amount: Decimal | None = Field(default=None, description="금액")
    concept: str | None = Field(default=None, description="내용")
    date: datetime.date | None = Field(default=None, description="이체일")
    notes: str | None = Field(default=None, description="메모")


class MonthlyExpensePayRequest(BaseModel):
    """월별 고정지출 결제 요청"""

    amount: Decimal = Field(..., description="결제 금액 (0 초과)")
    account_id: str = Field(..., description="결제 계좌 ID")
    paid_date: datetime.date | None = Field(default=None, description="결제일 (기본: 오늘)")
    notes: str | None = Field(default=None, description="메모")


class MonthlyExpenseUpdateRequest(BaseModel):
    """결제 정보 수정 요청"""

    amount: Decimal | None = Field(default=None, description="결제 금액")
    account_id: str | None = Field(default=None, description="결제 계좌 ID")
    paid_date: datetime.date | None = Field(default=None, description="결제일")
    notes: str | None = Field(default=None, description="메모")


class GenerateMonthlyExpensesRequest(BaseModel):
    """월별 인스턴스 생성 요청"""

    month: int = Field(..., description="월 (1-12)")
    year: int = Field(..., description="연도")


class RecurringExpenseCreateRequest(BaseModel):
    """고정지출 템플릿 생성 요청"""

    concept: str = Field(..., description="내용")
    category_id: str = Field(..., description="카테고리 ID")
    currency: str = Field(..., description="통화 (ISO 4217)")
    due_day: int | None = Field(default=None, description="납부일 (1-31)")
    notes: str | None = Field(default=None, description="메모")


class RecurringExpenseUpdateRequest(BaseModel):
    """고정지출 템플릿 수정 요청"""

    concept: str | None = Field(default=None, description="내용")
    category_id: str | None = Field(default=None, description="카테고리 ID")
    currency: str | None = Field(default=None, description="통화")
    due_day: int | None = Field(default=None, description="납부일 (1-31)")
    notes: str | None = Field(default=None, description="메모")
