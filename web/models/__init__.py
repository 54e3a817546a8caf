"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    AccountCreateRequest,
    AccountUpdateRequest,
    GenerateMonthlyExpensesRequest,
    MonthlyExpensePayRequest,
    MonthlyExpenseUpdateRequest,
    RecurringExpenseCreateRequest,
    RecurringExpenseUpdateRequest,
    TransactionCreateRequest,
    TransactionUpdateRequest,
    TransferCreateRequest,
    TransferUpdateRequest,
)
from web.models.responses import (
    AccountDetailResponse,
    AccountListResponse,
    AccountResponse,
    FinanceStatsResponse,
    HealthResponse,
    MonthlyExpenseResponse,
    RecurringExpenseResponse,
    TransactionListResponse,
    TransactionResponse,
    TransferResponse,
)

__all__ = [
    # Requests
    "AccountCreateRequest",
    "AccountUpdateRequest",
    "TransactionCreateRequest",
    "TransactionUpdateRequest",
    "TransferCreateRequest",
    "TransferUpdateRequest",
    "MonthlyExpensePayRequest",
    "MonthlyExpenseUpdateRequest",
    "GenerateMonthlyExpensesRequest",
    "RecurringExpenseCreateRequest",
    "RecurringExpenseUpdateRequest",
    # Responses
    "HealthResponse",
    "AccountResponse",
    "AccountDetailResponse",
    "AccountListResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "TransferResponse",
    "MonthlyExpenseResponse",
    "RecurringExpenseResponse",
    "FinanceStatsResponse",
]
