"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 모두 문자열 (Decimal 정밀도 유지).
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="실행 모드 (production/development)")
    version: str = Field(..., description="버전")


class AccountResponse(BaseModel):
    """계좌 응답"""

    id: str
    name: str
    type: str
    currency: str
    initial_balance: str
    current_balance: str
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None


class AccountListResponse(BaseModel):
    """계좌 목록 응답"""

    accounts: list[AccountResponse] = Field(default_factory=list)
    totals_by_currency: dict[str, str] = Field(default_factory=dict, description="통화별 잔액 합계")


class BalanceCheckResponse(BaseModel):
    """잔액 검증 응답"""

    account_id: str
    balance: str
    consistent: bool = True


class BalanceDriftResponse(BaseModel):
    """잔액 불일치 항목"""

    account_id: str
    stored: str
    expected: str
    difference: str


class BalanceAuditResponse(BaseModel):
    """전체 잔액 점검 응답"""

    consistent: bool
    drifts: list[BalanceDriftResponse] = Field(default_factory=list)


class TransactionResponse(BaseModel):
    """거래 응답"""

    id: str
    account_id: str
    category_id: str
    type: str
    amount: str
    concept: str
    date: str
    notes: str | None = None
    is_transfer: bool = False
    target_account_id: str | None = None
    transfer_pair_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class AccountStatisticsResponse(BaseModel):
    """계좌별 통계 (이체 레그 포함)"""

    total_income: str
    total_expenses: str
    transaction_count: int
    last_transaction: TransactionResponse | None = None


class AccountDetailResponse(AccountResponse):
    """계좌 상세 응답"""

    statistics: AccountStatisticsResponse


class TransactionDetailResponse(TransactionResponse):
    """거래 상세 응답 (이체인 경우 상대 레그 포함)"""

    paired_transaction: TransactionResponse | None = None


class TransactionMutationResponse(BaseModel):
    """거래 생성/수정 응답"""

    transaction: TransactionResponse
    warnings: list[str] = Field(default_factory=list, description="음수 잔액 경고")


class TransactionDeleteResponse(BaseModel):
    """거래 삭제 응답"""

    deleted_id: str
    warnings: list[str] = Field(default_factory=list)


class PaginationResponse(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class TransactionTotalsResponse(BaseModel):
    """거래 합계 (이체 제외)"""

    ingresos: str
    egresos: str
    balance: str


class TransactionListResponse(BaseModel):
    """거래 목록 응답"""

    transactions: list[TransactionResponse] = Field(default_factory=list)
    pagination: PaginationResponse
    totals: TransactionTotalsResponse


class TransferResponse(BaseModel):
    """이체 응답"""

    transfer_pair_id: str
    from_account_id: str
    to_account_id: str
    amount: str
    egreso: TransactionResponse
    ingreso: TransactionResponse


class TransferMutationResponse(BaseModel):
    """이체 생성/수정/삭제 응답"""

    transfer: TransferResponse
    warnings: list[str] = Field(default_factory=list)


class MonthlyExpenseResponse(BaseModel):
    """월별 고정지출 응답"""

    id: str
    recurring_expense_id: str
    month: int
    year: int
    concept: str
    category_id: str
    status: str
    amount: str | None = None
    account_id: str | None = None
    paid_date: str | None = None
    previous_amount: str
    linked_transaction_id: str | None = None
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class MonthlyExpenseMutationResponse(BaseModel):
    """결제/수정/취소 응답"""

    monthly_expense: MonthlyExpenseResponse
    warnings: list[str] = Field(default_factory=list)


class GenerationResultResponse(BaseModel):
    """월별 인스턴스 생성 결과"""

    created: int
    skipped: int
    errors: int
    month: int
    year: int


class RecurringExpenseResponse(BaseModel):
    """고정지출 템플릿 응답"""

    id: str
    concept: str
    category_id: str
    currency: str
    due_day: int | None = None
    notes: str | None = None
    is_active: bool
    created_at: str | None = None
    updated_at: str | None = None


class CategoryStatsResponse(BaseModel):
    category_id: str
    total_amount: str
    percentage: str


class MonthlyStatsResponse(BaseModel):
    month: int
    year: int
    ingresos: str
    egresos: str
    balance: str


class AccountSummaryResponse(BaseModel):
    account_id: str
    name: str
    type: str
    current_balance: str
    currency: str


class PeriodResponse(BaseModel):
    month: int
    year: int


class StatsTotalsResponse(BaseModel):
    ingresos: str
    egresos: str
    balance: str


class FinanceStatsResponse(BaseModel):
    """재무 통계 응답"""

    period: PeriodResponse
    totals: StatsTotalsResponse
    por_categoria: list[CategoryStatsResponse] = Field(default_factory=list)
    evolucion_mensual: list[MonthlyStatsResponse] = Field(default_factory=list)
    cuentas_resumen: list[AccountSummaryResponse] = Field(default_factory=list)
