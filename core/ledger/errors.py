"""
원장 예외 정의

LedgerError를 루트로 네 계열로 분류:
- ValidationError: 입력값 오류 (HTTP 400)
- NotFoundError: 대상 없음 (HTTP 404)
- StateConflictError: 현재 상태에서 허용되지 않는 작업 (HTTP 409)
- ConsistencyViolation: 저장된 데이터 불일치 (HTTP 500, 자동 복구하지 않음)
"""

from decimal import Decimal

from core.constants import LedgerLimits


class LedgerError(Exception):
    """원장 예외 기본 클래스

    Attributes:
        code: 에러 코드 (클래스명)
        message: 에러 메시지
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> str:
        """에러 코드"""
        return type(self).__name__


# =========================================================================
# 계열
# =========================================================================


class ValidationError(LedgerError):
    """입력값 검증 실패"""
    pass


class NotFoundError(LedgerError):
    """조회 대상 없음"""
    pass


class StateConflictError(LedgerError):
    """상태 충돌"""
    pass


class ConsistencyViolation(LedgerError):
    """원장 정합성 위반

    발견 즉시 ERROR 로그. 자동 복구 없이 호출자에게 전달.
    """
    pass


# =========================================================================
# ValidationError
# =========================================================================


class InvalidAmount(ValidationError):
    """숫자가 아니거나 0 이하, 소수점 2자리 초과, 상한 초과 금액"""

    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(
            f"Invalid amount {amount}: expected at most 2 decimal places "
            f"and absolute value up to {LedgerLimits.MAX_AMOUNT} (movements must be > 0)"
        )


class InvalidTransactionType(ValidationError):
    """ingreso/egreso가 아닌 거래 유형"""

    def __init__(self, movement_type: object):
        self.movement_type = movement_type
        super().__init__(f"Invalid transaction type: {movement_type}")


class InvalidField(ValidationError):
    """길이 초과 등 필드 형식 오류"""

    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__(f"Invalid {field}: {reason}")


class SameAccount(ValidationError):
    """출금/입금 계좌가 동일"""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Source and destination account are the same: {account_id}")


class CurrencyMismatch(ValidationError):
    """이체 계좌 간 통화 불일치"""

    def __init__(self, from_currency: str, to_currency: str):
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(
            f"Currency mismatch: {from_currency} -> {to_currency}"
        )


class AccountInactive(ValidationError):
    """비활성 계좌"""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account is inactive: {account_id}")


# =========================================================================
# NotFoundError
# =========================================================================


class AccountNotFound(NotFoundError):
    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class TransactionNotFound(NotFoundError):
    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class TransferNotFound(NotFoundError):
    def __init__(self, transfer_pair_id: str, message: str | None = None):
        self.transfer_pair_id = transfer_pair_id
        super().__init__(message or f"Transfer not found: {transfer_pair_id}")


class InstanceNotFound(NotFoundError):
    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Monthly expense not found: {instance_id}")


class RecurringExpenseNotFound(NotFoundError):
    def __init__(self, recurring_expense_id: str):
        self.recurring_expense_id = recurring_expense_id
        super().__init__(f"Recurring expense not found: {recurring_expense_id}")


# =========================================================================
# StateConflictError
# =========================================================================


class CannotEditTransferLeg(StateConflictError):
    """이체 레그는 이체 단위로만 수정 가능"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction {transaction_id} is a transfer leg; edit the transfer instead"
        )


class CannotDeleteTransferLeg(StateConflictError):
    """이체 레그는 이체 단위로만 삭제 가능"""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(
            f"Transaction {transaction_id} is a transfer leg; delete the transfer instead"
        )


class TransactionLinkedToPayment(StateConflictError):
    """월별 고정지출 결제에 연결된 거래"""

    def __init__(self, transaction_id: str, instance_id: str):
        self.transaction_id = transaction_id
        self.instance_id = instance_id
        super().__init__(
            f"Transaction {transaction_id} belongs to monthly expense {instance_id}; "
            f"use the monthly expense operations instead"
        )


class AlreadyPaid(StateConflictError):
    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Monthly expense already paid: {instance_id}")


class NotPaid(StateConflictError):
    def __init__(self, instance_id: str):
        self.instance_id = instance_id
        super().__init__(f"Monthly expense is not paid: {instance_id}")


class AccountHasTransactions(StateConflictError):
    """거래가 있는 계좌의 통화 변경/비활성화 불가"""

    def __init__(self, account_id: str, action: str):
        self.account_id = account_id
        self.action = action
        super().__init__(
            f"Cannot {action} account {account_id}: it has transactions"
        )


# =========================================================================
# ConsistencyViolation
# =========================================================================


class IncompleteTransferPair(TransferNotFound, ConsistencyViolation):
    """이체 쌍 중 한쪽 레그만 존재"""

    def __init__(self, transfer_pair_id: str, leg_count: int):
        self.leg_count = leg_count
        super().__init__(
            transfer_pair_id,
            f"Incomplete transfer pair {transfer_pair_id}: {leg_count} leg(s) found",
        )


class BalanceMismatch(ConsistencyViolation):
    """저장된 잔액과 거래 내역으로 재계산한 잔액 불일치"""

    def __init__(self, account_id: str, stored: Decimal, expected: Decimal):
        self.account_id = account_id
        self.stored = stored
        self.expected = expected
        super().__init__(
            f"Balance mismatch on account {account_id}: "
            f"stored={stored}, expected={expected}"
        )


class LinkedTransactionMissing(ConsistencyViolation):
    """결제 완료 인스턴스의 연결 거래 없음"""

    def __init__(self, instance_id: str, transaction_id: str | None):
        self.instance_id = instance_id
        self.transaction_id = transaction_id
        super().__init__(
            f"Monthly expense {instance_id} is paid but its linked transaction "
            f"{transaction_id} is missing"
        )
