"""
State Machines

월별 고정지출 인스턴스의 결제 상태 전이 관리.
"""

import logging

from core.types import ExpenseStatus

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """상태 전이 오류"""
    pass


class MonthlyExpenseStateMachine:
    """월별 고정지출 결제 상태 머신

    전이 규칙:
    - pendiente → pagado: 결제
    - pagado → pagado: 결제 정보 수정
    - pagado → pendiente: 결제 취소

    Args:
        initial_state: 초기 상태 (문자열 또는 ExpenseStatus)
    """

    TRANSITIONS: dict[ExpenseStatus, tuple[ExpenseStatus, ...]] = {
        ExpenseStatus.PENDIENTE: (ExpenseStatus.PAGADO,),
        ExpenseStatus.PAGADO: (ExpenseStatus.PAGADO, ExpenseStatus.PENDIENTE),
    }

    def __init__(self, initial_state: str | ExpenseStatus = ExpenseStatus.PENDIENTE):
        self._status = ExpenseStatus(initial_state)

    @property
    def state(self) -> str:
        """현재 상태 (DB 저장값)"""
        return self._status.value

    @property
    def is_paid(self) -> bool:
        return self._status == ExpenseStatus.PAGADO

    def can_transition(self, to_state: str | ExpenseStatus) -> bool:
        return ExpenseStatus(to_state) in self.TRANSITIONS[self._status]

    def transition(self, to_state: str | ExpenseStatus) -> str:
        """상태 전이

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = ExpenseStatus(to_state)
        if not self.can_transition(target):
            allowed = [s.value for s in self.TRANSITIONS[self._status]]
            raise StateMachineError(
                f"Monthly expense cannot go from {self._status.value} to {target.value}. "
                f"Allowed: {allowed}"
            )

        previous = self._status
        self._status = target
        logger.debug(f"Monthly expense status: {previous.value} → {target.value}")
        return self._status.value
