"""
키 단위 비동기 잠금

계좌 ID / 월별 고정지출 ID 단위로 asyncio.Lock을 관리.
여러 키를 잡을 때는 항상 정렬된 순서로 획득하여 교착 상태 방지.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

logger = logging.getLogger(__name__)


class AccountLocks:
    """키별 asyncio.Lock 레지스트리

    같은 이벤트 루프 안에서 공유해야 함 (Web은 프로세스 전역 인스턴스 사용).

    사용 예시:
    ```python
    locks = AccountLocks()

    async with locks.hold(from_account_id, to_account_id):
        ...
    ```
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def _get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def is_locked(self, key: str) -> bool:
        """잠금 여부"""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, *keys: str | None) -> AsyncIterator[None]:
        """여러 키를 정렬 순서로 잠금

        None과 중복 키는 무시.

        Args:
            *keys: 잠글 키 목록
        """
        ordered = sorted({k for k in keys if k})
        acquired: list[asyncio.Lock] = []

        try:
            for key in ordered:
                lock = self._get(key)
                await lock.acquire()
                acquired.append(lock)

            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
