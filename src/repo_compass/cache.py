"""TTL 기반 인메모리 캐시."""

import time
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

Clock = Callable[[], float]


class TTLCache(Generic[K, V]):
    """키별로 만료 시간을 가지는 read-through 캐시.

    만료된 항목은 해당 키를 읽을 때와 새 값을 저장할 때 함께 정리되므로,
    다시 오지 않는 키도 오래 남지 않는다. 시계는 주입할 수 있으므로
    테스트에서 가짜 시계로 만료를 재현할 수 있다.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic) -> None:
        """
        Args:
            ttl_seconds: 항목 유효 시간 (초)
            clock: 현재 시각(초)을 반환하는 함수
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[K, tuple[float, V]] = {}

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: K) -> V | None:
        """유효한 값을 반환한다. 없거나 만료되었으면 None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._expired(stored_at, self._clock()):
            del self._entries[key]
            return None
        return value

    def set(self, key: K, value: V) -> None:
        """값을 저장하고 만료된 항목을 정리한다."""
        now = self._clock()
        self.purge(now)
        self._entries[key] = (now, value)

    def purge(self, now: float | None = None) -> int:
        """만료된 항목을 모두 제거하고 제거한 개수를 반환한다."""
        now = self._clock() if now is None else now
        expired = [
            key
            for key, (stored_at, _) in self._entries.items()
            if self._expired(stored_at, now)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def invalidate(self, key: K) -> None:
        """키를 제거한다. 없으면 무시한다."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """모든 항목을 제거한다."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        self.purge()
        return len(self._entries)
