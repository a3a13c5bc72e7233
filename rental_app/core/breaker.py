import logging
import time
from typing import Any, Awaitable, Callable

from .exceptions import ProviderError

logger = logging.getLogger(__name__)


class CircuitBreaker:
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        base_recovery_time: int = 10,
        max_recovery_time: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_count = 0
        self.failure_threshold = failure_threshold
        self.base_recovery_time = base_recovery_time
        self.max_recovery_time = max_recovery_time
        self.last_failure_time = 0.0
        self.state = self.CLOSED
        self._clock = clock

    @property
    def current_recovery_time(self) -> float:
        return min(
            self.base_recovery_time
            * (2 ** max(self.failure_count - self.failure_threshold, 0)),
            self.max_recovery_time,
        )

    def _open(self):
        self.state = self.OPEN
        self.last_failure_time = self._clock()
        logger.warning(f"[{self.name}] circuit opened after {self.failure_count} failures.")

    def _half_open(self):
        self.state = self.HALF_OPEN
        logger.info(f"[{self.name}] circuit half-open: testing...")

    def _close(self):
        if self.state != self.CLOSED:
            logger.info(f"[{self.name}] circuit closed: stable again.")
        self.state = self.CLOSED
        self.failure_count = 0

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        if self.state == self.OPEN:
            elapsed = self._clock() - self.last_failure_time
            cooldown = self.current_recovery_time
            if elapsed < cooldown:
                raise ProviderError(
                    f"{self.name} unavailable, retry after {cooldown - elapsed:.1f}s"
                )
            self._half_open()

        try:
            result = await func(*args, **kwargs)
        except ProviderError:
            self._record_failure()
            raise
        except Exception as e:
            self._record_failure()
            logger.error(f"[{self.name}] call failed ({self.failure_count}): {e}")
            raise

        self._close()
        return result

    def _record_failure(self):
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self._open()
