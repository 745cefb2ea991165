from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from hirelens.ai.errors import QuotaExhaustedError

logger = logging.getLogger("hirelens.throttle")

T = TypeVar("T")

Work = Callable[[], Awaitable[Any]]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(frozen=True)
class ThrottleConfig:
    requests_per_minute: int = 12
    min_delay_ms: float = 100.0
    retry_fallback_delay_ms: float = 12000.0
    window_ms: float = 60000.0
    window_buffer_ms: float = 100.0

    @classmethod
    def from_settings(cls, settings: Any) -> "ThrottleConfig":
        return cls(
            requests_per_minute=max(1, int(settings.throttle_requests_per_minute)),
            min_delay_ms=max(0.0, float(settings.throttle_min_delay_ms)),
            retry_fallback_delay_ms=max(0.0, float(settings.throttle_retry_fallback_delay_ms)),
        )


@dataclass
class _QueuedTask:
    work: Work
    future: asyncio.Future
    attempts: int = 0


class RequestThrottle:
    """Serializes outbound model calls under one shared rate budget.

    Tasks run one at a time in submission order. At most
    ``requests_per_minute`` tasks are admitted inside any trailing window and
    consecutive admissions are at least ``min_delay_ms`` apart. A task that
    fails with :class:`QuotaExhaustedError` is put back at the head of the
    queue after a backoff and keeps its caller waiting; any other error is
    raised to the caller immediately.
    """

    def __init__(
        self,
        config: ThrottleConfig | None = None,
        *,
        clock: Clock | None = None,
        sleep: Sleep | None = None,
    ):
        self._config = config or ThrottleConfig()
        self._clock = clock or _monotonic_ms
        self._sleep = sleep or asyncio.sleep
        self._queue: deque[_QueuedTask] = deque()
        self._window: deque[float] = deque()
        self._last_admission_ms: float | None = None
        self._processing = False
        self._drain_task: asyncio.Task | None = None

    @property
    def config(self) -> ThrottleConfig:
        return self._config

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def window_size(self) -> int:
        return len(self._window)

    async def submit(self, work: Callable[[], Awaitable[T]]) -> T:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._queue.append(_QueuedTask(work=work, future=future))
        if not self._processing:
            self._processing = True
            self._drain_task = loop.create_task(self._drain())
        return await future

    async def _drain(self) -> None:
        current: _QueuedTask | None = None
        try:
            while self._queue:
                await self._wait_for_window()
                current = self._queue.popleft()
                await self._wait_for_spacing()

                admitted_at = self._clock()
                self._last_admission_ms = admitted_at
                self._window.append(admitted_at)
                current.attempts += 1

                try:
                    result = await current.work()
                except QuotaExhaustedError as exc:
                    delay_ms = exc.retry_after_ms
                    if not delay_ms or delay_ms < 0:
                        delay_ms = self._config.retry_fallback_delay_ms
                    logger.warning(
                        "throttle_quota_retry attempt=%s delay_ms=%.0f pending=%s",
                        current.attempts,
                        delay_ms,
                        len(self._queue),
                    )
                    await self._sleep(delay_ms / 1000)
                    self._queue.appendleft(current)
                    current = None
                    continue
                except Exception as exc:
                    _settle(current.future, error=exc)
                    current = None
                    continue

                _settle(current.future, result=result)
                current = None
        finally:
            self._processing = False
            if current is not None:
                current.future.cancel()
            # Only reached with a non-empty queue when the drain task itself was cancelled.
            while self._queue:
                self._queue.popleft().future.cancel()

    def _prune_window(self) -> None:
        cutoff = self._clock() - self._config.window_ms
        while self._window and self._window[0] <= cutoff:
            self._window.popleft()

    async def _wait_for_window(self) -> None:
        while True:
            self._prune_window()
            if len(self._window) < self._config.requests_per_minute:
                return
            oldest = self._window[0]
            wait_ms = self._config.window_ms - (self._clock() - oldest) + self._config.window_buffer_ms
            if wait_ms > 0:
                logger.info(
                    "throttle_window_full waiting_s=%.1f pending=%s",
                    wait_ms / 1000,
                    len(self._queue),
                )
                await self._sleep(wait_ms / 1000)

    async def _wait_for_spacing(self) -> None:
        if self._last_admission_ms is None:
            return
        elapsed = self._clock() - self._last_admission_ms
        if elapsed < self._config.min_delay_ms:
            await self._sleep((self._config.min_delay_ms - elapsed) / 1000)


def _settle(future: asyncio.Future, *, result: Any = None, error: BaseException | None = None) -> None:
    # The caller may have stopped awaiting; its future is then already cancelled.
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)
