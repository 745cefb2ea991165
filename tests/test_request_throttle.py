import asyncio
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hirelens.ai.errors import QuotaExhaustedError  # noqa: E402
from hirelens.core.throttle import RequestThrottle, ThrottleConfig  # noqa: E402


class VirtualClock:
    """Millisecond clock that only moves when the throttle sleeps."""

    def __init__(self):
        self.now_ms = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now_ms

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now_ms += seconds * 1000
        await asyncio.sleep(0)


class RequestThrottleTests(unittest.IsolatedAsyncioTestCase):
    def _throttle(self, **overrides) -> tuple[RequestThrottle, VirtualClock]:
        clock = VirtualClock()
        config = ThrottleConfig(**overrides)
        return RequestThrottle(config, clock=clock, sleep=clock.sleep), clock

    def _recording_task(self, clock: VirtualClock, log: list, name: str, result=None):
        async def work():
            log.append((name, clock.now_ms))
            return result if result is not None else name

        return work

    async def test_tasks_run_in_submission_order_with_min_spacing(self):
        throttle, clock = self._throttle(requests_per_minute=5, min_delay_ms=100)
        log: list = []

        results = await asyncio.gather(
            *(throttle.submit(self._recording_task(clock, log, name)) for name in ("a", "b", "c"))
        )

        self.assertEqual(results, ["a", "b", "c"])
        self.assertEqual([name for name, _ in log], ["a", "b", "c"])
        times = [at for _, at in log]
        self.assertAlmostEqual(times[0], 0.0)
        self.assertAlmostEqual(times[1], 100.0)
        self.assertAlmostEqual(times[2], 200.0)
        self.assertFalse(throttle.is_processing)
        self.assertEqual(throttle.pending, 0)

    async def test_requests_within_budget_do_not_wait_for_window(self):
        throttle, clock = self._throttle(requests_per_minute=3, min_delay_ms=0)
        log: list = []

        await asyncio.gather(*(throttle.submit(self._recording_task(clock, log, str(i))) for i in range(3)))

        self.assertEqual(clock.sleeps, [])
        self.assertEqual([at for _, at in log], [0.0, 0.0, 0.0])
        self.assertEqual(throttle.window_size, 3)

    async def test_request_over_budget_waits_for_oldest_to_leave_window(self):
        throttle, clock = self._throttle(requests_per_minute=3, min_delay_ms=100)
        log: list = []

        await asyncio.gather(*(throttle.submit(self._recording_task(clock, log, str(i))) for i in range(4)))

        times = [at for _, at in log]
        self.assertGreaterEqual(times[3] - times[0], 60000.0)
        self.assertLess(times[2], 60000.0)
        # Oldest admission at 0 ms, so the fourth waits out the window plus the buffer.
        self.assertAlmostEqual(times[3], 60100.0, places=3)

    async def test_admissions_in_any_window_never_exceed_budget(self):
        throttle, clock = self._throttle(requests_per_minute=2, min_delay_ms=0, window_buffer_ms=0)
        log: list = []

        await asyncio.gather(*(throttle.submit(self._recording_task(clock, log, str(i))) for i in range(7)))

        times = [at for _, at in log]
        for start in times:
            in_window = [t for t in times if start <= t < start + 60000.0]
            self.assertLessEqual(len(in_window), 2)

    async def test_quota_error_is_retried_with_server_delay(self):
        throttle, clock = self._throttle(min_delay_ms=0)
        calls = {"count": 0}

        async def flaky():
            calls["count"] += 1
            if calls["count"] < 3:
                raise QuotaExhaustedError("quota", retry_after_ms=500)
            return "ok"

        result = await throttle.submit(flaky)

        self.assertEqual(result, "ok")
        self.assertEqual(calls["count"], 3)
        self.assertEqual(clock.sleeps, [0.5, 0.5])

    async def test_quota_error_without_hint_uses_fallback_delay(self):
        throttle, clock = self._throttle(min_delay_ms=0, retry_fallback_delay_ms=12000)
        calls = {"count": 0}

        async def flaky():
            calls["count"] += 1
            if calls["count"] == 1:
                raise QuotaExhaustedError("quota")
            return "ok"

        self.assertEqual(await throttle.submit(flaky), "ok")
        self.assertEqual(clock.sleeps, [12.0])

    async def test_zero_second_hint_uses_fallback_delay(self):
        throttle, clock = self._throttle(min_delay_ms=0, retry_fallback_delay_ms=12000)
        calls = {"count": 0}

        async def flaky():
            calls["count"] += 1
            if calls["count"] == 1:
                raise QuotaExhaustedError("quota", retry_after_ms=0)
            return "ok"

        self.assertEqual(await throttle.submit(flaky), "ok")
        self.assertEqual(clock.sleeps, [12.0])

    async def test_retried_task_goes_back_to_head_of_queue(self):
        throttle, clock = self._throttle(requests_per_minute=10, min_delay_ms=0)
        executions: list[str] = []
        failed_once = {"b": False}

        def task(name: str):
            async def work():
                executions.append(name)
                if name == "b" and not failed_once["b"]:
                    failed_once["b"] = True
                    raise QuotaExhaustedError("quota", retry_after_ms=10)
                return name

            return work

        results = await asyncio.gather(*(throttle.submit(task(name)) for name in ("a", "b", "c")))

        self.assertEqual(results, ["a", "b", "c"])
        self.assertEqual(executions, ["a", "b", "b", "c"])

    async def test_other_errors_reject_only_their_caller(self):
        throttle, clock = self._throttle(min_delay_ms=0)

        async def broken():
            raise ValueError("boom")

        async def fine():
            return "fine"

        results = await asyncio.gather(throttle.submit(broken), throttle.submit(fine), return_exceptions=True)

        self.assertIsInstance(results[0], ValueError)
        self.assertEqual(results[1], "fine")
        self.assertEqual(throttle.pending, 0)

    async def test_throttle_restarts_after_draining(self):
        throttle, clock = self._throttle(min_delay_ms=100)
        log: list = []

        await throttle.submit(self._recording_task(clock, log, "first"))
        self.assertFalse(throttle.is_processing)
        clock.now_ms += 5000
        await throttle.submit(self._recording_task(clock, log, "second"))

        self.assertEqual([name for name, _ in log], ["first", "second"])
        self.assertEqual(clock.sleeps, [])

    def test_config_from_settings_clamps_values(self):
        class _Settings:
            throttle_requests_per_minute = 0
            throttle_min_delay_ms = -5
            throttle_retry_fallback_delay_ms = 2500

        config = ThrottleConfig.from_settings(_Settings())
        self.assertEqual(config.requests_per_minute, 1)
        self.assertEqual(config.min_delay_ms, 0.0)
        self.assertEqual(config.retry_fallback_delay_ms, 2500.0)


if __name__ == "__main__":
    unittest.main()
