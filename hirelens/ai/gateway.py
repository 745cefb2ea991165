from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from hirelens.ai.errors import ModelCallError, QuotaExhaustedError, classify_model_error
from hirelens.ai.types import JsonSchema, ModelClient
from hirelens.analytics.db import log_model_call
from hirelens.core.throttle import RequestThrottle

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment and try again."


@dataclass(frozen=True)
class _QuotaSignal:
    error: QuotaExhaustedError


def parse_json_payload(text: str) -> dict[str, Any]:
    cleaned = (text or "").strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
        cleaned = cleaned.strip()
    if not cleaned:
        raise ModelCallError("Empty response from AI. Please try again.", code="llm_invalid", status_code=502)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ModelCallError("Failed to parse AI response. Please try again.", code="llm_invalid", status_code=502) from exc
    if not isinstance(parsed, dict):
        raise ModelCallError("AI response was not a JSON object. Please try again.", code="llm_invalid", status_code=502)
    return parsed


class ModelGateway:
    """Single entry point for model calls; every call goes through the shared throttle."""

    def __init__(
        self,
        client: ModelClient,
        throttle: RequestThrottle,
        *,
        model_name: str = "unknown",
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        self._client = client
        self._throttle = throttle
        self._model_name = model_name
        self._sleep = sleep or asyncio.sleep

    @property
    def throttle(self) -> RequestThrottle:
        return self._throttle

    async def call(
        self,
        prompt: str,
        schema: JsonSchema,
        *,
        tool_slug: str = "unknown",
        retry_quota: bool = True,
    ) -> dict[str, Any]:
        """Run one structured model call.

        With ``retry_quota`` the throttle absorbs quota exhaustion and retries
        until the call goes through. Without it the quota error is raised to
        the caller after a single attempt.
        """
        run_id = uuid.uuid4().hex
        started = time.perf_counter()
        attempts = 0

        async def work() -> Any:
            nonlocal attempts
            attempts += 1
            try:
                return await self._client.generate(prompt, schema)
            except QuotaExhaustedError as exc:
                if retry_quota:
                    raise
                return _QuotaSignal(exc)
            except ModelCallError:
                raise
            except Exception as exc:  # noqa: BLE001
                classified = classify_model_error(exc)
                if isinstance(classified, QuotaExhaustedError) and not retry_quota:
                    return _QuotaSignal(classified)
                raise classified from exc

        try:
            outcome = await self._throttle.submit(work)
            if isinstance(outcome, _QuotaSignal):
                raise outcome.error
            payload = parse_json_payload(outcome)
        except ModelCallError as exc:
            logger.warning("model_call_failed tool=%s code=%s attempts=%s: %s", tool_slug, exc.code, attempts, exc)
            self._record(run_id, tool_slug, "error", exc.code, attempts, started)
            raise

        self._record(run_id, tool_slug, "success", None, attempts, started)
        return payload

    async def call_with_retry(
        self,
        prompt: str,
        schema: JsonSchema,
        *,
        tool_slug: str = "unknown",
        max_attempts: int = 3,
    ) -> dict[str, Any]:
        """Call with a bounded retry budget of its own for quota exhaustion."""
        fallback_ms = self._throttle.config.retry_fallback_delay_ms
        for attempt in range(1, max_attempts + 1):
            try:
                return await self.call(prompt, schema, tool_slug=tool_slug, retry_quota=False)
            except QuotaExhaustedError as exc:
                if attempt == max_attempts:
                    raise ModelCallError(RATE_LIMIT_MESSAGE, code="rate_limited", status_code=429) from exc
                delay_ms = exc.retry_after_ms if exc.retry_after_ms and exc.retry_after_ms > 0 else fallback_ms
                logger.warning(
                    "model_rate_limited tool=%s attempt=%s/%s retry_in_s=%.1f",
                    tool_slug,
                    attempt,
                    max_attempts,
                    delay_ms / 1000,
                )
                await self._sleep(delay_ms / 1000)
        raise ModelCallError(RATE_LIMIT_MESSAGE, code="rate_limited", status_code=429)

    def _record(
        self,
        run_id: str,
        tool_slug: str,
        outcome: str,
        error_code: str | None,
        attempts: int,
        started: float,
    ) -> None:
        try:
            log_model_call(
                run_id=run_id,
                tool_slug=tool_slug,
                model=self._model_name,
                outcome=outcome,
                error_code=error_code,
                attempts=attempts,
                latency_ms=int((time.perf_counter() - started) * 1000),
            )
        except Exception:  # pragma: no cover
            logger.debug("model_call_logging_failed", exc_info=True)
