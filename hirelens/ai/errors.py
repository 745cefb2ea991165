from __future__ import annotations

import re
from typing import Any

_RETRY_IN_RE = re.compile(r"retry in ([\d.]+)\s*s", re.IGNORECASE)
_DURATION_RE = re.compile(r"^\s*([\d.]+)\s*s?\s*$")
_QUOTA_STATUSES = {"RESOURCE_EXHAUSTED", "TOO_MANY_REQUESTS"}


class ModelCallError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_error", status_code: int = 503):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class QuotaExhaustedError(ModelCallError):
    def __init__(self, message: str, *, retry_after_ms: float | None = None):
        super().__init__(message, code="quota_exhausted", status_code=429)
        self.retry_after_ms = retry_after_ms


def _field(source: Any, name: str) -> Any:
    if source is None:
        return None
    if isinstance(source, dict):
        return source.get(name)
    return getattr(source, name, None)


def _error_body(exc: Any) -> Any:
    # google-genai APIError keeps the decoded payload on `details`; openai keeps it on `body`.
    for attr in ("details", "body", "response_json"):
        body = _field(exc, attr)
        if isinstance(body, dict):
            return body.get("error", body)
    return _field(exc, "error")


def _message(exc: Any) -> str:
    parts = [str(exc)]
    body = _error_body(exc)
    nested = _field(body, "message")
    if isinstance(nested, str):
        parts.append(nested)
    return " ".join(parts)


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_quota_error(exc: BaseException) -> bool:
    if isinstance(exc, QuotaExhaustedError):
        return True
    body = _error_body(exc)
    codes = (
        _as_int(_field(exc, "code")),
        _as_int(_field(exc, "status_code")),
        _as_int(_field(body, "code")),
    )
    if 429 in codes:
        return True
    statuses = {str(_field(exc, "status") or "").upper(), str(_field(body, "status") or "").upper()}
    if statuses & _QUOTA_STATUSES:
        return True
    message = _message(exc).lower()
    return "quota" in message or "429" in message


def _parse_duration_ms(raw: Any) -> float | None:
    if isinstance(raw, (int, float)):
        return float(raw) * 1000
    if not isinstance(raw, str):
        return None
    match = _DURATION_RE.match(raw)
    if not match:
        return None
    try:
        return float(match.group(1)) * 1000
    except ValueError:
        return None


def extract_retry_delay_ms(exc: BaseException) -> float | None:
    """Return the server-suggested backoff in milliseconds, if any.

    Looks at a structured ``RetryInfo`` detail first, then at a
    ``retry in Ns`` hint in the error text.
    """
    if isinstance(exc, QuotaExhaustedError) and exc.retry_after_ms is not None:
        return exc.retry_after_ms

    details = _field(_error_body(exc), "details")
    if isinstance(details, list):
        for detail in details:
            kind = str(_field(detail, "@type") or "")
            if "RetryInfo" not in kind:
                continue
            delay = _parse_duration_ms(_field(detail, "retryDelay"))
            if delay is not None:
                return delay

    match = _RETRY_IN_RE.search(_message(exc))
    if match:
        try:
            return float(match.group(1)) * 1000
        except ValueError:
            return None
    return None


def classify_model_error(exc: BaseException) -> ModelCallError:
    """Map a raw provider/transport error onto the model error taxonomy."""
    if isinstance(exc, ModelCallError):
        return exc
    if is_quota_error(exc):
        return QuotaExhaustedError(
            f"Model quota exhausted: {_message(exc)}",
            retry_after_ms=extract_retry_delay_ms(exc),
        )
    text = _message(exc)
    if "api key" in text.lower():
        return ModelCallError(
            "Invalid model API key. Check GEMINI_API_KEY / OPENAI_API_KEY and restart the server.",
            code="llm_disabled",
        )
    return ModelCallError(f"Model request failed: {text or type(exc).__name__}")
