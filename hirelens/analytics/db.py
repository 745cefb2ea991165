from __future__ import annotations

import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from hirelens.core.config import settings

_SCHEMA = """
CREATE TABLE IF NOT EXISTS model_calls (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT NOT NULL,
    run_id TEXT NOT NULL,
    tool_slug TEXT NOT NULL,
    model TEXT NOT NULL,
    outcome TEXT NOT NULL,
    error_code TEXT,
    attempts INTEGER NOT NULL DEFAULT 1,
    latency_ms INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_model_calls_created_at ON model_calls (created_at);
CREATE INDEX IF NOT EXISTS idx_model_calls_tool ON model_calls (tool_slug, outcome);
"""


def _connect() -> sqlite3.Connection:
    conn = sqlite3.connect(Path(settings.analytics_db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    Path(settings.analytics_db_path).parent.mkdir(parents=True, exist_ok=True)
    with closing(_connect()) as conn, conn:
        conn.executescript(_SCHEMA)
    purge_old_records()


def log_model_call(
    *,
    run_id: str,
    tool_slug: str,
    model: str,
    outcome: str,
    error_code: str | None = None,
    attempts: int = 1,
    latency_ms: int = 0,
) -> None:
    """Record one gateway call; ``outcome`` is ``success`` or ``error``."""
    if not settings.analytics_enabled:
        return
    with closing(_connect()) as conn, conn:
        conn.execute(
            """
            INSERT INTO model_calls (created_at, run_id, tool_slug, model, outcome, error_code, attempts, latency_ms)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                datetime.now(timezone.utc).isoformat(),
                run_id,
                tool_slug,
                model,
                outcome,
                error_code,
                max(1, attempts),
                max(0, latency_ms),
            ),
        )


def purge_old_records() -> int:
    if not settings.analytics_enabled:
        return 0
    retention = max(1, int(settings.analytics_retention_days))
    cutoff = datetime.now(timezone.utc).timestamp() - retention * 86400
    cutoff_iso = datetime.fromtimestamp(cutoff, timezone.utc).isoformat()
    with closing(_connect()) as conn, conn:
        cur = conn.execute("DELETE FROM model_calls WHERE created_at < ?", (cutoff_iso,))
        return int(cur.rowcount or 0)


def get_summary() -> dict[str, Any]:
    if not settings.analytics_enabled:
        return {"enabled": False}
    day_ago = datetime.fromtimestamp(datetime.now(timezone.utc).timestamp() - 86400, timezone.utc).isoformat()
    with closing(_connect()) as conn:
        totals = conn.execute(
            """
            SELECT
                COUNT(*) AS calls,
                SUM(CASE WHEN outcome = 'error' THEN 1 ELSE 0 END) AS failures,
                SUM(CASE WHEN created_at >= ? THEN 1 ELSE 0 END) AS calls_24h,
                SUM(attempts - 1) AS quota_retries
            FROM model_calls
            """,
            (day_ago,),
        ).fetchone()
        tools = conn.execute(
            """
            SELECT
                tool_slug,
                COUNT(*) AS calls,
                SUM(CASE WHEN outcome = 'error' THEN 1 ELSE 0 END) AS failures,
                CAST(AVG(latency_ms) AS INTEGER) AS avg_latency_ms,
                ROUND(AVG(attempts), 2) AS avg_attempts
            FROM model_calls
            GROUP BY tool_slug
            ORDER BY calls DESC
            """
        ).fetchall()
        errors = conn.execute(
            """
            SELECT error_code, COUNT(*) AS count
            FROM model_calls
            WHERE error_code IS NOT NULL
            GROUP BY error_code
            ORDER BY count DESC
            """
        ).fetchall()
    return {
        "enabled": True,
        "calls": totals["calls"] or 0,
        "failures": totals["failures"] or 0,
        "calls24h": totals["calls_24h"] or 0,
        "quotaRetries": totals["quota_retries"] or 0,
        "byTool": [dict(row) for row in tools],
        "byErrorCode": {row["error_code"]: row["count"] for row in errors},
    }


def get_latest(limit: int = 20) -> list[dict[str, Any]]:
    if not settings.analytics_enabled:
        return []
    with closing(_connect()) as conn:
        rows = conn.execute(
            """
            SELECT created_at, run_id, tool_slug, model, outcome, error_code, attempts, latency_ms
            FROM model_calls
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
    return [dict(row) for row in rows]
