"""
AI run log.

One row per advisor call routed through the fallback decorator: which
operation ran, whether the remote model answered or the heuristic took over,
and how long it took. Kept in its own sqlite file so it can be wiped or
disabled without touching user data.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from careercompass.core.config import settings

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ai_runs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT NOT NULL,
    run_id TEXT NOT NULL,
    operation TEXT NOT NULL,
    path TEXT NOT NULL,
    model TEXT NOT NULL,
    status TEXT NOT NULL,
    error_code TEXT,
    latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_ai_runs_created_at ON ai_runs (created_at);
CREATE INDEX IF NOT EXISTS idx_ai_runs_operation ON ai_runs (operation, path);
"""


def _timestamp(moment: datetime | None = None) -> str:
    return (moment or datetime.now(timezone.utc)).strftime(_TIMESTAMP_FORMAT)


def _get_db_path() -> Path:
    return Path(settings.analytics_db_path)


def _connect() -> sqlite3.Connection:
    conn = sqlite3.connect(_get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    if not settings.analytics_enabled:
        return
    _get_db_path().parent.mkdir(parents=True, exist_ok=True)
    with _connect() as conn:
        conn.executescript(_SCHEMA)


def log_ai_run(
    *,
    run_id: str,
    operation: str,
    path: str,
    model: str,
    status: str,
    error_code: str | None = None,
    latency_ms: int | None = None,
) -> None:
    if not settings.analytics_enabled:
        return
    with _connect() as conn:
        conn.execute(
            """
            INSERT INTO ai_runs (created_at, run_id, operation, path, model, status, error_code, latency_ms)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (_timestamp(), run_id, operation, path, model, status, error_code, latency_ms),
        )


def purge_old_records(now: datetime | None = None) -> dict[str, int]:
    """Delete runs older than the retention window."""
    if not settings.analytics_enabled:
        return {"ai_runs": 0}
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=settings.analytics_retention_days)
    with _connect() as conn:
        cur = conn.execute("DELETE FROM ai_runs WHERE created_at < ?", (_timestamp(cutoff),))
        return {"ai_runs": int(cur.rowcount or 0)}


def get_summary() -> dict[str, Any]:
    """Run counts per operation with the share answered by the heuristic fallback."""
    if not settings.analytics_enabled:
        return {"enabled": False}
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT operation,
                   COUNT(*) AS runs,
                   SUM(CASE WHEN path = 'fallback' THEN 1 ELSE 0 END) AS fallbacks,
                   AVG(latency_ms) AS avg_latency_ms
            FROM ai_runs
            GROUP BY operation
            ORDER BY operation
            """
        ).fetchall()
        codes = conn.execute(
            """
            SELECT error_code, COUNT(*) AS count
            FROM ai_runs
            WHERE error_code IS NOT NULL
            GROUP BY error_code
            ORDER BY count DESC, error_code
            """
        ).fetchall()

    operations = [
        {
            "operation": row["operation"],
            "runs": row["runs"],
            "fallbacks": row["fallbacks"],
            "fallback_rate": round(row["fallbacks"] / row["runs"], 3),
            "avg_latency_ms": None if row["avg_latency_ms"] is None else round(row["avg_latency_ms"]),
        }
        for row in rows
    ]
    return {
        "enabled": True,
        "total": sum(item["runs"] for item in operations),
        "operations": operations,
        "error_codes": {row["error_code"]: row["count"] for row in codes},
    }


def get_latest(limit: int = 20, *, operation: str | None = None) -> list[dict[str, Any]]:
    if not settings.analytics_enabled:
        return []
    query = "SELECT created_at, run_id, operation, path, model, status, error_code, latency_ms FROM ai_runs"
    params: list[Any] = []
    if operation:
        query += " WHERE operation = ?"
        params.append(operation)
    query += " ORDER BY id DESC LIMIT ?"
    params.append(limit)
    with _connect() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(row) for row in rows]
