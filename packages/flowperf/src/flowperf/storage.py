"""PostgreSQL result store — baseline lookup and persistence sink over asyncpg.

Baselines are the mean of each metric over stored, error-free results for the
flow/action within the last ``window_days``. Keys with no stored history map
to an empty AverageLimits, so every requested key gets an entry.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import asyncpg
from whenever import Instant, TimeDelta

from flowperf.models import AverageLimits, FlowActionKey
from flowperf_core.types import TrackedMetric

if TYPE_CHECKING:
    from flowperf.models import Alert, OrgContext, TestResult

logger = logging.getLogger("flowperf.storage")

SCHEMA_PATH = Path(__file__).parent / "db" / "schema.sql"

_METRIC_COLUMNS = [m.value for m in TrackedMetric]


def _iso_to_datetime(iso_str: str) -> datetime:
    """Convert ISO 8601 string to Python datetime for asyncpg."""
    return Instant.parse_iso(iso_str).py_datetime()


def _averages_query() -> str:
    averages = ",\n                   ".join(f"AVG({c}) AS {c}" for c in _METRIC_COLUMNS)
    return f"""
            SELECT r.flow_name, r.action,
                   {averages}
            FROM test_results r
            JOIN unnest($1::text[], $2::text[]) AS k(flow_name, action)
              ON r.flow_name = k.flow_name AND r.action = k.action
            WHERE r.created_at >= $3
              AND r.error IS NULL
            GROUP BY r.flow_name, r.action
        """


async def create_pool(database_url: str) -> asyncpg.Pool:
    logger.info("Creating PostgreSQL pool")
    return await asyncpg.create_pool(dsn=database_url, min_size=1, max_size=5)


class ResultStore:
    """Reads baselines from and writes results/alerts to PostgreSQL."""

    def __init__(self, *, pool: asyncpg.Pool, window_days: int = 10) -> None:
        self._pool = pool
        self._window = TimeDelta(hours=24 * window_days)

    async def fetch_averages(
        self, keys: Sequence[FlowActionKey]
    ) -> dict[FlowActionKey, AverageLimits]:
        since = (Instant.now() - self._window).py_datetime()
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                _averages_query(),
                [k.flow_name for k in keys],
                [k.action_name for k in keys],
                since,
            )

        averages = {k: AverageLimits() for k in keys}
        for row in rows:
            key = FlowActionKey(flow_name=row["flow_name"], action_name=row["action"])
            averages[key] = AverageLimits(**{c: row[c] for c in _METRIC_COLUMNS})

        missing = sum(1 for a in averages.values() if a == AverageLimits())
        if missing:
            logger.info("%d of %d flow/action keys have no stored history", missing, len(keys))
        return averages

    async def save(
        self,
        results: Sequence[TestResult],
        org_context: OrgContext,
        alerts: Sequence[Alert],
    ) -> None:
        """Insert results and alerts in a single transaction."""
        result_rows = [
            (
                uuid4(),
                r.flow_name,
                r.action,
                *(r.metric(m) for m in TrackedMetric),
                r.timer,
                r.error,
                org_context.org_id,
                org_context.release_version,
                org_context.is_sandbox,
                org_context.org_type,
                _iso_to_datetime(r.created_at),
            )
            for r in results
        ]
        alert_rows = [
            (
                uuid4(),
                a.flow_name,
                a.action_name,
                *(a.degraded(m) for m in TrackedMetric),
                org_context.org_id,
                _iso_to_datetime(a.created_at),
            )
            for a in alerts
        ]

        async with self._pool.acquire() as conn, conn.transaction():
            if result_rows:
                await conn.executemany(
                    """
                    INSERT INTO test_results
                        (id, flow_name, action, cpu_time, dml_rows, dml_statements,
                         heap_size, query_rows, timer, error, org_id, release_version,
                         is_sandbox, org_type, created_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15)
                    """,
                    result_rows,
                )
            if alert_rows:
                await conn.executemany(
                    """
                    INSERT INTO alerts
                        (id, flow_name, action, cpu_time_degraded, dml_rows_degraded,
                         dml_statements_degraded, heap_size_degraded, query_rows_degraded,
                         org_id, created_at)
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                    """,
                    alert_rows,
                )

        logger.info("Stored %d results and %d alerts", len(result_rows), len(alert_rows))
