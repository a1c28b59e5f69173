"""Batch entry point: report every result, then alert on regressions and persist.

    results ─┬─► reporters (all results, failures isolated)
             └─► eligible ─► baselines ─► alerts ─► valid alerts ─► save

The alerting/persistence phase only runs when a database is configured.
Any failure in that phase is logged and re-raised; reporting has already
completed by then.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel

from flowperf.alerting import build_alerts, fetch_baselines, select_eligible, valid_alerts
from flowperf.errors import StoreUnavailableError
from flowperf.models import Alert, TestResult, convert_output_to_test_result
from flowperf.reporters import run_reporters

if TYPE_CHECKING:
    from flowperf.alerting import BaselineLookup, PersistenceSink
    from flowperf.models import FlowPerfConfig, OrgContext, TestResultOutput
    from flowperf.reporters import Reporter

logger = logging.getLogger("flowperf.pipeline")

SAVE_FAILED_MESSAGE = (
    "Failed to save results to database. "
    "Check FLOWPERF_DATABASE_URL environment variable, unset to skip saving."
)


class BatchOutcome(BaseModel):
    results: list[TestResult]
    failed_reporters: list[str] = []
    eligible_count: int = 0
    raw_alert_count: int = 0
    alerts: list[Alert] = []
    saved: bool = False


async def report_results(
    outputs: Sequence[TestResultOutput],
    org_context: OrgContext,
    *,
    config: FlowPerfConfig,
    reporters: Sequence[Reporter] = (),
    baselines: BaselineLookup | None = None,
    sink: PersistenceSink | None = None,
) -> BatchOutcome:
    """Run reporters over the batch, then detect regressions and save."""
    results = [convert_output_to_test_result(o) for o in outputs]
    failed = await run_reporters(reporters, results)
    outcome = BatchOutcome(results=results, failed_reporters=failed)

    if not config.database_enabled:
        logger.info("No database configured, skipping alerting and save for %d results", len(results))
        return outcome

    try:
        if baselines is None or sink is None:
            msg = "Database is enabled but no baseline lookup / persistence sink was provided"
            raise StoreUnavailableError(msg)

        eligible = select_eligible(outputs, alerts_enabled=config.store_alerts)
        outcome.eligible_count = len(eligible)

        alerts: list[Alert] = []
        if eligible:
            averages = await fetch_baselines(eligible, baselines)
            raw = build_alerts(eligible, averages, config.range_collection())
            outcome.raw_alert_count = len(raw)
            alerts = valid_alerts(raw)

        await sink.save(results, org_context, alerts)
    except Exception:
        logger.error(SAVE_FAILED_MESSAGE)
        raise

    outcome.alerts = alerts
    outcome.saved = True
    logger.info(
        "Saved %d results with %d alerts (%d eligible, %d scored)",
        len(results),
        len(alerts),
        outcome.eligible_count,
        outcome.raw_alert_count,
    )
    return outcome
