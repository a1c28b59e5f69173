"""Baseline fetcher — one batched lookup per pipeline run."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from flowperf.models import FlowActionKey

if TYPE_CHECKING:
    from flowperf.alerting.protocols import BaselineLookup
    from flowperf.models import AverageLimits, TestResultOutput

logger = logging.getLogger("flowperf.alerting.baselines")


def distinct_keys(eligible: Sequence[TestResultOutput]) -> list[FlowActionKey]:
    """Flow/action keys in first-seen order, duplicates collapsed."""
    return list(dict.fromkeys(FlowActionKey.of(r) for r in eligible))


async def fetch_baselines(
    eligible: Sequence[TestResultOutput], lookup: BaselineLookup
) -> dict[FlowActionKey, AverageLimits]:
    """Fetch averages for every eligible key.

    The lookup is never called with zero keys. Lookup errors propagate.
    """
    if not eligible:
        return {}

    keys = distinct_keys(eligible)
    logger.info("Fetching baselines for %d flow/action keys (%d results)", len(keys), len(eligible))
    return await lookup.fetch_averages(keys)
