"""Degradation comparator — scores eligible results against their baselines.

Every tracked metric is scored independently:

    threshold = baseline * (1 + tolerance_pct / 100) + offset
    degraded  = max(0, observed - threshold)

The band (tolerance_pct, offset) is picked by the baseline value from the
metric's MetricRangePolicy. A per-result AlertThresholds entry replaces the
offset only. A metric with no history (baseline ``None``) never degrades.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from flowperf.errors import MissingBaselineError
from flowperf.models import Alert, FlowActionKey
from flowperf.models.results import now_iso
from flowperf_core.types import TrackedMetric

if TYPE_CHECKING:
    from flowperf.models import (
        AverageLimits,
        MetricRangePolicy,
        RangeCollection,
        TestResultOutput,
    )


def threshold_for(
    baseline: float,
    policy: MetricRangePolicy,
    offset_override: float | None = None,
) -> float:
    """Tolerance-adjusted baseline above which a value counts as degraded."""
    band = policy.band_for(baseline)
    if band is not None:
        tolerance_pct, offset = band.tolerance_pct, band.offset_threshold
    else:
        tolerance_pct, offset = policy.default_tolerance_pct, policy.default_offset

    if offset_override is not None:
        offset = offset_override

    return baseline * (1 + tolerance_pct / 100) + offset


def degradation(
    observed: float,
    baseline: float | None,
    policy: MetricRangePolicy,
    offset_override: float | None = None,
) -> float:
    """How far ``observed`` exceeds the adjusted baseline, floored at zero."""
    if baseline is None:
        return 0.0
    return max(0.0, observed - threshold_for(baseline, policy, offset_override))


def build_alert(
    result: TestResultOutput,
    baselines: Mapping[FlowActionKey, AverageLimits],
    ranges: RangeCollection,
) -> Alert:
    """Score one result. Raises MissingBaselineError if its key was not fetched."""
    key = FlowActionKey.of(result)
    averages = baselines.get(key)
    if averages is None:
        raise MissingBaselineError(key.flow_name, key.action_name)

    thresholds = result.alert_info.thresholds if result.alert_info else None

    degraded: dict[str, float] = {}
    for metric in TrackedMetric:
        override = thresholds.for_metric(metric) if thresholds else None
        degraded[metric.degraded_field] = degradation(
            result.metric(metric),
            averages.metric(metric),
            ranges.policy(metric),
            override,
        )

    return Alert(
        flow_name=key.flow_name,
        action_name=key.action_name,
        created_at=now_iso(),
        **degraded,
    )


def build_alerts(
    eligible: Sequence[TestResultOutput],
    baselines: Mapping[FlowActionKey, AverageLimits],
    ranges: RangeCollection,
) -> list[Alert]:
    """One alert per eligible result, in input order."""
    return [build_alert(result, baselines, ranges) for result in eligible]
