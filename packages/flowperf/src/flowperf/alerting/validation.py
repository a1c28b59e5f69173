"""Alert validator — drops alerts that carry no regression."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from flowperf_core.types import TrackedMetric

if TYPE_CHECKING:
    from flowperf.models import Alert


def has_degradation(alert: Alert) -> bool:
    return any(alert.degraded(metric) > 0 for metric in TrackedMetric)


def valid_alerts(alerts: Iterable[Alert]) -> list[Alert]:
    return [alert for alert in alerts if has_degradation(alert)]
