"""Eligibility filter — which results may raise alerts."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowperf.models import TestResultOutput


def is_eligible(result: TestResultOutput, *, alerts_enabled: bool) -> bool:
    """Only an explicit ``store_alerts=False`` opts a result out."""
    if not alerts_enabled:
        return False
    return result.alert_info is None or result.alert_info.store_alerts


def select_eligible(
    results: Iterable[TestResultOutput], *, alerts_enabled: bool
) -> list[TestResultOutput]:
    return [r for r in results if is_eligible(r, alerts_enabled=alerts_enabled)]
