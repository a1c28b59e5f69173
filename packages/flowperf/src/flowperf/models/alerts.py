"""Baseline and alert models."""

from __future__ import annotations

from pydantic import Field

from flowperf_core.models import CamelModel
from flowperf_core.types import TrackedMetric


class AverageLimits(CamelModel):
    """Historical mean per tracked metric for one flow/action.

    A metric left as ``None`` has no recorded history.
    """

    cpu_time: float | None = None
    dml_rows: float | None = None
    dml_statements: float | None = None
    heap_size: float | None = None
    query_rows: float | None = None

    def metric(self, metric: TrackedMetric) -> float | None:
        return getattr(self, metric.value)


class Alert(CamelModel):
    flow_name: str
    action_name: str
    cpu_time_degraded: float = Field(default=0.0, ge=0)
    dml_rows_degraded: float = Field(default=0.0, ge=0)
    dml_statements_degraded: float = Field(default=0.0, ge=0)
    heap_size_degraded: float = Field(default=0.0, ge=0)
    query_rows_degraded: float = Field(default=0.0, ge=0)
    created_at: str

    def degraded(self, metric: TrackedMetric) -> float:
        return getattr(self, metric.degraded_field)
