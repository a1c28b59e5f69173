"""Test result models — raw framework output, canonical results, org context."""

from __future__ import annotations

from pydantic import ConfigDict, Field
from whenever import Instant

from flowperf_core.models import CamelModel, MetricValues
from flowperf_core.types import TrackedMetric


def now_iso() -> str:
    """Return current UTC time as ISO 8601 string."""
    return Instant.now().format_iso()


class AlertThresholds(CamelModel):
    """Per-result absolute offsets that replace the configured range offset."""

    cpu_time_threshold: float | None = Field(default=None, ge=0)
    dml_rows_threshold: float | None = Field(default=None, ge=0)
    dml_statements_threshold: float | None = Field(default=None, ge=0)
    heap_size_threshold: float | None = Field(default=None, ge=0)
    query_rows_threshold: float | None = Field(default=None, ge=0)

    def for_metric(self, metric: TrackedMetric) -> float | None:
        return getattr(self, metric.threshold_field)


class AlertInfo(CamelModel):
    store_alerts: bool = True
    thresholds: AlertThresholds | None = None


class TestResultOutput(MetricValues):
    """One executed test's output as produced by the test framework."""

    __test__ = False

    flow_name: str
    action: str
    timer: float | None = Field(default=None, ge=0)
    error: str | None = None
    alert_info: AlertInfo | None = None


class TestResult(MetricValues):
    """Canonical result handed to reporters and the persistence sink."""

    __test__ = False

    flow_name: str
    action: str
    timer: float | None = None
    error: str | None = None
    created_at: str


class FlowActionKey(CamelModel):
    model_config = ConfigDict(frozen=True)

    flow_name: str
    action_name: str

    @classmethod
    def of(cls, result: TestResultOutput) -> FlowActionKey:
        return cls(flow_name=result.flow_name, action_name=result.action)


class OrgContext(CamelModel):
    org_id: str
    release_version: str | None = None
    is_sandbox: bool = False
    org_type: str | None = None


def convert_output_to_test_result(output: TestResultOutput) -> TestResult:
    return TestResult(
        flow_name=output.flow_name,
        action=output.action,
        timer=output.timer,
        error=output.error,
        created_at=now_iso(),
        **{m.value: output.metric(m) for m in TrackedMetric},
    )
