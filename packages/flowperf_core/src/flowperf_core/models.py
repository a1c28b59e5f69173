"""Shared base models used across flowperf_core and flowperf."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from flowperf_core.types import TrackedMetric


class CamelModel(BaseModel):
    """Accepts camelCase input as emitted by the test framework."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MetricValues(CamelModel):
    cpu_time: float = Field(default=0.0, ge=0)
    dml_rows: float = Field(default=0.0, ge=0)
    dml_statements: float = Field(default=0.0, ge=0)
    heap_size: float = Field(default=0.0, ge=0)
    query_rows: float = Field(default=0.0, ge=0)

    def metric(self, metric: TrackedMetric) -> float:
        return getattr(self, metric.value)
