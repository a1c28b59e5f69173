"""Tracked resource metrics and their naming conventions."""

from enum import StrEnum


class TrackedMetric(StrEnum):
    CPU_TIME = "cpu_time"
    DML_ROWS = "dml_rows"
    DML_STATEMENTS = "dml_statements"
    HEAP_SIZE = "heap_size"
    QUERY_ROWS = "query_rows"

    @property
    def degraded_field(self) -> str:
        """Name of the alert field carrying this metric's degradation."""
        return f"{self.value}_degraded"

    @property
    def threshold_field(self) -> str:
        """Name of the per-result threshold override for this metric."""
        return f"{self.value}_threshold"
