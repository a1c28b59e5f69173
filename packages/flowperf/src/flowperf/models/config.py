"""Configuration models for flowperf.

Range/Tolerance Policy:
- Each tracked metric has a MetricRangePolicy made of ordered RangeBands.
- A band is selected by the *baseline* value (first band whose
  [start_range, end_range] contains it).
- Threshold = baseline * (1 + tolerance_pct / 100) + offset_threshold.
- Baselines outside every band use the policy defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from flowperf.errors import RangeConfigError
from flowperf_core.types import TrackedMetric


class RangeBand(BaseModel):
    start_range: float = Field(ge=0)
    end_range: float = Field(ge=0)
    offset_threshold: float = Field(default=0.0, ge=0)
    tolerance_pct: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> RangeBand:
        if self.start_range > self.end_range:
            msg = f"start_range ({self.start_range}) must not exceed end_range ({self.end_range})"
            raise ValueError(msg)
        return self

    def contains(self, value: float) -> bool:
        return self.start_range <= value <= self.end_range


class MetricRangePolicy(BaseModel):
    bands: list[RangeBand] = Field(default_factory=list)
    default_offset: float = Field(default=0.0, ge=0)
    default_tolerance_pct: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _check_overlap(self) -> MetricRangePolicy:
        ordered = sorted(self.bands, key=lambda b: b.start_range)
        for prev, nxt in zip(ordered, ordered[1:], strict=False):
            # Touching bands are allowed; the earlier band wins at the boundary
            if nxt.start_range < prev.end_range:
                msg = (
                    f"Band [{nxt.start_range}, {nxt.end_range}] overlaps "
                    f"[{prev.start_range}, {prev.end_range}]"
                )
                raise ValueError(msg)
        return self

    def band_for(self, baseline: float) -> RangeBand | None:
        for band in self.bands:
            if band.contains(baseline):
                return band
        return None


class RangeCollection(BaseModel):
    """Tolerance policy for every tracked metric."""

    cpu_time: MetricRangePolicy = Field(default_factory=MetricRangePolicy)
    dml_rows: MetricRangePolicy = Field(default_factory=MetricRangePolicy)
    dml_statements: MetricRangePolicy = Field(default_factory=MetricRangePolicy)
    heap_size: MetricRangePolicy = Field(default_factory=MetricRangePolicy)
    query_rows: MetricRangePolicy = Field(default_factory=MetricRangePolicy)

    def policy(self, metric: TrackedMetric) -> MetricRangePolicy:
        return getattr(self, metric.value)

    @classmethod
    def from_file(cls, path: Path) -> RangeCollection:
        """Load a range collection from a YAML or JSON file."""
        if not path.exists():
            msg = f"Range file not found: {path}"
            raise RangeConfigError(msg)

        text = path.read_text()
        try:
            data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            msg = f"Could not parse range file {path}: {exc}"
            raise RangeConfigError(msg) from exc

        try:
            return cls.model_validate(data or {})
        except ValidationError as exc:
            msg = f"Invalid range file {path}: {exc}"
            raise RangeConfigError(msg) from exc


class FlowPerfConfig(BaseSettings):
    """Main configuration for flowperf."""

    # Persistence
    database_url: str | None = Field(
        default=None,
        description="PostgreSQL DSN; unset to skip alerting and saving",
    )
    baseline_window_days: int = Field(
        default=10, ge=1, description="Days of stored results averaged into a baseline"
    )

    # Alerting
    store_alerts: bool = Field(default=True, description="Global alerting toggle")
    ranges_file: Path | None = Field(
        default=None, description="YAML/JSON file with the range/tolerance policy"
    )
    ranges: RangeCollection = Field(default_factory=RangeCollection)

    # Reporting
    reporters: list[str] = Field(
        default=["console"], description="Reporter names, in invocation order"
    )
    report_dir: Path = Field(default=Path("reports"), description="Output dir for json reporter")
    webhook_url: str | None = Field(default=None, description="Endpoint for webhook reporter")
    webhook_timeout_sec: float = Field(default=30.0, gt=0)

    model_config = {"env_prefix": "FLOWPERF_"}

    @property
    def database_enabled(self) -> bool:
        return bool(self.database_url)

    def range_collection(self) -> RangeCollection:
        """The effective range policy: the ranges file when set, else the nested defaults."""
        if self.ranges_file is not None:
            return RangeCollection.from_file(self.ranges_file)
        return self.ranges
