"""Pydantic models for flowperf.

Data Flow:
- TestResultOutput (raw, per test) → TestResult (canonical, for reporters/storage)
- Eligible TestResultOutput + AverageLimits + RangeCollection → Alert
- Alerts with no positive degradation are discarded before persistence
"""

from .alerts import Alert, AverageLimits
from .config import FlowPerfConfig, MetricRangePolicy, RangeBand, RangeCollection
from .results import (
    AlertInfo,
    AlertThresholds,
    FlowActionKey,
    OrgContext,
    TestResult,
    TestResultOutput,
    convert_output_to_test_result,
)

__all__ = [
    "Alert",
    "AlertInfo",
    "AlertThresholds",
    "AverageLimits",
    "FlowActionKey",
    "FlowPerfConfig",
    "MetricRangePolicy",
    "OrgContext",
    "RangeBand",
    "RangeCollection",
    "TestResult",
    "TestResultOutput",
    "convert_output_to_test_result",
]
