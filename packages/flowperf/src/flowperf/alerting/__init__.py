"""Regression detection stages: eligibility → baselines → comparison → validation."""

from .baselines import distinct_keys, fetch_baselines
from .comparison import build_alert, build_alerts, degradation, threshold_for
from .eligibility import is_eligible, select_eligible
from .protocols import BaselineLookup, PersistenceSink
from .validation import has_degradation, valid_alerts

__all__ = [
    "BaselineLookup",
    "PersistenceSink",
    "build_alert",
    "build_alerts",
    "degradation",
    "distinct_keys",
    "fetch_baselines",
    "has_degradation",
    "is_eligible",
    "select_eligible",
    "threshold_for",
    "valid_alerts",
]
