"""Collaborator contracts consumed by the alerting pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from flowperf.models import Alert, AverageLimits, FlowActionKey, OrgContext, TestResult


class BaselineLookup(Protocol):
    async def fetch_averages(
        self, keys: Sequence[FlowActionKey]
    ) -> dict[FlowActionKey, AverageLimits]:
        """Return historical averages with an entry for every requested key."""
        ...


class PersistenceSink(Protocol):
    async def save(
        self,
        results: Sequence[TestResult],
        org_context: OrgContext,
        alerts: Sequence[Alert],
    ) -> None: ...
