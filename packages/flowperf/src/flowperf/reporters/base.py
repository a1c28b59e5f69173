"""Reporter contract and the isolated fan-out over configured reporters."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from flowperf.models import TestResult

logger = logging.getLogger("flowperf.reporters")


class Reporter(Protocol):
    name: str

    async def report(self, results: Sequence[TestResult]) -> None: ...


async def run_reporters(reporters: Sequence[Reporter], results: Sequence[TestResult]) -> list[str]:
    """Invoke every reporter once with the full result set.

    A failing reporter is logged and skipped; the rest still run.
    Returns the names of reporters that failed.
    """
    failed: list[str] = []
    for reporter in reporters:
        try:
            await reporter.report(results)
        except Exception as e:
            logger.error("Error running reporter '%s': %s", reporter.name, e)
            failed.append(reporter.name)
    return failed
