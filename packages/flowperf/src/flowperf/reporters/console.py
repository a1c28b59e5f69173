"""Rich table reporter."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from flowperf_core.types import TrackedMetric

if TYPE_CHECKING:
    from flowperf.models import TestResult


class ConsoleReporter:
    name = "console"

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    async def report(self, results: Sequence[TestResult]) -> None:
        table = Table(title=f"Performance results ({len(results)})")
        table.add_column("Flow", style="cyan")
        table.add_column("Action")
        for metric in TrackedMetric:
            table.add_column(metric.value.replace("_", " ").title(), justify="right")
        table.add_column("Timer (ms)", justify="right")
        table.add_column("Error", style="red")

        for r in results:
            table.add_row(
                r.flow_name,
                r.action,
                *(f"{r.metric(m):g}" for m in TrackedMetric),
                f"{r.timer:g}" if r.timer is not None else "-",
                r.error or "",
            )

        self._console.print(table)
