"""Commands for reporting a results file and inspecting the range policy."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path  # noqa: TC003 — Typer evaluates type hints at runtime
from typing import Annotated

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from flowperf.errors import FlowPerfError
from flowperf.models import FlowPerfConfig, OrgContext, TestResultOutput
from flowperf.pipeline import BatchOutcome, report_results
from flowperf.reporters import build_reporters
from flowperf.storage import ResultStore, create_pool
from flowperf_core.types import TrackedMetric

logger = logging.getLogger("flowperf.cli.report")

console = Console()

_OUTPUTS = TypeAdapter(list[TestResultOutput])


def _load_outputs(path: Path) -> list[TestResultOutput]:
    if not path.exists():
        console.print(f"[red]Results file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return _OUTPUTS.validate_python(json.loads(path.read_text()))
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Invalid results file {path}:[/red] {e}")
        raise typer.Exit(1) from None


async def _run(
    outputs: list[TestResultOutput], org_context: OrgContext, config: FlowPerfConfig
) -> BatchOutcome:
    reporters = build_reporters(config)
    if not config.database_url:
        return await report_results(outputs, org_context, config=config, reporters=reporters)

    try:
        pool = await create_pool(config.database_url)
    except Exception:
        logger.exception("Failed to create PostgreSQL pool")
        # Reporters still run; the pipeline then fails with StoreUnavailableError
        return await report_results(outputs, org_context, config=config, reporters=reporters)

    try:
        store = ResultStore(pool=pool, window_days=config.baseline_window_days)
        return await report_results(
            outputs,
            org_context,
            config=config,
            reporters=reporters,
            baselines=store,
            sink=store,
        )
    finally:
        await pool.close()


def report(
    results_file: Annotated[Path, typer.Argument(help="JSON file with a list of test outputs")],
    org_id: Annotated[str, typer.Option("--org-id", help="Org the tests ran against")],
    release_version: Annotated[
        str | None, typer.Option("--release-version", help="Release under test")
    ] = None,
    sandbox: Annotated[bool, typer.Option("--sandbox", help="Org is a sandbox")] = False,
    log_level: Annotated[str, typer.Option("--log-level", help="Logging level")] = "INFO",
) -> None:
    """Report a results file and store regression alerts."""
    logging.basicConfig(
        level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    outputs = _load_outputs(results_file)
    org_context = OrgContext(org_id=org_id, release_version=release_version, is_sandbox=sandbox)

    try:
        config = FlowPerfConfig()
        outcome = asyncio.run(_run(outputs, org_context, config))
    except FlowPerfError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Failed to save results:[/red] {e}")
        raise typer.Exit(1) from None

    for name in outcome.failed_reporters:
        console.print(f"[yellow]Reporter '{name}' failed[/yellow]")

    if not outcome.saved:
        console.print(f"[dim]Reported {len(outcome.results)} results (database not configured)[/dim]")
        return

    console.print(
        f"[green]✓[/green] Saved {len(outcome.results)} results, "
        f"{len(outcome.alerts)} regression alert(s)"
    )
    for alert in outcome.alerts:
        degraded = ", ".join(
            f"{m.value}=+{alert.degraded(m):g}" for m in TrackedMetric if alert.degraded(m) > 0
        )
        console.print(f"  [red]▲[/red] {alert.flow_name} / {alert.action_name}: {degraded}")


def ranges(
    ranges_file: Annotated[
        Path | None, typer.Option("--file", "-f", help="Range file (defaults to configured)")
    ] = None,
) -> None:
    """Show the effective range/tolerance policy per metric."""
    try:
        config = FlowPerfConfig()
        if ranges_file is not None:
            config.ranges_file = ranges_file
        collection = config.range_collection()
    except FlowPerfError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    table = Table(title="Range policy")
    table.add_column("Metric", style="cyan")
    table.add_column("Baseline range")
    table.add_column("Tolerance %", justify="right")
    table.add_column("Offset", justify="right")

    for metric in TrackedMetric:
        policy = collection.policy(metric)
        for band in policy.bands:
            table.add_row(
                metric.value,
                f"{band.start_range:g} – {band.end_range:g}",
                f"{band.tolerance_pct:g}",
                f"{band.offset_threshold:g}",
            )
        table.add_row(
            metric.value,
            "[dim]default[/dim]",
            f"{policy.default_tolerance_pct:g}",
            f"{policy.default_offset:g}",
        )

    console.print(table)
