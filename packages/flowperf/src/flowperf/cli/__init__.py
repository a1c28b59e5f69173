"""flowperf CLI."""

import typer

from flowperf.cli.db import app as db_app
from flowperf.cli.report import ranges, report

app = typer.Typer(
    name="flowperf",
    help="Performance regression alerting for flow/action test results",
    no_args_is_help=True,
)

app.add_typer(db_app, name="db", help="Database operations")
app.command()(report)
app.command()(ranges)


@app.callback()
def main() -> None:
    """flowperf CLI."""
    pass


if __name__ == "__main__":
    app()
