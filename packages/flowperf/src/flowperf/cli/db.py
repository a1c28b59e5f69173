"""Database CLI commands for flowperf."""

import asyncio
from typing import Annotated

import asyncpg
import typer
from rich.console import Console
from rich.panel import Panel

from flowperf.storage import SCHEMA_PATH

app = typer.Typer(no_args_is_help=True)
console = Console()

DatabaseUrl = Annotated[
    str,
    typer.Option("--database-url", "-d", envvar="FLOWPERF_DATABASE_URL", help="PostgreSQL DSN"),
]


async def execute_schema(database_url: str, schema_sql: str) -> None:
    conn = await asyncpg.connect(dsn=database_url)
    try:
        await conn.execute(schema_sql)
    finally:
        await conn.close()


async def fetch_server_version(database_url: str) -> str:
    conn = await asyncpg.connect(dsn=database_url)
    try:
        return await conn.fetchval("SELECT version()")
    finally:
        await conn.close()


@app.command()
def setup_schema(database_url: DatabaseUrl) -> None:
    """Create the test_results and alerts tables."""
    console.print(Panel.fit("Setting up flowperf schema", style="bold blue"))

    if not SCHEMA_PATH.exists():
        console.print(f"[red]Error:[/red] Schema file not found: {SCHEMA_PATH}")
        raise typer.Exit(1)

    with console.status("[bold green]Applying schema..."):
        try:
            asyncio.run(execute_schema(database_url, SCHEMA_PATH.read_text()))
        except Exception as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

    console.print("[green]✓[/green] Schema setup complete!")


@app.command()
def check_connection(database_url: DatabaseUrl) -> None:
    """Verify the database is reachable."""
    with console.status("[bold green]Connecting..."):
        try:
            version = asyncio.run(fetch_server_version(database_url))
        except Exception as e:
            console.print(f"[red]Connection failed:[/red] {e}")
            raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] Connected: [dim]{version}[/dim]")
