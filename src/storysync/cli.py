"""CLI interface for storysync."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from rich.console import Console
from rich.table import Table

from storysync import __version__
from storysync.config import Config
from storysync.sync.synchronizer import BatchSynchronizer, derive_summary
from storysync.validation import ValidationError, validate_sync_request

app = typer.Typer(
    name="storysync",
    help="Replicate requirements-dashboard work items into an issue tracker.",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Request lines from httpx would duplicate our own logging
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_batch(batch_file: Path) -> Any:
    """Read a batch file in JSON or YAML form."""
    text = batch_file.read_text(encoding="utf-8")
    if batch_file.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


@app.command()
def version() -> None:
    """Show the storysync version."""
    console.print(f"storysync {__version__}")


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Interface to bind (default from config: 127.0.0.1)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to listen on (default from config: 4000)"),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: .storysync/config.yaml)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Run the synchronization proxy over HTTP.

    Examples:
        storysync serve
        storysync serve --port 8080 --config deploy/storysync.yaml
    """
    import uvicorn

    from storysync.api.app import create_app

    _configure_logging(verbose)
    config = Config.load(config_path)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    console.print(f"[bold cyan]storysync {__version__}[/bold cyan] proxy on http://{bind_host}:{bind_port}")
    console.print(f"[dim]POST http://{bind_host}:{bind_port}/api/sync[/dim]")
    if config.tracker.dry_run:
        console.print("[yellow]Dry run: no issues will be created[/yellow]")

    uvicorn.run(
        create_app(config),
        host=bind_host,
        port=bind_port,
        log_level="debug" if verbose else config.server.log_level,
    )


@app.command()
def push(
    batch_file: Annotated[
        Path,
        typer.Argument(help="JSON or YAML file with the sync request body", exists=True, dir_okay=False),
    ],
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: .storysync/config.yaml)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be created without calling the tracker"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Synchronize a batch file into the tracker.

    The file holds the same body as POST /api/sync:
    trackerBaseUrl, username, apiToken, projectKey, items, iterationId.
    """
    _configure_logging(verbose)
    config = Config.load(config_path)
    if dry_run:
        config.tracker.dry_run = True

    try:
        payload = _load_batch(batch_file)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/red] Could not parse {batch_file}: {e}")
        raise typer.Exit(1) from e

    try:
        request = validate_sync_request(payload)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("#", style="cyan", width=4)
    table.add_column("Summary")
    table.add_column("Status", width=12)
    for position, item in enumerate(request.items, start=1):
        summary = derive_summary(item, config.tracker.summary_max_length, config.tracker.fallback_summary)
        table.add_row(str(position), summary, item.status or "-")

    target = f"{request.project_key} @ {request.tracker_base_url}"
    if request.iteration_id:
        target += f" (iteration {request.iteration_id})"
    console.print(f"[bold]Syncing {len(request.items)} item(s) to {target}[/bold]")
    console.print(table)

    result = asyncio.run(BatchSynchronizer(config.tracker).synchronize(request))

    if result.success:
        prefix = "[DRY RUN] " if config.tracker.dry_run else ""
        console.print(f"\n[green]{prefix}Sync complete[/green]")
    else:
        console.print(f"\n[red]Sync failed:[/red] {result.error_message}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
