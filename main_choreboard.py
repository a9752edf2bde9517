"""Mini README: Entry point CLI for the ChoreBoard household service.

This script exposes a Typer CLI that starts the FastAPI application, exports
the stored household ledger to ``choreboard-data.json`` and clears persisted
state. Settings come from ``CHOREBOARD_`` environment variables or ``.env``
when options are not given.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from choreboard.configuration import get_settings
from choreboard.export import LedgerExporter
from choreboard.household import HouseholdLedger, SessionHolder
from choreboard.logging_utils import configure_root_logger
from choreboard.storage import STORAGE_BACKENDS, KeyValueStore

cli = typer.Typer(help="Run and manage the ChoreBoard household service.")


def _open_store() -> KeyValueStore:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    return STORAGE_BACKENDS.create(settings.storage_backend, directory=settings.data_directory)


@cli.command()
def run(
    host: Optional[str] = typer.Option(None, help="Host interface to bind."),
    port: Optional[int] = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot navigate to the 0.0.0.0 / :: bind-all sentinels.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting ChoreBoard on {effective_host}:{effective_port}.\n"
        f"API available at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "choreboard.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def export(
    destination: Path = typer.Argument(Path("."), help="File or directory to write the export to."),
) -> None:
    """Write the stored household ledger to choreboard-data.json."""

    written = LedgerExporter(_open_store()).export(destination)
    if written is None:
        typer.echo("No household data stored yet; sign in once to create it.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Exported household data to {written}")


@cli.command()
def reset(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """Clear the household ledger, settings and session."""

    if not yes:
        typer.confirm("This permanently deletes all ChoreBoard data. Continue?", abort=True)
    store = _open_store()
    ledger = HouseholdLedger(store)
    SessionHolder(store, ledger).logout()
    ledger.clear()
    typer.echo("ChoreBoard data cleared.")


if __name__ == "__main__":
    cli()
