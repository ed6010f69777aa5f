"""Command-line interface for the Todoist sync client."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from todoist_sync import __version__
from todoist_sync.client import TodoistClient
from todoist_sync.config import Config
from todoist_sync.context import Context
from todoist_sync.errors import (
    APIError,
    CancellationError,
    ConfigurationError,
    TodoistError,
    TransportError,
)
from todoist_sync.models import ReadResponse
from todoist_sync.resources import AddProject, AddSection
from todoist_sync.utils import setup_logging
from todoist_sync.utils.confirmation import ConfirmationDeclined, create_confirming_transport

app = typer.Typer(help="Read and modify Todoist projects through the sync API")
console = Console()
logger = logging.getLogger(__name__)

SYNC_RESOURCES = ["projects", "sections"]

ConfigDirOption = typer.Option(
    None,
    "--config-dir",
    help="Configuration directory. Defaults to ~/.todoist-sync/",
)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging.")
ConfirmOption = typer.Option(
    False,
    "--confirm",
    help="Print each API call and prompt for confirmation before sending.",
)
TimeoutOption = typer.Option(60.0, "--timeout", help="Overall time budget in seconds.")


def _build_client(config: Config, verbose: bool, confirm: bool) -> TodoistClient:
    """Create a client from stored settings and token."""
    client_config = config.client_config(
        debug=True if verbose else None,
        transport=create_confirming_transport() if confirm else None,
    )
    return TodoistClient(config.get_token(), config=client_config)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn client errors into messages and exit codes."""
    try:
        yield
    except ConfigurationError:
        console.print("[yellow]Todoist API token not found. Please configure it first.[/yellow]")
        console.print("Run: todoist-sync configure")
        raise typer.Exit(code=1)
    except APIError as e:
        logger.error(f"API error: {e}")
        console.print(f"[red]API error {e.error_tag}: {e.message or 'no details'}[/red]")
        raise typer.Exit(code=1)
    except CancellationError as e:
        console.print(f"[yellow]Cancelled: {e}[/yellow]")
        raise typer.Exit(code=0)
    except TransportError as e:
        if isinstance(e.cause, ConfirmationDeclined):
            console.print("[yellow]Cancelled by user[/yellow]")
            raise typer.Exit(code=0)
        logger.error(f"API request failed: {e}", exc_info=True)
        console.print(f"[red]Error: API request failed: {e}[/red]")
        raise typer.Exit(code=1)
    except TodoistError as e:
        logger.error(f"Request failed: {e}", exc_info=True)
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def configure(
    config_dir: Optional[Path] = ConfigDirOption,
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override the sync API URL."),
) -> None:
    """Store the Todoist API token and optional settings."""
    setup_logging(config_dir=config_dir)
    config = Config(config_dir)

    console.print("[bold cyan]Todoist Sync Configuration[/bold cyan]")
    token = Prompt.ask("Enter your Todoist API token", password=True)
    config.storage.set_token(token)
    console.print("[green]✓ API token saved[/green]")

    if base_url:
        config.update_setting("base_url", base_url)
        console.print(f"[green]✓ Base URL set to {base_url}[/green]")

    console.print("[cyan]Testing connection...[/cyan]")
    with _handle_errors(), _build_client(config, verbose=False, confirm=False) as client:
        with Context.with_timeout(30) as ctx:
            projects, _ = client.projects.list(ctx, "*")
        console.print(f"[green]✓ Connected to Todoist (found {len(projects)} projects)[/green]")


@app.command()
def sync(
    full: bool = typer.Option(False, "--full", help="Ignore the stored sync token and fetch everything."),
    timeout: float = TimeoutOption,
    verbose: bool = VerboseOption,
    confirm: bool = ConfirmOption,
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """Fetch projects and sections changed since the last sync."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    logger.info(f"Todoist Sync v{__version__}")

    config = Config(config_dir)
    sync_token = "*" if full else (config.get_sync_token(SYNC_RESOURCES) or "*")

    with _handle_errors(), _build_client(config, verbose, confirm) as client:
        with Context.with_timeout(timeout) as ctx:
            response = client.sync(ctx, sync_token, SYNC_RESOURCES, model=ReadResponse)

        read = response.data or ReadResponse()

        table = Table(title="Sync Results")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="magenta")
        table.add_row("Full sync", "yes" if read.full_sync else "no")
        table.add_row("Projects", str(len(read.projects)))
        table.add_row("Sections", str(len(read.sections)))
        console.print(table)

        if read.sync_token:
            config.set_sync_token(SYNC_RESOURCES, read.sync_token)
            logger.info(f"Stored sync token for {','.join(SYNC_RESOURCES)}")


@app.command()
def projects(
    archived: bool = typer.Option(False, "--archived", help="List archived projects instead."),
    timeout: float = TimeoutOption,
    verbose: bool = VerboseOption,
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """List projects."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    config = Config(config_dir)

    with _handle_errors(), _build_client(config, verbose, confirm=False) as client:
        with Context.with_timeout(timeout) as ctx:
            if archived:
                items = client.projects.get_archived(ctx, "*")
            else:
                items, _ = client.projects.list(ctx, "*")

        if not items:
            console.print("[yellow]No projects found.[/yellow]")
            return

        table = Table(title="Archived Projects" if archived else "Projects")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Parent", style="yellow")
        for project in items:
            table.add_row(str(project.id), project.name, str(project.parent_id or "-"))
        console.print(table)


@app.command("add-project")
def add_project(
    name: str = typer.Argument(..., help="Project name."),
    parent_id: Optional[str] = typer.Option(None, "--parent-id", help="Parent project ID."),
    timeout: float = TimeoutOption,
    verbose: bool = VerboseOption,
    confirm: bool = ConfirmOption,
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """Create a project."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    config = Config(config_dir)

    fields = {"name": name}
    if parent_id:
        fields["parent_id"] = parent_id
    args = AddProject(**fields)

    with _handle_errors(), _build_client(config, verbose, confirm) as client:
        with Context.with_timeout(timeout) as ctx:
            _, response = client.projects.add(ctx, "", args)
        _report_commands(response.failed(), response.temp_id_mapping)


@app.command("add-section")
def add_section(
    name: str = typer.Argument(..., help="Section name."),
    project_id: str = typer.Option(..., "--project-id", help="Project the section belongs to."),
    timeout: float = TimeoutOption,
    verbose: bool = VerboseOption,
    confirm: bool = ConfirmOption,
    config_dir: Optional[Path] = ConfigDirOption,
) -> None:
    """Create a section in a project."""
    setup_logging(
        log_level=logging.DEBUG if verbose else logging.INFO,
        config_dir=config_dir,
    )
    config = Config(config_dir)

    with _handle_errors(), _build_client(config, verbose, confirm) as client:
        with Context.with_timeout(timeout) as ctx:
            _, response = client.sections.add(ctx, "", AddSection(name=name, project_id=project_id))
        _report_commands(response.failed(), response.temp_id_mapping)


def _report_commands(failed: dict, temp_id_mapping: dict) -> None:
    """Print command errors or the ids assigned by the server."""
    if failed:
        for command_uuid, error in failed.items():
            console.print(f"[red]✗ Command {command_uuid} failed: {error.error_tag} {error.error or ''}[/red]")
        raise typer.Exit(code=1)

    for temp_id, real_id in temp_id_mapping.items():
        console.print(f"[green]✓ Created {real_id}[/green] (temp id {temp_id})")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Todoist Sync v{__version__}")


def main() -> None:
    """Main entry point."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        console.print(f"[red]Unexpected error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
