"""
Command Line Interface for Velero-UI.

Runs the interactive backup/restore wizard and manages its configuration.

Built with Typer for automatic tab completion.
"""

import io
from pathlib import Path
from typing import Optional, Annotated

import typer
from pydantic import ValidationError
from rich.table import Table
from rich.markup import escape

from . import __version__, ui
from .core.config import Settings, default_config_path, get_settings
from .core.logging import setup_logging, get_logger
from .models import Outcome
from .state_machine import OperationWizard
from .ui import console
from .wizards import run_operation_wizard

# Create the main app
app = typer.Typer(
    name="velero-ui",
    help="Velero-UI - Interactive Velero backup and restore wizard",
    add_completion=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"velero-ui version {__version__}")
        raise typer.Exit()


def _load_settings(config: Optional[str]) -> Settings:
    """Load settings from the given file, the default file, or defaults."""
    if not config:
        # CLI overrides must not leak into the cached instance
        return get_settings().model_copy(deep=True)

    config_file = Path(config)
    if config_file.exists():
        return Settings.load_from_yaml(config_file)
    ui.warning(f"No config file at {config}, using defaults")
    return Settings()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[bool, typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit.")] = False,
):
    """
    Velero-UI - Interactive Velero backup and restore wizard

    Without a command, starts the wizard with default options.
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@app.command()
def run(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Path to configuration file")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug logging (printed on exit)")] = False,
    no_resources: Annotated[bool, typer.Option("--no-resources", help="Skip the specific-resources steps")] = False,
    poll_interval: Annotated[Optional[float], typer.Option("--poll-interval", help="Seconds between status checks")] = None,
    poll_timeout: Annotated[Optional[float], typer.Option("--poll-timeout", help="Stop waiting after this many seconds")] = None,
):
    """Start the interactive backup/restore wizard."""
    settings = _load_settings(config)

    # Apply CLI overrides
    if debug:
        settings.log.debug = True
    if no_resources:
        settings.wizard.resource_selection = False
    for option, field_name, value in (
        ("--poll-interval", "poll_interval", poll_interval),
        ("--poll-timeout", "poll_timeout", poll_timeout),
    ):
        if value is None:
            continue
        try:
            setattr(settings.wizard, field_name, value)
        except ValidationError as e:
            raise typer.BadParameter(e.errors()[0]["msg"], param_hint=option) from e

    debug_log = io.StringIO() if settings.log.debug else None
    setup_logging(
        level=settings.log.effective_level,
        format=settings.log.format,
        log_file=settings.log.file,
        buffer=debug_log,
    )
    logger = get_logger("velero_ui")

    wizard = OperationWizard.from_settings(settings, logger=logger)
    outcome = run_operation_wizard(wizard)

    if debug_log is not None:
        console.print("\n[bold]Debug log:[/bold]")
        console.print(debug_log.getvalue(), markup=False, highlight=False)

    if outcome is Outcome.FAILED:
        raise typer.Exit(1)


@app.command("init-config")
def init_config(
    output: Annotated[Optional[str], typer.Option("--output", "-o", help="Output path for configuration file")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing file")] = False,
):
    """Write a configuration file with the default commands and settings."""
    output_path = Path(output) if output else default_config_path()

    if output_path.exists() and not force:
        if not typer.confirm(f"Configuration file {output_path} already exists. Overwrite?"):
            raise typer.Abort()

    Settings().save_to_yaml(output_path)
    ui.success(f"Configuration file created: {output_path}")


@app.command("show-config")
def show_config(
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="Path to configuration file")] = None,
):
    """Show the effective configuration."""
    settings = _load_settings(config)

    for section, values in (
        ("Commands", settings.commands.model_dump()),
        ("Wizard", settings.wizard.model_dump()),
        ("Logging", settings.log.model_dump()),
    ):
        table = Table(title=section, show_header=False, title_justify="left")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key, value in values.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            table.add_row(key, escape(str(value)))
        console.print(table)
        console.print()


if __name__ == "__main__":
    app()
