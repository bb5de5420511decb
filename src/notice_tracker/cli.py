"""Command-line interface for notice_tracker.

Provides the main entry point and subcommands for generating third party
notices, acquiring a single package artifact and previewing generated
license texts.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from notice_tracker.acquisition import ArtifactAcquirer
from notice_tracker.config import NoticeTrackerSettings, get_settings
from notice_tracker.exceptions import AcquisitionError, LicenseError, NoticeRenderError
from notice_tracker.licensing import LicenseTextGenerator
from notice_tracker.models import AcquisitionMode
from notice_tracker.pipeline import generate_notices
from notice_tracker.scanners import get_scanner

app = typer.Typer(
    name="notice-tracker",
    help="Third party notice generation for native package dependencies.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger("notice_tracker")


def _setup_logging(verbose: bool, settings: Optional[NoticeTrackerSettings] = None) -> None:
    """Configure logging level based on verbosity flag and settings."""
    if verbose:
        level = logging.DEBUG
    elif settings is not None:
        level = logging.getLevelName(settings.log_level)
        if not isinstance(level, int):
            level = logging.WARNING
    else:
        level = logging.WARNING
    logging.getLogger("notice_tracker").setLevel(level)


def _load_settings(**overrides) -> NoticeTrackerSettings:
    """Build settings from options, exiting with code 1 when invalid."""
    try:
        return get_settings(**overrides)
    except ValidationError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(code=1)


async def _run_generate(
    config: Path,
    output: Optional[Path],
    settings: NoticeTrackerSettings,
    verbose: bool,
) -> int:
    """Async implementation of the generate command."""
    try:
        scanner = get_scanner(config)
        if verbose:
            console.print(f"[dim]Using scanner: {scanner.source_name}[/dim]")
        workspace = scanner.scan()
    except (ValueError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return 1

    if not workspace.units:
        console.print("[yellow]No workspace units found[/yellow]")
        return 0

    console.print(f"Found [bold]{len(workspace.units)}[/bold] workspace units")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Acquiring packages and staging files...", total=None)
        try:
            written = await generate_notices(workspace, settings, output=output, logger=logger)
        except NoticeRenderError as e:
            err_console.print(f"[red]Error writing output:[/red] {e}")
            return 1
        progress.update(task, completed=True)

    for path in written:
        console.print(f"[green]Generated:[/green] {path}")
    return 0


@app.command()
def generate(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to the workspace configuration (notice.toml, pyproject.toml)",
            exists=True,
            readable=True,
        ),
    ] = Path("notice.toml"),
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output file path (defaults to the configured output)",
        ),
    ] = None,
    mode: Annotated[
        Optional[AcquisitionMode],
        typer.Option(
            "--mode",
            help="Acquisition mode",
            case_sensitive=False,
        ),
    ] = None,
    target: Annotated[
        Optional[str],
        typer.Option(
            "--target",
            help="Target triple handed to the binding generator",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Generate third party notice documentation.

    Scans the workspace configuration, acquires every declared package,
    stages the distributed files and writes the notice documents.
    """
    settings = _load_settings(acquisition_mode=mode, target=target)
    _setup_logging(verbose, settings)

    exit_code = asyncio.run(_run_generate(config, output, settings, verbose))
    raise typer.Exit(code=exit_code)


async def _run_acquire(
    name: str,
    version: str,
    dest: Path,
    settings: NoticeTrackerSettings,
) -> Path:
    async with ArtifactAcquirer.from_settings(settings, logger=logger) as acquirer:
        return await acquirer.acquire(name, version, dest, settings.acquisition_mode)


@app.command()
def acquire(
    name: Annotated[str, typer.Argument(help="Package identifier")],
    version: Annotated[str, typer.Argument(help="Exact package version")],
    dest: Annotated[
        Path,
        typer.Option(
            "--dest",
            "-d",
            help="Directory receiving the extracted package",
        ),
    ] = Path("nuget_packages"),
    mode: Annotated[
        Optional[AcquisitionMode],
        typer.Option(
            "--mode",
            help="Acquisition mode",
            case_sensitive=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Acquire a single package and print its extracted directory."""
    settings = _load_settings(acquisition_mode=mode)
    _setup_logging(verbose, settings)

    try:
        path = asyncio.run(_run_acquire(name, version, dest, settings))
    except AcquisitionError as e:
        err_console.print(f"[red]Failed to acquire {name} {version}:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(str(path))


@app.command(name="license")
def license_command(
    expression: Annotated[str, typer.Argument(help="SPDX license expression")],
    holders: Annotated[
        str,
        typer.Option(
            "--holders",
            help="Copyright holders",
        ),
    ] = "<copyright holders>",
    year: Annotated[
        Optional[int],
        typer.Option(
            "--year",
            help="Copyright year (omitted from the text when not given)",
        ),
    ] = None,
) -> None:
    """Print the license texts generated for an SPDX expression."""
    generator = LicenseTextGenerator(logger=logger)
    try:
        texts = generator.generate(expression, year, holders)
    except LicenseError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if not texts:
        console.print("[yellow]No license texts available for this expression[/yellow]")
        return

    for index, text in enumerate(texts):
        if index:
            console.print()
        console.print(text, markup=False, highlight=False)


if __name__ == "__main__":
    app()
