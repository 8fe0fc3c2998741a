"""Command-line interface for duplo"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import load_config
from .core import STDIO, DuplicateFinder
from .exceptions import DuploError
from .logging_config import set_verbosity, setup_logging
from .source import read_file_list

app = typer.Typer(
    name="duplo",
    help="duplo - Duplicate Source Code Block Finder",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]duplo[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.command()
def main(
    file_list: str = typer.Argument(
        ...,
        help="File with one source file path per line ('-' reads stdin)",
    ),
    output: str = typer.Argument(
        ...,
        help="Report destination ('-' writes stdout)",
    ),
    min_lines: Optional[int] = typer.Option(
        None,
        "--min-lines",
        "-ml",
        help="Minimal block size in lines [default: 4]",
        min=1,
    ),
    percent: Optional[int] = typer.Option(
        None,
        "--percent",
        "-pt",
        help="Percentage of lines of duplication threshold (1-100) [default: 100]",
        min=1,
        max=100,
    ),
    min_chars: Optional[int] = typer.Option(
        None,
        "--min-chars",
        "-mc",
        help="Minimal characters in line [default: 3]",
        min=0,
    ),
    ignore_prepro: bool = typer.Option(
        False,
        "--ignore-prepro",
        "-ip",
        help="Ignore preprocessor directives",
    ),
    ignore_same_filename: bool = typer.Option(
        False,
        "--ignore-same-filename",
        "-d",
        help="Ignore file pairs with the same name",
    ),
    xml: bool = typer.Option(
        False,
        "--xml",
        help="Write the report as XML",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output and all but ERROR logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Find duplicated blocks of lines across a list of source files.

    [bold cyan]Examples:[/bold cyan]

      find . -name "*.py" > files.lst && duplo files.lst report.txt

      duplo files.lst report.xml --xml --min-lines 6

      git ls-files "*.c" | duplo - - --ignore-prepro
    """
    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    verbosity = "verbose" if verbose else "quiet" if quiet else "normal"
    try:
        logger = setup_logging(verbosity, log_file=str(log_file) if log_file else None)
    except OSError as e:
        console.print(f"[red]Error:[/red] Can't open log file: {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    try:
        overrides = {
            "min_block_size": min_lines,
            "block_percent_threshold": percent,
            "min_chars": min_chars,
            "verbose": verbose,
            "quiet": quiet,
        }
        if ignore_prepro:
            overrides["ignore_preprocessor"] = True
        if ignore_same_filename:
            overrides["ignore_same_filename"] = True
        if xml:
            overrides["xml"] = True

        settings = load_config(config_file=config, **overrides)
        set_verbosity(settings.verbosity)
        logger.debug(f"Loaded config: {settings}")

        if file_list == STDIO:
            filenames = read_file_list(sys.stdin)
        else:
            try:
                with open(file_list, encoding="utf-8") as f:
                    filenames = read_file_list(f)
            except OSError as e:
                raise DuploError(f"Can't open file list: {file_list}", details={"reason": str(e)})

        finder = DuplicateFinder(settings, show_progress=settings.verbosity != "quiet")
        finder.run(filenames, output)

    except DuploError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Run interrupted by user")
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during scan")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
