"""Typer application and entry point for the CLI.

Contains the Typer app, the version callback and the demo and text
inspection commands.
"""

from typing import Annotated

import typer

from spintable.cli.demos import run_group_demo, run_table_demo
from spintable.text.width import display_width, hyperlink_label_width, truncate
from spintable.utils.console import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
    show_version,
)
from spintable.utils.errors import ExitCode, SpintableError
from spintable.utils.logging import setup_logging

# Create Typer app
app = typer.Typer(
    name="spintable",
    help="SPINTABLE - Concurrent spinner groups and tables for the terminal",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and exit."""
    if value:
        show_version()
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """SPINTABLE - Concurrent spinner groups and tables for the terminal."""
    setup_logging()


def _finish(succeeded: bool, what: str) -> None:
    if not succeeded:
        print_error(f"{what} finished with failed tasks")
        raise typer.Exit(ExitCode.TASK_FAILED)
    print_success(f"{what} finished")


@app.command()
def group(
    tasks: Annotated[
        int,
        typer.Option("--tasks", "-n", min=1, help="Number of concurrent tasks"),
    ] = 4,
    fail: Annotated[
        bool,
        typer.Option("--fail", help="Make the last task raise to show the failure report"),
    ] = False,
) -> None:
    """Run simulated tasks in a spin group."""
    try:
        succeeded = run_group_demo(tasks, fail=fail)
    except SpintableError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    except KeyboardInterrupt as e:
        print_warning("Operation cancelled by user")
        raise typer.Exit(ExitCode.USER_CANCELLED) from e
    _finish(succeeded, "Spin group")


@app.command()
def table(
    rows: Annotated[
        int,
        typer.Option("--rows", "-r", min=1, max=26, help="Number of service rows"),
    ] = 3,
    columns: Annotated[
        int,
        typer.Option("--columns", "-c", min=1, help="Number of stage columns"),
    ] = 2,
) -> None:
    """Run a grid of simulated services in a spin table."""
    try:
        succeeded = run_table_demo(rows, columns)
    except SpintableError as e:
        print_error(str(e))
        raise typer.Exit(e.exit_code) from e
    except KeyboardInterrupt as e:
        print_warning("Operation cancelled by user")
        raise typer.Exit(ExitCode.USER_CANCELLED) from e
    _finish(succeeded, "Spin table")


@app.command("truncate")
def truncate_command(
    text: Annotated[str, typer.Argument(help="Text to truncate (may contain ANSI escapes)")],
    width: Annotated[int, typer.Argument(min=0, help="Display-column budget")],
) -> None:
    """Truncate TEXT to WIDTH display columns and print the result."""
    text = _decode_escapes(text)
    result = truncate(text, width)
    console.file.write(result + "\n")
    print_info(f"width {display_width(text)} -> {display_width(result)}")


@app.command("width")
def width_command(
    text: Annotated[str, typer.Argument(help="Text to measure (may contain ANSI escapes)")],
) -> None:
    """Print the display width and hyperlink label width of TEXT."""
    text = _decode_escapes(text)
    console.print(f"display width: {display_width(text)}", highlight=False)
    console.print(f"hyperlink label width: {hyperlink_label_width(text)}", highlight=False)


def _decode_escapes(text: str) -> str:
    """Turn a literal ``\\x1b`` or ``\\033`` typed on the command line into ESC."""
    return text.replace("\\x1b", "\x1b").replace("\\033", "\x1b")


__all__ = [
    "app",
    "main",
    "version_callback",
]
