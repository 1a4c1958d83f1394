"""
Main CLI Application
Typer application with global options and command registration
"""

from typing import Annotated, Optional

import typer
from rich.console import Console

from sizefit.cli import __version__
from sizefit.cli.commands import analyze, compress
from sizefit.config import settings
from sizefit.utils.logging import setup_logging

console = Console()

app = typer.Typer(
    name="sizefit",
    help="Encode images to a target file size",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool], typer.Option("--version", "-V", help="Show version and exit")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
):
    """
    sizefit - pick the format and quality that fit a file-size budget
    """
    if version:
        console.print(f"sizefit [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    # Quiet by default so log lines do not interleave with the summary
    log_level = "DEBUG" if verbose else max_level(settings.log_level, "WARNING")
    setup_logging(log_level=log_level, json_logs=settings.json_logs)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


def max_level(configured: str, floor: str) -> str:
    """The less verbose of two level names."""
    order = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    return max(configured.upper(), floor, key=order.index)


app.command(name="compress")(compress.compress)
app.command(name="analyze")(analyze.analyze)


if __name__ == "__main__":
    app()
