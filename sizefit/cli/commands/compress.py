"""
Compress Command
Encode an image so its file size lands near a byte target
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from sizefit.config import settings
from sizefit.core.exceptions import NoViableEncodingError, SizeFitError
from sizefit.core.optimization.orchestrator import EncodeResult
from sizefit.models.processing import OutputFormat, ProcessingOptions
from sizefit.services.resize_service import ResizeService
from sizefit.utils.sizes import default_target_size, format_bytes, parse_size

console = Console()


def compress(
    input_path: Annotated[
        Path,
        typer.Argument(help="Input image file", exists=True, dir_okay=False, readable=True),
    ],
    target: Annotated[
        Optional[str],
        typer.Option(
            "-t", "--target", help="Target size (e.g. 200KB, 1.5MB); default 70% of input"
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", case_sensitive=False, help="Output format"),
    ] = OutputFormat.AUTO,
    quality: Annotated[
        int,
        typer.Option("-q", "--quality", min=1, max=100, help="Initial quality (1-100)"),
    ] = settings.default_quality,
    max_width: Annotated[
        Optional[int], typer.Option("--max-width", min=1, help="Maximum width in pixels")
    ] = None,
    max_height: Annotated[
        Optional[int], typer.Option("--max-height", min=1, help="Maximum height in pixels")
    ] = None,
    no_aspect: Annotated[
        bool, typer.Option("--no-aspect", help="Clamp width and height independently")
    ] = False,
    compression_level: Annotated[
        int,
        typer.Option("-c", "--compression-level", min=0, max=9, help="Encoder effort (0-9)"),
    ] = settings.default_compression_level,
    lower_tolerance: Annotated[
        int,
        typer.Option("--lower-tolerance", help="Percent below target accepted (>= 10)"),
    ] = settings.default_lower_tolerance,
    upper_tolerance: Annotated[
        int,
        typer.Option("--upper-tolerance", help="Percent above target accepted (0-50)"),
    ] = settings.default_upper_tolerance,
    strict: Annotated[
        bool, typer.Option("--strict", help="Never exceed the target size")
    ] = False,
    parallel: Annotated[
        bool, typer.Option("--parallel", help="Search candidate formats concurrently")
    ] = False,
    output: Annotated[
        Optional[Path], typer.Option("-o", "--output", help="Output file path")
    ] = None,
):
    """
    Encode an image to a target file size

    Examples:
      sizefit compress photo.png --target 200KB
      sizefit compress logo.png -t 50KB --format webp --strict
      sizefit compress scan.jpg --max-width 1920 -o scan_small.jpg
    """
    image_data = input_path.read_bytes()

    if target is None:
        target_bytes = default_target_size(len(image_data))
    else:
        try:
            target_bytes = parse_size(target)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--target")

    service = ResizeService()
    try:
        options = ProcessingOptions.create(
            target_size_bytes=target_bytes,
            output_format=output_format,
            quality=quality,
            max_width=max_width,
            max_height=max_height,
            maintain_aspect_ratio=not no_aspect,
            compression_level=compression_level,
            lower_bound_tolerance=lower_tolerance,
            upper_bound_tolerance=upper_tolerance,
            strict_upper_limit=strict,
        )
        with console.status(f"[cyan]Compressing {input_path.name}...[/cyan]"):
            if parallel:
                result = asyncio.run(
                    service.optimize_bytes_async(image_data, options, parallel=True)
                )
            else:
                result = service.optimize_bytes(image_data, options)
    except NoViableEncodingError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        console.print(f"[dim]Formats tried: {', '.join(e.sequence)}[/dim]")
        raise typer.Exit(1)
    except SizeFitError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    output_path = output or input_path.with_name(
        f"{input_path.stem}_resized.{result.format.extension}"
    )
    output_path.write_bytes(result.data)

    console.print(build_summary_table(input_path, len(image_data), result))
    console.print(f"[green]✓[/green] Saved to [cyan]{output_path}[/cyan]")


def build_summary_table(input_path: Path, original_size: int, result: EncodeResult) -> Table:
    """Render the outcome of one compression run."""
    table = Table(title=f"Compressed {input_path.name}", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Format", result.format.value.upper())
    table.add_row("Quality", str(result.quality))
    table.add_row("Dimensions", f"{result.width}x{result.height}")
    table.add_row("Original size", format_bytes(original_size))
    table.add_row("Target size", format_bytes(result.target_size_bytes))
    table.add_row(
        "Result size",
        f"{format_bytes(result.size)} ({result.percent_of_target:.1f}% of target)",
    )
    table.add_row("Formats considered", " > ".join(f.value for f in result.sequence))
    table.add_row("Encode attempts", str(result.probes))
    table.add_row("Time", f"{result.processing_time:.2f}s")
    return table
