"""
Analyze Command
Show content characteristics and the automatic format order
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from sizefit.core.analysis.content_analyzer import ContentAnalyzer
from sizefit.core.exceptions import SizeFitError
from sizefit.core.raster import decode_image
from sizefit.core.sequencing.format_sequencer import FormatSequencer
from sizefit.models.processing import OutputFormat
from sizefit.utils.sizes import format_bytes

console = Console()


def analyze(
    input_path: Annotated[
        Path,
        typer.Argument(help="Input image file", exists=True, dir_okay=False, readable=True),
    ],
):
    """
    Show how an image would be classified

    Examples:
      sizefit analyze photo.jpg
    """
    image_data = input_path.read_bytes()
    try:
        raster, detected = decode_image(image_data)
    except SizeFitError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    characteristics = ContentAnalyzer().analyze(raster)
    sequence = FormatSequencer().sequence(
        detected,
        OutputFormat.AUTO,
        characteristics.has_transparency,
        characteristics.is_photo,
    )

    table = Table(title=f"Analysis of {input_path.name}", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Format", detected.value.upper() if detected else "unknown")
    table.add_row("Dimensions", f"{raster.width}x{raster.height}")
    table.add_row("File size", format_bytes(len(image_data)))
    table.add_row("Transparency", "yes" if characteristics.has_transparency else "no")
    table.add_row("Content", "photo" if characteristics.is_photo else "graphic")
    table.add_row("Unique color ratio", f"{characteristics.unique_color_ratio:.3f}")
    table.add_row("Edge ratio", f"{characteristics.edge_ratio:.3f}")
    table.add_row("Gradient ratio", f"{characteristics.gradient_ratio:.3f}")
    table.add_row("Format order", " > ".join(fmt.value for fmt in sequence))
    console.print(table)
