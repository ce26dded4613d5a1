"""
Main CLI entry point for barcodelin.

Provides the commands of the lineage typing tool:
- classify: Type every sample of a directory against a barcode reference
- barcodes: Inspect a barcode reference file
"""

from __future__ import annotations

import typer
from rich import print as rprint
from rich.console import Console

from barcodelin import __version__

app = typer.Typer(
    name="barcodelin",
    help="K-mer barcode lineage typing for microbial reads and assemblies",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"barcodelin version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Barcodelin: k-mer barcode lineage typing.

    Matches k-mers from sequencing reads or genome assemblies against a panel
    of lineage-defining barcodes and reports coverage, the most specific
    lineage call and whether the sample looks like a mixture.
    """


# Import subcommands
from barcodelin.cli import barcodes, classify

# Register subcommands
app.command(name="classify")(classify.classify)
app.add_typer(barcodes.app, name="barcodes")


if __name__ == "__main__":
    app()
