"""
Barcode reference commands.

Validates a barcode reference file for a given k-mer size and reports what
the built index contains.
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from barcodelin.core.barcodes import BarcodeDatabase
from barcodelin.core.constants import DEFAULT_KMER_SIZE
from barcodelin.core.exceptions import ConfigurationError

app = typer.Typer(
    name="barcodes",
    help="Inspect barcode reference files",
    no_args_is_help=True,
)

console = Console()


@app.command(name="inspect")
def inspect(
    barcodes: Path = typer.Option(
        ...,
        "--barcodes",
        "-b",
        help="File containing the reference barcodes",
        exists=True,
        dir_okay=False,
    ),
    kmer_size: int = typer.Option(
        DEFAULT_KMER_SIZE,
        "--kmer-size",
        "-k",
        help="K-mer size, an odd number between 11 and 99",
    ),
    show_lineages: bool = typer.Option(
        False,
        "--lineages",
        "-l",
        help="List every lineage with its number of barcodes",
    ),
) -> None:
    """
    Build the barcode index and report its contents.

    Example:

        barcodelin barcodes inspect --barcodes MTBC_barcodes.tsv --kmer-size 25
    """
    try:
        database = BarcodeDatabase.from_file(barcodes, kmer_size)
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(e.full_message)}[/red]")
        raise typer.Exit(code=1) from None
    except OSError as e:
        console.print(f"[red]Error reading barcode file: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    table = Table(title=f"Barcode Reference: {barcodes.name}", show_header=True)
    table.add_column("Property", justify="left")
    table.add_column("Value", justify="right")
    table.add_row("Genome size", f"{database.genome_size:,}")
    table.add_row("K-mer size", str(database.k))
    table.add_row("Barcodes", str(database.num_barcodes))
    table.add_row("Lineages", str(len(database.lineages)))
    table.add_row("Indexed k-mers", str(len(database)))
    console.print(table)

    if show_lineages:
        per_lineage = Counter(
            database.lineage_of(barcode_id) for barcode_id in range(database.num_barcodes)
        )
        lineage_table = Table(title="Barcodes per Lineage", show_header=True)
        lineage_table.add_column("Lineage", justify="left")
        lineage_table.add_column("Barcodes", justify="right")
        for lineage in database.lineages:
            lineage_table.add_row(lineage, str(per_lineage[lineage]))
        console.print(lineage_table)
