"""
Classify command: type every sample of a directory.

This is the command most users will interact with. It loads the barcode
reference once, groups the input directory into samples, scans each sample
and writes one report row per sample.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from barcodelin.cli.utils import (
    ProgressObserver,
    QuietConsole,
    configure_logging,
    spinner_progress,
)
from barcodelin.core.barcodes import BarcodeDatabase, validate_kmer_size
from barcodelin.core.constants import DEFAULT_OUTPUT
from barcodelin.core.exceptions import ConfigurationError
from barcodelin.core.input_files import discover_samples
from barcodelin.core.pipeline import LineageClassifier
from barcodelin.core.report import write_report
from barcodelin.models.config import ClassifierConfig
from barcodelin.models.results import SampleResult

logger = logging.getLogger(__name__)

console = Console()


def load_config(
    config_file: Path | None,
    kmer_size: int | None,
    min_count: int | None,
    n_barcodes: int | None,
    max_cov: int | None,
    threads: int | None,
) -> ClassifierConfig:
    """
    Build the run configuration: YAML file (if any) overridden by CLI flags.

    Raises:
        ConfigurationError: If the k-mer size is invalid.
        ValueError: If any other value is invalid or the YAML is malformed.
    """
    if kmer_size is not None:
        validate_kmer_size(kmer_size)

    overrides = {
        "kmer_size": kmer_size,
        "min_count": min_count,
        "min_barcodes": n_barcodes,
        "max_coverage": max_cov,
        "threads": threads,
    }
    if config_file:
        return ClassifierConfig.from_yaml(config_file, **overrides)
    return ClassifierConfig().with_overrides(**overrides)


def summarize_results(results: list[SampleResult]) -> Table:
    """Summary table of a finished batch."""
    typed = [r for r in results if r.succeeded and r.lineages]
    table = Table(title="Lineage Typing Summary", show_header=True)
    table.add_column("Samples", justify="left")
    table.add_column("Count", justify="right")
    table.add_row("Processed", str(len(results)))
    table.add_row("Lineage called", str(len(typed)))
    table.add_row("No lineage", str(sum(1 for r in results if r.succeeded and not r.lineages)))
    table.add_row("Mixtures", str(sum(1 for r in typed if r.mixture)))
    table.add_row("Errors", str(sum(1 for r in results if not r.succeeded)))
    return table


def classify(
    input_dir: Path = typer.Option(
        ...,
        "--dir",
        "-d",
        help="Directory containing the data files (.fastq.gz, .fq.gz, .fna.gz, .fas.gz, .fasta.gz)",
        exists=True,
        file_okay=False,
    ),
    barcodes: Path = typer.Option(
        ...,
        "--barcodes",
        "-b",
        help="File containing the reference barcodes",
        exists=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        Path(DEFAULT_OUTPUT),
        "--output",
        "-o",
        help="Output report path",
    ),
    kmer_size: int | None = typer.Option(
        None,
        "--kmer-size",
        "-k",
        help="K-mer size, an odd number between 11 and 99 [default: 25]",
    ),
    min_count: int | None = typer.Option(
        None,
        "--min-count",
        "-c",
        help="Minimum number of k-mer occurrences [default: 4]",
    ),
    n_barcodes: int | None = typer.Option(
        None,
        "--n-barcodes",
        "-n",
        help="Minimum number of barcodes per lineage [default: 3]",
    ),
    max_cov: int | None = typer.Option(
        None,
        "--max-cov",
        "-x",
        help="Maximum k-mer coverage to scan per read sample",
    ),
    threads: int | None = typer.Option(
        None,
        "--threads",
        "-t",
        help="Number of samples processed in parallel [default: 1]",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        help="YAML configuration file (CLI flags take precedence)",
        exists=True,
        dir_okay=False,
    ),
    output_format: str = typer.Option(
        "tsv",
        "--format",
        "-f",
        help="Output format: 'tsv' or 'parquet'",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output (for scripting)",
    ),
) -> None:
    """
    Type samples against a barcode reference.

    Each sample is one assembly (.fna.gz, .fas.gz, .fasta.gz), one read file
    (.fastq.gz, .fq.gz) or a pair of read files ending in _1/_2.

    Example:

        barcodelin classify \\
            --dir reads/ \\
            --barcodes MTBC_barcodes.tsv \\
            --output lineages.txt

        # Cap the work per read sample at 80x k-mer coverage, 4 samples at a time:
        barcodelin classify -d reads/ -b MTBC_barcodes.tsv -x 80 -t 4
    """
    out = QuietConsole(console, quiet=quiet)
    configure_logging(verbose, console)

    out.print("\n[bold blue]Barcodelin Lineage Typing[/bold blue]\n")

    output_format = output_format.lower()
    if output_format not in ("tsv", "parquet"):
        console.print(
            f"[red]Error: Invalid format '{output_format}'. "
            f"Use 'tsv' or 'parquet'.[/red]"
        )
        raise typer.Exit(code=1) from None

    try:
        config = load_config(config_file, kmer_size, min_count, n_barcodes, max_cov, threads)
    except ConfigurationError as e:
        console.print(f"[red]Error: {escape(e.full_message)}[/red]")
        raise typer.Exit(code=1) from None
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    with spinner_progress("Loading barcodes...", console, quiet):
        try:
            database = BarcodeDatabase.from_file(barcodes, config.kmer_size)
        except ConfigurationError as e:
            console.print(f"\n[red]Error: {escape(e.full_message)}[/red]")
            raise typer.Exit(code=1) from None
        except OSError as e:
            console.print(f"\n[red]Error reading barcode file: {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from None

    out.print(
        f"[green]Loaded {database.num_barcodes} barcodes "
        f"({len(database.lineages)} lineages, genome size {database.genome_size:,})[/green]"
    )

    try:
        samples = discover_samples(input_dir)
    except OSError as e:
        console.print(f"[red]Error reading input directory: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    num_files = sum(len(files) for files in samples.values())
    out.print(f"[green]Found {num_files} files in {len(samples)} samples[/green]\n")
    if not samples:
        out.print("[yellow]Warning: no sequence files found in input directory[/yellow]")

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=quiet,
    ) as progress:
        task_id = progress.add_task("Typing samples", total=len(samples))
        classifier = LineageClassifier(
            database,
            config,
            observer=ProgressObserver(progress, task_id),
        )
        try:
            results = classifier.classify_samples(samples)
        except OSError as e:
            console.print(f"\n[red]Error reading input file: {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from None

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        write_report(results, output, output_format)
    except OSError as e:
        console.print(f"[red]Error: could not write output file: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    for result in results:
        if not result.succeeded:
            out.print(f"[yellow]Warning: {result.sample}: {escape(result.error or '')}[/yellow]")

    out.print()
    out.print(summarize_results(results))
    out.print(f"\n[bold green]Report written to {output}[/bold green]")
