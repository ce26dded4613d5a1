"""
Batch report of per-sample lineage calls.

The report is a tab-separated table with one row per sample:

    #sample  data_type  k_cov  mixture  lineages  log_barcodes  log_errors
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import polars as pl

from barcodelin.core.constants import REPORT_COLUMNS
from barcodelin.core.io_utils import OutputFormat, read_dataframe, write_dataframe
from barcodelin.models.results import SampleResult

REPORT_SCHEMA: dict[str, pl.DataType] = {
    column: pl.Int64 if column == "k_cov" else pl.Utf8 for column in REPORT_COLUMNS
}


def results_to_dataframe(results: Iterable[SampleResult]) -> pl.DataFrame:
    """Build the report table from sample results, keeping their order."""
    rows = [result.to_row() for result in results]
    return pl.DataFrame(rows, schema=REPORT_SCHEMA, orient="row")


def write_report(
    results: Iterable[SampleResult],
    path: Path,
    output_format: OutputFormat = "tsv",
) -> int:
    """
    Write the batch report.

    Returns:
        Number of sample rows written.
    """
    df = results_to_dataframe(results)
    write_dataframe(df, path, output_format)
    return len(df)


def read_report(path: Path) -> pl.DataFrame:
    """Load a report written by write_report, with k_cov as an integer."""
    df = read_dataframe(path)
    return df.with_columns(pl.col("k_cov").cast(pl.Int64))
