"""
Unit tests for I/O utility functions.

Tests for write_dataframe and read_dataframe functions.
"""

from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from barcodelin.core.io_utils import read_dataframe, write_dataframe


@pytest.fixture
def sample_df() -> pl.DataFrame:
    """Create a sample DataFrame for testing."""
    return pl.DataFrame({
        "#sample": ["001", "ERR123", "G1"],
        "k_cov": [12, 40, 1],
        "lineages": ["lineage4 (12)", "", "lineage2.2 (1)"],
    })


class TestWriteDataframe:
    """Tests for write_dataframe function."""

    def test_write_tsv(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        """Should write DataFrame as tab-separated text."""
        output = tmp_path / "output.tsv"
        write_dataframe(sample_df, output, "tsv")

        assert output.exists()
        assert output.read_text().splitlines()[0] == "#sample\tk_cov\tlineages"

    def test_write_parquet(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        """Should write DataFrame to Parquet format with zstd compression."""
        output = tmp_path / "output.parquet"
        write_dataframe(sample_df, output, "parquet")

        assert output.exists()
        loaded = pl.read_parquet(output)
        assert loaded.shape == sample_df.shape
        assert loaded.columns == sample_df.columns

    def test_default_format_is_tsv(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        output = tmp_path / "out_barcodelin.txt"
        write_dataframe(sample_df, output)
        assert "\t" in output.read_text()

    def test_empty_strings_unquoted(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        """Empty strings are written as empty fields, without quotes."""
        output = tmp_path / "output.tsv"
        write_dataframe(sample_df, output, "tsv")

        assert output.read_text().splitlines()[2] == "ERR123\t40\t"


class TestReadDataframe:
    """Tests for read_dataframe function."""

    def test_read_tsv_as_strings(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        """Text columns are not coerced, so '001' stays a string."""
        output = tmp_path / "output.tsv"
        write_dataframe(sample_df, output, "tsv")

        loaded = read_dataframe(output)
        assert loaded["#sample"].to_list() == ["001", "ERR123", "G1"]
        assert loaded["k_cov"].to_list() == ["12", "40", "1"]
        assert loaded["lineages"].to_list()[1] == ""

    def test_read_txt(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        output = tmp_path / "output.txt"
        write_dataframe(sample_df, output, "tsv")
        assert read_dataframe(output).shape == sample_df.shape

    def test_read_parquet(self, sample_df: pl.DataFrame, tmp_path: Path) -> None:
        output = tmp_path / "output.parquet"
        write_dataframe(sample_df, output, "parquet")

        loaded = read_dataframe(output)
        assert loaded.equals(sample_df)

    def test_unrecognized_extension(self, tmp_path: Path) -> None:
        """Should raise for unknown formats."""
        with pytest.raises(ValueError, match="Unrecognized file format"):
            read_dataframe(tmp_path / "output.xlsx")
