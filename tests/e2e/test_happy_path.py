"""
E2E happy path tests for barcodelin CLI.

Tests basic functionality with valid inputs and expected outputs.
These tests verify the primary use cases work correctly.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from barcodelin import __version__
from barcodelin.cli.main import app
from tests.factories import WINDOWS_11, E2ETestDataset, repeated_windows
from tests.utils.assertions import CLIAssertions, ReportAssertions

pytestmark = pytest.mark.e2e


def run_classify(
    runner: CliRunner,
    samples_dir: Path,
    barcodes: Path,
    output: Path,
    *extra: str,
):
    return runner.invoke(
        app,
        [
            "classify",
            "--dir", str(samples_dir),
            "--barcodes", str(barcodes),
            "--output", str(output),
            "--kmer-size", "11",
            *extra,
        ],
    )


class TestClassifyHappyPath:
    """Happy path tests for the classify command."""

    def test_single_read_sample(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        """One read of a barcode window repeated 20 times is called as that lineage."""
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")], genome_size=100)
        test_dataset.single_sample("S1", ["ACGTACGTAAA" * 20])
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output,
            "--min-count", "1", "--n-barcodes", "1",
        )

        CLIAssertions.assert_success(result)
        df = ReportAssertions.assert_valid_report(output, expected_rows=1)
        row = ReportAssertions.row_for(df, "S1")
        assert row["data_type"] == "single"
        assert row["lineages"] == "A (20)"
        assert row["mixture"] == "no"
        assert row["k_cov"] == 2
        assert row["log_barcodes"] == "A (20)"
        assert row["log_errors"] == ""

    def test_mixed_batch(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        """Assembly, single, paired and broken samples in one directory."""
        barcodes = test_dataset.write_barcodes([
            ("L1", WINDOWS_11["W1"]),
            ("L1", WINDOWS_11["W2"]),
            ("L1.1", WINDOWS_11["W3"]),
            ("L1.1", WINDOWS_11["W4"]),
            ("L2", WINDOWS_11["W5"]),
            ("L2", WINDOWS_11["W6"]),
        ])
        test_dataset.assembly_sample(
            "genome", [repeated_windows([WINDOWS_11["W5"], WINDOWS_11["W6"]], 1)]
        )
        test_dataset.single_sample(
            "child", [repeated_windows([WINDOWS_11[w] for w in ("W1", "W2", "W3", "W4")], 5)]
        )
        test_dataset.paired_sample(
            "mix",
            [repeated_windows([WINDOWS_11["W1"], WINDOWS_11["W2"]], 6)],
            [repeated_windows([WINDOWS_11["W5"], WINDOWS_11["W6"]], 8)],
        )
        test_dataset.single_sample("conflict", [WINDOWS_11["W1"]])
        test_dataset.assembly_sample("conflict", [WINDOWS_11["W1"]])
        output = test_dataset.base_dir / "report.txt"

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output,
            "-c", "2", "-n", "2", "-q",
        )

        CLIAssertions.assert_success(result)
        df = ReportAssertions.assert_valid_report(output, expected_rows=4)
        ReportAssertions.assert_failed_rows_are_empty(df)

        genome = ReportAssertions.row_for(df, "genome")
        assert genome["data_type"] == "assembly"
        assert genome["lineages"] == "L2 (1)"

        child = ReportAssertions.row_for(df, "child")
        assert child["lineages"] == "L1.1 (5)"
        assert child["log_barcodes"] == "L1 (5, 5), L1.1 (5, 5)"
        assert child["mixture"] == "no"

        mix = ReportAssertions.row_for(df, "mix")
        assert mix["data_type"] == "paired"
        assert mix["lineages"] == "L1 (6), L2 (8)"
        assert mix["mixture"] == "yes"

        conflict = ReportAssertions.row_for(df, "conflict")
        assert conflict["data_type"] == "unknown"
        assert conflict["log_errors"] == "the sample conflict has 1 fasta and 1 fastq files"

    def test_parquet_output(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        test_dataset.single_sample("S1", ["ACGTACGTAAA" * 5])
        output = test_dataset.base_dir / "out.parquet"

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output,
            "-c", "1", "-n", "1", "--format", "parquet",
        )

        CLIAssertions.assert_success(result)
        df = ReportAssertions.assert_valid_report(output, expected_rows=1)
        assert df["lineages"].to_list() == ["A (5)"]

    def test_output_directory_created(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        test_dataset.single_sample("S1", ["ACGTACGTAAA"])
        output = test_dataset.base_dir / "nested" / "dir" / "out.txt"

        result = run_classify(cli_runner, test_dataset.samples_dir, barcodes, output)

        CLIAssertions.assert_success(result)
        assert output.exists()

    def test_threads_and_max_cov(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")], genome_size=100)
        # 50 reads of 111 bases add 100 k-mers each; a 1x cap stops after 2 reads
        for name in ("S1", "S2", "S3"):
            test_dataset.single_sample(name, ["ACGTACGTAAA" + "C" * 100] * 50)
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output,
            "-c", "1", "-n", "1", "-x", "1", "-t", "3",
        )

        CLIAssertions.assert_success(result)
        df = ReportAssertions.assert_valid_report(output, expected_rows=3)
        assert df["lineages"].to_list() == ["A (2)"] * 3
        assert df["k_cov"].to_list() == [2, 2, 2]

    def test_yaml_config(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        """Values from --config apply unless overridden on the command line."""
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        test_dataset.single_sample("S1", ["ACGTACGTAAA"] * 3)
        config = test_dataset.base_dir / "config.yaml"
        config.write_text("kmer:\n  size: 11\nfilters:\n  min_count: 5\n  min_barcodes: 1\n")
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output, "--config", str(config),
        )
        CLIAssertions.assert_success(result)
        assert ReportAssertions.assert_valid_report(output)["lineages"].to_list() == [""]

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output,
            "--config", str(config), "--min-count", "3",
        )
        CLIAssertions.assert_success(result)
        assert ReportAssertions.assert_valid_report(output)["lineages"].to_list() == ["A (3)"]

    def test_cli_kmer_size_overrides_bad_yaml(
        self, cli_runner: CliRunner, test_dataset: E2ETestDataset
    ):
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        test_dataset.single_sample("S1", ["ACGTACGTAAA"] * 3)
        config = test_dataset.base_dir / "config.yaml"
        config.write_text("kmer:\n  size: 24\n")
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(
            cli_runner, test_dataset.samples_dir, barcodes, output,
            "--config", str(config), "-c", "1", "-n", "1",
        )

        CLIAssertions.assert_success(result)
        assert ReportAssertions.assert_valid_report(output)["lineages"].to_list() == ["A (3)"]

    def test_empty_directory(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        """No samples still writes a header-only report."""
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(cli_runner, test_dataset.samples_dir, barcodes, output)

        CLIAssertions.assert_success(result)
        CLIAssertions.assert_output_contains(result, "no sequence files found")
        ReportAssertions.assert_valid_report(output, expected_rows=0)

    def test_summary_printed(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        test_dataset.single_sample("S1", ["ACGTACGTAAA"])
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(cli_runner, test_dataset.samples_dir, barcodes, output)

        CLIAssertions.assert_success(result)
        CLIAssertions.assert_output_contains(result, "Loaded 1 barcodes")
        CLIAssertions.assert_output_contains(result, "Typing Summary")

    def test_quiet_suppresses_output(self, cli_runner: CliRunner, test_dataset: E2ETestDataset):
        barcodes = test_dataset.write_barcodes([("A", "ACGTACGTAAA")])
        test_dataset.single_sample("S1", ["ACGTACGTAAA"])
        output = test_dataset.base_dir / "out.txt"

        result = run_classify(cli_runner, test_dataset.samples_dir, barcodes, output, "-q")

        CLIAssertions.assert_success(result)
        assert "Loaded" not in result.stdout
        assert output.exists()


class TestBarcodesInspect:
    """Tests for the barcodes inspect command."""

    def test_inspect(self, cli_runner: CliRunner, barcode_file: Path):
        result = cli_runner.invoke(
            app, ["barcodes", "inspect", "--barcodes", str(barcode_file), "-k", "11"]
        )

        CLIAssertions.assert_success(result)
        CLIAssertions.assert_output_contains(result, "Genome size")
        CLIAssertions.assert_output_contains(result, "Indexed k-mers")
        CLIAssertions.assert_output_contains(result, "12")

    def test_inspect_lineages(self, cli_runner: CliRunner, barcode_file: Path):
        result = cli_runner.invoke(
            app, ["barcodes", "inspect", "-b", str(barcode_file), "-k", "11", "--lineages"]
        )

        CLIAssertions.assert_success(result)
        CLIAssertions.assert_output_contains(result, "L1.1")
        CLIAssertions.assert_output_contains(result, "L2")


class TestVersion:
    """Tests for the --version flag."""

    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--version"])

        CLIAssertions.assert_success(result)
        CLIAssertions.assert_output_contains(result, __version__)
