"""
Shared pytest fixtures for barcodelin tests.

Provides barcode references, sequence file writers and a CLI runner
for unit and end-to-end testing.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from barcodelin.core.barcodes import BarcodeDatabase
from tests.factories import (
    WINDOWS_11,
    E2ETestDataset,
    SequenceFactory,
    barcode_text,
    write_fasta_gz,
    write_fastq_gz,
)


# =============================================================================
# Barcode Reference Fixtures
# =============================================================================


@pytest.fixture
def simple_barcode_text() -> str:
    """
    Reference with three lineages at k=11.

    L1 and its child L1.1 have two barcodes each, unrelated L2 has two.
    Barcode ids: W1=0, W2=1 (L1), W3=2, W4=3 (L1.1), W5=4, W6=5 (L2).
    """
    return barcode_text([
        ("L1", WINDOWS_11["W1"]),
        ("L1", WINDOWS_11["W2"]),
        ("L1.1", WINDOWS_11["W3"]),
        ("L1.1", WINDOWS_11["W4"]),
        ("L2", WINDOWS_11["W5"]),
        ("L2", WINDOWS_11["W6"]),
    ])


@pytest.fixture
def simple_database(simple_barcode_text: str) -> BarcodeDatabase:
    """BarcodeDatabase built from simple_barcode_text at k=11."""
    return BarcodeDatabase.from_text(simple_barcode_text, 11)


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary directory for test files."""
    return tmp_path


@pytest.fixture
def barcode_file(temp_dir: Path, simple_barcode_text: str) -> Path:
    """simple_barcode_text written to disk."""
    path = temp_dir / "barcodes.tsv"
    path.write_text(simple_barcode_text)
    return path


@pytest.fixture
def fastq_writer(temp_dir: Path) -> Callable[[str, Sequence[str | bytes]], Path]:
    """Factory writing gzip FASTQ files into the temp directory."""

    def _write(name: str, sequences: Sequence[str | bytes]) -> Path:
        return write_fastq_gz(temp_dir / name, sequences)

    return _write


@pytest.fixture
def fasta_writer(temp_dir: Path) -> Callable[[str, Sequence[str]], Path]:
    """Factory writing gzip FASTA files into the temp directory."""

    def _write(name: str, contigs: Sequence[str]) -> Path:
        return write_fasta_gz(temp_dir / name, contigs)

    return _write


@pytest.fixture
def sequence_factory() -> SequenceFactory:
    """Seeded random sequence generator."""
    return SequenceFactory(seed=42)


@pytest.fixture
def test_dataset(temp_dir: Path) -> E2ETestDataset:
    """Seeded reference and sample layout in the temp directory."""
    return E2ETestDataset(temp_dir, seed=42)


# =============================================================================
# CLI Testing Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Typer CLI runner for testing commands."""
    from typer.testing import CliRunner

    return CliRunner()
