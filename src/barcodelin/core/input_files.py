"""
Input discovery: group the files of a directory into samples.

Read files (.fastq.gz, .fq.gz) are grouped by basename with a trailing _1/_2
pair indicator removed; assembly files (.fas.gz, .fasta.gz, .fna.gz) form a
sample named after the file. Anything else in the directory is ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from barcodelin.core.constants import (
    ASSEMBLY_EXTENSIONS,
    PAIRED_SUFFIXES,
    READS_EXTENSIONS,
)
from barcodelin.core.exceptions import SampleCompositionError
from barcodelin.models.results import DataType

logger = logging.getLogger(__name__)


def _strip_extension(filename: str, extensions: tuple[str, ...]) -> str | None:
    for extension in extensions:
        if filename.endswith(extension):
            return filename[: -len(extension)]
    return None


def is_reads_file(path: Path) -> bool:
    """True for FASTQ-like read files."""
    return path.name.endswith(READS_EXTENSIONS)


def is_assembly_file(path: Path) -> bool:
    """True for FASTA-like assembly files."""
    return path.name.endswith(ASSEMBLY_EXTENSIONS)


def sample_name_from_path(path: Path) -> str | None:
    """
    Derive the sample name a file belongs to.

    Returns:
        Sample name, or None if the file extension is not recognized.

    Example:
        >>> sample_name_from_path(Path("ERR123_1.fastq.gz"))
        'ERR123'
        >>> sample_name_from_path(Path("genome.fna.gz"))
        'genome'
    """
    reads_stem = _strip_extension(path.name, READS_EXTENSIONS)
    if reads_stem is not None:
        for suffix in PAIRED_SUFFIXES:
            if reads_stem.endswith(suffix):
                return reads_stem[: -len(suffix)]
        return reads_stem
    return _strip_extension(path.name, ASSEMBLY_EXTENSIONS)


def group_samples(paths: list[Path]) -> dict[str, list[Path]]:
    """Group recognized files by sample name; file lists are sorted by name."""
    samples: dict[str, list[Path]] = {}
    for path in paths:
        sample = sample_name_from_path(path)
        if sample is None:
            continue
        samples.setdefault(sample, []).append(path)

    for files in samples.values():
        files.sort(key=lambda p: p.name)
    return samples


def discover_samples(directory: Path) -> dict[str, list[Path]]:
    """
    List a directory and group its sequence files into samples.

    Returns:
        Mapping of sample name to its files, sorted by sample name.

    Raises:
        OSError: If the directory cannot be read.
    """
    paths = [path for path in directory.iterdir() if path.is_file()]
    samples = group_samples(paths)
    logger.info(
        "Found %d sequence files in %d samples",
        sum(len(files) for files in samples.values()),
        len(samples),
    )
    return dict(sorted(samples.items()))


def classify_sample(sample: str, files: list[Path]) -> DataType:
    """
    Determine the data type of a sample from its file composition.

    Raises:
        SampleCompositionError: Unless the sample is exactly one assembly,
            one read file, or two read files.
    """
    num_fasta = sum(1 for path in files if is_assembly_file(path))
    num_fastq = sum(1 for path in files if is_reads_file(path))

    if num_fasta == 1 and num_fastq == 0:
        return DataType.ASSEMBLY
    if num_fasta == 0 and num_fastq == 1:
        return DataType.SINGLE
    if num_fasta == 0 and num_fastq == 2:
        return DataType.PAIRED
    raise SampleCompositionError(sample, num_fasta, num_fastq)
