"""
Custom exceptions with actionable guidance.

Provides specific error types for common failure scenarios,
each with helpful suggestions for resolution.

Configuration errors are fatal for a run and are raised before any sample
is processed. Sample errors are recorded in that sample's report row and the
batch continues.
"""

from __future__ import annotations

from pathlib import Path

from barcodelin.core.constants import (
    BARCODE_FLANK_OFFSET,
    KMER_SIZE_MAX,
    KMER_SIZE_MIN,
)


class BarcodelinError(Exception):
    """Base exception for barcodelin errors."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.full_message)

    @property
    def full_message(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class ConfigurationError(BarcodelinError):
    """Raised when run configuration or the barcode reference is invalid."""



class InvalidKmerSizeError(ConfigurationError):
    """Raised when the k-mer size is even or out of range."""

    def __init__(self, kmer_size: int):
        super().__init__(
            message=(
                f"the kmer size should be an odd number between "
                f"{KMER_SIZE_MIN} and {KMER_SIZE_MAX} (got {kmer_size})"
            ),
            suggestion="Use an odd --kmer-size such as 25.",
        )
        self.kmer_size = kmer_size


class GenomeSizeMissingError(ConfigurationError):
    """Raised when the barcode file has no genome_size control line."""

    def __init__(self) -> None:
        super().__init__(
            message="The genome size is missing from the barcode file",
            suggestion=(
                "Add a tab-separated control line such as "
                "'genome_size\\t4411532' to the barcode file."
            ),
        )


class GenomeSizeParseError(ConfigurationError):
    """Raised when the genome_size value is not a positive integer."""

    def __init__(self, value: str):
        super().__init__(
            message=f"Failed to read the genome size in barcode file: '{value}'",
            suggestion="The genome_size value must be a positive integer.",
        )
        self.value = value


class MalformedBarcodeError(ConfigurationError):
    """Raised when a barcode line cannot produce a valid k-mer window."""

    def __init__(self, line_num: int, reason: str):
        super().__init__(
            message=f"Malformed barcode at line {line_num}: {reason}",
            suggestion=(
                "Barcode lines must have 4 tab-separated columns "
                "(lineage, left, middle, right) over A/C/G/T, with the "
                f"window centred {BARCODE_FLANK_OFFSET} bases into the "
                "concatenated segments."
            ),
        )
        self.line_num = line_num
        self.reason = reason


class RecordParseError(BarcodelinError):
    """Raised by the FASTA/FASTQ decoders on a malformed record."""

    def __init__(self, message: str, line_num: int | None = None):
        if line_num is not None:
            message = f"line {line_num}: {message}"
        super().__init__(message=message)
        self.line_num = line_num


class SampleError(BarcodelinError):
    """Base class for failures scoped to a single sample."""

    def __init__(self, sample: str, message: str, suggestion: str | None = None):
        super().__init__(message=message, suggestion=suggestion)
        self.sample = sample


class SampleCompositionError(SampleError):
    """Raised when a sample's files match none of assembly/single/paired."""

    def __init__(self, sample: str, num_fasta: int, num_fastq: int):
        super().__init__(
            sample=sample,
            message=(
                f"the sample {sample} has {num_fasta} fasta and "
                f"{num_fastq} fastq files"
            ),
            suggestion=(
                "A sample needs exactly one assembly file, one read file, "
                "or two paired read files (_1/_2)."
            ),
        )
        self.num_fasta = num_fasta
        self.num_fastq = num_fastq


class SampleParseError(SampleError):
    """Raised when a record of a sample's input cannot be decoded."""

    def __init__(self, sample: str, path: Path, detail: str):
        super().__init__(
            sample=sample,
            message=f"Error in file {path.name}: {detail}",
        )
        self.path = path
        self.detail = detail
