"""
Pydantic models for per-sample lineage typing results.

One SampleResult is produced per sample and becomes one row of the report.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class DataType(str, Enum):
    """
    Kind of input a sample was built from.

    Categories:
        ASSEMBLY: One FASTA-like genome assembly file
        SINGLE: One FASTQ-like read file
        PAIRED: Two FASTQ-like read files (_1/_2)
        UNKNOWN: File composition matched none of the above
    """

    ASSEMBLY = "assembly"
    SINGLE = "single"
    PAIRED = "paired"
    UNKNOWN = "unknown"


class SampleResult(BaseModel):
    """
    Lineage typing result for a single sample.

    Attributes:
        sample: Sample name derived from its file names
        data_type: Input kind (assembly, single or paired)
        coverage: K-mer coverage, k-mers examined / genome size
        mixture: True if more than one unrelated lineage was called
        lineages: Leaf lineage call, e.g. "lineage4.1 (35)"
        log_barcodes: Evidence per lineage before filtering
        error: Error message if the sample could not be processed
    """

    sample: str = Field(description="Sample name")
    data_type: DataType = Field(description="Input kind")
    coverage: int = Field(default=0, ge=0, description="K-mer coverage")
    mixture: bool = Field(default=False, description="More than one leaf lineage")
    lineages: str = Field(default="", description="Leaf lineage call with medians")
    log_barcodes: str = Field(default="", description="Pre-filter barcode evidence")
    error: str | None = Field(default=None, description="Per-sample error message")

    model_config = {"frozen": True}

    @computed_field
    @property
    def succeeded(self) -> bool:
        """True if the sample was scanned without error."""
        return self.error is None

    @property
    def mixture_label(self) -> str:
        """Report rendering of the mixture flag."""
        return "yes" if self.mixture else "no"

    def to_row(self) -> tuple[str, str, int, str, str, str, str]:
        """Values in report column order."""
        return (
            self.sample,
            self.data_type.value,
            self.coverage,
            self.mixture_label,
            self.lineages,
            self.log_barcodes,
            self.error or "",
        )

    @classmethod
    def failed(cls, sample: str, data_type: DataType, error: str) -> SampleResult:
        """Result row for a sample that could not be processed."""
        return cls(sample=sample, data_type=data_type, error=error)
