"""
Constants used throughout the barcodelin package.

Centralizes file-format conventions, default parameters and report layout
to keep them consistent between the core engine and the CLI.
"""

from __future__ import annotations

# =============================================================================
# K-mer Constants
# =============================================================================

KMER_SIZE_MIN = 11
KMER_SIZE_MAX = 99
DEFAULT_KMER_SIZE = 25

# Largest k whose 2-bit code fits an unsigned 64-bit integer
VECTORIZED_KMER_MAX = 31

# =============================================================================
# Barcode Reference Format
#
# Barcode rows carry three segments (left, middle, right) whose concatenation
# places the barcode window centre at a fixed offset of 50 bases.
# =============================================================================

BARCODE_FLANK_OFFSET = 50
BARCODE_COLUMNS = 4
GENOME_SIZE_KEYS = ("genome_size", "#genome_size")

# =============================================================================
# Classification Defaults
# =============================================================================

DEFAULT_MIN_COUNT = 4
DEFAULT_MIN_BARCODES = 3

# Assemblies carry one copy of each barcode, so any hit counts
ASSEMBLY_MIN_COUNT = 1

# =============================================================================
# Input Files
# =============================================================================

READS_EXTENSIONS = (".fastq.gz", ".fq.gz")
ASSEMBLY_EXTENSIONS = (".fas.gz", ".fasta.gz", ".fna.gz")
PAIRED_SUFFIXES = ("_1", "_2")
GZIP_SUFFIX = ".gz"

# =============================================================================
# Report Layout
# =============================================================================

REPORT_COLUMNS = (
    "#sample",
    "data_type",
    "k_cov",
    "mixture",
    "lineages",
    "log_barcodes",
    "log_errors",
)
DEFAULT_OUTPUT = "out_barcodelin.txt"
