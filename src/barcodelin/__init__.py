"""
Barcodelin: k-mer barcode lineage typing for microbial genomes.

Assigns sequenced reads or genome assemblies to known lineages by exact
k-mer matching against a panel of lineage-defining barcode windows, and
reports k-mer coverage, the most specific lineage call and a mixture flag.
"""

__version__ = "0.1.0"
__author__ = "Barcodelin Team"

from barcodelin.core.barcodes import BarcodeDatabase
from barcodelin.core.lineages import LineageCall, resolve_lineages
from barcodelin.core.pipeline import LineageClassifier
from barcodelin.core.scanner import SequenceScanner
from barcodelin.models.results import DataType, SampleResult

__all__ = [
    "BarcodeDatabase",
    "DataType",
    "LineageCall",
    "LineageClassifier",
    "SampleResult",
    "SequenceScanner",
    "__version__",
    "resolve_lineages",
]
