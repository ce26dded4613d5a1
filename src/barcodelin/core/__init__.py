"""
Core algorithms for k-mer barcode lineage typing.

This module contains the barcode index, the streaming k-mer scanner and the
lineage resolver, plus the input discovery, decoding and reporting glue that
connects them.
"""

from barcodelin.core.barcodes import BarcodeDatabase, BarcodeEntry
from barcodelin.core.lineages import LineageCall, LineageResolver, median, resolve_lineages
from barcodelin.core.pipeline import LineageClassifier
from barcodelin.core.scanner import ScanResult, SequenceScanner

__all__ = [
    "BarcodeDatabase",
    "BarcodeEntry",
    "LineageCall",
    "LineageClassifier",
    "LineageResolver",
    "ScanResult",
    "SequenceScanner",
    "median",
    "resolve_lineages",
]
