"""
CLI commands for barcodelin.

Provides command-line interface for sample typing and barcode
reference inspection.
"""

__all__ = ["barcodes", "classify", "main"]
