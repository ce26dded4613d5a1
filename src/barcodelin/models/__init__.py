"""
Pydantic data models for barcodelin.

Provides type-safe models for run configuration and per-sample results.
"""

from barcodelin.models.config import ClassifierConfig
from barcodelin.models.results import DataType, SampleResult

__all__ = [
    "ClassifierConfig",
    "DataType",
    "SampleResult",
]
