"""Testing utilities for barcodelin."""

from tests.utils.assertions import (
    CLIAssertions,
    ReportAssertions,
)

__all__ = [
    "CLIAssertions",
    "ReportAssertions",
]
