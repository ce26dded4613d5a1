"""
Lineage resolution from per-barcode k-mer counts.

Barcode counts are merged into per-lineage evidence lists, lineages with too
few supporting barcodes are dropped, each survivor is summarized by the
median of its counts, and ancestors are removed in favour of their most
specific descendants.

Lineage names encode the hierarchy: "lineage4.1.2" descends from
"lineage4.1" and "lineage4" because those names are strict prefixes of it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import NamedTuple


class LineageCall(NamedTuple):
    """Outcome of lineage resolution for one sample."""

    call: str
    mixture: bool
    log: str


def median(values: Sequence[int]) -> int:
    """
    Median with integer truncation for even-length lists.

    Example:
        >>> median([2, 4])
        3
        >>> median([9, 2, 4])
        4
    """
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) // 2
    return ordered[mid]


def merge_barcodes(
    counts: Mapping[int, int],
    lineage_of: Callable[[int], str],
    min_count: int,
) -> dict[str, list[int]]:
    """
    Group barcode counts by lineage.

    Only barcodes seen at least min_count times contribute. Counts are
    appended in ascending barcode-id order so the evidence log is stable.
    Lineages without a qualifying barcode are absent from the result.
    """
    merged: dict[str, list[int]] = {}
    for barcode_id in sorted(counts):
        count = counts[barcode_id]
        if count >= min_count:
            merged.setdefault(lineage_of(barcode_id), []).append(count)
    return merged


def format_evidence(evidence: Mapping[str, Sequence[int]]) -> str:
    """
    Render lineage evidence as "name (c1, c2), name2 (c1)" sorted by name.
    """
    return ", ".join(
        f"{name} ({', '.join(str(count) for count in evidence[name])})"
        for name in sorted(evidence)
    )


def filter_lineages(
    evidence: Mapping[str, Sequence[int]],
    min_barcodes: int,
) -> dict[str, int]:
    """Median count of every lineage supported by at least min_barcodes barcodes."""
    return {
        name: median(counts)
        for name, counts in evidence.items()
        if len(counts) >= min_barcodes
    }


def leaf_lineages(medians: Mapping[str, int]) -> dict[str, int]:
    """
    Keep only the most specific lineages.

    A lineage is dropped when its name is a strict prefix of another
    surviving lineage's name.
    """
    names = list(medians)
    return {
        name: value
        for name, value in medians.items()
        if not any(other != name and other.startswith(name) for other in names)
    }


def format_call(leaves: Mapping[str, int]) -> str:
    """Render leaf lineages as "name (median), ..." sorted by name."""
    return ", ".join(f"{name} ({leaves[name]})" for name in sorted(leaves))


def resolve_lineages(
    counts: Mapping[int, int],
    lineage_of: Callable[[int], str],
    min_count: int,
    min_barcodes: int,
) -> LineageCall:
    """
    Turn per-barcode counts into a lineage call.

    Args:
        counts: Barcode id -> number of k-mer hits.
        lineage_of: Resolves a barcode id to its lineage name.
        min_count: Minimum hits for a barcode to count as evidence.
        min_barcodes: Minimum qualifying barcodes for a lineage to be called.

    Returns:
        LineageCall with the leaf call, the mixture flag (more than one leaf)
        and the pre-filter evidence log. Empty input gives an empty call.
    """
    evidence = merge_barcodes(counts, lineage_of, min_count)
    log = format_evidence(evidence)
    leaves = leaf_lineages(filter_lineages(evidence, min_barcodes))
    return LineageCall(call=format_call(leaves), mixture=len(leaves) > 1, log=log)


class LineageResolver:
    """Lineage resolution bound to a barcode database and thresholds."""

    def __init__(self, lineage_of: Callable[[int], str], min_count: int, min_barcodes: int) -> None:
        self.lineage_of = lineage_of
        self.min_count = min_count
        self.min_barcodes = min_barcodes

    def resolve(self, counts: Mapping[int, int]) -> LineageCall:
        return resolve_lineages(counts, self.lineage_of, self.min_count, self.min_barcodes)
