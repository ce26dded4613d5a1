"""
Streaming k-mer scanner.

Slides a window of width k over every record of a sample, looks each window
up in the barcode database and counts hits per barcode id. Work is bounded
by an optional k-mer budget derived from a coverage cap.

K-mer accounting convention: after each record of length L >= k the
examined-k-mer counter grows by L - k, one less than the L - k + 1 windows
actually looked up. Coverage values and coverage caps are expressed in this
unit.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from contextlib import closing
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from barcodelin.core.barcodes import BarcodeDatabase
from barcodelin.core.exceptions import RecordParseError, SampleParseError
from barcodelin.core.readers import SequenceRecord, iter_records
from barcodelin.core.sequence import iter_kmer_codes, kmer_codes_array

logger = logging.getLogger(__name__)


def kmer_coverage(kmers: int, genome_size: int) -> int:
    """
    K-mer coverage rounded half away from zero.

    Example:
        >>> kmer_coverage(250, 100)
        3
        >>> kmer_coverage(0, 100)
        0
    """
    if kmers <= 0:
        return 0
    return (2 * kmers + genome_size) // (2 * genome_size)


@dataclass
class ScanResult:
    """Barcode counts and k-mer tally accumulated for one sample."""

    counts: Counter[int] = field(default_factory=Counter)
    kmers: int = 0
    capped: bool = False

    def coverage(self, genome_size: int) -> int:
        """K-mer coverage of the scanned data."""
        return kmer_coverage(self.kmers, genome_size)


class SequenceScanner:
    """
    Count barcode k-mer hits in a stream of sequence records.

    Two lookup engines produce identical counts:
    - vectorized: NumPy encoding plus sorted-key membership, k <= 31
    - rolling: pure-Python 2-bit rolling encoder, any k

    Example:
        scanner = SequenceScanner(database, kmer_limit=database.kmer_limit(30))
        result = scanner.scan_sample("ERR123", [Path("ERR123_1.fq.gz")])
    """

    def __init__(
        self,
        database: BarcodeDatabase,
        kmer_limit: int | None = None,
        vectorized: bool | None = None,
    ) -> None:
        """
        Initialize scanner.

        Args:
            database: Barcode index to query.
            kmer_limit: Stop once more than this many k-mers were examined
                (None = scan everything).
            vectorized: Force an engine; defaults to vectorized when the
                database supports it.
        """
        if vectorized is None:
            vectorized = database.supports_vectorized
        elif vectorized and not database.supports_vectorized:
            msg = f"Vectorized scanning is not available for k={database.k}"
            raise ValueError(msg)

        self.database = database
        self.kmer_limit = kmer_limit
        self.vectorized = vectorized

    def scan_sequence(self, sequence: bytes, counts: Counter[int]) -> int:
        """
        Count barcode hits in one sequence.

        Returns:
            K-mers to add to the examined tally (length - k), or 0 if the
            sequence is shorter than k and was skipped.
        """
        k = self.database.k
        if len(sequence) < k:
            return 0

        if self.vectorized:
            barcode_ids = self.database.match_codes(kmer_codes_array(sequence, k))
            if len(barcode_ids):
                ids, hits = np.unique(barcode_ids, return_counts=True)
                for barcode_id, hit_count in zip(ids.tolist(), hits.tolist()):
                    counts[barcode_id] += hit_count
        else:
            lookup = self.database.barcode_id_of
            for code in iter_kmer_codes(sequence, k):
                barcode_id = lookup(code)
                if barcode_id is not None:
                    counts[barcode_id] += 1

        return len(sequence) - k

    def limit_reached(self, kmers: int) -> bool:
        """True once the examined k-mers exceed the budget."""
        return self.kmer_limit is not None and kmers > self.kmer_limit

    def scan_records(
        self,
        records: Iterable[SequenceRecord],
        result: ScanResult | None = None,
    ) -> ScanResult:
        """
        Scan records into a (new or existing) result, honouring the k-mer cap.

        Reading stops after the record that pushes the tally over the cap.
        """
        if result is None:
            result = ScanResult()
        for record in records:
            result.kmers += self.scan_sequence(record.sequence, result.counts)
            if self.limit_reached(result.kmers):
                result.capped = True
                break
        return result

    def scan_sample(self, sample: str, files: Sequence[Path]) -> ScanResult:
        """
        Scan all files of a sample in file-name order.

        Raises:
            SampleParseError: If any record cannot be decoded. Partial counts
                are discarded.
            OSError: If an input file cannot be opened.
        """
        result = ScanResult()
        for path in sorted(files, key=lambda p: p.name):
            try:
                with closing(iter_records(path)) as records:
                    self.scan_records(records, result)
            except RecordParseError as e:
                logger.warning("Sample %s: failed to decode %s: %s", sample, path.name, e.message)
                raise SampleParseError(sample, path, e.message) from e

            if result.capped:
                logger.debug(
                    "Sample %s: k-mer limit %s reached after %d k-mers in %s",
                    sample,
                    self.kmer_limit,
                    result.kmers,
                    path.name,
                )
                break
        return result
