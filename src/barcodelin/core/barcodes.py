"""
Barcode reference database.

The reference is a tab-separated text file with one control line giving the
genome size and one line per barcode:

    genome_size     4411532
    lineage1.1      <left segment>  <middle segment>  <right segment>

For each barcode line the k-mer window centred 50 bases into the
concatenated segments is indexed together with its reverse complement, both
pointing at the same (lineage, barcode id) entry. Keys are 2-bit integer
codes so lookups compare machine integers rather than strings.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

import numpy as np

from barcodelin.core.constants import (
    BARCODE_COLUMNS,
    BARCODE_FLANK_OFFSET,
    GENOME_SIZE_KEYS,
    KMER_SIZE_MAX,
    KMER_SIZE_MIN,
    VECTORIZED_KMER_MAX,
)
from barcodelin.core.exceptions import (
    GenomeSizeMissingError,
    GenomeSizeParseError,
    InvalidKmerSizeError,
    MalformedBarcodeError,
)
from barcodelin.core.sequence import encode_kmer, is_unambiguous, reverse_complement

logger = logging.getLogger(__name__)


def validate_kmer_size(k: int) -> int:
    """
    Check that k is an odd integer in [11, 99].

    Raises:
        InvalidKmerSizeError: If k is even or out of range.
    """
    if k < KMER_SIZE_MIN or k > KMER_SIZE_MAX or k % 2 == 0:
        raise InvalidKmerSizeError(k)
    return k


class BarcodeEntry(NamedTuple):
    """Value stored for every indexed k-mer."""

    lineage: str
    barcode_id: int


class BarcodeDefinition(NamedTuple):
    """One barcode line of the reference file."""

    lineage: str
    left: str
    middle: str
    right: str
    line_num: int

    def window(self, k: int) -> str:
        """
        Extract the k-mer window centred on the barcode position.

        Raises:
            MalformedBarcodeError: If the segments are too short or the window
                contains bases outside A/C/G/T.
        """
        context = f"{self.left}{self.middle}{self.right}"
        start = BARCODE_FLANK_OFFSET - (k - 1) // 2
        if len(context) < start + k:
            raise MalformedBarcodeError(
                self.line_num,
                f"segments span {len(context)} bases, need at least {start + k} for k={k}",
            )
        window = context[start:start + k].upper()
        if not is_unambiguous(window):
            raise MalformedBarcodeError(
                self.line_num,
                f"window '{window}' contains bases outside A/C/G/T",
            )
        return window


def parse_barcode_text(text: str) -> tuple[int, list[BarcodeDefinition]]:
    """
    Parse reference text into a genome size and barcode definitions.

    Returns:
        Tuple of (genome_size, definitions in file order).

    Raises:
        GenomeSizeMissingError: If no genome_size control line is present.
        GenomeSizeParseError: If the genome size is not a positive integer.
        MalformedBarcodeError: If a barcode line has too few columns.
    """
    genome_size: int | None = None
    definitions: list[BarcodeDefinition] = []

    for line_num, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        fields = line.split("\t")

        if fields[0] in GENOME_SIZE_KEYS:
            value = fields[1].strip() if len(fields) > 1 else ""
            digits = value[1:] if value.startswith("+") else value
            if not (digits.isascii() and digits.isdigit()):
                raise GenomeSizeParseError(value)
            genome_size = int(digits)
            if genome_size <= 0:
                raise GenomeSizeParseError(value)
            continue

        if len(fields) < BARCODE_COLUMNS:
            raise MalformedBarcodeError(
                line_num,
                f"expected {BARCODE_COLUMNS} tab-separated columns, got {len(fields)}",
            )
        lineage, left, middle, right = fields[:BARCODE_COLUMNS]
        definitions.append(BarcodeDefinition(lineage, left, middle, right, line_num))

    if genome_size is None:
        raise GenomeSizeMissingError()
    return genome_size, definitions


class BarcodeDatabase:
    """
    Immutable k-mer index of lineage-defining barcodes.

    Built once per run and shared read-only by every sample scan, so no
    locking is needed when samples are processed concurrently.

    Example:
        db = BarcodeDatabase.from_file(Path("barcodes.tsv"), k=25)
        entry = db.lookup("ACGT...")
    """

    __slots__ = (
        "_barcode_lineages",
        "_genome_size",
        "_index",
        "_k",
        "_sorted_codes",
        "_sorted_ids",
    )

    def __init__(
        self,
        index: dict[int, int],
        barcode_lineages: Sequence[str],
        genome_size: int,
        k: int,
    ) -> None:
        """
        Initialize from a prebuilt code index.

        Args:
            index: Mapping from 2-bit k-mer code to barcode id.
            barcode_lineages: Lineage name of each barcode id.
            genome_size: Reference genome size in bases (> 0).
            k: K-mer size used to build the index.
        """
        self._k = validate_kmer_size(k)
        if genome_size <= 0:
            raise GenomeSizeParseError(str(genome_size))
        self._genome_size = genome_size
        self._index = dict(index)
        self._barcode_lineages: tuple[str, ...] = tuple(barcode_lineages)

        # Sorted parallel arrays for vectorized membership tests
        if k <= VECTORIZED_KMER_MAX:
            codes = np.fromiter(self._index.keys(), dtype=np.uint64, count=len(self._index))
            ids = np.fromiter(self._index.values(), dtype=np.int64, count=len(self._index))
            order = np.argsort(codes)
            self._sorted_codes: np.ndarray | None = codes[order]
            self._sorted_ids: np.ndarray | None = ids[order]
        else:
            self._sorted_codes = None
            self._sorted_ids = None

    @classmethod
    def from_text(cls, text: str, k: int) -> BarcodeDatabase:
        """
        Build the database from reference text.

        Each barcode gets a zero-based id in file order. Its window and the
        reverse complement of the window are both indexed under that id. A
        palindromic window indexes the same key twice with the same value.
        When two barcodes share a window the later line wins.

        Raises:
            ConfigurationError: On an invalid k, a missing or unparsable
                genome size, or any malformed barcode line. No partial
                database is returned.
        """
        validate_kmer_size(k)
        genome_size, definitions = parse_barcode_text(text)

        index: dict[int, int] = {}
        barcode_lineages: list[str] = []
        collisions = 0

        for barcode_id, definition in enumerate(definitions):
            window = definition.window(k)
            barcode_lineages.append(definition.lineage)

            for kmer in (window, reverse_complement(window)):
                code = encode_kmer(kmer)
                previous = index.get(code)
                if previous is not None and previous != barcode_id:
                    collisions += 1
                    logger.debug(
                        "Barcode window at line %d (%s) overrides barcode %d (%s)",
                        definition.line_num,
                        definition.lineage,
                        previous,
                        barcode_lineages[previous],
                    )
                index[code] = barcode_id

        if collisions:
            logger.warning(
                "%d barcode k-mers are shared between barcodes; the last definition wins",
                collisions,
            )
        logger.info(
            "Loaded %d barcodes (%d k-mers, genome size %d)",
            len(barcode_lineages),
            len(index),
            genome_size,
        )
        return cls(index, barcode_lineages, genome_size, k)

    @classmethod
    def from_file(cls, path: Path, k: int) -> BarcodeDatabase:
        """Load the database from a barcode reference file."""
        return cls.from_text(path.read_text(), k)

    @property
    def k(self) -> int:
        """K-mer size of the index."""
        return self._k

    @property
    def genome_size(self) -> int:
        """Reference genome size in bases."""
        return self._genome_size

    @property
    def num_barcodes(self) -> int:
        """Number of barcode lines in the reference."""
        return len(self._barcode_lineages)

    @property
    def lineages(self) -> list[str]:
        """Sorted distinct lineage names."""
        return sorted(set(self._barcode_lineages))

    @property
    def supports_vectorized(self) -> bool:
        """True if k-mer codes fit 64-bit integers."""
        return self._sorted_codes is not None

    def __len__(self) -> int:
        """Number of distinct indexed k-mers."""
        return len(self._index)

    def __contains__(self, kmer: object) -> bool:
        if not isinstance(kmer, (str, bytes)):
            return False
        return self.lookup(kmer) is not None

    def lineage_of(self, barcode_id: int) -> str:
        """Lineage name of a barcode id."""
        return self._barcode_lineages[barcode_id]

    def lookup(self, kmer: str | bytes) -> BarcodeEntry | None:
        """
        Find the barcode matching a k-mer exactly.

        Returns:
            BarcodeEntry for the barcode, or None if the k-mer has the wrong
            length, contains ambiguous bases or is not a barcode.
        """
        if len(kmer) != self._k:
            return None
        code = encode_kmer(kmer)
        if code is None:
            return None
        barcode_id = self._index.get(code)
        if barcode_id is None:
            return None
        return BarcodeEntry(self._barcode_lineages[barcode_id], barcode_id)

    def barcode_id_of(self, code: int) -> int | None:
        """Barcode id of an encoded k-mer, or None."""
        return self._index.get(code)

    def match_codes(self, codes: np.ndarray) -> np.ndarray:
        """
        Vectorized lookup of many encoded k-mers.

        Args:
            codes: uint64 array of k-mer codes.

        Returns:
            Array of barcode ids, one per code that is in the index.
        """
        if self._sorted_codes is None or self._sorted_ids is None:
            msg = f"Vectorized lookup is not available for k={self._k}"
            raise ValueError(msg)
        if len(codes) == 0 or len(self._sorted_codes) == 0:
            return np.empty(0, dtype=np.int64)

        positions = np.searchsorted(self._sorted_codes, codes)
        positions = np.minimum(positions, len(self._sorted_codes) - 1)
        hits = self._sorted_codes[positions] == codes
        return self._sorted_ids[positions[hits]]

    def kmer_limit(self, max_coverage: int | None) -> int | None:
        """
        Absolute k-mer budget for a coverage cap.

        Returns:
            max_coverage * genome_size, or None when no cap is set.
        """
        if max_coverage is None:
            return None
        return max_coverage * self._genome_size
