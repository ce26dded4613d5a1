"""
Nucleotide alphabet and 2-bit k-mer encoding.

Bases A, C, G and T are packed into 2 bits each (A=0, C=1, G=2, T=3) with the
first base of a k-mer in the most significant position. Every other byte maps
to the ambiguous marker and can never be part of a matching k-mer.

Two encoders are provided for the scanning hot path: a rolling pure-Python
encoder that works for any k, and a NumPy encoder that vectorizes a whole
record at once for k <= 31 (codes fit in an unsigned 64-bit integer).
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

from barcodelin.core.constants import VECTORIZED_KMER_MAX

NUCLEOTIDES = "ACGT"
AMBIGUOUS_BASE = "N"

# Code assigned to any byte outside the nucleotide alphabet
AMBIGUOUS = 4


def _build_code_table() -> bytes:
    table = bytearray([AMBIGUOUS]) * 256
    for code, base in enumerate(NUCLEOTIDES):
        table[ord(base)] = code
    return bytes(table)


def _build_complement_table() -> bytes:
    table = bytearray(AMBIGUOUS_BASE.encode()) * 256
    for base, complement in zip(NUCLEOTIDES, reversed(NUCLEOTIDES)):
        table[ord(base)] = ord(complement)
    return bytes(table)


BASE_CODES = _build_code_table()
_COMPLEMENT = _build_complement_table()


def _as_bytes(sequence: str | bytes) -> bytes:
    return sequence.encode("ascii") if isinstance(sequence, str) else sequence


def is_unambiguous(sequence: str | bytes) -> bool:
    """True if every base of the sequence is one of A, C, G, T."""
    return AMBIGUOUS not in _as_bytes(sequence).translate(BASE_CODES)


def reverse_complement(sequence: str) -> str:
    """
    Reverse complement of an upper-case nucleotide sequence.

    Total over all inputs: A<->T and C<->G, any other character becomes the
    ambiguous base 'N', which never matches real sequence.

    Example:
        >>> reverse_complement("AACGTN")
        'NACGTT'
    """
    return _as_bytes(sequence)[::-1].translate(_COMPLEMENT).decode("ascii")


def encode_kmer(kmer: str | bytes) -> int | None:
    """
    Encode a k-mer as an integer with 2 bits per base.

    Returns:
        The integer code, or None if the k-mer contains an ambiguous base.
    """
    code = 0
    for base in _as_bytes(kmer).translate(BASE_CODES):
        if base == AMBIGUOUS:
            return None
        code = (code << 2) | base
    return code


def decode_kmer(code: int, k: int) -> str:
    """Inverse of encode_kmer for a k-mer of length k."""
    bases = []
    for _ in range(k):
        bases.append(NUCLEOTIDES[code & 3])
        code >>= 2
    return "".join(reversed(bases))


def iter_kmer_codes(sequence: bytes, k: int) -> Iterator[int]:
    """
    Yield the code of every unambiguous window of width k, left to right.

    Uses a rolling update so each base is visited once. Windows that overlap
    an ambiguous base are skipped.
    """
    mask = (1 << (2 * k)) - 1
    code = 0
    run = 0
    for base in sequence.translate(BASE_CODES):
        if base == AMBIGUOUS:
            code = 0
            run = 0
            continue
        code = ((code << 2) | base) & mask
        run += 1
        if run >= k:
            yield code


def kmer_codes_array(sequence: bytes, k: int) -> np.ndarray:
    """
    Vectorized k-mer encoding of a whole record.

    Args:
        sequence: Raw sequence bytes.
        k: Window width, at most 31.

    Returns:
        uint64 array with the code of every unambiguous window, left to right.

    Raises:
        ValueError: If k is too large for 64-bit codes.
    """
    if k > VECTORIZED_KMER_MAX:
        msg = f"Vectorized encoding supports k <= {VECTORIZED_KMER_MAX}, got {k}"
        raise ValueError(msg)

    num_windows = len(sequence) - k + 1
    if num_windows <= 0:
        return np.empty(0, dtype=np.uint64)

    codes = np.frombuffer(sequence.translate(BASE_CODES), dtype=np.uint8)
    ambiguous = codes == AMBIGUOUS
    values = np.where(ambiguous, 0, codes).astype(np.uint64)

    shift = np.uint64(2)
    kmers = np.zeros(num_windows, dtype=np.uint64)
    for offset in range(k):
        kmers = (kmers << shift) | values[offset:offset + num_windows]

    # Count ambiguous bases per window with a prefix sum
    prefix = np.concatenate(([0], np.cumsum(ambiguous, dtype=np.int64)))
    valid = (prefix[k:] - prefix[:-k]) == 0
    return kmers[valid]
