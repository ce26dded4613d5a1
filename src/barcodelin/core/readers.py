"""
Streaming FASTA/FASTQ record decoders.

Records are produced lazily one at a time so memory use is bounded by the
longest record, not by the file size. Files ending in .gz are decompressed
transparently (multi-member gzip included).
"""

from __future__ import annotations

import gzip
import zlib
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import BinaryIO, Literal, NamedTuple

from barcodelin.core.constants import GZIP_SUFFIX
from barcodelin.core.exceptions import RecordParseError

SequenceFormat = Literal["fasta", "fastq"]

FASTA_SUFFIXES = (".fas", ".fasta", ".fna", ".fa")


class SequenceRecord(NamedTuple):
    """A decoded sequence record."""

    name: str
    sequence: bytes


def _header_name(header: bytes) -> str:
    fields = header[1:].split(maxsplit=1)
    return fields[0].decode("utf-8", errors="replace") if fields else ""


def detect_format(path: Path) -> SequenceFormat:
    """
    Guess the record format from the file name.

    Example:
        >>> detect_format(Path("sample.fna.gz"))
        'fasta'
        >>> detect_format(Path("sample_1.fq.gz"))
        'fastq'
    """
    name = path.name.lower()
    if name.endswith(GZIP_SUFFIX):
        name = name[: -len(GZIP_SUFFIX)]
    if name.endswith(FASTA_SUFFIXES):
        return "fasta"
    return "fastq"


def open_sequence_file(path: Path) -> BinaryIO:
    """
    Open a sequence file for binary reading.

    The file is opened eagerly so a missing or unreadable input raises
    OSError here rather than later during decoding.
    """
    if path.name.endswith(GZIP_SUFFIX):
        return gzip.open(path, "rb")
    return path.open("rb")


def read_fasta(lines: Iterable[bytes]) -> Iterator[SequenceRecord]:
    """
    Decode multi-line FASTA records.

    Raises:
        RecordParseError: If sequence data appears before the first header.
    """
    name: str | None = None
    chunks: list[bytes] = []

    for line_num, raw in enumerate(lines, start=1):
        line = raw.rstrip(b"\r\n")
        if line.startswith(b">"):
            if name is not None:
                yield SequenceRecord(name, b"".join(chunks))
            name = _header_name(line)
            chunks = []
        elif line.strip():
            if name is None:
                raise RecordParseError("sequence data before the first FASTA header", line_num)
            chunks.append(line.strip())

    if name is not None:
        yield SequenceRecord(name, b"".join(chunks))


def read_fastq(lines: Iterable[bytes]) -> Iterator[SequenceRecord]:
    """
    Decode four-line FASTQ records.

    Raises:
        RecordParseError: On a header without '@', a separator without '+',
            a quality string whose length differs from the sequence, or a
            truncated final record.
    """
    line_iter = iter(lines)
    line_num = 0

    for raw in line_iter:
        line_num += 1
        header = raw.rstrip(b"\r\n")
        if not header.strip():
            continue
        if not header.startswith(b"@"):
            raise RecordParseError("FASTQ header does not start with '@'", line_num)

        body = []
        for _ in range(3):
            nxt = next(line_iter, None)
            if nxt is None:
                raise RecordParseError(
                    f"truncated FASTQ record '{_header_name(header)}'", line_num
                )
            body.append(nxt.rstrip(b"\r\n"))
        sequence, separator, quality = body

        if not separator.startswith(b"+"):
            raise RecordParseError("FASTQ separator line does not start with '+'", line_num + 2)
        if len(quality) != len(sequence):
            raise RecordParseError(
                f"sequence and quality lengths differ ({len(sequence)} vs {len(quality)})",
                line_num + 3,
            )
        line_num += 3
        yield SequenceRecord(_header_name(header), sequence)


def iter_records(path: Path, fmt: SequenceFormat | None = None) -> Iterator[SequenceRecord]:
    """
    Lazily decode every record of a sequence file.

    Args:
        path: FASTA or FASTQ file, optionally gzip-compressed.
        fmt: Record format; detected from the file name when None.

    Raises:
        OSError: If the file cannot be opened.
        RecordParseError: On a malformed record or corrupt compression.
    """
    decoder = read_fasta if (fmt or detect_format(path)) == "fasta" else read_fastq
    handle = open_sequence_file(path)
    with handle:
        try:
            yield from decoder(handle)
        except (EOFError, zlib.error, gzip.BadGzipFile) as e:
            msg = f"corrupt compressed data: {e}"
            raise RecordParseError(msg) from e
