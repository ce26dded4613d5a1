"""
Per-sample lineage typing pipeline.

Each sample is classified independently into one immutable SampleResult:
file composition -> k-mer scan -> lineage resolution. Sample-scoped failures
(unexpected file composition, undecodable records) are recorded in the
sample's result and the batch continues. Samples can be processed by a
bounded thread pool; the shared BarcodeDatabase is read-only.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Protocol

from barcodelin.core.barcodes import BarcodeDatabase
from barcodelin.core.constants import ASSEMBLY_MIN_COUNT
from barcodelin.core.exceptions import SampleCompositionError, SampleParseError
from barcodelin.core.input_files import classify_sample
from barcodelin.core.lineages import LineageResolver
from barcodelin.core.scanner import SequenceScanner
from barcodelin.models.config import ClassifierConfig
from barcodelin.models.results import DataType, SampleResult

logger = logging.getLogger(__name__)


class SampleObserver(Protocol):
    """Receives progress notifications around each sample."""

    def on_sample_start(self, sample: str) -> None: ...

    def on_sample_end(self, result: SampleResult) -> None: ...


class NullObserver:
    """Observer that ignores all notifications."""

    def on_sample_start(self, sample: str) -> None:
        pass

    def on_sample_end(self, result: SampleResult) -> None:
        pass


class LineageClassifier:
    """
    Classify samples against a barcode database.

    Assemblies are typed with a minimum count of 1 and no coverage cap;
    read samples use the configured minimum count and coverage cap.

    Example:
        database = BarcodeDatabase.from_file(Path("barcodes.tsv"), k=25)
        classifier = LineageClassifier(database, ClassifierConfig(kmer_size=25))
        results = classifier.classify_samples(discover_samples(Path("reads/")))
    """

    def __init__(
        self,
        database: BarcodeDatabase,
        config: ClassifierConfig | None = None,
        observer: SampleObserver | None = None,
    ) -> None:
        self.database = database
        self.config = config or ClassifierConfig(kmer_size=database.k)
        self.observer = observer or NullObserver()

        if self.config.kmer_size != database.k:
            msg = (
                f"Configured kmer_size ({self.config.kmer_size}) does not match "
                f"the barcode database ({database.k})"
            )
            raise ValueError(msg)

    def resolver_for(self, data_type: DataType) -> LineageResolver:
        """Lineage resolver with the minimum count for a data type."""
        if data_type == DataType.ASSEMBLY:
            min_count = ASSEMBLY_MIN_COUNT
        else:
            min_count = self.config.min_count
        return LineageResolver(self.database.lineage_of, min_count, self.config.min_barcodes)

    def kmer_limit_for(self, data_type: DataType) -> int | None:
        """Coverage cap in k-mers, or None for assemblies."""
        if data_type == DataType.ASSEMBLY:
            return None
        return self.database.kmer_limit(self.config.max_coverage)

    def _classify(self, sample: str, files: Sequence[Path]) -> SampleResult:
        try:
            data_type = classify_sample(sample, list(files))
        except SampleCompositionError as e:
            logger.warning("Skipping sample %s: %s", sample, e.message)
            return SampleResult.failed(sample, DataType.UNKNOWN, e.message)

        scanner = SequenceScanner(self.database, kmer_limit=self.kmer_limit_for(data_type))
        try:
            scan = scanner.scan_sample(sample, files)
        except SampleParseError as e:
            return SampleResult.failed(sample, data_type, e.message)

        call = self.resolver_for(data_type).resolve(scan.counts)
        return SampleResult(
            sample=sample,
            data_type=data_type,
            coverage=scan.coverage(self.database.genome_size),
            mixture=call.mixture,
            lineages=call.call,
            log_barcodes=call.log,
        )

    def classify_sample(self, sample: str, files: Sequence[Path]) -> SampleResult:
        """
        Classify one sample.

        Raises:
            OSError: If an input file cannot be opened (run-fatal).
        """
        self.observer.on_sample_start(sample)
        result = self._classify(sample, files)
        self.observer.on_sample_end(result)
        return result

    def classify_samples(
        self,
        samples: Mapping[str, Sequence[Path]],
        threads: int | None = None,
    ) -> list[SampleResult]:
        """
        Classify many samples, optionally in parallel.

        Args:
            samples: Sample name -> input files.
            threads: Worker count (default: config.threads).

        Returns:
            Results ordered by sample name.
        """
        workers = threads or self.config.threads
        ordered = sorted(samples.items())

        if workers <= 1 or len(ordered) <= 1:
            results = [self.classify_sample(name, files) for name, files in ordered]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self.classify_sample, name, files)
                    for name, files in ordered
                ]
                results = [future.result() for future in as_completed(futures)]

        return sorted(results, key=lambda result: result.sample)
