"""
Pydantic configuration model for barcodelin.

Defines the k-mer size, evidence thresholds, coverage cap and worker count
for a typing run. Configuration can be loaded from YAML files or built from
CLI arguments; CLI flags override YAML values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from barcodelin.core.constants import (
    DEFAULT_KMER_SIZE,
    DEFAULT_MIN_BARCODES,
    DEFAULT_MIN_COUNT,
    KMER_SIZE_MAX,
    KMER_SIZE_MIN,
)

logger = logging.getLogger(__name__)


class ClassifierConfig(BaseModel):
    """
    Configuration for k-mer barcode lineage typing.

    Evidence thresholds:
        - min_count: a barcode counts as evidence for its lineage only if its
          k-mer was seen at least this many times (reads only; assemblies
          always use 1)
        - min_barcodes: a lineage is called only with at least this many
          qualifying barcodes

    Coverage cap:
        max_coverage bounds the work per read sample. Scanning stops once
        max_coverage * genome_size k-mers have been examined.
    """

    kmer_size: int = Field(
        default=DEFAULT_KMER_SIZE,
        ge=KMER_SIZE_MIN,
        le=KMER_SIZE_MAX,
        description="K-mer size (odd number between 11 and 99)",
    )
    min_count: int = Field(
        default=DEFAULT_MIN_COUNT,
        ge=1,
        description="Minimum number of k-mer occurrences for a barcode to count",
    )
    min_barcodes: int = Field(
        default=DEFAULT_MIN_BARCODES,
        ge=1,
        description="Minimum number of barcodes supporting a lineage",
    )
    max_coverage: int | None = Field(
        default=None,
        ge=1,
        description="Maximum k-mer coverage to scan per read sample (None = no cap)",
    )
    threads: int = Field(
        default=1,
        ge=1,
        description="Number of samples processed concurrently",
    )

    @field_validator("kmer_size")
    @classmethod
    def validate_odd_kmer_size(cls, value: int) -> int:
        """The barcode window is centred, so k must be odd."""
        if value % 2 == 0:
            msg = f"kmer_size must be an odd number, got {value}"
            raise ValueError(msg)
        return value

    model_config = {"frozen": True}

    def with_overrides(self, **overrides: Any) -> ClassifierConfig:
        """
        Return a copy with the given non-None values replaced.

        Used to layer CLI flags on top of a YAML configuration.
        """
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        return ClassifierConfig(**values)

    @classmethod
    def from_yaml(cls, path: Path, **overrides: Any) -> ClassifierConfig:
        """
        Load configuration from a YAML file.

        The YAML file uses a nested structure:

            kmer:
              size: 25
            filters:
              min_count: 4
              min_barcodes: 3
            limits:
              max_coverage: 30
            runtime:
              threads: 4

        Unknown keys are ignored (forward compatibility). Non-None overrides
        replace file values before validation, so a valid override wins over
        an invalid value in the file.

        Raises:
            FileNotFoundError: If YAML file does not exist.
            ValueError: If the YAML is not a mapping or values are invalid.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            msg = f"YAML config must be a mapping, got {type(raw).__name__}"
            raise ValueError(msg)

        values = _flatten_yaml_config(raw)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def to_yaml(self, path: Path) -> None:
        """Write configuration to a YAML file."""
        path.write_text(self.to_yaml_str())

    def to_yaml_str(self) -> str:
        """Serialize configuration to a nested YAML string."""
        import yaml

        data = {
            "kmer": {"size": self.kmer_size},
            "filters": {
                "min_count": self.min_count,
                "min_barcodes": self.min_barcodes,
            },
            "limits": {"max_coverage": self.max_coverage},
            "runtime": {"threads": self.threads},
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False)


def _flatten_yaml_config(raw: dict[str, Any]) -> dict[str, Any]:
    """Map the nested YAML structure onto ClassifierConfig keyword arguments."""
    flat: dict[str, Any] = {}
    _map_if_present(raw.get("kmer", {}), "size", flat, "kmer_size")

    filters = raw.get("filters", {})
    _map_if_present(filters, "min_count", flat, "min_count")
    _map_if_present(filters, "min_barcodes", flat, "min_barcodes")

    _map_if_present(raw.get("limits", {}), "max_coverage", flat, "max_coverage")
    _map_if_present(raw.get("runtime", {}), "threads", flat, "threads")
    return flat


def _map_if_present(
    source: dict[str, Any],
    source_key: str,
    target: dict[str, Any],
    target_key: str,
) -> None:
    """Copy value from source dict to target dict if key exists."""
    if source_key in source and source[source_key] is not None:
        target[target_key] = source[source_key]
