from __future__ import annotations

from dataclasses import dataclass, field

from .canonical_fields import CanonicalField
from .product_record import UNKNOWN

"""Config dataclasses for the catalogue metrics pipeline.

These are separate from the YAML loader in src/config/loader.py and carry the
typed settings the normalizer and the derived metrics engine read.
"""

__all__ = [
    "MetricsSettings",
    "NormalizerSettings",
]


@dataclass(frozen=True)
class MetricsSettings:
    """Tunable constants for derived metrics.

    content_image_threshold varies between export variants (1 or 2 images), so it
    is configuration rather than a hardcoded rule.
    """
    content_image_threshold: int = 2
    weeks_per_year: float = 52.0
    weeks_of_cover_cap: float = 260.0  # display/binning only, stored metric is uncapped
    vat_rate: float = 0.2


@dataclass(frozen=True)
class NormalizerSettings:
    """Settings applied while turning raw rows into ProductRecords."""
    unknown_label: str = UNKNOWN
    # Extra header spellings per field, tried before the built-in candidates
    header_aliases: dict[CanonicalField, tuple[str, ...]] = field(default_factory=dict)
    metrics: MetricsSettings = field(default_factory=MetricsSettings)
    keep_raw_values: bool = False

    def candidates_for(self, canonical: CanonicalField) -> tuple[str, ...]:
        extra = self.header_aliases.get(canonical, ())
        return tuple(extra) + canonical.candidates
