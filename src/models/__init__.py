"""Domain models for the catalogue metrics pipeline.

This package contains the dataclasses and enums shared by the ingest, metrics and
services layers.
"""

from .canonical_fields import CanonicalField, FieldKind
from .config_models import MetricsSettings, NormalizerSettings
from .error_record import ErrorRecord
from .load_result import CoercionIssue, FieldResolution, LoadResult, LoadStatus
from .product_record import UNKNOWN, ProductRecord

__all__ = [
    # Field catalogue
    "CanonicalField",
    "FieldKind",
    # Configuration models
    "MetricsSettings",
    "NormalizerSettings",
    # Processing models
    "ProductRecord",
    "UNKNOWN",
    "LoadResult",
    "LoadStatus",
    "CoercionIssue",
    "FieldResolution",
    "ErrorRecord",
]
