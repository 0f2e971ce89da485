"""CSV ingestion: reading, header resolution, cell coercion and row normalization."""

from .coercion import to_int, to_number, to_trimmed_string, to_truthy_boolean
from .headers import HeaderIndex, build_index, normalize_header_key, resolve, resolve_field
from .normalizer import NormalizationResult, normalize, normalize_rows

__all__ = [
    "to_number",
    "to_int",
    "to_truthy_boolean",
    "to_trimmed_string",
    "HeaderIndex",
    "build_index",
    "normalize_header_key",
    "resolve",
    "resolve_field",
    "NormalizationResult",
    "normalize",
    "normalize_rows",
]
