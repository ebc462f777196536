"""Document classification, metadata extraction and schema validation."""

from legal_pipeline.core.normalization.normalizer import (
    NormalizeOptions,
    NormalizeResult,
    compute_source_hash,
    detect_doc_type,
    normalize,
)
from legal_pipeline.core.normalization.validation import validate

__all__ = [
    "NormalizeOptions",
    "NormalizeResult",
    "compute_source_hash",
    "detect_doc_type",
    "normalize",
    "validate",
]
