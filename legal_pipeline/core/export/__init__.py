"""JSONL export and validation."""

from legal_pipeline.core.export.jsonl import (
    JsonlValidationResult,
    build_jsonl,
    collection_for,
    validate_jsonl,
)

__all__ = ["JsonlValidationResult", "build_jsonl", "collection_for", "validate_jsonl"]
