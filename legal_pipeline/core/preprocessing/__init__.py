"""Noise removal for scanned and scraped legal text."""

from legal_pipeline.core.preprocessing.text_preprocessor import (
    PreprocessResult,
    preprocess,
)

__all__ = ["PreprocessResult", "preprocess"]
