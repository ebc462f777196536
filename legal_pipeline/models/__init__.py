"""
Domain models and API schemas.

Dependencies: pydantic
System role: Shared data contracts between core, services and API
"""

from legal_pipeline.models.enums import (
    Branch,
    ChunkType,
    CourtType,
    DocType,
    Outcome,
)
from legal_pipeline.models.document import (
    CourtMeta,
    IngestionMeta,
    NormalizedDocument,
    NormalizeInput,
    ValidationIssue,
)
from legal_pipeline.models.chunk import (
    ChunkInput,
    ChunkLocator,
    ChunkMetadata,
    ChunkResult,
    LegalChunk,
)

__all__ = [
    "Branch",
    "ChunkType",
    "CourtType",
    "DocType",
    "Outcome",
    "CourtMeta",
    "IngestionMeta",
    "NormalizedDocument",
    "NormalizeInput",
    "ValidationIssue",
    "ChunkInput",
    "ChunkLocator",
    "ChunkMetadata",
    "ChunkResult",
    "LegalChunk",
]
