"""
Chunking configuration settings.

Size limits for the structural chunker and the ingestion boundary.
Defaults are the reference values; changing them changes chunk output,
so CHUNKER_VERSION should be bumped alongside.

Dependencies: pydantic, pydantic_settings
System role: Chunker and ingestion size limits
"""

from pydantic import Field

from legal_pipeline.configs.base import BaseSettings, env_config


class ChunkingSettings(BaseSettings):
    """Structural chunker limits."""

    model_config = env_config("CHUNKING_")

    max_chunk_chars: int = Field(default=8000, description="Hard cap on a chunk span")
    min_chunk_chars: int = Field(
        default=200,
        description="Minimum leading text length that becomes a preamble chunk",
    )
    merge_min_chars: int = Field(
        default=200,
        description="Chunks shorter than this merge into a same-parent predecessor",
    )
    fixed_window_overlap: int = Field(
        default=200,
        description="Character overlap between consecutive fixed windows",
    )
    qa_max_errors: int = Field(default=10, description="Violations reported by the QA gate")

    max_ingest_chars: int = Field(
        default=2_000_000,
        description="Largest raw text accepted by the ingest endpoint",
    )
    insert_batch_size: int = Field(default=200, description="Chunk rows per insert batch")
