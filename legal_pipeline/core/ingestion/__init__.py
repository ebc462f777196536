"""Payload parsing for ingestion."""

from legal_pipeline.core.ingestion.input_parser import (
    InputSourceType,
    ParsedInput,
    ParsedItem,
    parse_input,
)

__all__ = ["InputSourceType", "ParsedInput", "ParsedItem", "parse_input"]
