"""
Format detection for bulk ingestion payloads.

Accepts a JSON array (of strings or objects), JSONL, HTML or raw text
and yields one ParsedItem per document to ingest.

Dependencies: json (stdlib), pydantic
System role: Front door of bulk ingestion
"""

from enum import Enum
import json
import re
from typing import Any

from pydantic import BaseModel, Field

from legal_pipeline.observability import get_logger

logger = get_logger(__name__)

TEXT_FIELDS = ("content_text", "content", "text", "body")
HTML_START_RE = re.compile(r"^<!DOCTYPE|^<html", re.I)


class InputSourceType(str, Enum):
    RAW_TEXT = "raw_text"
    HTML = "html"
    JSON = "json"
    JSONL = "jsonl"


class ParsedItem(BaseModel):
    """One document extracted from a payload."""

    file_name: str
    mime_type: str = "text/plain"
    raw_text: str
    source_url: str | None = None
    meta: dict[str, Any] | None = None


class ParsedInput(BaseModel):
    source_type: InputSourceType
    items: list[ParsedItem] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _text_of(obj: dict[str, Any]) -> str:
    for name in TEXT_FIELDS:
        value = obj.get(name)
        if value:
            return str(value)
    return ""


def _item_from_object(obj: dict[str, Any], default_name: str, source_url: str | None, text: str) -> ParsedItem:
    return ParsedItem(
        file_name=str(obj.get("fileName") or obj.get("file_name") or obj.get("title") or default_name),
        mime_type=str(obj.get("mimeType") or obj.get("mime_type") or "text/plain"),
        raw_text=text,
        source_url=obj.get("sourceUrl") or obj.get("source_url") or source_url,
        meta=obj,
    )


def _parse_json_array(
    trimmed: str, file_name: str, source_url: str | None
) -> ParsedInput | None:
    try:
        data = json.loads(trimmed)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, list):
        return None

    result = ParsedInput(source_type=InputSourceType.JSON)
    for i, item in enumerate(data):
        default_name = f"{file_name}_{i}"
        if isinstance(item, str):
            result.items.append(ParsedItem(file_name=default_name, raw_text=item, source_url=source_url))
        elif isinstance(item, dict):
            text = _text_of(item)
            if text:
                result.items.append(_item_from_object(item, default_name, source_url, text))
            else:
                result.warnings.append(f"Item {i}: no text field found")
        else:
            result.warnings.append(f"Item {i}: unsupported type {type(item).__name__}")
    return result


def _parse_jsonl(trimmed: str, file_name: str, source_url: str | None) -> ParsedInput | None:
    lines = [line for line in trimmed.split("\n") if line.strip()]
    result = ParsedInput(source_type=InputSourceType.JSONL)
    for i, line in enumerate(lines):
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            return None
        if not isinstance(obj, dict):
            return None
        text = _text_of(obj) or json.dumps(obj, ensure_ascii=False)
        result.items.append(_item_from_object(obj, f"{file_name}_{i}", source_url, text))
    return result if result.items else None


def parse_input(
    payload: str,
    file_name: str = "input.txt",
    mime_type: str = "text/plain",
    source_url: str | None = None,
) -> ParsedInput:
    """
    Detect the payload format and extract raw documents.

    Args:
        payload: Uploaded content
        file_name: Base name; JSON items get an _i suffix when unnamed
        mime_type: Declared MIME type
        source_url: Default source URL for every item

    Returns:
        ParsedInput with detected source type, items and warnings
    """
    trimmed = payload.strip()

    if trimmed.startswith("["):
        parsed = _parse_json_array(trimmed, file_name, source_url)
        if parsed is not None:
            logger.info(f"Parsed JSON array payload: {len(parsed.items)} items")
            return parsed

    if trimmed.startswith("{") and "\n" in trimmed:
        parsed = _parse_jsonl(trimmed, file_name, source_url)
        if parsed is not None:
            logger.info(f"Parsed JSONL payload: {len(parsed.items)} items")
            return parsed

    is_html = "html" in mime_type.lower() or bool(HTML_START_RE.match(trimmed[:100]))
    return ParsedInput(
        source_type=InputSourceType.HTML if is_html else InputSourceType.RAW_TEXT,
        items=[
            ParsedItem(
                file_name=file_name,
                mime_type="text/html" if is_html else mime_type,
                raw_text=payload,
                source_url=source_url,
            )
        ],
    )
