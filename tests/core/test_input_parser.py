"""
Unit tests for bulk payload format detection.
"""

import json

from legal_pipeline.core.ingestion import InputSourceType, parse_input


class TestJsonPayloads:
    """Test JSON array and JSONL payloads."""

    def test_array_of_strings(self):
        """Strings get indexed default names."""
        parsed = parse_input('["first doc", "second doc"]', file_name="batch.json")

        assert parsed.source_type == InputSourceType.JSON
        assert [i.file_name for i in parsed.items] == ["batch.json_0", "batch.json_1"]
        assert [i.raw_text for i in parsed.items] == ["first doc", "second doc"]

    def test_array_of_objects_with_warnings(self):
        """Objects without text and unsupported items produce warnings."""
        payload = json.dumps(
            [
                {"fileName": "law.txt", "content": "Law body", "sourceUrl": "https://arlis.am/1"},
                {"title": "empty"},
                42,
            ]
        )

        parsed = parse_input(payload, file_name="batch.json")

        assert len(parsed.items) == 1
        item = parsed.items[0]
        assert item.file_name == "law.txt"
        assert item.raw_text == "Law body"
        assert item.source_url == "https://arlis.am/1"
        assert parsed.warnings == ["Item 1: no text field found", "Item 2: unsupported type int"]

    def test_jsonl(self):
        """One object per line is JSONL."""
        payload = '{"text": "alpha"}\n\n{"content_text": "beta", "file_name": "b.txt"}\n'

        parsed = parse_input(payload, source_url="https://example.org")

        assert parsed.source_type == InputSourceType.JSONL
        assert [i.file_name for i in parsed.items] == ["input.txt_0", "b.txt"]
        assert [i.raw_text for i in parsed.items] == ["alpha", "beta"]
        assert all(i.source_url == "https://example.org" for i in parsed.items)

    def test_broken_json_is_raw_text(self):
        """Unparseable JSON-looking payloads are treated as plain text."""
        parsed = parse_input("[not json at all")

        assert parsed.source_type == InputSourceType.RAW_TEXT
        assert parsed.items[0].raw_text == "[not json at all"


class TestTextPayloads:
    """Test HTML and raw text payloads."""

    def test_html_detected_from_content(self):
        """A doctype marks HTML regardless of declared type."""
        parsed = parse_input("<!DOCTYPE html><html><body>Law</body></html>", file_name="page")

        assert parsed.source_type == InputSourceType.HTML
        assert parsed.items[0].mime_type == "text/html"

    def test_html_from_mime_type(self):
        """Declared HTML MIME types are honored."""
        parsed = parse_input("<div>Law</div>", mime_type="text/html")

        assert parsed.source_type == InputSourceType.HTML

    def test_raw_text_passthrough(self, legislation_text):
        """Plain text becomes one unchanged item."""
        parsed = parse_input(legislation_text, file_name="law.txt")

        assert parsed.source_type == InputSourceType.RAW_TEXT
        assert len(parsed.items) == 1
        assert parsed.items[0].raw_text == legislation_text
        assert parsed.items[0].file_name == "law.txt"
        assert parsed.warnings == []
