"""
Text preprocessor for PDF/HTML ingested legal documents.

Deterministic line-level cleaning applied before normalization. Rules run
in a fixed order and each is recorded in rules_applied only when it
changed the text:

    invisible -> html -> entities -> page_numbers -> repeated_lines
    -> url_noise -> garbled -> whitespace

Lines that open a legal structure (article headers) are never removed by
the heuristic rules.

Dependencies: re (stdlib)
System role: First stage of the normalization pipeline
"""

from dataclasses import dataclass, field
import re
from collections import Counter

INVISIBLE_CHARS_RE = re.compile("[\ufeff\u200b\u200c\u200d\u2060\ufffe]")

HTML_DETECT_RE = re.compile(
    r"<(?:!doctype|html|head|body|div|p|br|span|table|tr|td|h[1-6]|ul|ol|li)\b",
    re.IGNORECASE,
)
HTML_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
STYLE_SCRIPT_RE = re.compile(r"<(style|script)[^>]*>.*?</\1\s*>", re.DOTALL | re.IGNORECASE)
BLOCK_TAG_RE = re.compile(r"</?(?:p|div|br|tr|li|h[1-6]|table|section|article)\b[^>]*>", re.IGNORECASE)
HTML_TAG_RE = re.compile(r"</?[a-zA-Z][^>]*>")

ENTITY_MAP = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
    "ndash": "–",
    "mdash": "—",
    "laquo": "«",
    "raquo": "»",
}
NAMED_ENTITY_RE = re.compile(r"&(amp|lt|gt|quot|apos|nbsp|ndash|mdash|laquo|raquo);", re.IGNORECASE)
NUMERIC_ENTITY_RE = re.compile(r"&#(\d{1,7});")
HEX_ENTITY_RE = re.compile(r"&#x([0-9a-fA-F]{1,6});")

PAGE_NUMBER_LINE_RE = re.compile(r"^\s*-?\s*\d{1,4}\s*-?\s*$")
# page / p. / str. / "стр." / Armenian "Էջ"; "of" / "/" / Armenian "իզ" / "из"
PAGE_OF_RE = re.compile(
    r"^\s*(?:page|p\.|str\.|стр\.?|Էջ)\s*\d+\s*"
    r"(?:of|/|իզ|из)?\s*\d*\s*$",
    re.IGNORECASE,
)

REPEATED_LINE_MIN_COUNT = 3
REPEATED_LINE_MAX_LENGTH = 120

BARE_URL_LINE_RE = re.compile(r"^\s*https?://\S+\s*$")
# Home / Main / Armenian "Գլխավոր" / Russian "Главная" followed by a breadcrumb separator
NAV_LINE_RE = re.compile(
    r"^\s*(?:Home|Main|Գլխավոր|Главная)"
    r"\s*[>|»›]",
    re.IGNORECASE,
)
PORTAL_NOISE_RE = re.compile(r"^\s*(?:www\.)?(?:arlis|datalex)\.am\s*$", re.IGNORECASE)

GARBLED_LINE_RE = re.compile(r"^[A-Za-z]{3,}$")
GARBLED_MIN_LENGTH = 4
GARBLED_MAX_LENGTH = 30
GARBLED_DIVERSITY_RATIO = 0.4

# Article / Статья / Հոդված followed by a number
STRUCTURE_MARKER_RE = re.compile(
    r"^\s*(?:Article|Статья|Հոդված)\s+\d",
    re.IGNORECASE,
)

HORIZONTAL_WS_RE = re.compile(r"[^\S\n]+")
BLANK_RUN_RE = re.compile(r"\n{3,}")
# Rows with two or more tabs keep their cell separators
TAB_ROW_MIN_TABS = 2


@dataclass
class PreprocessResult:
    """Cleaned text plus an account of what changed."""

    cleaned: str
    rules_applied: list[str] = field(default_factory=list)
    chars_removed: int = 0


def _is_structural(line: str) -> bool:
    return bool(STRUCTURE_MARKER_RE.match(line))


def strip_invisible(text: str) -> str:
    return INVISIBLE_CHARS_RE.sub("", text)


def looks_like_html(text: str) -> bool:
    return bool(HTML_DETECT_RE.search(text[:2000]))


def strip_html(text: str) -> str:
    text = STYLE_SCRIPT_RE.sub(" ", text)
    text = HTML_COMMENT_RE.sub(" ", text)
    text = BLOCK_TAG_RE.sub("\n", text)
    return HTML_TAG_RE.sub(" ", text)


def _decode_codepoint(match: re.Match, base: int) -> str:
    try:
        return chr(int(match.group(1), base))
    except (ValueError, OverflowError):
        return match.group(0)


def decode_entities(text: str) -> str:
    text = NAMED_ENTITY_RE.sub(lambda m: ENTITY_MAP[m.group(1).lower()], text)
    text = NUMERIC_ENTITY_RE.sub(lambda m: _decode_codepoint(m, 10), text)
    return HEX_ENTITY_RE.sub(lambda m: _decode_codepoint(m, 16), text)


def remove_page_numbers(lines: list[str]) -> list[str]:
    return [
        line for line in lines
        if not PAGE_NUMBER_LINE_RE.match(line) and not PAGE_OF_RE.match(line)
    ]


def remove_repeated_lines(lines: list[str]) -> list[str]:
    """Drop short lines that repeat often enough to be page headers or footers."""
    counts = Counter(
        line.strip() for line in lines
        if 0 < len(line.strip()) < REPEATED_LINE_MAX_LENGTH
    )
    repeated = {
        text for text, count in counts.items()
        if count >= REPEATED_LINE_MIN_COUNT and not _is_structural(text)
    }
    if not repeated:
        return lines
    return [line for line in lines if line.strip() not in repeated]


def remove_url_noise(lines: list[str]) -> list[str]:
    return [
        line for line in lines
        if _is_structural(line) or not (
            BARE_URL_LINE_RE.match(line)
            or NAV_LINE_RE.match(line)
            or PORTAL_NOISE_RE.match(line)
        )
    ]


def is_garbled(line: str) -> bool:
    """
    Detect OCR debris such as "aaaaaa" or "xxxxyyyy".

    Only short, purely Latin lines with very low character diversity
    qualify, so real words and Armenian/Cyrillic text are untouched.
    """
    trimmed = line.strip()
    if not GARBLED_MIN_LENGTH <= len(trimmed) <= GARBLED_MAX_LENGTH:
        return False
    if not GARBLED_LINE_RE.match(trimmed):
        return False
    unique = len(set(trimmed.lower()))
    return unique / len(trimmed) < GARBLED_DIVERSITY_RATIO


def remove_garbled(lines: list[str]) -> list[str]:
    return [line for line in lines if not is_garbled(line)]


def _normalize_line(line: str) -> str:
    if line.count("\t") >= TAB_ROW_MIN_TABS:
        cells = (HORIZONTAL_WS_RE.sub(" ", cell).strip() for cell in line.split("\t"))
        return "\t".join(cells).strip()
    return HORIZONTAL_WS_RE.sub(" ", line).strip()


def normalize_whitespace(text: str) -> str:
    text = "\n".join(_normalize_line(line) for line in text.split("\n"))
    return BLANK_RUN_RE.sub("\n\n", text).strip()


def preprocess(raw: str, is_html: bool = False) -> PreprocessResult:
    """
    Clean raw extracted text.

    Args:
        raw: Text as extracted from PDF, DOCX or HTML
        is_html: Force HTML stripping; otherwise detected from the first 2000 chars

    Returns:
        PreprocessResult: cleaned text, names of rules that changed it and
        the number of characters removed
    """
    applied: list[str] = []
    text = raw

    def apply(name: str, result: str) -> str:
        if result != text:
            applied.append(name)
        return result

    text = apply("invisible", strip_invisible(text))

    if is_html or looks_like_html(text):
        text = apply("html", strip_html(text))
        text = apply("entities", decode_entities(text))

    lines = text.split("\n")
    for name, rule in (
        ("page_numbers", remove_page_numbers),
        ("repeated_lines", remove_repeated_lines),
        ("url_noise", remove_url_noise),
        ("garbled", remove_garbled),
    ):
        cleaned_lines = rule(lines)
        if len(cleaned_lines) != len(lines):
            applied.append(name)
        lines = cleaned_lines
    text = "\n".join(lines)

    text = apply("whitespace", normalize_whitespace(text))

    return PreprocessResult(
        cleaned=text,
        rules_applied=applied,
        chars_removed=len(raw) - len(text),
    )
