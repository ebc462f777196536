"""
Fixed-shape extractors for dates, act numbers and case numbers.

Dependencies: re (stdlib)
System role: Metadata extraction shared by the normalizer and chunker
"""

from legal_pipeline.core.normalization.patterns import (
    ACT_NUMBER_LATIN_RE,
    ACT_NUMBER_RE,
    CASE_NUMBER_PATTERNS,
    ECHR_APPLICATION_PATTERNS,
    ISO_DATE_RE,
    MONTH_FIRST_DATE_RE,
    MONTH_NAME_DATE_RE,
    MONTHS,
    NUMERIC_DATE_RE,
    TREATY_SERIES_RE,
)

CASE_NUMBER_WINDOW = 2000


def _iso(year: str, month: int, day: int) -> str | None:
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    return f"{year}-{month:02d}-{day:02d}"


def extract_first_date(text: str) -> str | None:
    """
    Extract the first plausible date as YYYY-MM-DD.

    Month-name dates win over ISO dates, which win over DD.MM.YYYY.
    Dates with an out-of-range month or day are skipped.
    """
    for match in MONTH_NAME_DATE_RE.finditer(text):
        day, month_name, year = match.groups()
        iso = _iso(year, MONTHS[month_name.lower()], int(day))
        if iso:
            return iso

    for match in MONTH_FIRST_DATE_RE.finditer(text):
        month_name, day, year = match.groups()
        iso = _iso(year, MONTHS[month_name.lower()], int(day))
        if iso:
            return iso

    for match in ISO_DATE_RE.finditer(text):
        year, month, day = match.groups()
        iso = _iso(year, int(month), int(day))
        if iso:
            return iso

    for match in NUMERIC_DATE_RE.finditer(text):
        day, month, year = match.groups()
        iso = _iso(year, int(month), int(day))
        if iso:
            return iso

    return None


def extract_act_number(text: str) -> str | None:
    match = ACT_NUMBER_RE.search(text)
    if match:
        return match.group(0)
    match = ACT_NUMBER_LATIN_RE.search(text)
    return match.group(1) if match else None


def extract_case_number(text: str) -> str | None:
    """Return the first case number found in the opening of a ruling."""
    header = text[:CASE_NUMBER_WINDOW]
    for pattern in CASE_NUMBER_PATTERNS:
        match = pattern.search(header)
        if match and match.group(1):
            return match.group(1).strip()
    return None


def extract_application_number(text: str) -> str | None:
    """Return the ECHR application number (e.g. 12345/06), if any."""
    header = text[:CASE_NUMBER_WINDOW]
    for pattern in ECHR_APPLICATION_PATTERNS:
        match = pattern.search(header)
        if match:
            return match.group(1)
    return None


def extract_treaty_number(text: str) -> str | None:
    match = TREATY_SERIES_RE.search(text[:CASE_NUMBER_WINDOW])
    return match.group(0) if match else None
