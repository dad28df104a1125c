"""Line classification against a bank's pattern registry."""

from typing import Iterable, Pattern

from bank_ocr_parser.parsers.models import LineClass
from bank_ocr_parser.parsers.patterns import PatternRegistry


def matches_any(patterns: Iterable[Pattern], line: str) -> bool:
    """Return True if any pattern is found in the line."""
    return any(pattern.search(line) for pattern in patterns)


def is_plausible_data(line: str, registry: PatternRegistry) -> bool:
    """Check the registry's plausible-data heuristic for a line.

    Args:
        line: Trimmed line text.
        registry: Active pattern registry.

    Returns:
        True if the line looks like transaction data and is short enough.
    """
    if not registry.plausible_data:
        return False
    if registry.max_plausible_length is not None and len(line) >= registry.max_plausible_length:
        return False
    return matches_any(registry.plausible_data, line)


def classify_line(line: str, registry: PatternRegistry) -> LineClass:
    """Classify one line of OCR text.

    Rules are applied in a fixed order and the first match wins: blank,
    header, personal information, transaction start, continuation or
    plausible data, then unclassified. Metadata checks run before
    transaction checks so that a header that happens to look like wrapped
    transaction text is never merged into a record.

    Args:
        line: Line text; surrounding whitespace is ignored.
        registry: Pattern registry of the statement layout.

    Returns:
        The line's classification.
    """
    line = line.strip()
    if not line:
        return LineClass.BLANK
    if matches_any(registry.headers, line):
        return LineClass.HEADER
    if matches_any(registry.personal_info, line):
        return LineClass.PERSONAL_INFO
    if registry.transaction_start.search(line):
        return LineClass.TRANSACTION_START
    if matches_any(registry.continuation, line):
        return LineClass.CONTINUATION
    if is_plausible_data(line, registry):
        return LineClass.PLAUSIBLE_DATA
    return LineClass.UNCLASSIFIED
