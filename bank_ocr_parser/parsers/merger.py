"""Reassembly of multi-line OCR transactions into merged records."""

import re
from typing import Iterator, List, Optional, Sequence

from bank_ocr_parser.parsers.classifier import classify_line
from bank_ocr_parser.parsers.models import LineClass, MergedRecord, ParseStats, RawLine
from bank_ocr_parser.parsers.patterns import PAGE_MARKER_PATTERN, PatternRegistry
from bank_ocr_parser.utils.logger import get_logger

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")

_APPENDABLE = (LineClass.CONTINUATION, LineClass.PLAUSIBLE_DATA)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def join_pages(pages: Sequence[str]) -> str:
    """Stitch per-page text back into one document in page order.

    Args:
        pages: Text of each page, first page first.

    Returns:
        Document text with a ``=== PAGE n ===`` marker before each page.
    """
    return "".join(
        f"=== PAGE {number} ===\n{text}\n\n"
        for number, text in enumerate(pages, 1)
    )


def iter_raw_lines(raw_text: str) -> Iterator[RawLine]:
    """Yield the lines of a document with page and position ordinals.

    Page numbers advance on ``=== PAGE n ===`` markers. Text without markers
    is treated as a single page.
    """
    page = 1
    seen_marker = False
    for position, text in enumerate(raw_text.splitlines()):
        marker = PAGE_MARKER_PATTERN.match(text.strip())
        if marker:
            if marker.group(1):
                page = int(marker.group(1))
            elif seen_marker:
                page += 1
            seen_marker = True
        yield RawLine(text=text, page=page, position=position)


def _build_record(parts: List[str], first_line: int, last_line: int, page: int) -> MergedRecord:
    return MergedRecord(
        text=normalize_whitespace(" ".join(parts)),
        first_line=first_line,
        last_line=last_line,
        page=page,
    )


def merge_records(
    raw_text: str,
    registry: PatternRegistry,
    stats: Optional[ParseStats] = None
) -> List[MergedRecord]:
    """Group transaction-start lines with the lines that continue them.

    Lines are scanned strictly in document order. A transaction-start line
    opens a record; continuation and plausible-data lines that follow are
    appended to it. Any other line closes the open record, and a new
    transaction-start line immediately opens the next one. Lines outside a
    record are skipped.

    Args:
        raw_text: OCR text of the whole document.
        registry: Pattern registry of the statement layout.
        stats: Optional counters to update.

    Returns:
        Merged records in document order.
    """
    records: List[MergedRecord] = []
    parts: List[str] = []
    first_line = last_line = page = 0
    accumulating = False

    for raw_line in iter_raw_lines(raw_text):
        line = raw_line.text.strip()
        line_class = classify_line(line, registry)
        if line_class is LineClass.BLANK:
            if accumulating:
                records.append(_build_record(parts, first_line, last_line, page))
                accumulating = False
            continue

        if stats is not None:
            stats.lines_processed += 1

        if accumulating:
            if line_class in _APPENDABLE:
                parts.append(line)
                last_line = raw_line.position
                continue
            records.append(_build_record(parts, first_line, last_line, page))
            accumulating = False

        if line_class is LineClass.TRANSACTION_START:
            parts = [line]
            first_line = last_line = raw_line.position
            page = raw_line.page
            accumulating = True
        elif stats is not None:
            stats.lines_skipped += 1

    if accumulating:
        records.append(_build_record(parts, first_line, last_line, page))

    if stats is not None:
        stats.records_merged += len(records)
    logger.debug(f"Merged {len(records)} records from {registry.bank} text")
    return records
