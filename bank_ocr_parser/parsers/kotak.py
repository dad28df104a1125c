"""Kotak Mahindra Bank statement parser.

Every Kotak amount carries an explicit ``(Cr)`` or ``(Dr)`` suffix, so the
direction is read straight off the statement.
"""

import re
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from bank_ocr_parser.parsers.base import (
    UNKNOWN_DESCRIPTION,
    BaseParser,
    format_amount,
    format_description,
    parse_amount,
    scrub_description,
    split_fields,
)
from bank_ocr_parser.parsers.models import MergedRecord, ProvisionalTransaction, TransactionType
from bank_ocr_parser.parsers.patterns import AMOUNT_PATTERN, KOTAK_PATTERNS, PatternRegistry
from bank_ocr_parser.parsers.reconciliation import Direction

_RECORD = re.compile(
    rf"^(\d{{2}}-\d{{2}}-\d{{4}})\s+(.+?)\s+({AMOUNT_PATTERN.pattern})\s?\((Cr|Dr)\)",
    re.IGNORECASE,
)
_SIMPLE_DATE = re.compile(r"^\d{2}-\d{2}-\d{4}$")
_MARKED_AMOUNT = re.compile(rf"^({AMOUNT_PATTERN.pattern})\s?\((Cr|Dr)\)$", re.IGNORECASE)

# OCR renderings of the UPI prefix
_UPI_PREFIX = re.compile(r"^(?:UPI|UPU|UPV|UPl|UP1)", re.IGNORECASE)
_UPI_TOKEN = re.compile(r"^(?:UPI|UPU|UPV|UPl|UP1)$", re.IGNORECASE)

_NEFT = re.compile(r"^NEFT\s+[A-Z0-9]+\s+(.+?)\s+NEFTINW-\d+")
_MOBILE_BANKING = re.compile(r"MB:RECEIVED FROM\s+(.+?)\s+MB-\d+")
_IMPS = re.compile(r"(?:SentIMPS|Senilupss21)\d*([A-Za-z\s.]+?)(?:/|IMPS)")

DESCRIPTION_SUBSTITUTIONS = (
    (re.compile(r"\b(?:UPI|IMPS|NEFTINW|MB)-\d+\b", re.IGNORECASE), " "),
    (re.compile(r"[A-Za-z0-9.\-_]+@[A-Za-z0-9]+"), " "),
    (re.compile(r"\b\d{10,}\b"), " "),
    (re.compile(r"\b(?=[A-Za-z]*\d)[A-Za-z0-9]{12,}\b"), " "),
    (re.compile(r"\|"), " "),
)


def _describe(narration: str) -> str:
    """Pick the payee or purpose out of a Kotak narration."""
    if narration.startswith("NEFT"):
        match = _NEFT.search(narration)
        if match:
            return match.group(1)
    elif narration.startswith("MB:RECEIVED FROM"):
        match = _MOBILE_BANKING.search(narration)
        if match:
            return match.group(1)
    elif "IMPS" in narration.upper():
        match = _IMPS.search(narration)
        if match:
            return match.group(1)
    elif narration.startswith("CASHBACK EARNED"):
        return "CASHBACK EARNED"
    elif "/" in narration:
        parts = narration.split("/")
        if _UPI_TOKEN.match(parts[0].strip()):
            return parts[1]
        return _UPI_PREFIX.sub("", parts[0])
    return narration


class KotakParser(BaseParser):
    """Parser for Kotak Mahindra Bank account statements."""

    bank_code = "KOTAK"

    def get_patterns(self) -> PatternRegistry:
        return KOTAK_PATTERNS

    def extract_fields(self, record: MergedRecord) -> Optional[ProvisionalTransaction]:
        """Extract date, description and the first Cr/Dr-marked amount."""
        match = _RECORD.match(record.text)
        if not match:
            return None

        date, narration, amount, marker = match.groups()
        description = scrub_description(_describe(narration), DESCRIPTION_SUBSTITUTIONS)

        return ProvisionalTransaction(
            date=date,
            description=description or UNKNOWN_DESCRIPTION,
            amount=abs(parse_amount(amount)),
            marker=marker.capitalize(),
        )

    def format_simplified(self, transaction: ProvisionalTransaction) -> str:
        return (
            f"{transaction.date} | {format_description(transaction.description)} | "
            f"{format_amount(transaction.amount)}({transaction.marker})"
        )

    def parse_simplified_line(self, line: str) -> Optional[ProvisionalTransaction]:
        fields = split_fields(line, 3)
        if fields is None:
            return None

        date, description, amount_part = fields
        match = _MARKED_AMOUNT.match(amount_part)
        if not _SIMPLE_DATE.match(date) or not match:
            return None

        amount, marker = match.groups()
        return ProvisionalTransaction(
            date=date,
            description=description or UNKNOWN_DESCRIPTION,
            amount=abs(parse_amount(amount)),
            marker=marker.capitalize(),
        )

    def resolve_directions(
        self,
        transactions: Sequence[ProvisionalTransaction]
    ) -> List[Tuple[Direction, Decimal]]:
        """Map the Cr/Dr marker of each amount to its direction."""
        resolved = []
        for transaction in transactions:
            if transaction.marker == "Cr":
                direction = Direction(TransactionType.CREDIT)
            elif transaction.marker == "Dr":
                direction = Direction(TransactionType.DEBIT)
            else:
                direction = Direction(TransactionType.UNKNOWN, reconciled=False)
            resolved.append((direction, transaction.amount))
        return resolved
