"""ICICI Bank statement parser.

ICICI statements print separate withdrawal and deposit columns, so the
column that carries a non-zero value decides the direction.
"""

import re
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from bank_ocr_parser.parsers.base import (
    DEFAULT_DESCRIPTION,
    BaseParser,
    find_amounts,
    format_amount,
    format_description,
    parse_amount,
    scrub_description,
    split_fields,
)
from bank_ocr_parser.parsers.models import MergedRecord, ProvisionalTransaction, TransactionType
from bank_ocr_parser.parsers.patterns import ICICI_PATTERNS, PatternRegistry
from bank_ocr_parser.parsers.reconciliation import Direction, UNKNOWN_DIRECTION

ZERO = Decimal("0.00")

# Optional serial number, value date, then the transaction date
_DATES = re.compile(r"^\s*(?:\d+\s+)?\d{2}/\d{2}/\d{4}\s+(\d{2}/\d{2}/\d{4})(?!\d)")
_SIMPLE_DATE = re.compile(r"^\d{2}/\d{2}/\d{4}$")

DESCRIPTION_SUBSTITUTIONS = (
    (re.compile(r"/UPI/[A-Z\s]+BANK", re.IGNORECASE), " "),
    (re.compile(r"\b\d{10,}\b"), " "),
    (re.compile(r"[A-Za-z0-9.\-_]+@[A-Za-z0-9]+"), " "),
    (re.compile(r"\b[A-Z0-9]{15,}\b"), " "),
    (re.compile(r"\|"), " "),
    (re.compile(r"^\s*(?:UPI|NEFT|IMPS|RTGS)\s*[/-]", re.IGNORECASE), ""),
)

_SEGMENT_SEPARATOR = re.compile(r"[/-]")
_LETTERS = re.compile(r"[A-Za-z]")
_IDENTIFIER = re.compile(r"^(?=[A-Za-z]*\d)[A-Za-z0-9]{6,}$")
_PROTOCOL = re.compile(r"^(?:UPI|NEFT|IMPS|RTGS|MMT|BIL|INF)$", re.IGNORECASE)


def first_meaningful_segment(text: str) -> str:
    """Return the first ``/``- or ``-``-separated segment that names something.

    A segment counts when it contains letters and is neither a reference
    number nor a bare protocol keyword.
    """
    for segment in _SEGMENT_SEPARATOR.split(text):
        segment = segment.strip()
        if (
            _LETTERS.search(segment)
            and not _IDENTIFIER.match(segment)
            and not _PROTOCOL.match(segment)
        ):
            return segment
    return ""


class ICICIParser(BaseParser):
    """Parser for ICICI Bank detailed statements."""

    bank_code = "ICICI"

    def get_patterns(self) -> PatternRegistry:
        return ICICI_PATTERNS

    def extract_fields(self, record: MergedRecord) -> Optional[ProvisionalTransaction]:
        """Extract transaction date, description and the three amount columns.

        The last three monetary tokens are withdrawal, deposit and balance.
        """
        date_match = _DATES.match(record.text)
        if not date_match:
            return None

        body = record.text[date_match.end():]
        amounts = find_amounts(body)
        if len(amounts) < 3:
            return None

        withdrawal, deposit, balance = amounts[-3:]
        raw_description = f"{body[:withdrawal.start()]} {body[balance.end():]}"
        description = first_meaningful_segment(
            scrub_description(raw_description, DESCRIPTION_SUBSTITUTIONS)
        )

        return ProvisionalTransaction(
            date=date_match.group(1),
            description=description or DEFAULT_DESCRIPTION,
            withdrawal=parse_amount(withdrawal.group()),
            deposit=parse_amount(deposit.group()),
            balance=parse_amount(balance.group()),
        )

    def format_simplified(self, transaction: ProvisionalTransaction) -> str:
        return (
            f"{transaction.date} | {format_description(transaction.description)} | "
            f"{format_amount(transaction.withdrawal)} {format_amount(transaction.deposit)} "
            f"{format_amount(transaction.balance)}"
        )

    def parse_simplified_line(self, line: str) -> Optional[ProvisionalTransaction]:
        fields = split_fields(line, 3)
        if fields is None:
            return None

        date, description, amounts_part = fields
        amounts = find_amounts(amounts_part)
        if not _SIMPLE_DATE.match(date) or len(amounts) < 3:
            return None

        withdrawal, deposit, balance = amounts[-3:]
        return ProvisionalTransaction(
            date=date,
            description=description or DEFAULT_DESCRIPTION,
            withdrawal=parse_amount(withdrawal.group()),
            deposit=parse_amount(deposit.group()),
            balance=parse_amount(balance.group()),
        )

    def resolve_directions(
        self,
        transactions: Sequence[ProvisionalTransaction]
    ) -> List[Tuple[Direction, Decimal]]:
        """Pick the direction from whichever amount column is filled.

        Rows with both columns empty or both filled stay UNKNOWN with a
        zero amount.
        """
        resolved = []
        for transaction in transactions:
            withdrawal = transaction.withdrawal or ZERO
            deposit = transaction.deposit or ZERO
            if withdrawal > 0 and deposit == 0:
                resolved.append((Direction(TransactionType.DEBIT), withdrawal))
            elif deposit > 0 and withdrawal == 0:
                resolved.append((Direction(TransactionType.CREDIT), deposit))
            else:
                resolved.append((UNKNOWN_DIRECTION, ZERO))
        return resolved
