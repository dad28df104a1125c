"""HDFC Bank statement parser.

HDFC statements print withdrawals and deposits in separate columns but only
one of them is filled per row, so OCR yields a single amount followed by the
closing balance. Directions are recovered by reconciling running balances.
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
from bank_ocr_parser.parsers.models import MergedRecord, ProvisionalTransaction
from bank_ocr_parser.parsers.patterns import HDFC_PATTERNS, PatternRegistry
from bank_ocr_parser.parsers.reconciliation import Direction, reconcile_directions

_DATE_AT_START = re.compile(r"^(\d{2}/\d{2}/\d{2})(?!\d)")
_SIMPLE_DATE = re.compile(r"^\d{2}/\d{2}/\d{2}$")

DESCRIPTION_SUBSTITUTIONS = (
    # Value dates and column rules
    (re.compile(r"\b\d{2}/\d{2}/\d{2,4}\b"), " "),
    (re.compile(r"\|"), " "),
    (re.compile(r"\bUPL-"), ""),
    # UPI handle with the payee's VPA name, e.g. -SWIGGY8@YBL
    (re.compile(r"-?[A-Za-z0-9._]*@[A-Za-z0-9\-]*"), " "),
    (re.compile(r"-KKBK\d+"), ""),
    (re.compile(r"-(?:UPI|UPT|PAY)\b"), ""),
    (re.compile(r"AIR-BANK"), ""),
    # Reference numbers and IFSC codes
    (re.compile(r"\b(?=[A-Z]*\d)[A-Z0-9]{10,}\b"), " "),
    (re.compile(r"\b(?:[A-Z]{3,}BANK|ICICI|HDFC|AXIS|SBIN|KKBK|YESB|PAYTM)\b"), " "),
    (re.compile(r"^\s*(?:UPI|NEFT|IMPS|RTGS)(?:\s+(?:CR|DR))?\b[-/:\s]*"), ""),
)


class HDFCParser(BaseParser):
    """Parser for HDFC Bank account statements."""

    bank_code = "HDFC"

    def get_patterns(self) -> PatternRegistry:
        return HDFC_PATTERNS

    def extract_fields(self, record: MergedRecord) -> Optional[ProvisionalTransaction]:
        """Extract date, description, amount and closing balance.

        The amount is the second to last monetary token and the balance the
        last. The description is everything else after the date.
        """
        date_match = _DATE_AT_START.match(record.text)
        if not date_match:
            return None

        body = record.text[date_match.end():]
        amounts = find_amounts(body)
        if len(amounts) < 2:
            return None

        amount_match, balance_match = amounts[-2], amounts[-1]
        raw_description = f"{body[:amount_match.start()]} {body[balance_match.end():]}"
        description = scrub_description(raw_description, DESCRIPTION_SUBSTITUTIONS)

        return ProvisionalTransaction(
            date=date_match.group(1),
            description=description or DEFAULT_DESCRIPTION,
            amount=abs(parse_amount(amount_match.group())),
            balance=parse_amount(balance_match.group()),
        )

    def format_simplified(self, transaction: ProvisionalTransaction) -> str:
        return (
            f"{transaction.date} | {format_description(transaction.description)} | "
            f"{format_amount(transaction.amount)} {format_amount(transaction.balance)}"
        )

    def parse_simplified_line(self, line: str) -> Optional[ProvisionalTransaction]:
        fields = split_fields(line, 3)
        if fields is None:
            return None

        date, description, amounts_part = fields
        amounts = find_amounts(amounts_part)
        if not _SIMPLE_DATE.match(date) or len(amounts) < 2:
            return None

        return ProvisionalTransaction(
            date=date,
            description=description or DEFAULT_DESCRIPTION,
            amount=abs(parse_amount(amounts[-2].group())),
            balance=parse_amount(amounts[-1].group()),
        )

    def resolve_directions(
        self,
        transactions: Sequence[ProvisionalTransaction]
    ) -> List[Tuple[Direction, Decimal]]:
        """Reconcile each amount against the change in closing balance."""
        rows = [(t.amount, t.balance) for t in transactions]
        directions = reconcile_directions(rows, self.tolerance)
        return [
            (direction, transaction.amount)
            for direction, transaction in zip(directions, transactions)
        ]
