"""Conversion of categorized text into records for persistence."""

from typing import Any, Dict, List, Optional, Sequence

from bank_ocr_parser.parsers.base import normalize_date, parse_amount, split_fields
from bank_ocr_parser.parsers.models import CategorizedTransaction, TransactionType
from bank_ocr_parser.parsers.patterns import PAGE_MARKER_PATTERN
from bank_ocr_parser.utils.logger import get_logger

logger = get_logger(__name__)


def parse_categorized_line(line: str) -> Optional[CategorizedTransaction]:
    """Parse one ``date | description | amount | TYPE`` line.

    Returns:
        CategorizedTransaction, or None if the line is malformed.
    """
    fields = split_fields(line, 4)
    if fields is None:
        return None

    raw_date, description, amount_text, type_text = fields
    date = normalize_date(raw_date)
    amount = parse_amount(amount_text)
    try:
        transaction_type = TransactionType(type_text.upper())
    except ValueError:
        return None

    if date is None or amount is None:
        return None

    return CategorizedTransaction(
        date=date,
        description=description,
        amount=abs(amount),
        type=transaction_type,
        raw_date=raw_date,
    )


def parse_categorized_text(text: str) -> List[CategorizedTransaction]:
    """Read categorized text back into transactions.

    Blank lines, page markers and malformed lines are skipped.

    Args:
        text: Output of a parser's ``categorize`` stage.

    Returns:
        Transactions in the order they appear.
    """
    transactions = []
    skipped = 0
    for line in (text or "").splitlines():
        line = line.strip()
        if not line or PAGE_MARKER_PATTERN.match(line):
            continue
        transaction = parse_categorized_line(line)
        if transaction is None:
            skipped += 1
            continue
        transactions.append(transaction)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed categorized lines")
    return transactions


def to_records(transactions: Sequence[CategorizedTransaction]) -> List[Dict[str, Any]]:
    """Build the bulk-insert payload: date, description, amount and type per row."""
    return [transaction.to_record() for transaction in transactions]
