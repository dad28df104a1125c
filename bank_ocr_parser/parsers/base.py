"""Base parser contract and helpers shared by the bank-specific parsers."""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Pattern, Sequence, Tuple

from bank_ocr_parser.parsers.merger import merge_records, normalize_whitespace
from bank_ocr_parser.parsers.models import (
    CategorizedTransaction,
    MergedRecord,
    ParseResult,
    ParseStats,
    ProvisionalTransaction,
    TransactionType,
)
from bank_ocr_parser.parsers.patterns import AMOUNT_PATTERN, PatternRegistry
from bank_ocr_parser.parsers.reconciliation import DEFAULT_TOLERANCE, Direction
from bank_ocr_parser.utils.exceptions import AbstractInstantiationError
from bank_ocr_parser.utils.logger import get_logger

DEFAULT_DESCRIPTION = "Transaction"
UNKNOWN_DESCRIPTION = "Unknown Transaction"

CENTS = Decimal("0.01")

_DATE = re.compile(r"^\s*(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})\s*$")
_DANGLING_SEPARATORS = re.compile(r"(?<!\S)[-/|:]+(?!\S)")
FIELD_SEPARATOR = "|"

Substitution = Tuple[Pattern, str]


def find_amounts(text: str) -> List[re.Match]:
    """Return every monetary token in the text, left to right."""
    return list(AMOUNT_PATTERN.finditer(text))


def parse_amount(token: str) -> Optional[Decimal]:
    """Parse a monetary token such as ``1,23,456.78`` into a Decimal.

    Args:
        token: Amount text; thousands separators are ignored.

    Returns:
        Amount rounded to two decimals, or None if the token is not a number.
    """
    try:
        value = Decimal(token.replace(",", "").strip())
    except (InvalidOperation, AttributeError):
        return None
    if not value.is_finite():
        return None
    return value.quantize(CENTS)


def format_amount(value: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{value:,.2f}"


def normalize_date(raw_date: str) -> Optional[datetime]:
    """Normalize a statement date to a datetime.

    Accepts day-first dates separated by ``/`` or ``-`` with two or four
    digit years. Two-digit years below 50 are read as 20xx, others as 19xx.

    Args:
        raw_date: Date as printed on the statement.

    Returns:
        Midnight of that day, or None if the date is malformed or impossible.
    """
    match = _DATE.match(raw_date or "")
    if not match:
        return None

    day, month, year = match.groups()
    if len(year) == 2:
        year = f"20{year}" if int(year) < 50 else f"19{year}"

    try:
        return datetime.strptime(f"{year}-{month.zfill(2)}-{day.zfill(2)}", "%Y-%m-%d")
    except ValueError:
        return None


def scrub_description(text: str, substitutions: Sequence[Substitution]) -> str:
    """Apply ordered noise-removal passes to a description.

    Args:
        text: Raw description text.
        substitutions: (pattern, replacement) pairs applied in order.

    Returns:
        Description with noise, stray separators and extra whitespace removed.
        It never contains the field separator.
    """
    text = normalize_whitespace(text)
    for pattern, replacement in substitutions:
        text = pattern.sub(replacement, text)
    text = text.replace(FIELD_SEPARATOR, " ")
    text = _DANGLING_SEPARATORS.sub(" ", text)
    return normalize_whitespace(text).strip(" -/:")


def split_fields(line: str, count: int) -> Optional[List[str]]:
    """Split a pipe-delimited line into exactly ``count`` trimmed fields."""
    fields = [field.strip() for field in line.split(FIELD_SEPARATOR)]
    if len(fields) != count:
        return None
    return fields


def format_description(description: str) -> str:
    """Make a description safe to write into a pipe-delimited line."""
    return normalize_whitespace(description.replace(FIELD_SEPARATOR, " "))


def format_categorized(transactions: Sequence[CategorizedTransaction]) -> str:
    """Serialize transactions as ``date | description | amount | TYPE`` lines."""
    return "\n".join(
        f"{t.raw_date} | {format_description(t.description)} | {t.amount:.2f} | {t.type.value}"
        for t in transactions
    )


class BaseParser(ABC):
    """Common pipeline for bank statement parsers.

    A parser runs three stages over OCR text: ``clean`` rebuilds multi-line
    transactions into merged records, ``simplify`` pulls out date,
    description and amounts, and ``categorize`` assigns each transaction a
    direction. Subclasses supply the pattern registry and the
    layout-specific extraction and direction rules.
    """

    bank_code = ""

    def __new__(cls, *args, **kwargs):
        if cls is BaseParser:
            raise AbstractInstantiationError(
                "BaseParser is abstract; request a parser with get_parser()"
            )
        return super().__new__(cls)

    def __init__(self, tolerance: Optional[Decimal] = None) -> None:
        """Initialize parser.

        Args:
            tolerance: Largest balance mismatch accepted when directions are
                inferred from running balances.
        """
        self.logger = get_logger(__name__)
        self.tolerance = DEFAULT_TOLERANCE if tolerance is None else Decimal(tolerance)
        self.patterns = self.get_patterns()

    @abstractmethod
    def get_patterns(self) -> PatternRegistry:
        """Return the pattern registry of this statement layout."""

    @abstractmethod
    def extract_fields(self, record: MergedRecord) -> Optional[ProvisionalTransaction]:
        """Pull date, description and amounts out of a merged record.

        Returns None when the record lacks a date or enough amounts.
        """

    @abstractmethod
    def format_simplified(self, transaction: ProvisionalTransaction) -> str:
        """Serialize a provisional transaction as a simplified line."""

    @abstractmethod
    def parse_simplified_line(self, line: str) -> Optional[ProvisionalTransaction]:
        """Read a simplified line back into a provisional transaction."""

    @abstractmethod
    def resolve_directions(
        self,
        transactions: Sequence[ProvisionalTransaction]
    ) -> List[Tuple[Direction, Decimal]]:
        """Decide direction and unsigned amount for each transaction, in order."""

    def clean(self, raw_text: str, stats: Optional[ParseStats] = None) -> str:
        """Merge multi-line OCR transactions.

        Args:
            raw_text: OCR text of the whole document.
            stats: Optional counters to update.

        Returns:
            One merged record per transaction, separated by blank lines.
        """
        records = merge_records(raw_text, self.patterns, stats)
        return "\n\n".join(record.text for record in records)

    def extract(
        self,
        raw_text: str,
        stats: Optional[ParseStats] = None
    ) -> List[ProvisionalTransaction]:
        """Merge records and extract fields, dropping records that fail.

        Args:
            raw_text: OCR text of the whole document.
            stats: Optional counters to update.

        Returns:
            Provisional transactions in document order.
        """
        transactions = []
        for record in merge_records(raw_text, self.patterns, stats):
            transaction = self.extract_fields(record)
            if (
                transaction is None
                or not transaction.has_amount()
                or normalize_date(transaction.date) is None
            ):
                self.logger.debug(
                    f"Dropped {self.bank_code} record (line {record.first_line}, "
                    f"{record.line_count} merged): {record.text[:60]}"
                )
                if stats is not None:
                    stats.records_dropped += 1
                continue
            transactions.append(transaction)
        return transactions

    def simplify(self, raw_text: str, stats: Optional[ParseStats] = None) -> str:
        """Run ``clean`` and field extraction over OCR text.

        Args:
            raw_text: OCR text of the whole document.
            stats: Optional counters to update.

        Returns:
            One ``date | description | amount(s)`` line per transaction.
        """
        transactions = self.extract(raw_text, stats)
        return "\n".join(self.format_simplified(t) for t in transactions)

    def read_simplified(
        self,
        simplified_text: str,
        stats: Optional[ParseStats] = None
    ) -> List[ProvisionalTransaction]:
        """Parse simplified lines, skipping blank and malformed ones."""
        transactions = []
        for line in simplified_text.splitlines():
            line = line.strip()
            if not line:
                continue
            transaction = self.parse_simplified_line(line)
            if transaction is None or normalize_date(transaction.date) is None:
                self.logger.debug(f"Skipped unparsable {self.bank_code} line: {line[:60]}")
                if stats is not None:
                    stats.lines_unparsed += 1
                continue
            transactions.append(transaction)
        return transactions

    def resolve(
        self,
        transactions: Sequence[ProvisionalTransaction],
        stats: Optional[ParseStats] = None
    ) -> List[CategorizedTransaction]:
        """Assign directions and build the final transaction records.

        Args:
            transactions: Provisional transactions in document order.
            stats: Optional counters to update.

        Returns:
            Categorized transactions in the same order.
        """
        resolved = []
        unreconciled = 0
        for transaction, (direction, amount) in zip(
            transactions, self.resolve_directions(transactions)
        ):
            categorized = CategorizedTransaction(
                date=normalize_date(transaction.date),
                description=transaction.description,
                amount=abs(amount).quantize(CENTS),
                type=direction.type,
                raw_date=transaction.date,
                balance=transaction.balance,
                reconciled=direction.reconciled,
            )
            if categorized.type is not TransactionType.UNKNOWN and not categorized.reconciled:
                unreconciled += 1
                self.logger.debug(
                    f"No balance match for {transaction.date} {transaction.description}; "
                    f"using {categorized.type.value} from balance change"
                )
            resolved.append(categorized)

        unknown = sum(1 for t in resolved if t.type is TransactionType.UNKNOWN)
        if unreconciled:
            self.logger.warning(
                f"{unreconciled} {self.bank_code} transactions resolved without a balance match"
            )
        if stats is not None:
            stats.transactions_resolved += len(resolved)
            stats.unknown_direction += unknown
            stats.unreconciled += unreconciled
        return resolved

    def categorize(self, simplified_text: str, stats: Optional[ParseStats] = None) -> str:
        """Assign DEBIT/CREDIT/UNKNOWN to simplified transaction lines.

        Args:
            simplified_text: Output of ``simplify``.
            stats: Optional counters to update.

        Returns:
            One ``date | description | amount | TYPE`` line per transaction.
        """
        if not simplified_text or not simplified_text.strip():
            return ""
        transactions = self.resolve(self.read_simplified(simplified_text, stats), stats)
        return format_categorized(transactions)

    def parse(self, raw_text: str) -> ParseResult:
        """Run the whole pipeline over OCR text.

        Args:
            raw_text: OCR text of the whole document.

        Returns:
            Categorized transactions with the categorized text and counters.
        """
        stats = ParseStats()
        transactions = self.resolve(self.extract(raw_text, stats), stats)
        self.logger.info(
            f"{self.bank_code}: {len(transactions)} transactions from "
            f"{stats.records_merged} records ({stats.dropped} dropped)"
        )
        return ParseResult(
            bank=self.bank_code,
            transactions=transactions,
            stats=stats,
            categorized_text=format_categorized(transactions),
        )
