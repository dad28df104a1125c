"""Data classes shared by the statement parsing pipeline."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class LineClass(Enum):
    """Classification of a single OCR line."""
    TRANSACTION_START = "transaction_start"
    HEADER = "header"
    CONTINUATION = "continuation"
    PERSONAL_INFO = "personal_info"
    PLAUSIBLE_DATA = "plausible_data"
    BLANK = "blank"
    UNCLASSIFIED = "unclassified"


class TransactionType(str, Enum):
    """Direction of a categorized transaction."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class RawLine:
    """One line of OCR output with its place in the document."""
    text: str
    page: int
    position: int


@dataclass(frozen=True)
class MergedRecord:
    """One logical transaction rebuilt from one or more physical lines."""
    text: str
    first_line: int
    last_line: int
    page: int = 1

    @property
    def line_count(self) -> int:
        return self.last_line - self.first_line + 1


@dataclass(frozen=True)
class ProvisionalTransaction:
    """Fields pulled out of a merged record, before direction is known.

    Which monetary fields are populated depends on the statement layout:
    amount and balance, withdrawal/deposit/balance columns, or an amount
    with an explicit ``Cr``/``Dr`` marker.
    """
    date: str
    description: str
    amount: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    withdrawal: Optional[Decimal] = None
    deposit: Optional[Decimal] = None
    marker: Optional[str] = None

    def has_amount(self) -> bool:
        return any(
            value is not None
            for value in (self.amount, self.withdrawal, self.deposit)
        )


@dataclass(frozen=True)
class CategorizedTransaction:
    """Final transaction record handed to persistence and reporting."""
    date: datetime
    description: str
    amount: Decimal
    type: TransactionType
    raw_date: str = ""
    balance: Optional[Decimal] = None
    # False when the direction came from the sign-of-change fallback
    # instead of an arithmetic balance match.
    reconciled: bool = True

    def to_record(self) -> Dict[str, Any]:
        """Convert to the four-field record used for bulk insertion.

        Returns:
            Dictionary with ISO date, description, float amount and type.
        """
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": float(self.amount),
            "type": self.type.value,
        }


@dataclass
class ParseStats:
    """Diagnostic counters collected during one parse."""
    lines_processed: int = 0
    lines_skipped: int = 0
    records_merged: int = 0
    records_dropped: int = 0
    transactions_resolved: int = 0
    lines_unparsed: int = 0
    unknown_direction: int = 0
    unreconciled: int = 0

    @property
    def dropped(self) -> int:
        return self.records_dropped + self.lines_unparsed

    def to_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["dropped"] = self.dropped
        return data


@dataclass
class ParseResult:
    """Outcome of running the full pipeline over one document."""
    bank: str
    transactions: List[CategorizedTransaction] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)
    categorized_text: str = ""

    def to_records(self) -> List[Dict[str, Any]]:
        return [transaction.to_record() for transaction in self.transactions]

    @property
    def total_debit(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.type is TransactionType.DEBIT),
            Decimal("0.00"),
        )

    @property
    def total_credit(self) -> Decimal:
        return sum(
            (t.amount for t in self.transactions if t.type is TransactionType.CREDIT),
            Decimal("0.00"),
        )
