"""Per-bank pattern registries used to classify OCR lines.

Registries are plain data: compiled regular expressions grouped by the role
a matching line plays in a statement. They are built once at import time and
shared read-only by every parser instance.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

# Exactly two fraction digits, grouped (1,23,456.78 or 12,550.00) or not (450.00).
# Never starts or ends inside a longer number.
AMOUNT_PATTERN = re.compile(r"(?<![\d.,])(?:\d{1,3}(?:,\d{2,3})+|\d+)\.\d{2}(?!\d)")

PAGE_MARKER_PATTERN = re.compile(r"^={3,}\s*PAGE\s*(\d+)?\s*=*$", re.IGNORECASE)


def _p(*patterns: str, flags: int = 0) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p, flags) for p in patterns)


@dataclass(frozen=True)
class PatternRegistry:
    """Classification rules for one statement layout.

    Attributes:
        bank: Statement code the registry belongs to.
        transaction_start: Pattern of a line that opens a new transaction.
        headers: Page furniture, table headings and disclaimers.
        continuation: Lines known to carry wrapped transaction details.
        personal_info: Customer name and address blocks.
        plausible_data: Patterns of lines that look like transaction data.
        max_plausible_length: Lines at or above this length are never
            treated as plausible data.
    """
    bank: str
    transaction_start: Pattern
    headers: Tuple[Pattern, ...]
    continuation: Tuple[Pattern, ...]
    personal_info: Tuple[Pattern, ...] = ()
    plausible_data: Tuple[Pattern, ...] = ()
    max_plausible_length: Optional[int] = None


HDFC_PATTERNS = PatternRegistry(
    bank="HDFC",
    # DD/MM/YY followed by a column rule or whitespace
    transaction_start=re.compile(r"^\d{2}/\d{2}/\d{2}\s*[|\s]"),
    headers=(
        PAGE_MARKER_PATTERN,
        *_p(
            r"^(Page No|PageNo)[:.]?\s*\d+",
            r"HDFC\s+BANK",
            r"Account\s+Branch",
            r"Address\s*:",
            r"Phone\s+no",
            r"Cust\s+ID",
            r"Account\s*(No|Number)",
            r"RTGS/NEFT",
            r"Statement\s+of\s+account",
            r"From\s*:\s*\d{2}/\d{2}",
            r"Closing\s+Balance",
            r"Withdrawal\s+Amt",
            r"STATEMENT\s+SUMMARY",
            r"Generated\s+On:",
            r"computer\s+generated",
            r"^\*.*funds.*earmarked",
            r"Contents\s+of\s+this",
            r"Registered\s+Office",
            flags=re.IGNORECASE,
        ),
    ),
    continuation=_p(
        r"@[A-Z0-9\-]+",
        r"[A-Z]{3,}BANK",
        r"-UPI$",
        r"-UPT$",
        r"-PAY$",
        r"^[A-Z0-9@\-]{8,}$",
        r"HDFC\d{7}",
        r"ICIC\d{7}",
        r"^[A-Z0-9@\-\s]{6,}$",
    ),
    personal_info=(
        *_p(r"^(MR|MS|MRS)\s+[A-Z\s]+$"),
        *_p(
            r"^FLAT\s+NO\s+\d+",
            r"^(LIVING|APARTMENT|ROAD|STREET)",
            r"^(BANGALORE|BENGALURU|MUMBAI|DELHI|CHENNAI|KOLKATA)",
            r"^[A-Z\s]+(NAGAR|COLONY|LAYOUT|CROSS)",
            flags=re.IGNORECASE,
        ),
    ),
    plausible_data=(
        AMOUNT_PATTERN,
        re.compile(r"\d{2}/\d{2}/\d{2}"),
    ),
    max_plausible_length=100,
)


KOTAK_PATTERNS = PatternRegistry(
    bank="KOTAK",
    transaction_start=re.compile(r"^\d{2}-\d{2}-\d{4}\s+"),
    headers=(
        PAGE_MARKER_PATTERN,
        *_p(
            # Page and document structure
            r"^(Page|PageNo)[\s:]?\d+(\s+of\s+\d+)?",
            # Bank identification
            r"^KOTAK(\s+MAHINDRA)?\s+BANK\b",
            r"^MAHINDRA\s+BANK\b",
            r"\b(IFSC|MICR|RTGS|NEFT)\s+(Code|No)",
            # Account and customer info
            r"^(Account|Acc)\s+(No|Number)\s*[:=]",
            r"^(Cust|Customer)\s+",
            r"^Currency\s*[:=]",
            r"^Branch\s*[:=]",
            r"^Nominee\s+(Registered|Name)",
            # Statement headers and footers
            r"^(Date|Txn Date)\s+(Narration|Description)",
            r"^Statement\s+(Summary|Period)",
            r"^(Opening|Closing)\s+Balance",
            r"^Total\s+(Withdrawal|Deposit|Credit|Debit)",
            r"^(Withdrawal|Deposit|Credit|Debit)\s+(Count|Amount)",
            # Disclaimers
            r"^(Any|All)\s+discrepancy",
            r"^End\s+of\s+Statement",
            r"^This\s+is\s+(system|computer)",
            r"^(Generated|Printed)\s+(On|At)",
            r"does\s+not\s+require\s+(signature|stamp)",
            r"^(Registered|Corporate)\s+Office",
            r"^For\s+(any|more)\s+(queries|information)",
            flags=re.IGNORECASE,
        ),
    ),
    continuation=_p(
        # UPI
        r"^/UP[Il]?intent$",
        r"^/Payment(\s|$)",
        r"^from\s+Ph(one)?$",
        # Transaction type
        r"^\[(Rent|EMI|Loan|Bill)\s+for$",
        r"^(repayme|repayment)$",
        r"^/[A-Z][a-z]+pay$",
        # Merchants
        r"^I[A-Z][a-z]+Online",
        r"^\d+\s+(will?|rs?)$",
        r"^(Pay\s+to|Transfer\s+to)$",
        r"^[A-Z][a-z]+Pe$",
        r"^Only\s+Rs\.?$",
        flags=re.IGNORECASE,
    ),
    personal_info=(
        # Upper-case customer names, optionally followed by the period label
        *_p(
            r"^(MR|MS|MRS|DR|PROF)\.?\s+[A-Z][A-Za-z\s]+$",
            r"^[A-Z]{2,}\s+[A-Z]{2,}(\s+[A-Z]{2,})?(\s+Period)?$",
        ),
        *_p(
            # Address
            r"^(FLAT|APARTMENT|HOUSE|BLDG|BUILDING)\s+(NO\.?|NUMBER)\s*\d+",
            r"^(FLOOR|FLR)\s*\d+",
            r"^[A-Z\d\s]+(APARTMENT|COMPLEX|RESIDENCY|LAYOUT|COLONY)$",
            r"^[A-Z\d\s]+(ROAD|STREET|AVENUE|LANE|CROSS)$",
            r"^[A-Z\d\s]+(NAGAR|PURAM|ENCLAVE|SOCIETY)$",
            # City, state and country
            r"^[A-Z][a-z]+(ABAD|URU|AI|PORE|TAN|GAR)-\d{6}$",
            r"^(KARNATAKA|MAHARASHTRA|TAMIL\s+NADU|GUJARAT|DELHI|RAJASTHAN|UP|MP),?\s+(INDIA)?$",
            r"^INDIA$",
            # Contact
            r"^(Phone|Mobile|Tel|Contact)\s+(No|Number)\.?\s*[:=]?\s*\d",
            r"^Email\s*[:=]",
            flags=re.IGNORECASE,
        ),
    ),
    plausible_data=_p(
        r"UPI-\d+",
        r"IMPS-\d+",
        r"NEFTINW-\d+",
        r"MB-\d+",
        r"BF-[a-z0-9]+",
        r"\d+\.\d{2}\s?\((Cr|Dr)\)",
    ),
    max_plausible_length=150,
)


ICICI_PATTERNS = PatternRegistry(
    bank="ICICI",
    # Optional serial number, value date, transaction date
    transaction_start=re.compile(r"^\s*(?:\d+\s+)?\d{2}/\d{2}/\d{4}\s+\d{2}/\d{2}/\d{4}"),
    headers=(
        PAGE_MARKER_PATTERN,
        *_p(
            r"DETAILED\s+STATEMENT",
            r"Transactions\s+List",
            r"Account\s+Number",
            r"^S\s+No\.",
            r"^Value\s+Date",
            r"^Transaction\s+Date",
            r"^Withdrawal\s+Amount",
            r"^Deposit\s+Amount",
            r"^Balance\s+\(INR\s*\)",
            r"ICICI\s+Bank",
            flags=re.IGNORECASE,
        ),
    ),
    continuation=(
        *_p(
            r"@[A-Z0-9\-]+",
            r"\b\d{12,}\b",
            r"\b[A-Z0-9]{15,}\b",
        ),
        *_p(
            r"[A-Z]{3,}BANK",
            r"^\s*[a-zA-Z\s/]+$",
            flags=re.IGNORECASE,
        ),
    ),
    plausible_data=(
        AMOUNT_PATTERN,
        re.compile(r"\d{2,}"),
    ),
    max_plausible_length=150,
)
