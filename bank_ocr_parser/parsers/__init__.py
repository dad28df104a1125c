"""Bank statement parsers and the factory that selects one by bank code."""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Type

from bank_ocr_parser.config.settings import SUPPORTED_BANKS
from bank_ocr_parser.parsers.base import BaseParser
from bank_ocr_parser.parsers.hdfc import HDFCParser
from bank_ocr_parser.parsers.icici import ICICIParser
from bank_ocr_parser.parsers.kotak import KotakParser
from bank_ocr_parser.parsers.models import (
    CategorizedTransaction,
    ParseResult,
    ParseStats,
    TransactionType,
)
from bank_ocr_parser.utils.exceptions import UnsupportedVariantError

PARSERS: Dict[str, Type[BaseParser]] = {
    "HDFC": HDFCParser,
    "KOTAK": KotakParser,
    "ICICI": ICICIParser,
}


def get_parser(bank_code: str, tolerance: Optional[Decimal] = None) -> BaseParser:
    """Create the parser for a bank statement layout.

    Args:
        bank_code: Bank code such as ``"HDFC"``; case-insensitive.
        tolerance: Optional balance reconciliation tolerance.

    Returns:
        A new parser instance.

    Raises:
        UnsupportedVariantError: If no parser is registered for the code.
    """
    if not bank_code or not bank_code.strip():
        raise UnsupportedVariantError("Bank code is required")

    parser_class = PARSERS.get(bank_code.strip().upper())
    if parser_class is None:
        raise UnsupportedVariantError(
            f"No parser available for bank: {bank_code}. "
            f"Supported banks: {', '.join(sorted(PARSERS))}"
        )
    return parser_class(tolerance=tolerance)


def get_supported_banks() -> List[Dict[str, Any]]:
    """List the banks that have a registered parser.

    Returns:
        One dictionary per bank with its code, name and description.
    """
    return [
        {
            "code": code,
            "name": SUPPORTED_BANKS[code]["name"],
            "description": SUPPORTED_BANKS[code]["description"],
        }
        for code in PARSERS
        if SUPPORTED_BANKS.get(code, {}).get("active", False)
    ]


__all__ = [
    "BaseParser",
    "CategorizedTransaction",
    "HDFCParser",
    "ICICIParser",
    "KotakParser",
    "PARSERS",
    "ParseResult",
    "ParseStats",
    "TransactionType",
    "get_parser",
    "get_supported_banks",
]
