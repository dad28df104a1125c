"""Pytest configuration and fixtures for the bank statement parsing system."""

import os
import shutil
import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from bank_ocr_parser.config.settings import Settings
from bank_ocr_parser.parsers.models import CategorizedTransaction, TransactionType


HDFC_OCR_TEXT = """=== PAGE 1 ===
HDFC BANK Ltd.
Page No: 1
MR JOHN DOE
FLAT NO 12 LIVING APARTMENTS
Statement of account
Date Narration Chq./Ref.No. Value Dt Withdrawal Amt. Deposit Amt. Closing Balance
01/04/23 UPI-SWIGGY LIMITED-SWIGGY8@YBL 0000309912345678 01/04/23 450.00 9,550.00
03/04/23 UPI-AMAZON PAY INDIA-AMAZONUPI@APL
0000309345678901 03/04/23 1,200.00 8,350.00

=== PAGE 2 ===
05/04/23 NEFT CR-HDFC0001234-ACME CORP PVT LTD-JOHN 05/04/23 25,000.00 33,350.00
STATEMENT SUMMARY
"""

KOTAK_OCR_TEXT = """=== PAGE 1 ===
Kotak Mahindra Bank
JOHN DOE
Account No: 1234567890
Date Narration Chq/Ref No Withdrawal (Dr) Deposit (Cr) Balance
01-04-2023 UPI/SWIGGY/309912345678/Payment UPI-309912345678 450.00(Dr) 9,550.00(Cr)
from Phone
02-04-2023 NEFT N123230012345 ACME CORP PVT LTD NEFTINW-0012345 25,000.00(Cr) 34,550.00(Cr)
03-04-2023 MB:RECEIVED FROM JANE SMITH MB-1234567 1,500.00(Cr) 36,050.00(Cr)
04-04-2023 CASHBACK EARNED 25.00(Cr) 36,075.00(Cr)
End of Statement
"""

ICICI_OCR_TEXT = """=== PAGE 1 ===
DETAILED STATEMENT
S No. Value Date Transaction Date Cheque Number Transaction Remarks Withdrawal Amount (INR ) Deposit Amount (INR ) Balance (INR )
1 01/04/2023 01/04/2023 UPI/SWIGGY/309912345678/Payment 450.00 0.00 9,550.00
2 02/04/2023 03/04/2023 NEFT-ICIC0001234-ACME CORP PVT LTD 0.00 25,000.00 34,550.00
3 05/04/2023 05/04/2023 UPI/AMAZON PAY/
AMAZONUPI@APL/YES BANK 1,200.00 0.00 33,350.00
4 06/04/2023 06/04/2023 REVERSAL 0.00 0.00 33,350.00
"""

HDFC_CATEGORIZED = (
    "01/04/23 | SWIGGY LIMITED | 450.00 | DEBIT\n"
    "03/04/23 | AMAZON PAY INDIA | 1200.00 | DEBIT\n"
    "05/04/23 | ACME CORP PVT LTD-JOHN | 25000.00 | CREDIT"
)

KOTAK_CATEGORIZED = (
    "01-04-2023 | SWIGGY | 450.00 | DEBIT\n"
    "02-04-2023 | ACME CORP PVT LTD | 25000.00 | CREDIT\n"
    "03-04-2023 | JANE SMITH | 1500.00 | CREDIT\n"
    "04-04-2023 | CASHBACK EARNED | 25.00 | CREDIT"
)

ICICI_CATEGORIZED = (
    "01/04/2023 | SWIGGY | 450.00 | DEBIT\n"
    "03/04/2023 | ACME CORP PVT LTD | 25000.00 | CREDIT\n"
    "05/04/2023 | AMAZON PAY | 1200.00 | DEBIT\n"
    "06/04/2023 | REVERSAL | 0.00 | UNKNOWN"
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_settings(temp_dir):
    """Create sample settings for testing."""
    return Settings(
        default_bank="HDFC",
        reconciliation_tolerance="0.01",
        output_dir=str(temp_dir / "reports"),
        log_level="INFO",
        currency_symbol="INR",
    )


@pytest.fixture
def hdfc_ocr_text():
    """OCR text of a two-page HDFC statement."""
    return HDFC_OCR_TEXT


@pytest.fixture
def kotak_ocr_text():
    """OCR text of a Kotak statement."""
    return KOTAK_OCR_TEXT


@pytest.fixture
def icici_ocr_text():
    """OCR text of an ICICI detailed statement."""
    return ICICI_OCR_TEXT


@pytest.fixture
def hdfc_text_file(temp_dir):
    """Write the HDFC OCR text to a file."""
    text_file = temp_dir / "hdfc_statement.txt"
    text_file.write_text(HDFC_OCR_TEXT, encoding="utf-8")
    return str(text_file)


@pytest.fixture
def sample_transactions():
    """Categorized transactions across two months."""
    return [
        CategorizedTransaction(
            date=datetime(2023, 4, 1),
            description="SWIGGY LIMITED",
            amount=Decimal("450.00"),
            type=TransactionType.DEBIT,
            raw_date="01/04/23",
            balance=Decimal("9550.00"),
        ),
        CategorizedTransaction(
            date=datetime(2023, 4, 5),
            description="ACME CORP PVT LTD",
            amount=Decimal("25000.00"),
            type=TransactionType.CREDIT,
            raw_date="05/04/23",
            balance=Decimal("34550.00"),
        ),
        CategorizedTransaction(
            date=datetime(2023, 5, 2),
            description="AMAZON PAY INDIA",
            amount=Decimal("1200.00"),
            type=TransactionType.DEBIT,
            raw_date="02/05/23",
            balance=Decimal("33350.00"),
            reconciled=False,
        ),
        CategorizedTransaction(
            date=datetime(2023, 5, 6),
            description="REVERSAL",
            amount=Decimal("0.00"),
            type=TransactionType.UNKNOWN,
            raw_date="06/05/23",
            reconciled=False,
        ),
    ]


@pytest.fixture
def sample_environment():
    """Create sample environment variables for testing."""
    env_vars = {
        "DEFAULT_BANK": "KOTAK",
        "RECONCILIATION_TOLERANCE": "0.05",
        "CURRENCY_SYMBOL": "Rs",
        "LOG_LEVEL": "DEBUG",
        "OUTPUT_DIR": "test_reports",
        "MAX_FILE_SIZE_MB": "10",
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


@pytest.fixture
def expected_categorized():
    """Categorized output expected for each sample statement."""
    return {
        "HDFC": HDFC_CATEGORIZED,
        "KOTAK": KOTAK_CATEGORIZED,
        "ICICI": ICICI_CATEGORIZED,
    }


@pytest.fixture
def sample_statements():
    """OCR text of each sample statement keyed by bank code."""
    return {
        "HDFC": HDFC_OCR_TEXT,
        "KOTAK": KOTAK_OCR_TEXT,
        "ICICI": ICICI_OCR_TEXT,
    }
