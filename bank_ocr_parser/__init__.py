"""Bank Statement OCR Parsing System.

Turns noisy OCR text extracted from bank statements into typed, categorized
transaction records using bank-specific parsers.
"""

__version__ = "1.0.0"
__author__ = "Statement Parsing Team"
