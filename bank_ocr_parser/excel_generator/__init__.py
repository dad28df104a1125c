"""Excel reporting for categorized transactions."""

from bank_ocr_parser.excel_generator.converter import ExcelConverter
from bank_ocr_parser.excel_generator.summarizer import TransactionSummarizer

__all__ = ["ExcelConverter", "TransactionSummarizer"]
