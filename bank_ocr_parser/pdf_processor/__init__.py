"""Text extraction from digital PDF statements."""

from bank_ocr_parser.pdf_processor.extractor import PDFTextExtractor

__all__ = ["PDFTextExtractor"]
