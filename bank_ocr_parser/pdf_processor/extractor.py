"""PDF text extraction for bank statements that already carry a text layer."""

from typing import List, Optional

import pdfplumber

from bank_ocr_parser.parsers.merger import join_pages
from bank_ocr_parser.utils.exceptions import PDFExtractionError
from bank_ocr_parser.utils.logger import get_logger


class PDFTextExtractor:
    """Pulls page text out of a PDF statement in page order."""

    def __init__(self) -> None:
        """Initialize PDF text extractor."""
        self.logger = get_logger(__name__)

    def extract_pages(self, pdf_path: str, password: Optional[str] = None) -> List[str]:
        """Extract the text of every page.

        Pages without a text layer yield an empty string so page numbers stay
        aligned with the document.

        Args:
            pdf_path: Path to PDF file.
            password: Optional password for encrypted statements.

        Returns:
            List of text strings, one per page.

        Raises:
            PDFExtractionError: If the file cannot be opened or has no text.
        """
        try:
            pages = []
            with pdfplumber.open(pdf_path, password=password) as pdf:
                for page_num, page in enumerate(pdf.pages, 1):
                    page_text = page.extract_text() or ""
                    if page_text:
                        self.logger.debug(f"Extracted text from page {page_num}")
                    else:
                        self.logger.warning(f"No text found on page {page_num}")
                    pages.append(page_text)
        except Exception as e:
            raise PDFExtractionError(f"Failed to extract text from PDF: {str(e)}") from e

        if not any(text.strip() for text in pages):
            raise PDFExtractionError("No text content extracted from PDF")

        self.logger.info(f"Extracted text from {len(pages)} pages")
        return pages

    def extract_text(self, pdf_path: str, password: Optional[str] = None) -> str:
        """Extract the whole document as page-marked text.

        Args:
            pdf_path: Path to PDF file.
            password: Optional password for encrypted statements.

        Returns:
            Text with a ``=== PAGE n ===`` marker before each page.
        """
        return join_pages(self.extract_pages(pdf_path, password))
