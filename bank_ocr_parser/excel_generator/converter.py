"""Excel report generation for categorized bank statement transactions."""

import os
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from bank_ocr_parser.config.settings import (
    CURRENCY_SYMBOL,
    EXCEL_OUTPUT_FORMAT,
    INCLUDE_METADATA,
    REPORTS_DIR,
)
from bank_ocr_parser.excel_generator.summarizer import TransactionSummarizer
from bank_ocr_parser.parsers.models import CategorizedTransaction
from bank_ocr_parser.utils.exceptions import ExcelConversionError, ValidationError
from bank_ocr_parser.utils.logger import get_logger
from bank_ocr_parser.utils.validators import validate_directory_path

TRANSACTION_HEADERS = ["Date", "Description", "Amount", "Type", "Balance", "Reconciled"]
MONTHLY_HEADERS = ["Month", "Transactions", "Total Debits", "Total Credits", "Unknown", "Net Amount"]


class ExcelConverter:
    """Writes categorized transactions and their summary to an Excel workbook."""

    def __init__(
        self,
        summarizer: Optional[TransactionSummarizer] = None,
        currency_symbol: str = CURRENCY_SYMBOL,
        include_metadata: bool = INCLUDE_METADATA
    ) -> None:
        """Initialize Excel converter.

        Args:
            summarizer: Summarizer used for the Summary sheet.
            currency_symbol: Symbol shown with amounts.
            include_metadata: Whether to write the Metadata sheet.
        """
        self.logger = get_logger(__name__)
        self.summarizer = summarizer or TransactionSummarizer()
        self.currency_symbol = currency_symbol
        self.include_metadata = include_metadata

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center")

        self.currency_format = f'[{currency_symbol}] #,##0.00'
        self.date_format = 'YYYY-MM-DD'

    def generate_filename(
        self,
        base_name: str,
        suffix: Optional[str] = None,
        timestamp: bool = True
    ) -> str:
        """Generate a report filename.

        Args:
            base_name: Base filename.
            suffix: Optional suffix such as the bank code.
            timestamp: Whether to append the current time.

        Returns:
            Filename with the configured Excel extension.
        """
        parts = [base_name]
        if suffix:
            parts.append(suffix)
        if timestamp:
            parts.append(datetime.now().strftime("%Y%m%d_%H%M%S"))
        return f"{'_'.join(parts)}.{EXCEL_OUTPUT_FORMAT}"

    def _style_header(self, cell) -> None:
        cell.font = self.header_font
        cell.fill = self.header_fill
        cell.alignment = self.header_alignment

    @staticmethod
    def _autosize_columns(worksheet: Worksheet) -> None:
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            for row_idx in range(1, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))
            worksheet.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 50)

    def create_transactions_sheet(
        self,
        workbook: Workbook,
        transactions: Sequence[CategorizedTransaction],
        sheet_name: str = "Transactions"
    ) -> Worksheet:
        """Create the transactions sheet, one row per transaction in document order."""
        worksheet = workbook.create_sheet(title=sheet_name)

        for col_num, header in enumerate(TRANSACTION_HEADERS, 1):
            self._style_header(worksheet.cell(row=1, column=col_num, value=header))

        for row_num, transaction in enumerate(transactions, 2):
            date_cell = worksheet.cell(row=row_num, column=1, value=transaction.date)
            date_cell.number_format = self.date_format
            worksheet.cell(row=row_num, column=2, value=transaction.description)
            amount_cell = worksheet.cell(row=row_num, column=3, value=float(transaction.amount))
            amount_cell.number_format = self.currency_format
            worksheet.cell(row=row_num, column=4, value=transaction.type.value)
            if transaction.balance is not None:
                balance_cell = worksheet.cell(row=row_num, column=5, value=float(transaction.balance))
                balance_cell.number_format = self.currency_format
            worksheet.cell(row=row_num, column=6, value="Yes" if transaction.reconciled else "No")

        if not transactions:
            self.logger.warning("No transaction data to write to Excel")

        self._autosize_columns(worksheet)
        self.logger.info(f"Created transactions sheet with {len(transactions)} rows")
        return worksheet

    def create_summary_sheet(
        self,
        workbook: Workbook,
        summary_data: Dict[str, Any],
        sheet_name: str = "Summary"
    ) -> Worksheet:
        """Create the summary sheet with overall totals and a monthly breakdown.

        Args:
            workbook: Excel workbook object.
            summary_data: Output of ``TransactionSummarizer.generate_summary``.
            sheet_name: Name for the sheet.
        """
        worksheet = workbook.create_sheet(title=sheet_name)

        title_cell = worksheet.cell(row=1, column=1, value="Bank Statement Summary")
        title_cell.font = Font(bold=True, size=16)
        worksheet.merge_cells(start_row=1, start_column=1, end_row=1, end_column=3)

        row = self._write_section_header(worksheet, "Overall Summary", 3, 3)
        totals = summary_data.get("overall_totals", {})
        for label, value in (
            ("Total Transactions:", totals.get("transaction_count", 0)),
            ("Debits:", totals.get("debit_count", 0)),
            ("Credits:", totals.get("credit_count", 0)),
            ("Unknown Direction:", totals.get("unknown_count", 0)),
            ("Total Debits:", f"{self.currency_symbol} {totals.get('total_debits', 0):,.2f}"),
            ("Total Credits:", f"{self.currency_symbol} {totals.get('total_credits', 0):,.2f}"),
            ("Net Amount:", f"{self.currency_symbol} {totals.get('net_amount', 0):,.2f}"),
            ("Unreconciled:", summary_data.get("unreconciled_count", 0)),
        ):
            worksheet.cell(row=row, column=1, value=label)
            worksheet.cell(row=row, column=2, value=value)
            row += 1

        period = summary_data.get("analysis_period")
        if period:
            row = self._write_section_header(worksheet, "Analysis Period", row + 1, 3)
            for label, key in (
                ("Start Date:", "start_date"),
                ("End Date:", "end_date"),
                ("Total Days:", "total_days"),
            ):
                worksheet.cell(row=row, column=1, value=label)
                worksheet.cell(row=row, column=2, value=period.get(key, "N/A"))
                row += 1

        monthly = summary_data.get("monthly_summaries") or []
        if monthly:
            self._write_monthly_summaries(worksheet, monthly, row + 1)

        self._autosize_columns(worksheet)
        self.logger.info("Created summary sheet")
        return worksheet

    def _write_section_header(
        self,
        worksheet: Worksheet,
        title: str,
        start_row: int,
        width: int
    ) -> int:
        """Write a merged section header and return the first row below it."""
        self._style_header(worksheet.cell(row=start_row, column=1, value=title))
        worksheet.merge_cells(start_row=start_row, start_column=1, end_row=start_row, end_column=width)
        return start_row + 2

    def _write_monthly_summaries(
        self,
        worksheet: Worksheet,
        monthly_summaries: List[Dict[str, Any]],
        start_row: int
    ) -> int:
        """Write the monthly breakdown table.

        Returns:
            Next available row number.
        """
        row = self._write_section_header(
            worksheet, "Monthly Breakdown", start_row, len(MONTHLY_HEADERS)
        )
        for col, header in enumerate(MONTHLY_HEADERS, 1):
            self._style_header(worksheet.cell(row=row, column=col, value=header))
        row += 1

        for summary in monthly_summaries:
            values = [
                summary["month"],
                summary["transaction_count"],
                summary["total_debits"],
                summary["total_credits"],
                summary["total_unknown"],
                summary["net_amount"],
            ]
            for col, value in enumerate(values, 1):
                cell = worksheet.cell(row=row, column=col, value=value)
                if col >= 3:
                    cell.number_format = self.currency_format
            row += 1
        return row

    def create_metadata_sheet(
        self,
        workbook: Workbook,
        metadata: Dict[str, Any],
        sheet_name: str = "Metadata"
    ) -> Worksheet:
        """Create a two-column key/value metadata sheet."""
        worksheet = workbook.create_sheet(title=sheet_name)

        self._style_header(worksheet.cell(row=1, column=1, value="Property"))
        self._style_header(worksheet.cell(row=1, column=2, value="Value"))
        for row_num, (key, value) in enumerate(metadata.items(), 2):
            worksheet.cell(row=row_num, column=1, value=str(key))
            worksheet.cell(row=row_num, column=2, value=str(value))

        self._autosize_columns(worksheet)
        self.logger.info(f"Created metadata sheet with {len(metadata)} items")
        return worksheet

    def convert_to_excel(
        self,
        transactions: Sequence[CategorizedTransaction],
        output_path: Optional[str] = None,
        filename: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """Write transactions, their summary and optional metadata to Excel.

        Args:
            transactions: Categorized transactions in document order.
            output_path: Output directory; defaults to the reports directory.
            filename: Output filename; generated when omitted.
            metadata: Optional key/value pairs for the Metadata sheet.

        Returns:
            Path to created Excel file.

        Raises:
            ExcelConversionError: If the workbook cannot be written.
        """
        try:
            if output_path is None:
                output_path = REPORTS_DIR
            validate_directory_path(output_path)

            if filename is None:
                filename = self.generate_filename("bank_statement")
            if not filename.endswith(f".{EXCEL_OUTPUT_FORMAT}"):
                filename = f"{filename}.{EXCEL_OUTPUT_FORMAT}"
            full_path = os.path.join(output_path, filename)

            summary = self.summarizer.generate_summary(transactions)

            workbook = Workbook()
            workbook.remove(workbook.active)
            self.create_transactions_sheet(workbook, transactions)
            self.create_summary_sheet(workbook, summary)
            if self.include_metadata and metadata:
                self.create_metadata_sheet(workbook, metadata)

            workbook.save(full_path)
            workbook.close()
        except ValidationError as e:
            raise ExcelConversionError(f"Validation error: {str(e)}") from e
        except Exception as e:
            raise ExcelConversionError(f"Failed to convert to Excel: {str(e)}") from e

        self.logger.info(f"Excel file created successfully: {full_path}")
        return full_path
