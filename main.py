#!/usr/bin/env python3
"""Bank statement OCR text parsing system.

This script turns OCR or PDF text of HDFC, Kotak and ICICI bank statements
into categorized DEBIT/CREDIT transactions and writes them as text, JSON or
an Excel report.

Usage:
    python main.py --text-file <ocr_text> --bank HDFC [--stage categorize] [--format text]

    python main.py --pdf-file <statement.pdf> --bank ICICI [--password <password>] --format xlsx

    python main.py --batch-dir <directory> --bank KOTAK [--output-dir <dir>] [--config <settings.json>]
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from bank_ocr_parser.config.settings import (
    LOG_LEVELS,
    OUTPUT_FORMATS,
    SUPPORTED_PDF_FORMATS,
    SUPPORTED_TEXT_FORMATS,
    Settings,
    load_config_from_file,
    merge_configs,
)
from bank_ocr_parser.excel_generator.converter import ExcelConverter
from bank_ocr_parser.parsers import BaseParser, get_parser
from bank_ocr_parser.pdf_processor.extractor import PDFTextExtractor
from bank_ocr_parser.utils.exceptions import (
    InvalidConfigurationError,
    StatementProcessingError,
    ValidationError,
)
from bank_ocr_parser.utils.logger import ProcessingLogger, get_logger, setup_logging
from bank_ocr_parser.utils.validators import (
    validate_bank_code,
    validate_directory_path,
    validate_input_file,
    validate_password,
)

STAGES = ("clean", "simplify", "categorize")


def load_settings(config_file: Optional[str] = None) -> Settings:
    """Build settings from the environment, overridden by a JSON config file.

    Args:
        config_file: Optional path of a JSON object with setting overrides.

    Returns:
        Merged settings.

    Raises:
        InvalidConfigurationError: If the file cannot be read or names
            unknown settings.
    """
    config = Settings.from_env().to_dict()
    if not config_file:
        return Settings.from_dict(config)

    try:
        overrides = load_config_from_file(config_file)
    except (OSError, ValueError) as e:
        raise InvalidConfigurationError(f"Cannot read config file {config_file}: {e}") from e
    if not isinstance(overrides, dict):
        raise InvalidConfigurationError(f"Config file {config_file} must contain a JSON object")

    unknown = sorted(set(overrides) - set(config))
    if unknown:
        raise InvalidConfigurationError(
            f"Unknown settings in {config_file}: {', '.join(unknown)}"
        )
    return Settings.from_dict(merge_configs(config, overrides))


class StatementProcessor:
    """Runs the parsing pipeline over statement files and writes the results."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the processor.

        Args:
            settings: Optional settings; read from the environment when omitted.

        Raises:
            InvalidConfigurationError: If any setting holds an unusable value.
        """
        self.logger = get_logger(__name__)
        self.settings = settings or Settings.from_env()
        errors = self.settings.get_errors()
        if errors:
            raise InvalidConfigurationError(f"Invalid settings: {', '.join(errors)}")

        self.extractor = PDFTextExtractor()
        self.converter = ExcelConverter(
            currency_symbol=self.settings.currency_symbol,
            include_metadata=self.settings.include_metadata,
        )

    def load_text(self, file_path: str, password: Optional[str] = None) -> str:
        """Read statement text from a PDF or an OCR text file.

        Args:
            file_path: Path to the input file.
            password: Optional password for encrypted PDFs.

        Returns:
            Document text.

        Raises:
            ValidationError: If the file is missing, too large or unsupported.
            PDFExtractionError: If PDF text extraction fails.
        """
        validate_input_file(file_path, self.settings.max_file_size_mb)
        if Path(file_path).suffix.lower() in SUPPORTED_PDF_FORMATS:
            return self.extractor.extract_text(file_path, password)
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()

    def _write_output(
        self,
        parser: BaseParser,
        raw_text: str,
        stage: str,
        output_format: str,
        output_dir: str,
        stem: str,
        processing_logger: ProcessingLogger
    ) -> str:
        if stage != "categorize":
            stage_text = parser.clean(raw_text) if stage == "clean" else parser.simplify(raw_text)
            extension = "json" if output_format == "json" else "txt"
            output_path = os.path.join(output_dir, f"{stem}_{stage}.{extension}")
            with open(output_path, 'w', encoding='utf-8') as f:
                if output_format == "json":
                    json.dump({"bank": parser.bank_code, "stage": stage, "text": stage_text}, f, indent=2)
                else:
                    f.write(stage_text)
            return output_path

        result = parser.parse(raw_text)
        processing_logger.log_stats(result.stats.to_dict())
        processing_logger.log_progress(
            f"{len(result.transactions)} transactions, debits {result.total_debit:,.2f}, "
            f"credits {result.total_credit:,.2f}"
        )

        if output_format == "xlsx":
            metadata = {
                "Source": stem,
                "Bank": parser.bank_code,
                "Transactions": len(result.transactions),
                **{key.replace("_", " ").title(): value for key, value in result.stats.to_dict().items()},
            }
            return self.converter.convert_to_excel(
                result.transactions,
                output_path=output_dir,
                filename=self.converter.generate_filename(stem, parser.bank_code),
                metadata=metadata,
            )

        if output_format == "json":
            output_path = os.path.join(output_dir, f"{stem}_categorized.json")
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(
                    {
                        "bank": parser.bank_code,
                        "transactions": result.to_records(),
                        "stats": result.stats.to_dict(),
                    },
                    f,
                    indent=2,
                )
            return output_path

        output_path = os.path.join(output_dir, f"{stem}_categorized.txt")
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(result.categorized_text)
        return output_path

    def process_file(
        self,
        file_path: str,
        bank: str,
        stage: str = "categorize",
        output_format: str = "text",
        password: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> Optional[str]:
        """Parse one statement file and write the requested stage output.

        Args:
            file_path: PDF or OCR text file.
            bank: Bank code selecting the parser.
            stage: Pipeline stage whose output is written.
            output_format: ``text``, ``json`` or ``xlsx``.
            password: Optional password for encrypted PDFs.
            output_dir: Output directory; defaults to the output_dir setting.

        Returns:
            Path of the written output, or None if processing failed.

        Raises:
            InvalidConfigurationError: If no parser exists for the bank code.
        """
        parser = get_parser(bank, self.settings.get_tolerance())
        output_dir = output_dir or self.settings.output_dir
        stem = Path(file_path).stem
        processing_logger = ProcessingLogger(stem)

        try:
            processing_logger.log_start(file_path, parser.bank_code)
            validate_directory_path(output_dir)
            raw_text = self.load_text(file_path, password)
            processing_logger.log_progress(f"Loaded {len(raw_text.splitlines())} lines")

            output_path = self._write_output(
                parser, raw_text, stage, output_format, output_dir, stem, processing_logger
            )
            processing_logger.log_completion(output_path)
            return output_path

        except InvalidConfigurationError:
            raise
        except StatementProcessingError as e:
            processing_logger.log_error(e, "statement processing")
            return None
        except UnicodeDecodeError as e:
            processing_logger.log_error(e, "text decoding")
            return None
        except OSError as e:
            processing_logger.log_error(e, "file handling")
            return None

    def process_batch(
        self,
        batch_dir: str,
        bank: str,
        stage: str = "categorize",
        output_format: str = "text",
        password: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> List[str]:
        """Process every PDF and text statement in a directory.

        Returns:
            Paths of the outputs that were written.

        Raises:
            ValidationError: If the batch directory does not exist.
        """
        self.logger.info(f"Processing batch directory: {batch_dir}")
        if not os.path.isdir(batch_dir):
            raise ValidationError(f"Batch directory does not exist: {batch_dir}")

        extensions = set(SUPPORTED_PDF_FORMATS) | set(SUPPORTED_TEXT_FORMATS)
        files = sorted(
            path for path in Path(batch_dir).iterdir()
            if path.is_file() and path.suffix.lower() in extensions
        )
        if not files:
            self.logger.warning(f"No statement files found in {batch_dir}")
            return []

        self.logger.info(f"Found {len(files)} statement files")

        outputs = []
        for file_path in files:
            output_path = self.process_file(
                str(file_path), bank, stage, output_format, password, output_dir
            )
            if output_path:
                outputs.append(output_path)

        self.logger.info(f"Successfully processed {len(outputs)}/{len(files)} files")
        return outputs


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Options left unset fall back to the settings read from the environment
    and the optional config file.

    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="Parse OCR text of bank statements into categorized transactions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Categorize an HDFC statement OCR dump
    python main.py --text-file hdfc.txt --bank HDFC

    # Only merge multi-line transactions
    python main.py --text-file kotak.txt --bank KOTAK --stage clean

    # Excel report from a password-protected ICICI PDF
    python main.py --pdf-file icici.pdf --bank ICICI --password secret --format xlsx

    # Every statement in a directory, with settings from a config file
    python main.py --batch-dir ./statements --config parser.json --format json
        """
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        '--text-file',
        type=str,
        help='Path to an OCR text file to parse'
    )
    group.add_argument(
        '--pdf-file',
        type=str,
        help='Path to a digital PDF statement to parse'
    )
    group.add_argument(
        '--batch-dir',
        type=str,
        help='Directory containing statement PDF or text files'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='JSON file with settings that override the environment'
    )
    parser.add_argument(
        '--bank',
        type=str,
        help='Bank code: HDFC, KOTAK or ICICI (default: default_bank setting)'
    )
    parser.add_argument(
        '--stage',
        choices=STAGES,
        default='categorize',
        help='Pipeline stage to output (default: categorize)'
    )
    parser.add_argument(
        '--format',
        dest='output_format',
        choices=OUTPUT_FORMATS,
        help='Output format (default: output_format setting); xlsx requires the categorize stage'
    )
    parser.add_argument(
        '--password',
        type=str,
        help='Password for encrypted PDF statements'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        help='Output directory (default: output_dir setting)'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        choices=LOG_LEVELS,
        help='Logging level (default: log_level setting)'
    )

    args = parser.parse_args(argv)
    if args.output_format == 'xlsx' and args.stage != 'categorize':
        parser.error('--format xlsx requires --stage categorize')
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code: 0 on success, 1 when processing failed, 2 for invalid
        configuration and 130 when interrupted.
    """
    try:
        args = parse_arguments(argv)
        settings = load_settings(args.config)
        setup_logging(
            args.log_level or settings.get_log_level(),
            log_file=settings.log_file,
            log_format=settings.log_format,
        )

        bank = validate_bank_code(args.bank or settings.default_bank)
        output_format = args.output_format or settings.output_format
        if output_format == 'xlsx' and args.stage != 'categorize':
            raise InvalidConfigurationError("xlsx output requires the categorize stage")
        if args.password is not None:
            validate_password(args.password)
        processor = StatementProcessor(settings)

        if args.batch_dir:
            output_paths = processor.process_batch(
                batch_dir=args.batch_dir,
                bank=bank,
                stage=args.stage,
                output_format=output_format,
                password=args.password,
                output_dir=args.output_dir,
            )
            if output_paths:
                print(f"Success! Created {len(output_paths)} outputs:")
                for path in output_paths:
                    print(f"  - {path}")
                return 0
            print("Error: No files were processed successfully. Check logs for details.")
            return 1

        output_path = processor.process_file(
            file_path=args.text_file or args.pdf_file,
            bank=bank,
            stage=args.stage,
            output_format=output_format,
            password=args.password,
            output_dir=args.output_dir,
        )
        if output_path:
            print(f"Success! Output written: {output_path}")
            return 0
        print("Error: Processing failed. Check logs for details.")
        return 1

    except (InvalidConfigurationError, ValidationError) as e:
        print(f"Configuration error: {str(e)}")
        return 2
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
