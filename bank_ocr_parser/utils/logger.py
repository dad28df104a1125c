"""Logging configuration and utilities for the statement parsing system."""

import logging
import os
from typing import Any, Dict, Optional

from bank_ocr_parser.config.settings import LOG_LEVEL, LOG_FORMAT

ROOT_LOGGER_NAME = "bank_ocr_parser"


def setup_logging(
    log_level: str = LOG_LEVEL,
    log_file: Optional[str] = None,
    log_format: str = LOG_FORMAT,
    console_output: bool = True
) -> logging.Logger:
    """Configure the package logger.

    Args:
        log_level: Logging level name.
        log_file: Optional path of a log file to write to.
        log_format: Format string for log records.
        console_output: Whether to also log to the console.

    Returns:
        Configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


class ProcessingLogger:
    """Specialized logger for a single statement parsing run."""

    def __init__(self, document_id: str, logger: Optional[logging.Logger] = None) -> None:
        """Initialize processing logger.

        Args:
            document_id: Identifier of the document being parsed.
            logger: Optional logger to write to. Defaults to a child of the
                package logger.
        """
        self.document_id = document_id
        self.logger = logger or get_logger(f"{ROOT_LOGGER_NAME}.processing")

    def log_start(self, source: str, bank: str) -> None:
        """Log parsing start.

        Args:
            source: Path or label of the input.
            bank: Statement code used for parsing.
        """
        self.logger.info(f"Document {self.document_id}: parsing {source} as {bank}")

    def log_progress(self, message: str) -> None:
        """Log parsing progress."""
        self.logger.info(f"Document {self.document_id}: {message}")

    def log_stats(self, stats: Dict[str, Any]) -> None:
        """Log diagnostic counters.

        Args:
            stats: Mapping of counter names to values.
        """
        summary = ", ".join(f"{key}={value}" for key, value in stats.items())
        self.logger.info(f"Document {self.document_id}: {summary}")

    def log_error(self, error: Exception, context: str = "") -> None:
        """Log parsing error.

        Args:
            error: Exception that occurred.
            context: Additional context information.
        """
        error_msg = f"Document {self.document_id}: Error in {context}: {str(error)}"
        self.logger.error(error_msg, exc_info=True)

    def log_completion(self, output: str) -> None:
        """Log parsing completion.

        Args:
            output: Path or label of the produced output.
        """
        self.logger.info(f"Document {self.document_id}: Completed successfully. Output: {output}")
