"""Shared utilities: logging, validation and exceptions."""

from bank_ocr_parser.utils.exceptions import (
    AbstractInstantiationError,
    InvalidConfigurationError,
    StatementProcessingError,
    UnsupportedVariantError,
    ValidationError,
)
from bank_ocr_parser.utils.logger import get_logger, setup_logging

__all__ = [
    "AbstractInstantiationError",
    "InvalidConfigurationError",
    "StatementProcessingError",
    "UnsupportedVariantError",
    "ValidationError",
    "get_logger",
    "setup_logging",
]
