"""Validation utilities for the statement parsing system."""

import os
from typing import List, Optional

from bank_ocr_parser.config.settings import (
    MAX_FILE_SIZE_MB,
    SUPPORTED_BANKS,
    SUPPORTED_PDF_FORMATS,
    SUPPORTED_TEXT_FORMATS,
)
from bank_ocr_parser.utils.exceptions import ValidationError


def validate_file_path(file_path: str) -> None:
    """Validate that a file path exists and is accessible.

    Args:
        file_path: Path to the file to validate.

    Raises:
        ValidationError: If file path is invalid.
    """
    if not file_path:
        raise ValidationError("File path cannot be empty")

    if not os.path.exists(file_path):
        raise ValidationError(f"File does not exist: {file_path}")

    if not os.path.isfile(file_path):
        raise ValidationError(f"Path is not a file: {file_path}")

    if not os.access(file_path, os.R_OK):
        raise ValidationError(f"File is not readable: {file_path}")


def validate_file_size(file_path: str, max_size_mb: int = MAX_FILE_SIZE_MB) -> None:
    """Validate file size against maximum allowed size.

    Args:
        file_path: Path to the file to validate.
        max_size_mb: Maximum allowed file size in MB.

    Raises:
        ValidationError: If file size exceeds limit.
    """
    file_size_bytes = os.path.getsize(file_path)
    file_size_mb = file_size_bytes / (1024 * 1024)

    if file_size_mb > max_size_mb:
        raise ValidationError(
            f"File size {file_size_mb:.2f}MB exceeds maximum "
            f"allowed size {max_size_mb}MB"
        )


def validate_file_extension(file_path: str, supported_formats: List[str]) -> None:
    """Validate file extension against supported formats.

    Args:
        file_path: Path to the file to validate.
        supported_formats: List of supported file extensions.

    Raises:
        ValidationError: If file extension is not supported.
    """
    _, ext = os.path.splitext(file_path.lower())

    if ext not in supported_formats:
        raise ValidationError(
            f"File extension '{ext}' not supported. "
            f"Supported formats: {', '.join(supported_formats)}"
        )


def validate_input_file(file_path: str, max_size_mb: int = MAX_FILE_SIZE_MB) -> None:
    """Validate a statement input file (PDF or extracted OCR text).

    Args:
        file_path: Path to the file to validate.
        max_size_mb: Maximum allowed file size in MB.

    Raises:
        ValidationError: If any validation fails.
    """
    validate_file_path(file_path)
    validate_file_size(file_path, max_size_mb)
    validate_file_extension(file_path, SUPPORTED_PDF_FORMATS + SUPPORTED_TEXT_FORMATS)


def validate_directory_path(dir_path: str) -> None:
    """Validate that a directory path exists and is writable.

    Args:
        dir_path: Path to the directory to validate.

    Raises:
        ValidationError: If directory path is invalid.
    """
    if not dir_path:
        raise ValidationError("Directory path cannot be empty")

    if not os.path.exists(dir_path):
        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError as e:
            raise ValidationError(f"Cannot create directory {dir_path}: {str(e)}")

    if not os.path.isdir(dir_path):
        raise ValidationError(f"Path is not a directory: {dir_path}")

    if not os.access(dir_path, os.W_OK):
        raise ValidationError(f"Directory is not writable: {dir_path}")


def validate_password(password: Optional[str]) -> None:
    """Validate PDF password.

    Args:
        password: Password to validate.

    Raises:
        ValidationError: If password is invalid.
    """
    if not isinstance(password, str):
        raise ValidationError("Password must be a string")

    if len(password.strip()) == 0:
        raise ValidationError("Password cannot be empty or whitespace only")


def validate_bank_code(code: Optional[str]) -> str:
    """Validate a statement code and return its canonical form.

    Args:
        code: Statement code such as "hdfc".

    Returns:
        Upper-cased statement code.

    Raises:
        ValidationError: If the code is empty or not a supported bank.
    """
    if not code or not code.strip():
        raise ValidationError("Bank code cannot be empty")

    canonical = code.strip().upper()
    if canonical not in SUPPORTED_BANKS:
        raise ValidationError(
            f"Bank code '{code}' not supported. "
            f"Supported banks: {', '.join(sorted(SUPPORTED_BANKS))}"
        )
    return canonical
