"""Configuration settings for the statement parsing system."""

import os
import json
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, asdict

# Input Configuration
SUPPORTED_PDF_FORMATS = [".pdf"]
SUPPORTED_TEXT_FORMATS = [".txt"]
MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "100"))

# File Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
REPORTS_DIR = os.getenv("REPORTS_DIR", os.path.join(BASE_DIR, "reports"))

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Parser Configuration
DEFAULT_BANK = os.getenv("DEFAULT_BANK", "HDFC")

SUPPORTED_BANKS: Dict[str, Dict[str, Any]] = {
    "HDFC": {
        "name": "HDFC Bank",
        "description": "HDFC Bank statements",
        "active": True,
    },
    "KOTAK": {
        "name": "Kotak Bank",
        "description": "Kotak Bank statements",
        "active": True,
    },
    "ICICI": {
        "name": "ICICI Bank",
        "description": "ICICI Bank statements",
        "active": True,
    },
}

# Output Configuration
OUTPUT_FORMATS = ["text", "json", "xlsx"]
EXCEL_OUTPUT_FORMAT = "xlsx"
INCLUDE_METADATA = os.getenv("INCLUDE_METADATA", "True").lower() == "true"

# Currency Configuration
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "INR")


@dataclass
class Settings:
    """Configuration settings class."""

    # Parsing
    default_bank: str = "HDFC"
    reconciliation_tolerance: str = "0.01"

    # Output Configuration
    output_dir: str = "reports"
    output_format: str = "text"
    include_metadata: bool = True
    currency_symbol: str = "INR"

    # Logging
    log_level: str = "INFO"
    log_format: str = LOG_FORMAT
    log_file: Optional[str] = None

    # Input limits
    max_file_size_mb: int = 100

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            default_bank=os.getenv("DEFAULT_BANK", "HDFC"),
            reconciliation_tolerance=os.getenv("RECONCILIATION_TOLERANCE", "0.01"),
            output_dir=os.getenv("OUTPUT_DIR", "reports"),
            output_format=os.getenv("OUTPUT_FORMAT", "text"),
            include_metadata=os.getenv("INCLUDE_METADATA", "True").lower() == "true",
            currency_symbol=os.getenv("CURRENCY_SYMBOL", "INR"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", LOG_FORMAT),
            log_file=os.getenv("LOG_FILE") or None,
            max_file_size_mb=int(os.getenv("MAX_FILE_SIZE_MB", "100")),
        )

    def get_errors(self) -> List[str]:
        """List the settings that hold unusable values."""
        errors = []
        if str(self.default_bank).strip().upper() not in SUPPORTED_BANKS:
            errors.append(f"default_bank={self.default_bank!r}")
        if self.get_tolerance() is None:
            errors.append(f"reconciliation_tolerance={self.reconciliation_tolerance!r}")
        if self.output_format not in OUTPUT_FORMATS:
            errors.append(f"output_format={self.output_format!r}")
        if not self.currency_symbol:
            errors.append(f"currency_symbol={self.currency_symbol!r}")
        if not isinstance(self.max_file_size_mb, int) or self.max_file_size_mb <= 0:
            errors.append(f"max_file_size_mb={self.max_file_size_mb!r}")
        return errors

    def validate(self) -> bool:
        """Validate settings."""
        return not self.get_errors()

    def get_log_level(self) -> str:
        """Get log level as string."""
        if str(self.log_level).upper() in LOG_LEVELS:
            return self.log_level.upper()
        return "INFO"

    def get_tolerance(self) -> Optional[Decimal]:
        """Get the balance reconciliation tolerance as a Decimal.

        Returns:
            Non-negative tolerance, or None if the configured value is invalid.
        """
        try:
            tolerance = Decimal(str(self.reconciliation_tolerance))
        except InvalidOperation:
            return None
        if not tolerance.is_finite() or tolerance < 0:
            return None
        return tolerance

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create settings from dictionary."""
        return cls(**data)


def load_config_from_file(file_path: str) -> Dict[str, Any]:
    """Load settings overrides from a JSON file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``base`` with the keys of ``override`` applied."""
    result = base.copy()
    result.update(override)
    return result
