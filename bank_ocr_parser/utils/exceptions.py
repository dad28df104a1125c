"""Exception hierarchy for the statement parsing system."""


class StatementProcessingError(Exception):
    """Base exception for statement processing errors."""
    pass


class InvalidConfigurationError(StatementProcessingError):
    """Raised when a parser is requested or built with an unusable configuration."""
    pass


class UnsupportedVariantError(InvalidConfigurationError):
    """Raised when no parser is registered for a statement code."""
    pass


class AbstractInstantiationError(InvalidConfigurationError):
    """Raised when the abstract parser base is instantiated directly."""
    pass


class PDFExtractionError(StatementProcessingError):
    """Raised when text cannot be extracted from a PDF document."""
    pass


class SummaryCalculationError(StatementProcessingError):
    """Raised when transaction summaries cannot be computed."""
    pass


class ExcelConversionError(StatementProcessingError):
    """Raised when an Excel report cannot be written."""
    pass


class ValidationError(StatementProcessingError):
    """Raised when user-supplied input fails validation."""
    pass
