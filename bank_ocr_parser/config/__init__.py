"""Configuration package."""

from bank_ocr_parser.config.settings import Settings

__all__ = ["Settings"]
