"""Core module - logging configuration and helpers."""

from .logging_config import setup_logging, filter_sensitive_data, truncate_large_data, preview_text

__all__ = ['setup_logging', 'filter_sensitive_data', 'truncate_large_data', 'preview_text']
