"""Utility modules for semantic rag."""

from .logger import get_logger
from .text_processing import clean_text, split_text

__all__ = [
    "clean_text",
    "get_logger",
    "split_text",
]
