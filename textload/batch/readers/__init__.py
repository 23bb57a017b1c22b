"""
Batch text readers.
"""

from .text_reader import TextLineReader

__all__ = ["TextLineReader"]
