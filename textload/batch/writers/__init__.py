"""
Batch sinks for rejected records.
"""

from .error_writer import CollectingErrorSink, ErrorSink, TextFileErrorSink

__all__ = [
    "ErrorSink",
    "TextFileErrorSink",
    "CollectingErrorSink",
]
