"""
Spark batch load module.
"""

from .keyed import GenerateKey
from .pipeline import LoadPipeline, LoadResult
from .process import LoadProcess, Outcome
from .readers import TextLineReader
from .writers import CollectingErrorSink, ErrorSink, TextFileErrorSink

__all__ = [
    "LoadPipeline",
    "LoadResult",
    "LoadProcess",
    "Outcome",
    "GenerateKey",
    "TextLineReader",
    "ErrorSink",
    "TextFileErrorSink",
    "CollectingErrorSink",
]
