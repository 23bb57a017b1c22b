"""
Core data models for the textload pipeline.

All models use Pydantic for runtime validation and are immutable.
"""

from .column import ColumnIdentity
from .decode_result import (
    DecodeError,
    DecodeOk,
    DecodeReason,
    DecodeResult,
    NotEnoughInput,
    ParseError,
    TooMuchInput,
    TypeMismatch,
)
from .raw_record import PartitionContext, RawRecord
from .validation_result import ValidationResult

__all__ = [
    "RawRecord",
    "PartitionContext",
    "ColumnIdentity",
    "DecodeOk",
    "DecodeError",
    "DecodeReason",
    "DecodeResult",
    "TypeMismatch",
    "ParseError",
    "NotEnoughInput",
    "TooMuchInput",
    "ValidationResult",
]
