"""
SchemaCodec: the contract the load pipeline uses to reach a target type.

The pipeline only ever calls arity, column_of and decode. It never looks
inside the target type, so any structured type can be loaded by writing a
codec for it.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from textload.core.models import (
    ColumnIdentity,
    DecodeError,
    DecodeResult,
    NotEnoughInput,
    TooMuchInput,
)


class SchemaCodec(ABC):
    """Abstract base class for target schema codecs."""

    @abstractmethod
    def arity(self) -> int:
        """Number of fields the target type expects."""

    @abstractmethod
    def column_of(self, index: int) -> ColumnIdentity:
        """Identity of the column at index (0 <= index < arity)."""

    @abstractmethod
    def decode(self, fields: Sequence[str]) -> DecodeResult:
        """Decode cleaned field values into the target type."""

    def spark_schema(self) -> Any:
        """StructType of decoded values, or None when Spark should infer it."""
        return None

    def check_arity(self, fields: Sequence[str]) -> DecodeError | None:
        """
        Return the count-mismatch DecodeError for fields, if any.

        Shared by the concrete codecs so every codec reports mismatched
        field counts the same way.
        """
        required = self.arity()
        present = len(fields)

        if present < required:
            return DecodeError(
                remainder=tuple(fields),
                counter=present,
                reason=NotEnoughInput(required=required, present=present),
            )
        if present > required:
            return DecodeError(
                remainder=tuple(fields[required:]),
                counter=required,
                reason=TooMuchInput(required=required, present=present),
            )
        return None
