"""
RawRecord and PartitionContext models (ephemeral, one per input line).
"""

from pydantic import BaseModel, ConfigDict, Field


class RawRecord(BaseModel):
    """
    One input line plus the derived values appended to it.

    Attributes:
        line: The raw text line, without its terminator
        extra_fields: Derived values in fixed order: time first, key second if present
    """

    model_config = ConfigDict(frozen=True)

    line: str
    extra_fields: tuple[str, ...] = Field(default_factory=tuple)


class PartitionContext(BaseModel):
    """
    Where a line came from, as reported by the execution engine.

    Only valid while that one line is being processed.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    partition_index: int = Field(..., ge=0)
    byte_offset: int = Field(..., ge=0)
