"""
DecodeResult models returned by schema codecs (ephemeral).

A decode either succeeds with the typed value (DecodeOk) or fails with a
DecodeError carrying one of four reasons. The pipeline turns every
DecodeError into a single-line message for the error sink.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TypeMismatch(BaseModel):
    """A field value that cannot be coerced to the column's declared type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["type_mismatch"] = "type_mismatch"
    value: str
    expected: str

    def describe(self) -> str:
        return f"{self.value!r} is not a valid {self.expected}"


class ParseError(BaseModel):
    """A field value that structurally cannot be parsed for its column."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["parse_error"] = "parse_error"
    value: str
    expected: str
    error: str

    def describe(self) -> str:
        return f"could not parse {self.value!r} as {self.expected} ({self.error})"


class NotEnoughInput(BaseModel):
    """Fewer fields than the schema arity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["not_enough_input"] = "not_enough_input"
    required: int
    present: int

    def describe(self) -> str:
        return f"{self.required} required, {self.present} present"


class TooMuchInput(BaseModel):
    """More fields than the schema arity."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["too_much_input"] = "too_much_input"
    required: int
    present: int

    def describe(self) -> str:
        return f"{self.required} required, {self.present} present"


DecodeReason = Union[TypeMismatch, ParseError, NotEnoughInput, TooMuchInput]


class DecodeOk(BaseModel):
    """Successful decode holding the typed value."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any

    @property
    def ok(self) -> bool:
        return True


class DecodeError(BaseModel):
    """
    Failed decode.

    Attributes:
        remainder: Fields that had not been consumed when decoding stopped
        counter: Zero-based position of the failing field (the arity for count mismatches)
        reason: Why decoding failed
    """

    model_config = ConfigDict(frozen=True)

    remainder: tuple[str, ...] = Field(default_factory=tuple)
    counter: int = 0
    reason: DecodeReason = Field(..., discriminator="kind")

    @property
    def ok(self) -> bool:
        return False


DecodeResult = Union[DecodeOk, DecodeError]
