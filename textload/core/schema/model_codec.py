"""
Codec for pydantic models.

Fields are matched to model fields in declaration order and coerced with
pydantic's lax mode ("42" -> 42, "true" -> True, "2024-01-31" -> date).
"""

from typing import Any, Sequence, get_args

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from textload.core.models import (
    ColumnIdentity,
    DecodeError,
    DecodeOk,
    DecodeResult,
    ParseError,
    TypeMismatch,
)

from .codec import SchemaCodec


def _type_name(annotation: Any) -> str:
    name = getattr(annotation, "__name__", None)
    if name and not get_args(annotation):
        return name
    return str(annotation).replace("typing.", "")


def _is_optional(annotation: Any) -> bool:
    return type(None) in get_args(annotation)


class ModelCodec(SchemaCodec):
    """
    Decode field lists into instances of a pydantic model.

    Error mapping:
    - pydantic ``*_parsing`` errors (e.g. int_parsing, date_parsing) -> ParseError
    - every other field error (constraints, literals, ...) -> TypeMismatch
    - an empty value for an Optional field decodes to None

    Args:
        model: Target BaseModel subclass
    """

    def __init__(self, model: type[BaseModel]):
        self.model = model
        self._names: list[str] = list(model.model_fields)
        self._fields: list[FieldInfo] = [model.model_fields[name] for name in self._names]
        self._keys: list[str] = [
            field.alias or name for name, field in zip(self._names, self._fields)
        ]

    def arity(self) -> int:
        return len(self._names)

    def column_of(self, index: int) -> ColumnIdentity:
        return ColumnIdentity(
            name=self._names[index],
            position=index,
            type_hint=_type_name(self._fields[index].annotation),
        )

    def decode(self, fields: Sequence[str]) -> DecodeResult:
        mismatch = self.check_arity(fields)
        if mismatch:
            return mismatch

        payload = {}
        for key, field, value in zip(self._keys, self._fields, fields):
            if value == "" and _is_optional(field.annotation):
                payload[key] = None
            else:
                payload[key] = value

        try:
            return DecodeOk(value=self.model.model_validate(payload))
        except ValidationError as e:
            return self._decode_error(fields, e)

    def _decode_error(self, fields: Sequence[str], error: ValidationError) -> DecodeError:
        """Translate the first pydantic error into a DecodeError."""
        detail = error.errors()[0]
        loc = detail.get("loc") or ()

        if loc and loc[0] in self._keys:
            index = self._keys.index(loc[0])
            value = fields[index]
            expected = _type_name(self._fields[index].annotation)
        else:
            # Model-level failure: not attributable to one field
            index = 0
            value = "|".join(fields)
            expected = self.model.__name__

        if detail["type"].endswith("_parsing"):
            reason = ParseError(value=value, expected=expected, error=detail["msg"])
        else:
            reason = TypeMismatch(value=value, expected=expected)

        return DecodeError(remainder=tuple(fields[index:]), counter=index, reason=reason)
