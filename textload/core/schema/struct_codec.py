"""
Codec for Spark StructType schemas.

Decodes field lists into pyspark Rows whose values match the schema's data
types, so accepted records convert straight into a DataFrame.
"""

import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Sequence

from pyspark.sql import Row
from pyspark.sql.types import (
    BooleanType,
    ByteType,
    DataType,
    DateType,
    DecimalType,
    DoubleType,
    FloatType,
    IntegerType,
    LongType,
    ShortType,
    StringType,
    StructField,
    StructType,
    TimestampType,
)

from textload.core.models import (
    ColumnIdentity,
    DecodeError,
    DecodeOk,
    DecodeReason,
    DecodeResult,
    ParseError,
    TypeMismatch,
)

from .codec import SchemaCodec


INTEGRAL_RANGES = {
    ByteType: (-(2 ** 7), 2 ** 7 - 1),
    ShortType: (-(2 ** 15), 2 ** 15 - 1),
    IntegerType: (-(2 ** 31), 2 ** 31 - 1),
    LongType: (-(2 ** 63), 2 ** 63 - 1),
}

TYPE_NAMES = {
    "string": StringType,
    "str": StringType,
    "byte": ByteType,
    "tinyint": ByteType,
    "short": ShortType,
    "smallint": ShortType,
    "int": IntegerType,
    "integer": IntegerType,
    "long": LongType,
    "bigint": LongType,
    "float": FloatType,
    "double": DoubleType,
    "boolean": BooleanType,
    "bool": BooleanType,
    "date": DateType,
    "timestamp": TimestampType,
}

DECIMAL_PATTERN = re.compile(r"^decimal\((\d+),\s*(\d+)\)$")

# Plain ASCII numerals only; decimals take no exponent
INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")
DECIMAL_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")
FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

SUPPORTED_TYPES = tuple(TYPE_NAMES.values()) + (DecimalType,)


class _FieldFailure(Exception):
    def __init__(self, reason: DecodeReason):
        super().__init__(reason.describe())
        self.reason = reason


def data_type_from_name(name: str) -> DataType:
    """
    Map a type name from configuration to a Spark data type.

    Accepts the names in TYPE_NAMES plus ``decimal(p,s)``.
    """
    normalized = name.strip().lower()
    match = DECIMAL_PATTERN.match(normalized)
    if match:
        return DecimalType(int(match.group(1)), int(match.group(2)))
    if normalized == "decimal":
        return DecimalType()

    type_class = TYPE_NAMES.get(normalized)
    if not type_class:
        raise ValueError(f"Unsupported column type: {name}")
    return type_class()


def struct_from_columns(columns: Sequence[dict[str, Any]]) -> StructType:
    """Build a StructType from ``[{"name": ..., "type": ..., "nullable": ...}]``."""
    return StructType([
        StructField(column["name"], data_type_from_name(column["type"]), column.get("nullable", True))
        for column in columns
    ])


class StructTypeCodec(SchemaCodec):
    """
    Decode field lists into Rows of a StructType.

    Error mapping:
    - integral value out of range, float overflowing to infinity, boolean
      other than true/false, decimal with too many digits -> TypeMismatch
    - value that does not parse as a number, decimal, date or timestamp -> ParseError;
      numbers must be plain ASCII literals, so "1_000", " 42" and "nan" do not parse
    - an empty value in a nullable non-string column decodes to None

    Args:
        schema: Target StructType; only flat schemas of the supported types
    """

    def __init__(self, schema: StructType):
        for field in schema.fields:
            if not isinstance(field.dataType, SUPPORTED_TYPES):
                raise ValueError(
                    f"Unsupported data type for column '{field.name}': {field.dataType.simpleString()}"
                )

        self.schema = schema
        self._row = Row(*schema.names)

    def arity(self) -> int:
        return len(self.schema.fields)

    def column_of(self, index: int) -> ColumnIdentity:
        field = self.schema.fields[index]
        return ColumnIdentity(name=field.name, position=index, type_hint=field.dataType.simpleString())

    def spark_schema(self) -> StructType:
        return self.schema

    def decode(self, fields: Sequence[str]) -> DecodeResult:
        mismatch = self.check_arity(fields)
        if mismatch:
            return mismatch

        values = []
        for index, (field, value) in enumerate(zip(self.schema.fields, fields)):
            try:
                values.append(self._decode_value(field, value))
            except _FieldFailure as failure:
                return DecodeError(remainder=tuple(fields[index:]), counter=index, reason=failure.reason)

        return DecodeOk(value=self._row(*values))

    def _decode_value(self, field: StructField, value: str) -> Any:
        data_type = field.dataType
        expected = data_type.simpleString()

        if isinstance(data_type, StringType):
            return value

        if value == "" and field.nullable:
            return None

        if isinstance(data_type, tuple(INTEGRAL_RANGES)):
            if not INTEGER_LITERAL.fullmatch(value):
                raise _FieldFailure(ParseError(value=value, expected=expected, error="invalid integer literal"))
            if len(value.lstrip("+-").lstrip("0")) > 19:
                raise _FieldFailure(TypeMismatch(value=value, expected=expected))
            number = int(value)
            low, high = INTEGRAL_RANGES[type(data_type)]
            if not low <= number <= high:
                raise _FieldFailure(TypeMismatch(value=value, expected=expected))
            return number

        if isinstance(data_type, (FloatType, DoubleType)):
            if not FLOAT_LITERAL.fullmatch(value):
                raise _FieldFailure(ParseError(value=value, expected=expected, error="invalid floating point literal"))
            number = float(value)
            if math.isinf(number):
                raise _FieldFailure(TypeMismatch(value=value, expected=expected))
            return number

        if isinstance(data_type, DecimalType):
            return self._decode_decimal(data_type, value)

        if isinstance(data_type, BooleanType):
            lowered = value.lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
            raise _FieldFailure(TypeMismatch(value=value, expected=expected))

        if isinstance(data_type, DateType):
            try:
                return date.fromisoformat(value)
            except ValueError as e:
                raise _FieldFailure(ParseError(value=value, expected="date (YYYY-MM-DD)", error=str(e)))

        if isinstance(data_type, TimestampType):
            try:
                return datetime.fromisoformat(value)
            except ValueError as e:
                raise _FieldFailure(ParseError(value=value, expected="timestamp (ISO 8601)", error=str(e)))

        raise TypeError(f"Unhandled data type: {expected}")

    def _decode_decimal(self, data_type: DecimalType, value: str) -> Decimal:
        expected = data_type.simpleString()
        if not DECIMAL_LITERAL.fullmatch(value):
            raise _FieldFailure(ParseError(value=value, expected=expected, error="invalid decimal literal"))
        number = Decimal(value)

        _, digits, exponent = number.as_tuple()
        scale = max(0, -exponent)
        integer_digits = 0 if number == 0 else max(0, len(digits) + exponent)
        if scale > data_type.scale or integer_digits > data_type.precision - data_type.scale:
            raise _FieldFailure(TypeMismatch(value=value, expected=expected))

        return number
