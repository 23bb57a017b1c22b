"""
Per-record load logic, independent of Spark.

LoadProcess takes one RawRecord through split -> filter -> tag/clean ->
decode -> validate and returns an Outcome: the accepted value, or the
rejection kind plus a single-line message for the error sink. Filtered
records return None. Rejections never raise; exceptions from the pluggable
splitter, filter, cleaner, codec or validator are defects and propagate.
"""

from typing import Any, NamedTuple, Optional, Sequence

from textload.core.clean import Clean
from textload.core.filter import RowFilter
from textload.core.models import ColumnIdentity, DecodeError, RawRecord, ValidationResult
from textload.core.schema import SchemaCodec
from textload.core.split import Splitter
from textload.core.validators import Validator

ACCEPTED = "accepted"
VALIDATION = "validation"

DECODE_ERROR_PREFIXES = {
    "type_mismatch": "unexpected type",
    "parse_error": "unexpected type",
    "not_enough_input": "not enough fields in record",
    "too_much_input": "too many fields in record",
}


class Outcome(NamedTuple):
    """
    Result of loading one record.

    kind is ACCEPTED, VALIDATION or the decode reason kind
    (type_mismatch, parse_error, not_enough_input, too_much_input).
    warnings holds the messages of warning-severity rules; they never
    reject a record.
    """

    kind: str
    value: Any = None
    message: str | None = None
    warnings: tuple[str, ...] = ()

    @property
    def accepted(self) -> bool:
        return self.kind == ACCEPTED


def single_line(text: str) -> str:
    """Escape line breaks so text stays on one line of the error output."""
    return text.replace("\r", "\\r").replace("\n", "\\n")


def format_decode_error(error: DecodeError, fields: Sequence[str]) -> str:
    prefix = DECODE_ERROR_PREFIXES[error.reason.kind]
    detail = single_line(error.reason.describe())
    return f"{prefix}: {detail} at field {error.counter}; fields={list(fields)!r}"


def format_validation_error(result: ValidationResult, fields: Sequence[str]) -> str:
    errors = ",".join(single_line(error) for error in result.errors)
    return f"The following errors occurred: {errors}; fields={list(fields)!r}"


class LoadProcess:
    """
    Turns RawRecords into Outcomes.

    Args:
        splitter: Line splitter
        codec: Target schema codec
        clean: Field cleaner
        validator: Business rule validator
        row_filter: Row filter applied after splitting
    """

    def __init__(
        self,
        splitter: Splitter,
        codec: SchemaCodec,
        clean: Clean | None = None,
        validator: Validator | None = None,
        row_filter: RowFilter | None = None,
    ):
        self.splitter = splitter
        self.codec = codec
        self.clean = clean or Clean.identity()
        self.validator = validator or Validator.accept()
        self.row_filter = row_filter or RowFilter.keep()

    def column_of(self, index: int) -> ColumnIdentity:
        if index < self.codec.arity():
            return self.codec.column_of(index)
        return ColumnIdentity.overflow(index)

    def clean_fields(self, fields: Sequence[str]) -> list[str]:
        """Pair every field with its column identity and clean it."""
        return [self.clean.run(value, self.column_of(index)) for index, value in enumerate(fields)]

    def process(self, record: RawRecord) -> Optional[Outcome]:
        fields = self.splitter.run(record.line) + list(record.extra_fields)

        filtered = self.row_filter.run(fields)
        if filtered is None:
            return None

        decoded = self.codec.decode(self.clean_fields(filtered))

        if isinstance(decoded, DecodeError):
            return Outcome(decoded.reason.kind, message=format_decode_error(decoded, filtered))

        result = self.validator.run(decoded.value)
        warnings = tuple(single_line(warning) for warning in result.warnings)
        if result.passed:
            return Outcome(ACCEPTED, value=result.value, warnings=warnings)

        return Outcome(VALIDATION, message=format_validation_error(result, filtered), warnings=warnings)

    def process_partition(self, records):
        """mapPartitions body: outcomes of every record that passes the filter."""
        for record in records:
            outcome = self.process(record)
            if outcome is not None:
                yield outcome
