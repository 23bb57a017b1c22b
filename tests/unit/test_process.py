"""
Unit tests for the per-record load process.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pyspark.sql.types import IntegerType, StringType, StructField, StructType

from textload.batch.process import ACCEPTED, VALIDATION, LoadProcess, Outcome, format_decode_error
from textload.core.clean import Clean
from textload.core.filter import RowFilter
from textload.core.models import DecodeError, ParseError, RawRecord, ValidationResult
from textload.core.rules import RuleConfigBuilder, RuleEngine
from textload.core.schema import SchemaCodec, StructTypeCodec
from textload.core.split import Splitter
from textload.core.validators import Validator


def string_codec(*names):
    return StructTypeCodec(StructType([StructField(name, StringType(), True) for name in names]))


def reject_with_newline(value, record):
    raise ValueError(f"bad value\n{value}")


class SpyCodec(SchemaCodec):
    """Delegates to a real codec and remembers what it was asked to decode."""

    def __init__(self, codec):
        self.codec = codec
        self.decoded = []

    def arity(self):
        return self.codec.arity()

    def column_of(self, index):
        return self.codec.column_of(index)

    def decode(self, fields):
        self.decoded.append(list(fields))
        return self.codec.decode(fields)


@pytest.fixture
def record():
    return RawRecord(line="a,b,c", extra_fields=("20240101",))


class TestAccepted:
    """Tests for records that pass every stage"""

    def test_time_field_is_appended(self, record):
        """Test the time field is decoded after the split fields"""
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "z", "time"))

        outcome = process.process(record)

        assert outcome.accepted
        assert list(outcome.value) == ["a", "b", "c", "20240101"]
        assert outcome.message is None
        assert outcome.warnings == ()

    def test_key_follows_time(self):
        """Test the key field is decoded after the time field"""
        process = LoadProcess(Splitter.delimited("|"), string_codec("x", "time", "key"))

        outcome = process.process(RawRecord(line="v", extra_fields=("20240101", "ab" * 32)))

        assert outcome.value.time == "20240101"
        assert outcome.value.key == "ab" * 32

    def test_validator_sees_decoded_value(self, record):
        """Test the validator receives the decoded value"""
        seen = []

        def check(value):
            seen.append(value)
            return []

        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "z", "time"), validator=Validator.of(check))

        outcome = process.process(record)

        assert outcome.kind == ACCEPTED
        assert seen == [outcome.value]

    def test_warning_rules_are_carried(self):
        """Test warning-severity rule messages travel on an accepted outcome"""
        codec = StructTypeCodec(StructType([
            StructField("n", IntegerType(), True),
            StructField("time", StringType(), True),
        ]))
        rules = RuleEngine(RuleConfigBuilder().add_range("n", max_value=10, severity="warning").build())
        process = LoadProcess(Splitter.delimited(","), codec, validator=rules)

        outcome = process.process(RawRecord(line="99", extra_fields=("t",)))

        assert outcome.accepted
        assert outcome.value.n == 99
        assert len(outcome.warnings) == 1
        assert "exceeds maximum 10" in outcome.warnings[0]


class TestRejected:
    """Tests for records rejected with a message"""

    def test_too_many_fields(self, record):
        """Test extra fields reject the record"""
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "time"))

        outcome = process.process(record)

        assert outcome.kind == "too_much_input"
        assert outcome.message.startswith("too many fields in record: 3 required, 4 present")
        assert "['a', 'b', 'c', '20240101']" in outcome.message

    def test_not_enough_fields(self):
        """Test missing fields reject the record"""
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "z", "time"))

        outcome = process.process(RawRecord(line="a", extra_fields=("t",)))

        assert outcome.kind == "not_enough_input"
        assert outcome.message.startswith("not enough fields in record: 4 required, 2 present")

    def test_type_errors_share_prefix(self):
        """Test parse errors and type mismatches share one prefix"""
        codec = StructTypeCodec(StructType([
            StructField("n", IntegerType(), False),
            StructField("time", StringType(), True),
        ]))
        process = LoadProcess(Splitter.delimited(","), codec)

        parse = process.process(RawRecord(line="abc", extra_fields=("t",)))
        overflow = process.process(RawRecord(line="99999999999", extra_fields=("t",)))

        assert parse.kind == "parse_error"
        assert overflow.kind == "type_mismatch"
        assert parse.message.startswith("unexpected type: ")
        assert overflow.message.startswith("unexpected type: ")
        assert "at field 0" in overflow.message

    def test_validation_errors_are_joined(self, record):
        """Test validation messages are comma-joined"""
        validator = Validator.all(
            Validator.by(lambda value: value.x != "a", "x must not be a"),
            Validator.by(lambda value: value.y != "b", "y must not be b"),
        )
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "z", "time"), validator=validator)

        outcome = process.process(record)

        assert outcome.kind == VALIDATION
        assert outcome.message.startswith("The following errors occurred: x must not be a,y must not be b; fields=")

    def test_warnings_do_not_reject(self, record):
        """Test warnings leave the record accepted"""
        validator = Validator(lambda value: ValidationResult.valid(value, ["looks odd"]))
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "z", "time"), validator=validator)

        outcome = process.process(record)

        assert outcome.accepted
        assert outcome.warnings == ("looks odd",)

    def test_message_is_single_line(self):
        """Test control characters in fields stay escaped"""
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "time"))

        outcome = process.process(RawRecord(line="a\rb,c\td", extra_fields=("t",)))

        assert "\n" not in outcome.message
        assert "\r" not in outcome.message

    def test_multi_line_rule_message_is_escaped(self):
        """Test a rule message containing a newline stays on one line"""
        rules = RuleEngine(RuleConfigBuilder().add_custom("x", reject_with_newline, error_message="x rejected").build())
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "time"), validator=rules)

        outcome = process.process(RawRecord(line="oops", extra_fields=("t",)))

        assert outcome.kind == VALIDATION
        assert "\n" not in outcome.message
        assert "\r" not in outcome.message
        assert "bad value\\noops" in outcome.message

    def test_multi_line_parse_error_is_escaped(self):
        """Test a parse error detail containing line breaks stays on one line"""
        error = DecodeError(
            counter=1,
            reason=ParseError(value="v", expected="int", error="first line\r\nsecond line"),
        )

        message = format_decode_error(error, ["a", "v"])

        assert message.startswith("unexpected type: ")
        assert "\n" not in message
        assert "\r" not in message
        assert "first line\\r\\nsecond line" in message

    def test_validator_exceptions_propagate(self, record):
        """Test unexpected validator exceptions are not swallowed"""
        def explode(value):
            raise RuntimeError("broken rule")

        process = LoadProcess(Splitter.delimited(","), string_codec("x", "y", "z", "time"), validator=Validator(explode))

        with pytest.raises(RuntimeError, match="broken rule"):
            process.process(record)


class TestFilterAndClean:
    """Tests for row filtering and field cleaning"""

    def test_filtered_rows_are_never_decoded(self):
        """Test rows dropped by the filter never reach the codec"""
        spy = SpyCodec(string_codec("x", "time"))
        process = LoadProcess(Splitter.delimited("|"), spy, row_filter=RowFilter.by_row_leader("D"))

        assert process.process(RawRecord(line="H|header", extra_fields=("t",))) is None
        assert spy.decoded == []

        outcome = process.process(RawRecord(line="D|detail", extra_fields=("t",)))

        assert outcome.value.x == "detail"
        assert spy.decoded == [["detail", "t"]]

    def test_filter_output_length_is_checked(self):
        """Test fields added by the filter count toward the arity"""
        process = LoadProcess(
            Splitter.delimited("|"), string_codec("x", "time"), row_filter=RowFilter(lambda fields: fields + ["more"])
        )

        assert process.process(RawRecord(line="v", extra_fields=("t",))).kind == "too_much_input"

    def test_cleaned_values_are_decoded(self):
        """Test the codec decodes cleaned values"""
        process = LoadProcess(Splitter.delimited(","), string_codec("x", "time"), clean=Clean.default())

        outcome = process.process(RawRecord(line="  hi\x07 ", extra_fields=("t",)))

        assert outcome.value.x == "hi"

    def test_message_shows_fields_before_cleaning(self):
        """Test rejection messages show the raw fields"""
        process = LoadProcess(Splitter.delimited(","), string_codec("time"), clean=Clean.trim())

        outcome = process.process(RawRecord(line=" a ", extra_fields=("t",)))

        assert "[' a ', 't']" in outcome.message

    def test_cleaner_sees_every_column_including_overflow(self):
        """Test overflow fields are cleaned with synthetic columns"""
        seen = []

        def spy(value, column):
            seen.append((column.name, column.position))
            return value

        process = LoadProcess(Splitter.delimited(","), string_codec("x", "time"), clean=Clean(spy))

        process.process(RawRecord(line="a,b,c", extra_fields=("t",)))

        assert seen == [("x", 0), ("time", 1), ("_2", 2), ("_3", 3)]

    def test_process_partition_drops_filtered_records(self):
        """Test the partition body skips filtered records"""
        process = LoadProcess(
            Splitter.delimited("|"), string_codec("x", "time"), row_filter=RowFilter.where(lambda fields: fields[0] != "#")
        )
        records = [
            RawRecord(line="#", extra_fields=("t",)),
            RawRecord(line="a", extra_fields=("t",)),
            RawRecord(line="a|b", extra_fields=("t",)),
        ]

        outcomes = list(process.process_partition(records))

        assert [outcome.kind for outcome in outcomes] == [ACCEPTED, "too_much_input"]
        assert all(isinstance(outcome, Outcome) for outcome in outcomes)


field_text = st.text(alphabet=st.characters(blacklist_characters=",", blacklist_categories=("Cs",)), max_size=8)


@given(fields=st.lists(field_text, min_size=2, max_size=8), arity=st.integers(min_value=1, max_value=9))
def test_only_matching_field_counts_are_accepted(fields, arity):
    """Test only records matching the arity are accepted"""
    codec = string_codec(*[f"c{i}" for i in range(arity)])
    process = LoadProcess(Splitter.delimited(","), codec)

    outcome = process.process(RawRecord(line=",".join(fields[:-1]), extra_fields=(fields[-1],)))

    if len(fields) == arity:
        assert outcome.accepted
        assert list(outcome.value) == fields
    elif len(fields) < arity:
        assert outcome.kind == "not_enough_input"
    else:
        assert outcome.kind == "too_much_input"
