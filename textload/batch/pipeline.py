"""
Batch load pipeline orchestration.

Coordinates the flow: read lines → append time (and key) → split → filter →
clean → decode → validate → route accepted records and rejection messages.
"""

from typing import Any

from pyspark import RDD, StorageLevel
from pyspark.sql import DataFrame, Row, SparkSession

from textload.batch.keyed import GenerateKey
from textload.batch.process import ACCEPTED, LoadProcess, Outcome
from textload.batch.readers import TextLineReader
from textload.batch.writers import ErrorSink, TextFileErrorSink
from textload.core.clean import Clean
from textload.core.filter import RowFilter
from textload.core.keys import KeyGenerator
from textload.core.models import RawRecord
from textload.core.schema import SchemaCodec
from textload.core.split import Splitter
from textload.core.time_source import TimeSource, get_time
from textload.core.validators import Validator, as_mapping
from textload.observability.logger import get_logger, log_operation
from textload.observability.metrics import record_load


logger = get_logger(__name__)


def _is_accepted(outcome: Outcome) -> bool:
    return outcome.kind == ACCEPTED


def _is_rejected(outcome: Outcome) -> bool:
    return outcome.kind != ACCEPTED


def _with_time(time: str):
    def to_raw_record(line: str) -> RawRecord:
        return RawRecord(line=line, extra_fields=(time,))
    return to_raw_record


class LoadResult:
    """
    Outcome of one load: accepted values plus the rejection messages that
    were already written to the error sink.

    Outcomes are persisted so that reading the accepted records does not
    re-run the load.
    """

    def __init__(self, outcomes: RDD, codec: SchemaCodec, mode: str, duration: float | None = None):
        self.outcomes = outcomes
        self.codec = codec
        self.mode = mode
        self.duration = duration

    @property
    def accepted(self) -> RDD:
        """RDD of decoded and validated values."""
        return self.outcomes.filter(_is_accepted).map(lambda outcome: outcome.value)

    @property
    def errors(self) -> RDD:
        """RDD of single-line rejection messages."""
        return self.outcomes.filter(_is_rejected).map(lambda outcome: outcome.message)

    def to_dataframe(self, spark: SparkSession) -> DataFrame:
        """
        Accepted values as a DataFrame.

        Uses the codec's Spark schema when it has one; otherwise values are
        converted to Rows and Spark infers the schema.
        """
        schema = self.codec.spark_schema()
        if schema is not None:
            return spark.createDataFrame(self.accepted, schema)
        return spark.createDataFrame(self.accepted.map(lambda value: Row(**as_mapping(value))))

    def summarize(self) -> dict[str, Any]:
        """
        Count outcomes by kind and record them as metrics.

        Returns:
            Dictionary with accepted, rejected, rejected_by_kind and warnings
        """
        counts = dict(self.outcomes.map(lambda outcome: outcome.kind).countByValue())
        accepted = counts.pop(ACCEPTED, 0)
        rejected = sum(counts.values())
        warnings = self.outcomes.map(lambda outcome: len(outcome.warnings)).sum()

        record_load(self.mode, accepted, counts, self.duration, warnings=warnings)

        return {
            "mode": self.mode,
            "accepted": accepted,
            "rejected": rejected,
            "rejected_by_kind": counts,
            "warnings": warnings,
        }

    def unpersist(self) -> None:
        self.outcomes.unpersist()


class LoadPipeline:
    """
    Loads text files into typed records.

    Three entry points mirror the supported input layouts:
    - load: delimited lines, time field appended
    - load_with_key: delimited lines, time field and a 256-bit key appended
    - load_fixed_length: fixed-width lines, time field appended

    All of them end in load_process, which can also be fed any RDD of
    RawRecords directly.
    """

    def __init__(self, spark: SparkSession):
        """
        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.sc = spark.sparkContext
        self.reader = TextLineReader(self.sc)

    def load(
        self,
        delimiter: str,
        sources: list[str],
        errors: ErrorSink | str,
        time_source: TimeSource,
        codec: SchemaCodec,
        clean: Clean | None = None,
        validator: Validator | None = None,
        row_filter: RowFilter | None = None,
    ) -> LoadResult:
        """
        Load delimited text files.

        Args:
            delimiter: Field delimiter
            sources: Input paths
            errors: Error sink, or a path for a TextFileErrorSink
            time_source: Where the appended time field comes from
            codec: Target schema codec; its arity includes the time field
            clean: Field cleaner (identity by default)
            validator: Business rules (accept everything by default)
            row_filter: Row filter (keep everything by default)

        Returns:
            LoadResult with accepted records; rejections are already written
        """
        return self.load_process(
            self._raw_records(sources, time_source),
            Splitter.delimited(delimiter),
            errors,
            codec,
            clean,
            validator,
            row_filter,
            mode="delimited",
        )

    def load_with_key(
        self,
        delimiter: str,
        sources: list[str],
        errors: ErrorSink | str,
        time_source: TimeSource,
        codec: SchemaCodec,
        clean: Clean | None = None,
        validator: Validator | None = None,
        row_filter: RowFilter | None = None,
        key_generator: KeyGenerator | None = None,
    ) -> LoadResult:
        """
        Same as load but also appends a unique key after the time field.

        The last column of the target schema must be a string column set
        aside for the key. One random run seed is drawn for the whole call
        unless a key_generator is supplied.
        """
        self._check_sources(sources)
        key_generator = key_generator or KeyGenerator(sources)

        logger.info(f"Generating record keys for {len(sources)} source(s)")

        raw = self.sc.union([
            self.reader.lines_with_offsets(path).mapPartitionsWithIndex(
                GenerateKey(path, get_time(time_source, path), key_generator)
            )
            for path in sources
        ])

        return self.load_process(
            raw,
            Splitter.delimited(delimiter),
            errors,
            codec,
            clean,
            validator,
            row_filter,
            mode="delimited_with_key",
        )

    def load_fixed_length(
        self,
        lengths: list[int],
        sources: list[str],
        errors: ErrorSink | str,
        time_source: TimeSource,
        codec: SchemaCodec,
        clean: Clean | None = None,
        validator: Validator | None = None,
        row_filter: RowFilter | None = None,
    ) -> LoadResult:
        """Same as load but splits lines into columns of the given widths."""
        return self.load_process(
            self._raw_records(sources, time_source),
            Splitter.fixed(lengths),
            errors,
            codec,
            clean,
            validator,
            row_filter,
            mode="fixed_length",
        )

    def load_process(
        self,
        raw: RDD,
        splitter: Splitter,
        errors: ErrorSink | str,
        codec: SchemaCodec,
        clean: Clean | None = None,
        validator: Validator | None = None,
        row_filter: RowFilter | None = None,
        mode: str = "custom",
    ) -> LoadResult:
        """
        Run RawRecords through the record pipeline and write rejections.

        Args:
            raw: RDD of RawRecord
            splitter: Line splitter
            errors: Error sink, or a path for a TextFileErrorSink
            codec: Target schema codec
            clean: Field cleaner
            validator: Business rules
            row_filter: Row filter
            mode: Label used in logs and metrics

        Returns:
            LoadResult
        """
        sink = TextFileErrorSink(errors) if isinstance(errors, str) else errors
        process = LoadProcess(splitter, codec, clean, validator, row_filter)

        with log_operation("load", logger=logger, mode=mode, splitter=splitter.description) as operation:
            outcomes = raw.mapPartitions(process.process_partition).persist(StorageLevel.MEMORY_AND_DISK)
            result = LoadResult(outcomes, codec, mode)
            sink.write(result.errors)

        result.duration = operation.duration
        return result

    def _raw_records(self, sources: list[str], time_source: TimeSource) -> RDD:
        self._check_sources(sources)
        return self.sc.union([
            self.reader.lines(path).map(_with_time(get_time(time_source, path)))
            for path in sources
        ])

    @staticmethod
    def _check_sources(sources: list[str]) -> None:
        if not sources:
            raise ValueError("At least one source path is required")
