"""
Error sinks for rejected-record messages.

Writes each message as one line of text under the configured error path,
so downstream jobs can decide what rejection rate they tolerate.
"""

from abc import ABC, abstractmethod

from pyspark import RDD

from textload.observability.logger import get_logger

logger = get_logger(__name__)


class ErrorSink(ABC):
    """Destination for rejected-record messages."""

    @abstractmethod
    def write(self, messages: RDD) -> None:
        """Write an RDD of single-line messages."""


class TextFileErrorSink(ErrorSink):
    """
    Writes messages as text files (one part file per partition) to a directory.

    Args:
        path: Output directory; must not exist unless overwrite is set
        overwrite: Delete an existing directory at path first
    """

    def __init__(self, path: str, overwrite: bool = False):
        self.path = path
        self.overwrite = overwrite

    def write(self, messages: RDD) -> None:
        if self.overwrite:
            self._delete_existing(messages)

        logger.info(f"Writing rejected record messages to {self.path}")
        messages.saveAsTextFile(self.path)

    def _delete_existing(self, messages: RDD) -> None:
        sc = messages.context
        hadoop_path = sc._jvm.org.apache.hadoop.fs.Path(self.path)
        fs = hadoop_path.getFileSystem(sc._jsc.hadoopConfiguration())
        if fs.exists(hadoop_path):
            logger.warning(f"Overwriting existing error output at {self.path}")
            fs.delete(hadoop_path, True)


class CollectingErrorSink(ErrorSink):
    """Keeps messages in driver memory; for tests and small dry runs."""

    def __init__(self):
        self.messages: list[str] = []

    def write(self, messages: RDD) -> None:
        self.messages.extend(messages.collect())
