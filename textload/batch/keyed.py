"""
Key stamping for keyed loads, run inside Spark tasks.
"""

from typing import Iterable, Iterator

from textload.core.keys import KeyGenerator, KeyScratch
from textload.core.models import RawRecord


class GenerateKey:
    """
    mapPartitionsWithIndex function turning (byte_offset, line) pairs of one
    source file into RawRecords carrying [time, key].

    The KeyGenerator (seed and path fingerprints) is shared read-only by every
    task; the KeyScratch is created per partition and dropped with it.

    Args:
        path: Source path of the RDD this function is applied to
        time: Time value for path
        key_generator: Run-scoped key generator
    """

    def __init__(self, path: str, time: str, key_generator: KeyGenerator):
        self.path = path
        self.time = time
        self.key_generator = key_generator

    def __call__(self, partition_index: int, entries: Iterable[tuple[int, str]]) -> Iterator[RawRecord]:
        scratch = KeyScratch()
        for offset, line in entries:
            key = self.key_generator.key(self.path, partition_index, offset, line, scratch)
            yield RawRecord(line=line, extra_fields=(self.time, key))
