"""
Row filters run over the split field list before cleaning and decoding.

Returning None drops the record: it is neither decoded nor reported as an
error. Returning a list continues the pipeline with that list, whose length
then goes through the normal arity check.
"""

from typing import Callable, Optional


class RowFilter:
    """A fields -> fields-or-None function."""

    def __init__(self, run: Callable[[list[str]], Optional[list[str]]]):
        self._run = run

    def run(self, fields: list[str]) -> Optional[list[str]]:
        return self._run(fields)

    @classmethod
    def keep(cls) -> "RowFilter":
        """Keep every row unchanged."""
        return cls(lambda fields: fields)

    @classmethod
    def where(cls, predicate: Callable[[list[str]], bool]) -> "RowFilter":
        """Keep rows for which predicate holds, drop the rest."""
        return cls(lambda fields: fields if predicate(fields) else None)

    @classmethod
    def by_row_leader(cls, leader: str) -> "RowFilter":
        """
        Keep only rows whose first field equals leader, without that field.

        Used for files that mix header, detail and trailer rows tagged by
        a leading record type such as ``H``, ``D`` and ``T``.
        """
        def run(fields: list[str]) -> Optional[list[str]]:
            if fields and fields[0] == leader:
                return fields[1:]
            return None

        return cls(run)
