"""
Field cleaners: (value, column) -> value, applied once per field after the
codec has tagged it with its ColumnIdentity and before decoding.
"""

from typing import Callable, Iterable

from textload.core.models import ColumnIdentity


class Clean:
    """A schema-aware value-to-value function."""

    def __init__(self, run: Callable[[str, ColumnIdentity], str]):
        self._run = run

    def run(self, value: str, column: ColumnIdentity) -> str:
        return self._run(value, column)

    @classmethod
    def identity(cls) -> "Clean":
        return cls(lambda value, column: value)

    @classmethod
    def trim(cls) -> "Clean":
        """Strip leading and trailing whitespace."""
        return cls(lambda value, column: value.strip())

    @classmethod
    def remove_non_printables(cls) -> "Clean":
        """Drop control and other non-printable characters."""
        return cls(lambda value, column: "".join(ch for ch in value if ch.isprintable()))

    @classmethod
    def all(cls, *cleaners: "Clean") -> "Clean":
        """Apply cleaners left to right."""
        def run(value: str, column: ColumnIdentity) -> str:
            for cleaner in cleaners:
                value = cleaner.run(value, column)
            return value

        return cls(run)

    @classmethod
    def default(cls) -> "Clean":
        """Trim, then remove non-printable characters."""
        return cls.all(cls.trim(), cls.remove_non_printables())

    @classmethod
    def for_columns(cls, names: Iterable[str], cleaner: "Clean") -> "Clean":
        """Apply cleaner only to the named columns, leave the others untouched."""
        selected = frozenset(names)

        def run(value: str, column: ColumnIdentity) -> str:
            if column.name in selected:
                return cleaner.run(value, column)
            return value

        return cls(run)
