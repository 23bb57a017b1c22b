"""
Splitters turn one text line into an ordered list of field strings.

Field content is never modified here; cleaning is a separate stage.
"""

from typing import Callable


class Splitter:
    """
    A line-to-fields function.

    Build one with Splitter.delimited or Splitter.fixed.
    """

    def __init__(self, run: Callable[[str], list[str]], description: str):
        self._run = run
        self.description = description

    def run(self, line: str) -> list[str]:
        return self._run(line)

    def __repr__(self) -> str:
        return f"Splitter({self.description})"

    @classmethod
    def delimited(cls, delimiter: str) -> "Splitter":
        """
        Split on every literal occurrence of delimiter.

        Empty fields are preserved, including trailing ones, and an empty
        line yields a single empty field.
        """
        if not delimiter:
            raise ValueError("Delimiter must be a non-empty string")

        def run(line: str) -> list[str]:
            return line.split(delimiter)

        return cls(run, f"delimited {delimiter!r}")

    @classmethod
    def fixed(cls, lengths: list[int]) -> "Splitter":
        """
        Split into consecutive columns of the given widths.

        Always yields exactly len(lengths) fields: a short line gives empty
        or partial trailing fields and characters past the last column are
        discarded.
        """
        lengths = list(lengths)
        if any(length < 0 for length in lengths):
            raise ValueError(f"Column widths must not be negative: {lengths}")

        def run(line: str) -> list[str]:
            fields = []
            start = 0
            for length in lengths:
                fields.append(line[start:start + length])
                start += length
            return fields

        return cls(run, f"fixed {lengths}")
