"""
Time sources: where the time field appended to every record comes from.

A TimeSource is either a constant (Predetermined) or a function of the
source path (FromPath). Both are pure; a path the function cannot handle is
the caller's problem and its exception propagates.
"""

import re
from typing import Callable, Union

from pydantic import BaseModel, ConfigDict


class Predetermined(BaseModel):
    """The same time value for every path."""

    model_config = ConfigDict(frozen=True)

    time: str


class FromPath(BaseModel):
    """A time value computed from each source path."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    extract: Callable[[str], str]


TimeSource = Union[Predetermined, FromPath]


def get_time(source: TimeSource, path: str) -> str:
    """
    Resolve the time value for a source path.

    Args:
        source: Predetermined or FromPath
        path: Source path identifier

    Returns:
        Time string to append to every record read from path
    """
    if isinstance(source, Predetermined):
        return source.time
    if isinstance(source, FromPath):
        return source.extract(path)
    raise TypeError(f"Unsupported time source: {type(source).__name__}")


class PathPattern:
    """
    Extract a time value from a path with a regular expression.

    All capture groups of the first match are concatenated, so
    ``r"year=(\\d{4})/month=(\\d{2})/day=(\\d{2})"`` turns
    ``/data/year=2024/month=01/day=31/part-0`` into ``20240131``.
    """

    def __init__(self, pattern: str):
        self.pattern = re.compile(pattern)
        if self.pattern.groups == 0:
            raise ValueError(f"Time pattern needs at least one capture group: {pattern}")

    def __call__(self, path: str) -> str:
        match = self.pattern.search(path)
        if not match:
            raise ValueError(f"Path {path!r} does not match time pattern {self.pattern.pattern!r}")
        return "".join(group or "" for group in match.groups())

    def __repr__(self) -> str:
        return f"PathPattern({self.pattern.pattern!r})"


def from_path_pattern(pattern: str) -> FromPath:
    """FromPath time source driven by a regular expression over the path."""
    return FromPath(extract=PathPattern(pattern))
