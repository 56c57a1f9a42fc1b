# pie_errors.py
# Exceptions raised by the pie chart pipeline.

from __future__ import annotations

from typing import Optional


class PieChartError(Exception):
    """Base class for every failure the builder reports to the user."""


class ParseError(PieChartError, ValueError):
    """Malformed input: bad syntax, wrong structure or a bad option value."""

    def __init__(self, message: str, *, line: Optional[int] = None,
                 column: Optional[int] = None, field: Optional[str] = None):
        self.line = line
        self.column = column
        self.field = field
        where = []
        if line is not None:
            where.append(f"line {line}")
        if column is not None:
            where.append(f"column {column}")
        if field:
            where.append(f"field '{field}'")
        super().__init__(f"{message} ({', '.join(where)})" if where else message)


class EmptyInputError(ParseError):
    """The input holds no slices."""

    def __init__(self, message: str = "chart has no slices", **kwargs):
        super().__init__(message, **kwargs)


class InvalidValueError(ParseError):
    """A slice value that is not a positive, finite number."""

    def __init__(self, label: str, value, reason: str, *, field: Optional[str] = None):
        self.label = label
        self.value = value
        super().__init__(f"slice '{label}' has invalid value {value!r}: {reason}", field=field)


class UnknownOptionWarning(UserWarning):
    """An unrecognized top-level key; ignored."""


class WriteError(PieChartError):
    """The rendered chart could not be written to its destination."""
