"""Errors raised while indexing sources and rendering diagnostics.

All of them describe bad caller-supplied data; none is retried. A render
call that raises has written nothing to its output sink.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Hashable

if TYPE_CHECKING:
    from reportz.reports import Span


class ReportError(Exception):
    """Base class for every reportz error."""


class UnknownSource(ReportError):
    """The diagnostic references a source id missing from the cache."""

    def __init__(self, source_id: Hashable) -> None:
        self.source_id = source_id
        super().__init__(f"unknown source: {source_id!r}")


class PositionOutOfBounds(ReportError):
    """A byte position lies beyond the end of the source."""

    def __init__(self, position: int, byte_len: int) -> None:
        self.position = position
        self.byte_len = byte_len
        super().__init__(f"position {position} is outside source of {byte_len} bytes")


class SpanOutsideSource(ReportError):
    """A label span does not fit the source it points into."""

    def __init__(self, span: Span, byte_len: int, reason: str = "") -> None:
        self.span = span
        self.byte_len = byte_len
        detail = reason or f"outside source of {byte_len} bytes"
        super().__init__(f"span {span.start}..{span.end} is {detail}")


class LineIndexOutOfRange(ReportError):
    def __init__(self, index: int, line_count: int) -> None:
        self.index = index
        self.line_count = line_count
        super().__init__(f"line index {index} out of range (source has {line_count} lines)")


class InvalidEncoding(ReportError):
    """Source text is not valid Unicode (UTF-8 for byte input)."""


class NoLabels(ReportError):
    """A snippet locus was requested for a diagnostic without labels."""

    def __init__(self) -> None:
        super().__init__("diagnostic has no labels to derive a snippet location from")
