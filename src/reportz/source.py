"""Source indexing: line tables, position lookup and the source cache."""

from __future__ import annotations

import bisect
import logging
import threading
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Hashable

from reportz.errors import (
    InvalidEncoding,
    LineIndexOutOfRange,
    PositionOutOfBounds,
    SpanOutsideSource,
    UnknownSource,
)
from reportz.reports import Span

logger = logging.getLogger(__name__)

# Line feed, vertical tab, next line, line separator, paragraph separator.
LINE_SEPARATORS = frozenset("\n\x0b\x85\u2028\u2029")


def _utf8_len(ch: str) -> int:
    cp = ord(ch)
    if cp < 0x80:
        return 1
    if cp < 0x800:
        return 2
    if cp < 0x10000:
        return 3
    return 4


@dataclass(frozen=True)
class Line:
    """One line of a source. The trailing separator belongs to the line."""

    char_offset: int
    char_len: int
    byte_offset: int
    byte_len: int

    @property
    def byte_end(self) -> int:
        return self.byte_offset + self.byte_len


@dataclass(frozen=True)
class Locus:
    """1-based line and 0-based character column of a span's start."""

    line: int
    column: int


@dataclass(frozen=True)
class AnalyzedSource:
    """Immutable source text plus its line table."""

    raw: str
    data: bytes
    lines: tuple[Line, ...]
    char_len: int
    byte_len: int
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_line_starts", tuple(ln.byte_offset for ln in self.lines))

    @classmethod
    def compute(cls, raw_source: str | bytes) -> AnalyzedSource:
        """Build the line table in a single pass over the scalar values."""
        try:
            if isinstance(raw_source, bytes):
                data = raw_source
                text = raw_source.decode("utf-8")
            else:
                text = raw_source
                data = raw_source.encode("utf-8")
        except UnicodeError as e:
            raise InvalidEncoding(f"source is not valid UTF-8 text: {e}") from e

        lines: list[Line] = []
        char_start = byte_start = 0
        char_pos = byte_pos = 0
        for ch in text:
            char_pos += 1
            byte_pos += _utf8_len(ch)
            if ch in LINE_SEPARATORS:
                lines.append(Line(char_start, char_pos - char_start, byte_start, byte_pos - byte_start))
                char_start, byte_start = char_pos, byte_pos
        # The last line ends at EOF, separator or not.
        lines.append(Line(char_start, char_pos - char_start, byte_start, byte_pos - byte_start))

        return cls(raw=text, data=data, lines=tuple(lines), char_len=char_pos, byte_len=byte_pos)

    @classmethod
    def from_path(cls, path: Path) -> AnalyzedSource:
        return cls.compute(path.read_bytes())

    def line(self, index: int) -> Line:
        if not 0 <= index < len(self.lines):
            raise LineIndexOutOfRange(index, len(self.lines))
        return self.lines[index]

    def get_line_on_position(self, position: int) -> int:
        """Index of the line whose byte range contains *position*.

        ``byte_len`` itself (the end-of-file position) maps to the last line.
        """
        if not 0 <= position <= self.byte_len:
            raise PositionOutOfBounds(position, self.byte_len)
        return bisect.bisect_right(self._line_starts, position) - 1

    def span_lines(self, span: Span) -> tuple[int, int]:
        """Start and end line of *span*; the end line holds its last byte."""
        if span.end > self.byte_len:
            raise SpanOutsideSource(span, self.byte_len)
        start_line = self.get_line_on_position(span.start)
        end_line = self.get_line_on_position(max(span.start, span.end - 1))
        return start_line, end_line

    def span_to_locus(self, span: Span) -> Locus:
        if span.end > self.byte_len:
            raise SpanOutsideSource(span, self.byte_len)
        index = self.get_line_on_position(span.start)
        line = self.lines[index]
        column = len(self.text_between(line.byte_offset, span.start))
        return Locus(line=index + 1, column=column)

    def line_slice(self, index: int) -> str:
        """Text of a line, including its trailing separator."""
        line = self.line(index)
        return self.text_between(line.byte_offset, line.byte_end)

    def text_between(self, start: int, end: int) -> str:
        """Decode the raw bytes in [start, end)."""
        try:
            return self.data[start:end].decode("utf-8")
        except UnicodeDecodeError:
            raise SpanOutsideSource(
                Span(start, end), self.byte_len, "not aligned to character boundaries"
            ) from None


class SourceCache:
    """Maps source ids to analyzed sources, analyzing each id at most once.

    Entries are immutable, so lookups take no lock. Insertion runs under
    *lock* (a ``threading.Lock`` unless another context manager is given).
    """

    def __init__(self, lock: AbstractContextManager | None = None) -> None:
        self._sources: dict[Hashable, AnalyzedSource] = {}
        self._lock = lock if lock is not None else threading.Lock()

    def __contains__(self, source_id: Hashable) -> bool:
        return source_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def add_source(self, source_id: Hashable, source: str | bytes) -> AnalyzedSource:
        """Analyze and store *source* unless *source_id* is already known."""
        existing = self._sources.get(source_id)
        if existing is not None:
            logger.debug("source %r already cached", source_id)
            return existing
        with self._lock:
            existing = self._sources.get(source_id)
            if existing is not None:
                return existing
            analyzed = AnalyzedSource.compute(source)
            self._sources[source_id] = analyzed
        logger.debug("analyzed source %r: %d lines, %d bytes", source_id, len(analyzed.lines), analyzed.byte_len)
        return analyzed

    def add_source_preanalyzed(self, source_id: Hashable, analyzed: AnalyzedSource) -> None:
        with self._lock:
            self._sources[source_id] = analyzed

    def get(self, source_id: Hashable) -> AnalyzedSource:
        try:
            return self._sources[source_id]
        except KeyError:
            raise UnknownSource(source_id) from None
