"""Label ordering, gutter sizing and splitting lines into styled fragments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from reportz.ansi import BasicColor, Color
from reportz.reports import Label, Span
from reportz.source import LINE_SEPARATORS, AnalyzedSource

_LINE_TERMINATORS = "".join(sorted(LINE_SEPARATORS)) + "\r"


def strip_line_terminators(text: str) -> str:
    return text.rstrip(_LINE_TERMINATORS)


def sort_labels(labels: Iterable[Label]) -> list[Label]:
    """Order labels by start offset. Equal starts keep their input order."""
    return sorted(labels, key=lambda label: label.span.start)


@dataclass(frozen=True)
class LineFragment:
    """A contiguous slice of one line drawn in a single color."""

    text: str
    color: Color
    local_span: Span
    label: Label | None
    is_multiline: bool
    is_multiline_start: bool

    @property
    def display_text(self) -> str:
        """The text without trailing line terminators."""
        return strip_line_terminators(self.text)


@dataclass(frozen=True)
class _LabelInfo:
    label: Label
    start_line: int
    end_line: int

    @property
    def is_multiline(self) -> bool:
        return self.start_line != self.end_line


class LabelResolver:
    """Resolves the labels of one diagnostic against its source.

    Labels are sorted once on construction; every span is validated against
    the source, so out-of-range spans fail before anything is laid out.
    """

    def __init__(self, source: AnalyzedSource, labels: Sequence[Label]) -> None:
        self.source = source
        self.labels = sort_labels(labels)
        self._info = [_LabelInfo(label, *source.span_lines(label.span)) for label in self.labels]

    def lines_of(self, index: int) -> tuple[int, int]:
        """Start and end line of the label at *index* in sorted order."""
        info = self._info[index]
        return info.start_line, info.end_line

    def is_multiline(self, index: int) -> bool:
        return self._info[index].is_multiline

    def relevant_lines(self) -> list[int]:
        """Lines holding the start or end of some label, ascending."""
        lines: set[int] = set()
        for info in self._info:
            lines.add(info.start_line)
            lines.add(info.end_line)
        return sorted(lines)

    def gutter_width(self) -> int:
        """Digits of the largest rendered line number, plus a pad on each side."""
        lines = self.relevant_lines()
        if not lines:
            return 0
        return len(str(lines[-1] + 1)) + 2

    def multiline_depth(self) -> int:
        """Most multi-line labels open on any single line."""
        ranges = [(i.start_line, i.end_line) for i in self._info if i.is_multiline]
        depth = 0
        for start, _ in ranges:
            depth = max(depth, sum(1 for s, e in ranges if s <= start <= e))
        return depth

    def to_local_line_span(self, line: int, span: Span) -> Span | None:
        """Translate *span* into coordinates local to *line*.

        Interior lines of a multi-line span yield None: only the first and
        last line of a multi-line label carry markup.
        """
        start_line, end_line = self.source.span_lines(span)
        if line < start_line or line > end_line:
            return None
        if start_line < line < end_line:
            return None

        source_line = self.source.line(line)
        if start_line == end_line:
            return Span(span.start - source_line.byte_offset, span.end - source_line.byte_offset)
        if line == start_line:
            return Span(span.start - source_line.byte_offset, source_line.byte_len)
        return Span(0, span.end - source_line.byte_offset)

    def intersecting(self, line: int) -> list[tuple[int, Span]]:
        """Sorted-label indices touching *line*, with their line-local spans."""
        found = []
        for index, label in enumerate(self.labels):
            local = self.to_local_line_span(line, label.span)
            if local is not None:
                found.append((index, local))
        return found

    def split_line_by_labels(self, line: int) -> list[LineFragment]:
        """Partition *line* into fragments colored by their innermost label."""
        source_line = self.source.line(line)
        intersecting = self.intersecting(line)

        points = {0, source_line.byte_len}
        for _, local in intersecting:
            points.add(local.start)
            points.add(local.end)
        split_points = sorted(points)

        fragments: list[LineFragment] = []
        for start, end in zip(split_points, split_points[1:]):
            selected: int | None = None
            smallest = None
            for index, local in intersecting:
                if local.start <= start and end <= local.end:
                    size = local.end - local.start
                    if smallest is None or size < smallest:
                        smallest = size
                        selected = index

            label = None
            color: Color = BasicColor.DEFAULT
            is_multiline = is_multiline_start = False
            if selected is not None:
                info = self._info[selected]
                label = info.label
                color = label.color
                is_multiline = info.is_multiline
                is_multiline_start = is_multiline and info.start_line == line

            fragments.append(LineFragment(
                text=self.source.text_between(source_line.byte_offset + start, source_line.byte_offset + end),
                color=color,
                local_span=Span(start, end),
                label=label,
                is_multiline=is_multiline,
                is_multiline_start=is_multiline_start,
            ))
        return fragments
