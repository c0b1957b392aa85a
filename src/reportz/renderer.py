"""Rust-style annotated snippet rendering.

A diagnostic renders as::

    error[E042]: mismatched braces
       ╭─[main.rz:1:5]
     1 │ ╭─▶ if x {
       ┆ │
     3 │ ├─▶ } y
       │ │     ┬
       │ │     ╰── stray token
       │ │
       │ ╰── block opened here
       │
       │ help: remove `y`
    ───╯

Each render call works on its own buffer, so a failing call never leaves
partial output behind.
"""

from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from reportz.ansi import BasicColor, Color, Style
from reportz.config import LabelAttach
from reportz.errors import NoLabels
from reportz.labels import LabelResolver, strip_line_terminators
from reportz.reports import Diagnostic, Span
from reportz.source import Locus, SourceCache

logger = logging.getLogger(__name__)

GUTTER_COLOR = BasicColor.BRIGHT_BLACK

# One character of a row body and the color it is drawn in (None = unstyled).
Cell = tuple[str, Optional[Color]]
_BLANK: Cell = (" ", None)


class Renderer:
    """Renders diagnostics whose sources live in *source_cache*."""

    def __init__(self, source_cache: SourceCache) -> None:
        self.source_cache = source_cache

    def render(self, diagnostic: Diagnostic) -> str:
        logger.debug(
            "rendering %s for %r with %d label(s)",
            diagnostic.severity.value, diagnostic.source_id, len(diagnostic.labels),
        )
        return _RenderPass(self.source_cache, diagnostic).run()

    def write(self, diagnostic: Diagnostic, out: TextIO | None = None) -> None:
        """Render *diagnostic* and write it to *out* (stderr by default) in one piece."""
        text = self.render(diagnostic)
        (out or sys.stderr).write(text)


@dataclass
class _OpenLabel:
    """A multi-line label whose connector is currently drawn in the margin."""

    index: int
    slot: int
    color: Color
    end_line: int


class _RenderPass:
    """State of a single render call."""

    def __init__(self, source_cache: SourceCache, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        self.config = diagnostic.config
        self.chars = diagnostic.config.char_set
        self.out = io.StringIO()
        self.active: list[_OpenLabel] = []
        self.resolver: LabelResolver | None = None
        self.gutter_width = 0
        self.margin_width = 0

        if diagnostic.labels:
            source = source_cache.get(diagnostic.source_id)
            self.resolver = LabelResolver(source, diagnostic.labels)
            self.gutter_width = self.resolver.gutter_width()
            depth = self.resolver.multiline_depth()
            if depth:
                self.margin_width = 2 * depth + 2

    def run(self) -> str:
        self.render_header()
        if self.resolver is None:
            self.render_bare_notes()
            return self.out.getvalue()

        self.render_snippet_start()
        self.render_snippet_content()
        self.render_empty_line()
        self.render_notes()
        self.render_snippet_end()
        return self.out.getvalue()

    # ── Styling ───────────────────────────────────────────────────

    def _style(self, color: Color) -> Style:
        return Style(foreground=color, enabled=self.config.colors)

    def _paint_cells(self, cells: list[Cell]) -> str:
        """Join cells into text, one style run per color."""
        end = len(cells)
        while end and cells[end - 1] == _BLANK:
            end -= 1

        parts: list[str] = []
        run: list[str] = []
        run_color: Color | None = None
        for ch, color in cells[:end]:
            if run and color != run_color:
                parts.append(self._paint_run("".join(run), run_color))
                run = []
            run_color = color
            run.append(ch)
        if run:
            parts.append(self._paint_run("".join(run), run_color))
        return "".join(parts)

    def _paint_run(self, text: str, color: Color | None) -> str:
        if color is None:
            return text
        return self._style(color).paint(text)

    # ── Rows ──────────────────────────────────────────────────────

    def _write_row(self, line_no: int | None, body: str = "", bar: str | None = None) -> None:
        """Write one snippet row: gutter, bar and an optional body."""
        if line_no is not None:
            number = f"{line_no:>{self.gutter_width - 1}} "
        else:
            number = " " * self.gutter_width
        row = self._style(GUTTER_COLOR).paint(number + (bar or self.chars.vbar))
        if body:
            row += " " + body
        self.out.write(row + "\n")

    def _margin(self) -> list[Cell]:
        """Connector columns of all open multi-line labels."""
        cells = [_BLANK] * self.margin_width
        for entry in self.active:
            cells[2 * entry.slot] = (self.chars.vbar, entry.color)
        return cells

    def _joint_margin(self, joints: dict[int, tuple[str, Color]]) -> list[Cell]:
        """Margin with joints at *joints* slots and an arrow toward the code."""
        cells = self._margin()
        first = min(joints)
        color = joints[first][1]
        for pos in range(2 * first, self.margin_width - 2):
            slot, odd = divmod(pos, 2)
            if not odd and slot in joints:
                glyph, color = joints[slot]
                cells[pos] = (glyph, color)
            elif not odd and cells[pos] != _BLANK:
                cells[pos] = (self.chars.xbar, cells[pos][1])
            else:
                cells[pos] = (self.chars.hbar, color)
        cells[-2] = (self.chars.rarrow, color)
        return cells

    def _closing_margin(self, entry: _OpenLabel) -> list[Cell]:
        """Margin closing *entry*'s connector; *entry* is already popped."""
        cells = self._margin()
        cells[2 * entry.slot] = (self.chars.lbot, entry.color)
        for pos in range(2 * entry.slot + 1, self.margin_width - 1):
            if pos % 2 == 0 and cells[pos] != _BLANK:
                cells[pos] = (self.chars.xbar, cells[pos][1])
            else:
                cells[pos] = (self.chars.hbar, entry.color)
        return cells

    # ── Sections ──────────────────────────────────────────────────

    def render_header(self) -> None:
        """``error[C001]: message``"""
        diag = self.diagnostic
        style = self._style(diag.severity.color)
        code = f"[{diag.code}]" if diag.code else ""
        self.out.write(f"{style}{diag.severity.value}{code}{style.reset()}: {diag.message}\n")

    def locus(self) -> Locus:
        """Location of the first label, shown in the snippet border."""
        if self.resolver is None:
            raise NoLabels()
        return self.resolver.source.span_to_locus(self.resolver.labels[0].span)

    def render_snippet_start(self) -> None:
        c = self.chars
        gutter = self._style(GUTTER_COLOR)
        locus = self.locus()
        self.out.write(" " * self.gutter_width)
        self.out.write(gutter.paint(f"{c.ltop}{c.hbar}{c.lbox}"))
        self.out.write(f"{self.diagnostic.source_id}:{locus.line}:{locus.column}")
        self.out.write(gutter.paint(c.rbox) + "\n")

    def render_snippet_end(self) -> None:
        c = self.chars
        self.out.write(self._style(GUTTER_COLOR).paint(c.hbar * self.gutter_width + c.rbot) + "\n")

    def render_empty_line(self) -> None:
        self._write_row(None)

    def render_snippet_content(self) -> None:
        previous: int | None = None
        for line in self.resolver.relevant_lines():
            if self.config.ellipsis and previous is not None and line != previous + 1:
                self._write_row(None, self._paint_cells(self._margin()), bar=self.chars.vbar_gap)
            self.render_line(line)
            previous = line

    def render_line(self, line: int) -> None:
        """Code row, underline row, label messages and closing brackets of *line*."""
        resolver = self.resolver
        intersecting = resolver.intersecting(line)

        # Open brackets for multi-line labels starting here.
        joints: dict[int, tuple[str, Color]] = {}
        for entry in self.active:
            if entry.end_line == line:
                joints[entry.slot] = (self.chars.lcross, entry.color)
        for index, _ in intersecting:
            start_line, end_line = resolver.lines_of(index)
            if start_line != end_line and start_line == line:
                entry = self._push(index, end_line)
                joints[entry.slot] = (self.chars.ltop, entry.color)

        margin = self._joint_margin(joints) if joints else self._margin()
        code: list[Cell] = []
        for fragment in resolver.split_line_by_labels(line):
            color = fragment.color
            if color == BasicColor.DEFAULT:
                color = GUTTER_COLOR
            code.extend((ch, color) for ch in fragment.display_text)
        self._write_row(line + 1, self._paint_cells(margin + code))

        singles = [
            (index, local) for index, local in intersecting
            if not resolver.is_multiline(index)
        ]
        if singles:
            self.render_label_messages(line, singles)

        ending = [entry for entry in reversed(self.active) if entry.end_line == line]
        if ending:
            self._write_row(None, self._paint_cells(self._margin()))
            for entry in ending:
                self.active.remove(entry)
                message = resolver.labels[entry.index].message
                cells = self._closing_margin(entry) + [(ch, None) for ch in message]
                self._write_row(None, self._paint_cells(cells))

    def _push(self, index: int, end_line: int) -> _OpenLabel:
        used = {entry.slot for entry in self.active}
        slot = 0
        while slot in used:
            slot += 1
        entry = _OpenLabel(index, slot, self.resolver.labels[index].color, end_line)
        self.active.append(entry)
        return entry

    def render_label_messages(self, line: int, singles: list[tuple[int, Span]]) -> None:
        """Underline row followed by one message row per single-line label."""
        resolver = self.resolver
        source_line = resolver.source.line(line)
        visible = len(strip_line_terminators(resolver.source.line_slice(line)))

        def column(offset: int) -> int:
            return len(resolver.source.text_between(
                source_line.byte_offset, source_line.byte_offset + offset,
            ))

        columns = {
            index: (column(local.start), min(column(local.end), visible))
            for index, local in singles
        }

        # A label is queued once its last fragment on the line is reached,
        # i.e. in order of local end.
        queue = sorted(singles, key=lambda item: item[1].end)
        anchors: list[tuple[int, int]] = []
        taken: set[int] = set()
        for index, _ in queue:
            start, end = columns[index]
            width = max(1, end - start)
            if self.config.label_attach is LabelAttach.END:
                col = start + width - 1
            else:
                col = start + width // 2
            while col in taken:
                col += 1
            taken.add(col)
            anchors.append((index, col))

        row: list[Cell] = [_BLANK] * (max(taken) + 1)
        if self.config.underlines:
            # Innermost label painted last; equal sizes resolve to the earlier label.
            by_size = sorted(singles, key=lambda item: (-item[1].length, -item[0]))
            for index, _ in by_size:
                start, end = columns[index]
                if end > len(row):
                    row.extend([_BLANK] * (end - len(row)))
                for col in range(start, end):
                    row[col] = (self.chars.underline, resolver.labels[index].color)
        for index, col in anchors:
            row[col] = (self.chars.underbar, resolver.labels[index].color)
        self._write_row(None, self._paint_cells(self._margin() + row))

        remaining = list(anchors)
        while remaining:
            index, col = remaining.pop()
            label = resolver.labels[index]
            # The connector runs past every anchor still waiting to its right.
            stop = max([col + 2] + [other_col + 1 for _, other_col in remaining if other_col > col])
            cells: list[Cell] = [_BLANK] * (stop + 1)
            for other, other_col in remaining:
                cells[other_col] = (self.chars.vbar, resolver.labels[other].color)
            cells[col] = (self.chars.lbot, label.color)
            for pos in range(col + 1, stop + 1):
                if cells[pos] == _BLANK:
                    cells[pos] = (self.chars.hbar, label.color)
            cells.append(_BLANK)
            cells.extend((ch, None) for ch in label.message)
            self._write_row(None, self._paint_cells(self._margin() + cells))

    def render_notes(self) -> None:
        for note in self.diagnostic.notes:
            first, *rest = note.message.split("\n")
            category = self._style(note.category_color).paint(note.category)
            self._write_row(None, f"{category}: {first}")
            indent = " " * (len(note.category) + 2)
            for text in rest:
                self._write_row(None, indent + text)

    def render_bare_notes(self) -> None:
        """Notes of a diagnostic without labels, which has no snippet."""
        for note in self.diagnostic.notes:
            first, *rest = note.message.split("\n")
            category = self._style(note.category_color).paint(note.category)
            self.out.write(f"  = {category}: {first}\n")
            indent = " " * (len(note.category) + 6)
            for text in rest:
                self.out.write(f"{indent}{text}\n")
