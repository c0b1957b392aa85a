"""Tests for snippet layout and rendering."""

from __future__ import annotations

import io

import pytest

from reportz.ansi import BasicColor, Style
from reportz.charset import CharSet
from reportz.config import Config, LabelAttach
from reportz.errors import NoLabels, SpanOutsideSource, UnknownSource
from reportz.renderer import GUTTER_COLOR, Renderer, _RenderPass
from reportz.reports import Diagnostic, Label, Note, Severity, Span
from tests.helpers import PLAIN, lines, render

LET_X = "let x = 5;\nlet y = 10;"


class TestSingleLine:
    def test_basic_snippet(self):
        out = render(LET_X, [Label(Span(4, 5), "here")], code="E001", message="bad")
        assert out == lines(
            "error[E001]: bad",
            "   ╭─[main.rz:1:4]",
            " 1 │ let x = 5;",
            "   │     ┬",
            "   │     ╰── here",
            "   │",
            "───╯",
        )

    def test_two_labels_stack_messages(self):
        out = render("let x = y;", [Label(Span(4, 5), "target"), Label(Span(8, 9), "value")])
        assert out == lines(
            "error: oops",
            "   ╭─[main.rz:1:4]",
            " 1 │ let x = y;",
            "   │     ┬   ┬",
            "   │     │   ╰── value",
            "   │     ╰── target",
            "   │",
            "───╯",
        )

    def test_nested_labels_get_separate_anchors(self):
        outer = Label(Span(0, 9), "outer message", BasicColor.RED)
        inner = Label(Span(4, 5), "inner message", BasicColor.BLUE)
        out = render("let x = 5;", [outer, inner])
        assert out.count("outer message") == 1
        assert out.count("inner message") == 1
        assert " 1 │ let x = 5;\n" in out
        assert (
            "   │ ────┬┬───\n"
            "   │     │╰── outer message\n"
            "   │     ╰── inner message\n"
        ) in out

    def test_connector_crosses_anchor_still_waiting(self):
        out = render("abcdefghij", [Label(Span(0, 8), "wide"), Label(Span(6, 7), "narrow")])
        assert out == lines(
            "error: oops",
            "   ╭─[main.rz:1:0]",
            " 1 │ abcdefghij",
            "   │ ────┬─┬─",
            "   │     ╰─│─ wide",
            "   │       ╰── narrow",
            "   │",
            "───╯",
        )

    def test_single_label_fully_underlined_beside_multiline_start(self):
        out = render("abcdef\nxyz\n", [Label(Span(0, 6), "single"), Label(Span(5, 9), "multi")])
        assert " 1 │ ╭─▶ abcdef\n" in out
        assert "   │ │   ───┬──\n" in out
        assert "   │ │      ╰── single\n" in out
        assert "   │ ╰── multi\n" in out

    def test_wide_label_centered(self):
        out = render("let x = 5;", [Label(Span(0, 3), "keyword")])
        assert "   │ ─┬─\n" in out
        assert "   │  ╰── keyword\n" in out

    def test_wide_label_attached_at_end(self):
        config = Config(colors=False, label_attach=LabelAttach.END)
        out = render("let x = 5;", [Label(Span(0, 3), "keyword")], config=config)
        assert "   │ ──┬\n" in out
        assert "   │   ╰── keyword\n" in out

    def test_underlines_disabled(self):
        config = Config(colors=False, underlines=False)
        out = render("let x = 5;", [Label(Span(0, 3), "keyword")], config=config)
        assert "   │  ┬\n" in out
        assert "─┬─" not in out

    def test_label_at_end_of_file(self):
        out = render("abc", [Label(Span(3, 3), "eof")])
        assert "   │    ┬\n" in out
        assert "   │    ╰── eof\n" in out

    def test_columns_count_characters(self):
        out = render("é = x;", [Label(Span(5, 6), "x")])
        assert "[main.rz:1:4]" in out
        assert "   │     ┬\n" in out

    def test_label_at_line_start_renders_line(self):
        out = render("ab\ncd\nef", [Label(Span(3, 5), "cd")])
        assert "[main.rz:2:0]" in out
        assert " 2 │ cd\n" in out
        assert " 1 │" not in out
        assert " 3 │" not in out

    def test_gutter_grows_with_line_numbers(self):
        source = "".join(f"line {i}\n" for i in range(1, 13))
        tenth = source.index("line 10")
        out = render(source, [Label(Span(tenth, tenth + 4), "here")])
        assert out.splitlines()[1] == "    ╭─[main.rz:10:0]"
        assert " 10 │ line 10\n" in out
        assert out.endswith("────╯\n")


class TestMultiline:
    SOURCE = "if x {\n  z\n} y\n"
    LABELS = [Label(Span(5, 12), "block opened here"), Label(Span(13, 14), "stray token")]

    def test_brackets_and_skipped_middle_line(self):
        out = render(
            self.SOURCE, self.LABELS,
            code="E042", message="mismatched braces",
            notes=[Note("help", "remove `y`")],
        )
        assert out == lines(
            "error[E042]: mismatched braces",
            "   ╭─[main.rz:1:5]",
            " 1 │ ╭─▶ if x {",
            "   ┆ │",
            " 3 │ ├─▶ } y",
            "   │ │     ┬",
            "   │ │     ╰── stray token",
            "   │ │",
            "   │ ╰── block opened here",
            "   │",
            "   │ help: remove `y`",
            "───╯",
        )
        assert " 2 │" not in out

    def test_ellipsis_disabled(self):
        config = Config(colors=False, ellipsis=False)
        out = render(self.SOURCE, self.LABELS, config=config)
        assert "┆" not in out
        assert " 1 │ ╭─▶ if x {\n 3 │ ├─▶ } y\n" in out

    def test_nested_multiline_labels(self):
        source = "a {\nb {\nc\n}\n}\n"
        labels = [Label(Span(2, 13), "outer"), Label(Span(6, 11), "inner")]
        out = render(source, labels, message="nested")
        assert out == lines(
            "error: nested",
            "   ╭─[main.rz:1:2]",
            " 1 │ ╭───▶ a {",
            " 2 │ │ ╭─▶ b {",
            "   ┆ │ │",
            " 4 │ │ ├─▶ }",
            "   │ │ │",
            "   │ │ ╰── inner",
            " 5 │ ├───▶ }",
            "   │ │",
            "   │ ╰──── outer",
            "   │",
            "───╯",
        )

    def test_ascii_glyphs(self):
        config = Config(colors=False, char_set=CharSet.ASCII)
        out = render(self.SOURCE, self.LABELS, config=config)
        assert " 1 | ,-> if x {\n" in out
        assert " 3 | |-> } y\n" in out
        assert "   | `-- block opened here\n" in out
        assert out.endswith("---'\n")


class TestCharSets:
    def test_ascii_single_line(self):
        config = Config(colors=False, char_set=CharSet.ASCII)
        out = render(LET_X, [Label(Span(4, 5), "here")], config=config)
        assert out == lines(
            "error: oops",
            "   ,-[main.rz:1:4]",
            " 1 | let x = 5;",
            "   |     |",
            "   |     `-- here",
            "   |",
            "---'",
        )

    def test_square_corners(self):
        config = Config(colors=False, char_set=CharSet.SQUARE)
        out = render(LET_X, [Label(Span(4, 5), "here")], config=config)
        assert "   ┌─[main.rz:1:4]\n" in out
        assert "   │     └── here\n" in out
        assert out.endswith("───┘\n")

    def test_by_name(self):
        assert CharSet.by_name("ASCII") is CharSet.ASCII
        with pytest.raises(ValueError, match="unknown character set"):
            CharSet.by_name("fancy")


class TestNotes:
    def test_multiline_note_is_indented(self):
        out = render(LET_X, [Label(Span(4, 5), "here")], notes=[Note("note", "first\nsecond")])
        assert "   │ note: first\n   │       second\n───╯\n" in out

    def test_no_labels_renders_header_and_notes_only(self):
        out = render(
            LET_X, [],
            severity=Severity.WARNING, message="careful",
            notes=[Note("help", "do this\nthen that")],
        )
        assert out == lines(
            "warning: careful",
            "  = help: do this",
            "          then that",
        )


class TestColors:
    def test_label_color_and_gutter_style(self):
        config = Config()
        out = render(LET_X, [Label(Span(4, 5), "here", BasicColor.RED)], code="E001", config=config)
        red = Style(foreground=BasicColor.RED)
        gutter = Style(foreground=GUTTER_COLOR)
        assert out.startswith(f"{Style(foreground=BasicColor.BRIGHT_RED)}error[E001]{Style.RESET}: oops\n")
        assert red.paint("x") in out
        assert gutter.paint("let ") in out
        assert red.paint("┬") in out

    def test_whole_line_label_is_verbatim(self):
        out = render("let x = 5;", [Label(Span(0, 10), "all", BasicColor.GREEN)], config=Config())
        assert "let x = 5;" in out

    def test_severity_colors(self):
        assert Severity.ERROR.color is BasicColor.BRIGHT_RED
        assert Severity.WARNING.color is BasicColor.YELLOW
        assert Severity.ADVICE.color is BasicColor.BRIGHT_GREEN


class TestRenderer:
    def _diag(self, labels, source_id="main.rz"):
        return Diagnostic(
            source_id=source_id,
            severity=Severity.ERROR,
            message="oops",
            labels=labels,
            config=PLAIN,
        )

    def test_render_is_idempotent(self, cache, renderer):
        cache.add_source("main.rz", "if x {\n  z\n} y\n")
        diag = Diagnostic(
            source_id="main.rz",
            severity=Severity.ADVICE,
            message="twice",
            labels=[Label(Span(5, 12), "block", BasicColor.CYAN), Label(Span(13, 14), "y", BasicColor.GREEN)],
        )
        assert renderer.render(diag) == renderer.render(diag)

    def test_write_to_stream(self, cache, renderer):
        cache.add_source("main.rz", LET_X)
        buf = io.StringIO()
        renderer.write(self._diag([Label(Span(4, 5), "here")]), buf)
        assert buf.getvalue().startswith("error: oops\n")

    def test_unknown_source(self, renderer):
        with pytest.raises(UnknownSource):
            renderer.render(self._diag([Label(Span(0, 1), "x")], source_id="nope.rz"))

    def test_failed_render_writes_nothing(self, cache, renderer):
        cache.add_source("main.rz", LET_X)
        buf = io.StringIO()
        diag = self._diag([Label(Span(4, 5), "fine"), Label(Span(20, 99), "broken")])
        with pytest.raises(SpanOutsideSource):
            renderer.write(diag, buf)
        assert buf.getvalue() == ""

    def test_labels_sorted_for_locus(self, cache, renderer):
        cache.add_source("main.rz", LET_X)
        diag = self._diag([Label(Span(15, 16), "later"), Label(Span(4, 5), "earlier")])
        assert "[main.rz:1:4]" in renderer.render(diag)

    def test_locus_requires_a_label(self, cache):
        cache.add_source("main.rz", LET_X)
        with pytest.raises(NoLabels):
            _RenderPass(cache, self._diag([])).locus()
