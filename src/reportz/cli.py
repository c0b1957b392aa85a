"""reportz command line."""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from itertools import cycle
from pathlib import Path

import click

from reportz import __version__
from reportz.ansi import BasicColor
from reportz.charset import CharSet
from reportz.config import Config, LabelAttach, find_config, load_config
from reportz.errors import ReportError
from reportz.renderer import Renderer
from reportz.reports import Diagnostic, Label, Note, Severity, Span
from reportz.source import AnalyzedSource, SourceCache

# Label colors, assigned in the order labels are given.
LABEL_PALETTE = (
    BasicColor.BRIGHT_BLUE,
    BasicColor.MAGENTA,
    BasicColor.CYAN,
    BasicColor.GREEN,
    BasicColor.YELLOW,
    BasicColor.BRIGHT_RED,
)

DEMO_SOURCE = (
    "let value = switch (something) {\n"
    "    .a => 5,\n"
    '    .b => "other",\n'
    "};"
)


def _configure_logging(verbosity: int) -> None:
    """0 = WARNING, 1 = INFO, 2+ = DEBUG on the ``reportz`` logger."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("reportz")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)


def _resolve_config(file: Path, config_path: str | None) -> Config:
    """Config from --config, else the nearest reportz.toml, else defaults."""
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config(file))
    except FileNotFoundError:
        return Config()


def demo_diagnostic(config: Config | None = None) -> Diagnostic:
    """The showcase diagnostic rendered by ``reportz demo``."""
    return Diagnostic(
        source_id="internal_0",
        severity=Severity.ERROR,
        code="C001",
        message="Incompatible types",
        labels=[
            Label(Span(12, 66), "Inside of this 'switch' expression.", BasicColor.BRIGHT_BLUE),
            Label(Span(43, 44), "This is of type 'number'.", BasicColor.MAGENTA),
            Label(Span(38, 39), "This is an identifier. (just for showcase)", BasicColor.CYAN),
            Label(Span(56, 63), "This is of type 'string'.", BasicColor.GREEN),
        ],
        notes=[
            Note("help", "Make both arms return the same type.", BasicColor.BRIGHT_GREEN),
        ],
        config=config or Config(),
    )


@click.group()
@click.version_option(__version__, prog_name="reportz")
@click.option("-v", "--verbose", count=True, help="Log more (repeatable).")
def main(verbose: int) -> None:
    """Render annotated source-code diagnostics."""
    _configure_logging(verbose)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-l", "--label", "labels", multiple=True, type=(int, int, str),
    metavar="START END MESSAGE", help="Byte span and message of a label (repeatable).",
)
@click.option(
    "--severity", type=click.Choice([s.value for s in Severity]), default="error",
    show_default=True,
)
@click.option("--code", default=None, help="Diagnostic code, e.g. E042.")
@click.option("-m", "--message", default="", help="Diagnostic message.")
@click.option(
    "-n", "--note", "notes", multiple=True, type=(str, str),
    metavar="CATEGORY MESSAGE", help="Trailing note (repeatable).",
)
@click.option("--char-set", type=click.Choice(["rounded", "square", "ascii"]), default=None)
@click.option("--attach", type=click.Choice([a.value for a in LabelAttach]), default=None)
@click.option("--color/--no-color", default=None, help="Override colored output.")
@click.option("--ellipsis/--no-ellipsis", default=None, help="Mark skipped lines.")
@click.option("--underlines/--no-underlines", default=None, help="Underline labeled spans.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None)
def render(
    file: str,
    labels: tuple[tuple[int, int, str], ...],
    severity: str,
    code: str | None,
    message: str,
    notes: tuple[tuple[str, str], ...],
    char_set: str | None,
    attach: str | None,
    color: bool | None,
    ellipsis: bool | None,
    underlines: bool | None,
    config_path: str | None,
) -> None:
    """Render one diagnostic for FILE."""
    path = Path(file)
    try:
        config = _resolve_config(path, config_path)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    overrides: dict = {}
    if char_set is not None:
        overrides["char_set"] = CharSet.by_name(char_set)
    if attach is not None:
        overrides["label_attach"] = LabelAttach(attach)
    if color is not None:
        overrides["colors"] = color
    if ellipsis is not None:
        overrides["ellipsis"] = ellipsis
    if underlines is not None:
        overrides["underlines"] = underlines
    config = replace(config, **overrides)

    try:
        cache = SourceCache()
        cache.add_source(str(path), path.read_bytes())
        diag = Diagnostic(
            source_id=str(path),
            severity=Severity(severity),
            code=code,
            message=message,
            labels=[
                Label(Span(start, end), text, palette_color)
                for (start, end, text), palette_color in zip(labels, cycle(LABEL_PALETTE))
            ],
            notes=[Note(category, text) for category, text in notes],
            config=config,
        )
        output = Renderer(cache).render(diag)
    except (ReportError, ValueError) as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    click.echo(output, nl=False, color=config.colors)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def lines(file: str) -> None:
    """Print the line table of FILE."""
    try:
        source = AnalyzedSource.from_path(Path(file))
    except ReportError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"{len(source.lines)} lines, {source.char_len} chars, {source.byte_len} bytes")
    for index, line in enumerate(source.lines):
        click.echo(
            f"{index + 1:>5}  bytes {line.byte_offset}+{line.byte_len}"
            f"  chars {line.char_offset}+{line.char_len}"
        )


@main.command()
@click.option("--char-set", type=click.Choice(["rounded", "square", "ascii"]), default="rounded")
@click.option("--color/--no-color", default=True)
def demo(char_set: str, color: bool) -> None:
    """Render a built-in example diagnostic."""
    cache = SourceCache()
    cache.add_source("internal_0", DEMO_SOURCE)
    config = Config(colors=color, char_set=CharSet.by_name(char_set))
    click.echo(Renderer(cache).render(demo_diagnostic(config)), nl=False, color=color)
