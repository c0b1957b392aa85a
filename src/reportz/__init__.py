"""reportz: annotated source-code diagnostics for the terminal."""

from __future__ import annotations

from reportz.ansi import BasicColor, Modifiers, RgbColor, Style
from reportz.charset import CharSet
from reportz.config import Config, LabelAttach
from reportz.errors import (
    InvalidEncoding,
    LineIndexOutOfRange,
    NoLabels,
    PositionOutOfBounds,
    ReportError,
    SpanOutsideSource,
    UnknownSource,
)
from reportz.renderer import Renderer
from reportz.reports import Diagnostic, Label, Note, Severity, Span
from reportz.source import AnalyzedSource, SourceCache

__version__ = "0.1.0"

__all__ = [
    "AnalyzedSource",
    "BasicColor",
    "CharSet",
    "Config",
    "Diagnostic",
    "InvalidEncoding",
    "Label",
    "LabelAttach",
    "LineIndexOutOfRange",
    "Modifiers",
    "NoLabels",
    "Note",
    "PositionOutOfBounds",
    "Renderer",
    "ReportError",
    "RgbColor",
    "Severity",
    "SourceCache",
    "Span",
    "SpanOutsideSource",
    "Style",
    "UnknownSource",
]
