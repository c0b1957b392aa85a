"""Diagnostic data model: severities, spans, labels and notes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable

from reportz.ansi import BasicColor, Color
from reportz.config import Config


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    ADVICE = "advice"

    @property
    def color(self) -> BasicColor:
        return _SEVERITY_COLORS[self]


_SEVERITY_COLORS = {
    Severity.ERROR: BasicColor.BRIGHT_RED,
    Severity.WARNING: BasicColor.YELLOW,
    Severity.ADVICE: BasicColor.BRIGHT_GREEN,
}


@dataclass(frozen=True)
class Span:
    """Half-open byte range [start, end) into one source's raw text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


@dataclass(frozen=True)
class Label:
    """Points at a span of the source with a message."""

    span: Span
    message: str
    color: Color = BasicColor.DEFAULT


@dataclass(frozen=True)
class Note:
    """Trailing remark, e.g. ``help: use this feature instead``."""

    category: str
    message: str
    category_color: Color = BasicColor.DEFAULT


@dataclass
class Diagnostic:
    """A single diagnostic with labels and notes, in supplied order."""

    source_id: Hashable
    severity: Severity
    message: str
    code: str | None = None
    labels: list[Label] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    config: Config = field(default_factory=Config)
