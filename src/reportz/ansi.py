"""ANSI escape-sequence styling backend."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Flag, IntEnum
from typing import ClassVar, Union

ESC = "\033"
CSI = ESC + "["


class BasicColor(IntEnum):
    """Standard and bright terminal colors, valued by their SGR foreground code."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37
    DEFAULT = 39  # 38 selects an extended color

    BRIGHT_BLACK = 90
    BRIGHT_RED = 91
    BRIGHT_GREEN = 92
    BRIGHT_YELLOW = 93
    BRIGHT_BLUE = 94
    BRIGHT_MAGENTA = 95
    BRIGHT_CYAN = 96
    BRIGHT_WHITE = 97

    def sgr(self, *, background: bool = False) -> str:
        code = self.value + (10 if background else 0)
        return f"{CSI}{code}m"


@dataclass(frozen=True)
class RgbColor:
    """24-bit color."""

    r: int
    g: int
    b: int

    def sgr(self, *, background: bool = False) -> str:
        mode = 48 if background else 38
        return f"{CSI}{mode};2;{self.r};{self.g};{self.b}m"


Color = Union[BasicColor, RgbColor]


class Modifiers(Flag):
    """Text attributes. Rendered in declaration order."""

    NONE = 0
    RESET = 1
    BOLD = 2
    FAINT = 4
    ITALIC = 8
    UNDERLINE = 16
    BLINKING = 32
    REVERSE = 64
    HIDDEN = 128
    STRIKETHROUGH = 256

    def sgr(self) -> str:
        return "".join(
            f"{CSI}{_MODIFIER_CODES[member]}m"
            for member in _MODIFIER_ORDER
            if member in self
        )


_MODIFIER_ORDER = (
    Modifiers.RESET,
    Modifiers.BOLD,
    Modifiers.FAINT,
    Modifiers.ITALIC,
    Modifiers.UNDERLINE,
    Modifiers.BLINKING,
    Modifiers.REVERSE,
    Modifiers.HIDDEN,
    Modifiers.STRIKETHROUGH,
)

# SGR 6 (rapid blink) is skipped.
_MODIFIER_CODES = {
    Modifiers.RESET: 0,
    Modifiers.BOLD: 1,
    Modifiers.FAINT: 2,
    Modifiers.ITALIC: 3,
    Modifiers.UNDERLINE: 4,
    Modifiers.BLINKING: 5,
    Modifiers.REVERSE: 7,
    Modifiers.HIDDEN: 8,
    Modifiers.STRIKETHROUGH: 9,
}


@dataclass(frozen=True)
class Style:
    """A foreground/background/modifier combination.

    ``str(style)`` yields the escape sequence that switches the terminal to
    this style, or nothing at all when the style is disabled.
    """

    foreground: Color = BasicColor.DEFAULT
    background: Color = BasicColor.DEFAULT
    modifiers: Modifiers = Modifiers.NONE
    enabled: bool = True

    RESET: ClassVar[Style]

    def __str__(self) -> str:
        if not self.enabled:
            return ""
        return (
            self.modifiers.sgr()
            + self.foreground.sgr()
            + self.background.sgr(background=True)
        )

    def reset(self) -> str:
        """The reset marker, honouring this style's ``enabled`` flag."""
        return str(Style.RESET) if self.enabled else ""

    def paint(self, text: str) -> str:
        """Wrap *text* in this style followed by a reset."""
        if not text:
            return ""
        return f"{self}{text}{self.reset()}"


Style.RESET = Style(modifiers=Modifiers.RESET)


_HEX_RE = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def parse_color(text: str) -> Color:
    """Parse a basic color name (``bright_red``) or ``#rrggbb``."""
    m = _HEX_RE.match(text.strip())
    if m:
        r, g, b = (int(part, 16) for part in m.groups())
        return RgbColor(r, g, b)
    try:
        return BasicColor[text.strip().upper().replace("-", "_")]
    except KeyError:
        raise ValueError(f"unknown color: {text!r}") from None
