"""Glyph tables for snippet borders, connectors and underlines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CharSet:
    """One glyph per drawing role. Swapping tables never changes layout."""

    name: str
    hbar: str
    vbar: str
    xbar: str
    vbar_break: str
    vbar_gap: str
    uarrow: str
    rarrow: str
    ltop: str
    mtop: str
    rtop: str
    lbot: str
    mbot: str
    rbot: str
    lbox: str
    rbox: str
    lcross: str
    rcross: str
    underbar: str
    underline: str

    ROUNDED: ClassVar[CharSet]
    SQUARE: ClassVar[CharSet]
    ASCII: ClassVar[CharSet]

    @classmethod
    def by_name(cls, name: str) -> CharSet:
        """Look up ``rounded``, ``square`` or ``ascii``."""
        table = _CHAR_SETS.get(name.strip().lower())
        if table is None:
            choices = ", ".join(_CHAR_SETS)
            raise ValueError(f"unknown character set {name!r} (expected one of: {choices})")
        return table


CharSet.ROUNDED = CharSet(
    name="rounded",
    hbar="─",
    vbar="│",
    xbar="┼",
    vbar_break="┆",
    vbar_gap="┆",
    uarrow="▲",
    rarrow="▶",
    ltop="╭",
    mtop="┬",
    rtop="╮",
    lbot="╰",
    mbot="┴",
    rbot="╯",
    lbox="[",
    rbox="]",
    lcross="├",
    rcross="┤",
    underbar="┬",
    underline="─",
)

CharSet.SQUARE = CharSet(
    name="square",
    hbar="─",
    vbar="│",
    xbar="┼",
    vbar_break="┆",
    vbar_gap="┆",
    uarrow="▲",
    rarrow="▶",
    ltop="┌",
    mtop="┬",
    rtop="┐",
    lbot="└",
    mbot="┴",
    rbot="┘",
    lbox="[",
    rbox="]",
    lcross="├",
    rcross="┤",
    underbar="┬",
    underline="─",
)

CharSet.ASCII = CharSet(
    name="ascii",
    hbar="-",
    vbar="|",
    xbar="+",
    vbar_break="*",
    vbar_gap=":",
    uarrow="^",
    rarrow=">",
    ltop=",",
    mtop="v",
    rtop=".",
    lbot="`",
    mbot="^",
    rbot="'",
    lbox="[",
    rbox="]",
    lcross="|",
    rcross="|",
    underbar="|",
    underline="^",
)

_CHAR_SETS = {cs.name: cs for cs in (CharSet.ROUNDED, CharSet.SQUARE, CharSet.ASCII)}
