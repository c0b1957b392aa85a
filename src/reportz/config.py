"""Rendering configuration and reportz.toml loading."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from reportz.charset import CharSet

CONFIG_FILENAME = "reportz.toml"


class LabelAttach(Enum):
    """Column of a label's underline where its message connector attaches."""

    CENTER = "center"
    END = "end"


@dataclass(frozen=True)
class Config:
    colors: bool = True
    underlines: bool = True
    ellipsis: bool = True
    label_attach: LabelAttach = LabelAttach.CENTER
    char_set: CharSet = CharSet.ROUNDED
    tab_width: int = 4  # reserved, not used by the layout yet


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find reportz.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> Config:
    """Parse the ``[render]`` table of a reportz.toml file into a Config."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    render = data.get("render", {})
    defaults = Config()

    attach = render.get("label_attach", defaults.label_attach.value)
    try:
        label_attach = LabelAttach(attach)
    except ValueError:
        raise ValueError(f"{path}: invalid label_attach {attach!r}") from None

    try:
        char_set = CharSet.by_name(render.get("char_set", defaults.char_set.name))
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from None

    return Config(
        colors=render.get("colors", defaults.colors),
        underlines=render.get("underlines", defaults.underlines),
        ellipsis=render.get("ellipsis", defaults.ellipsis),
        label_attach=label_attach,
        char_set=char_set,
        tab_width=render.get("tab_width", defaults.tab_width),
    )
