"""Shared test helpers for the reportz test suite."""

from __future__ import annotations

from reportz.config import Config
from reportz.labels import LabelResolver
from reportz.renderer import Renderer
from reportz.reports import Diagnostic, Label, Severity
from reportz.source import AnalyzedSource, SourceCache

PLAIN = Config(colors=False)


def render(
    source: str,
    labels: list[Label],
    *,
    message: str = "oops",
    code: str | None = None,
    notes: list | None = None,
    severity: Severity = Severity.ERROR,
    config: Config = PLAIN,
    source_id: str = "main.rz",
) -> str:
    """Render one diagnostic against *source*, colors off unless *config* says otherwise."""
    cache = SourceCache()
    cache.add_source(source_id, source)
    diag = Diagnostic(
        source_id=source_id,
        severity=severity,
        message=message,
        code=code,
        labels=labels,
        notes=notes or [],
        config=config,
    )
    return Renderer(cache).render(diag)


def resolver(source: str, labels: list[Label]) -> LabelResolver:
    return LabelResolver(AnalyzedSource.compute(source), labels)


def lines(*rows: str) -> str:
    """Join expected output rows, each terminated by a newline."""
    return "".join(row + "\n" for row in rows)
