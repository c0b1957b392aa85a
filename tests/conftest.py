"""Shared pytest fixtures for the reportz test suite."""

from __future__ import annotations

import pytest

from reportz.renderer import Renderer
from reportz.source import SourceCache


@pytest.fixture
def cache():
    return SourceCache()


@pytest.fixture
def renderer(cache):
    return Renderer(cache)
