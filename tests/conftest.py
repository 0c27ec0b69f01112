"""Shared fixtures for canvas-layout tests."""

import pytest

from canvas_layout.canvas import Canvas
from canvas_layout.config import LayoutConfig
from canvas_layout.models import GroupNode, TextNode


@pytest.fixture
def canvas():
    """An empty canvas with the default 10-unit margin."""
    return Canvas(config=LayoutConfig())


@pytest.fixture
def make_text():
    def _make(node_id, x, y, width=100, height=100, text=""):
        return TextNode(id=node_id, x=x, y=y, width=width, height=height, text=text)
    return _make


@pytest.fixture
def make_group():
    def _make(node_id, x, y, width, height, label=None):
        return GroupNode(id=node_id, x=x, y=y, width=width, height=height, label=label)
    return _make
