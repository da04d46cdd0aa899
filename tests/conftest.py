"""Pytest configuration for the justhead test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from justhead import Document, HeadContext, MARKER_ATTRIBUTE, settings
from justhead.node import ElementNode
from justhead.registry import normalize_props
from justhead.tags import Instance


@pytest.fixture(autouse=True)
def _dom_enabled() -> Iterator[None]:
    """Every test starts with live-document mutation switched on."""
    previous = settings.can_use_dom
    settings.can_use_dom = True
    yield
    settings.can_use_dom = previous


@pytest.fixture
def document() -> Document:
    return Document.create()


@pytest.fixture
def context(document: Document) -> HeadContext:
    return HeadContext(document)


@pytest.fixture
def managed(document: Document) -> Callable[[str], list[ElementNode]]:
    """Return the marked head elements called ``name``, in document order."""

    def find(name: str) -> list[ElementNode]:
        assert document.head is not None
        return [element for element in document.head.iter_elements(name) if element.has_attribute(MARKER_ATTRIBUTE)]

    return find


@pytest.fixture
def stack() -> Callable[..., list[Instance]]:
    """Build an instance stack from raw declarations, shallowest first."""

    def build(*declarations: dict[str, Any]) -> list[Instance]:
        return [normalize_props(props, depth) for depth, props in enumerate(declarations)]

    return build
