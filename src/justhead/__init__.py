from __future__ import annotations

import logging

from .config import settings, use_dom
from .constants import MARKER_ATTRIBUTE
from .context import HeadContext, InstanceHandle
from .errors import JustHeadWarning
from .merge import format_title, merge_instances
from .node import Document, ElementNode, TextNode
from .patch import AppliedRecord, Patcher
from .registry import normalize_props
from .scheduler import FlushScheduler, TaskQueue, asyncio_submitter
from .serialize import StaticHead, render_static, to_html
from .tags import HeadState, HeadTag, Instance

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MARKER_ATTRIBUTE",
    "AppliedRecord",
    "Document",
    "ElementNode",
    "FlushScheduler",
    "HeadContext",
    "HeadState",
    "HeadTag",
    "Instance",
    "InstanceHandle",
    "JustHeadWarning",
    "Patcher",
    "StaticHead",
    "TaskQueue",
    "TextNode",
    "asyncio_submitter",
    "format_title",
    "merge_instances",
    "normalize_props",
    "render_static",
    "settings",
    "to_html",
    "use_dom",
]
