from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .config import settings
from .constants import EAGER_CATEGORIES
from .errors import report
from .identity import accepted_tags
from .merge import merge_instances
from .patch import AppliedRecord, Patcher
from .registry import InstanceRegistry, normalize_props
from .scheduler import FlushScheduler, TaskQueue
from .serialize import render_static

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .node import Document, ElementNode
    from .scheduler import Submit
    from .serialize import StaticHead
    from .tags import HeadState, Instance

logger = logging.getLogger(__name__)


class InstanceHandle:
    """One mounted declaration point; update it or unmount it through here."""

    __slots__ = ("_context", "key")

    _context: HeadContext
    key: int

    def __init__(self, context: HeadContext, key: int) -> None:
        self._context = context
        self.key = key

    def __repr__(self) -> str:
        return f"<InstanceHandle {self.key}{'' if self.active else ' (unmounted)'}>"

    @property
    def active(self) -> bool:
        return self.key in self._context.registry

    @property
    def instance(self) -> Instance | None:
        return self._context.registry.get(self.key)

    def update(self, props: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        """Replace this declaration's props wholesale."""
        self._context._update(self, {**(props or {}), **kwargs})

    def unmount(self) -> None:
        self._context._unmount(self)


class HeadContext:
    """Registry, ownership record and scheduler for one document root.

    Contexts are independent, so separate documents (or separate server
    requests) never see each other's declarations.

    Args:
        document: The live document to patch. Without one (or with
            ``settings.can_use_dom`` off) the context only tracks state and
            serializes it.
        submit: Host scheduling primitive. Defaults to a :class:`TaskQueue`
            exposed as ``context.queue``; drive it with ``run_pending()``.
    """

    __slots__ = ("document", "last_state", "patcher", "queue", "record", "registry", "scheduler")

    document: Document | None
    last_state: HeadState | None
    patcher: Patcher | None
    queue: TaskQueue | None
    record: AppliedRecord
    registry: InstanceRegistry
    scheduler: FlushScheduler

    def __init__(self, document: Document | None = None, *, submit: Submit | None = None) -> None:
        self.document = document
        self.registry = InstanceRegistry()
        self.record = AppliedRecord()
        self.patcher = Patcher(document, self.record) if document is not None else None
        self.last_state = None
        if submit is None:
            self.queue = TaskQueue()
            submit = self.queue.submit
        else:
            self.queue = None
        self.scheduler = FlushScheduler(self._flush, submit)

    @property
    def can_use_dom(self) -> bool:
        return self.patcher is not None and settings.can_use_dom

    def mount(
        self,
        props: Mapping[str, Any] | None = None,
        *,
        depth: int = 0,
        parent: InstanceHandle | None = None,
        **kwargs: Any,
    ) -> InstanceHandle:
        """Register a declaration point and schedule a flush.

        ``depth`` is the structural nesting depth; deeper declarations win.
        Passing an active ``parent`` handle declares this one inside another
        declaration, which is not allowed: it is reported and ignored.
        """
        instance = normalize_props({**(props or {}), **kwargs}, depth)
        nested = parent is not None and parent.active
        if nested:
            report("nested-instance", level=logging.WARNING, stacklevel=3)
        key = self.registry.add(instance, nested=nested)
        handle = InstanceHandle(self, key)
        if not nested:
            self._apply_eagerly(instance)
            self.scheduler.request()
        return handle

    def _update(self, handle: InstanceHandle, props: Mapping[str, Any]) -> None:
        current = self.registry.get(handle.key)
        if current is None:
            logger.debug("Ignoring update of unmounted instance %d", handle.key)
            return
        instance = normalize_props(props, current.depth)
        if not self.registry.replace(handle.key, instance):
            return
        if not self.registry.is_nested(handle.key):
            self._apply_eagerly(instance)
            self.scheduler.request()

    def _unmount(self, handle: InstanceHandle) -> None:
        nested = self.registry.is_nested(handle.key)
        if self.registry.remove(handle.key) and not nested:
            self.scheduler.request()

    def _apply_eagerly(self, instance: Instance) -> None:
        if instance.defer is not False or not self.can_use_dom:
            return
        assert self.patcher is not None
        for category in EAGER_CATEGORIES:
            tags = [tag for _key, tag in accepted_tags(category, instance.tags(category))]
            if tags:
                self.patcher.apply_eagerly(category, tags)

    def peek(self) -> HeadState:
        """Return the state the current declarations produce, without flushing."""
        return merge_instances(self.registry.instances())

    def render_static(self) -> StaticHead:
        """Serialize the current state for server-side rendering."""
        return render_static(self.peek())

    def flush(self) -> HeadState | None:
        """Run one merge, patch and callback cycle now and return its state.

        Called from inside a running flush, this schedules another cycle
        instead and returns the state of the last completed one.
        """
        self.scheduler.run_now()
        return self.last_state

    def _flush(self) -> None:
        state = self.peek()
        self.last_state = state
        if not self.can_use_dom:
            logger.debug("Flushed %d instances without a document", len(self.registry))
            return

        assert self.patcher is not None
        added, removed = self.patcher.apply(state)
        logger.debug(
            "Flushed %d instances: %d added, %d removed",
            len(self.registry),
            sum(len(elements) for elements in added.values()),
            sum(len(elements) for elements in removed.values()),
        )
        callback = state.on_change_client_state
        if callback is not None:
            _notify(callback, state, added, removed)

    def run_pending(self) -> int:
        """Drive the default task queue one tick; returns the number of tasks run."""
        if self.queue is None:
            raise RuntimeError("This context schedules flushes through a custom submit function")
        return self.queue.run_pending()


def _notify(
    callback: Any,
    state: HeadState,
    added: dict[str, list[ElementNode]],
    removed: dict[str, list[ElementNode]],
) -> None:
    try:
        callback(state, added, removed)
    except Exception:
        logger.exception("on_change_client_state callback failed")
