"""Single-flight flush scheduling.

Any number of registry mutations between two ticks of the host's scheduling
primitive collapse into one flush. The host primitive is any callable that
accepts a zero-argument callback and runs it later: :meth:`TaskQueue.submit`
for hosts that drive their own frame loop, or ``loop.call_soon`` from
:func:`asyncio_submitter`.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    Task = Callable[[], Any]
    Submit = Callable[[Task], Any]

logger = logging.getLogger(__name__)


class TaskQueue:
    """A FIFO of callbacks run when the host calls :meth:`run_pending`.

    Each call to ``run_pending`` is one tick: callbacks submitted while it
    runs wait for the next tick.
    """

    __slots__ = ("_tasks",)

    _tasks: deque[Task]

    def __init__(self) -> None:
        self._tasks = deque()

    def __len__(self) -> int:
        return len(self._tasks)

    def submit(self, task: Task) -> None:
        self._tasks.append(task)

    def run_pending(self) -> int:
        """Run the callbacks queued before this tick; return how many ran."""
        count = len(self._tasks)
        for _ in range(count):
            task = self._tasks.popleft()
            task()
        return count


def asyncio_submitter(loop: asyncio.AbstractEventLoop | None = None) -> Submit:
    """Schedule flushes on an asyncio event loop (the running one by default)."""
    if loop is None:
        loop = asyncio.get_running_loop()
    return loop.call_soon


class FlushScheduler:
    """Coalesce flush requests into one submitted task per pending window.

    ``request()`` marks a flush pending and submits a single task. While the
    flush runs, ``in_flight`` is set: requests made from inside it (for
    example by callbacks that mount more instances) open a new pending
    window and a new task instead of recursing.
    """

    __slots__ = ("_flush", "_submit", "in_flight", "pending")

    _flush: Task
    _submit: Submit
    in_flight: bool
    pending: bool

    def __init__(self, flush: Task, submit: Submit) -> None:
        self._flush = flush
        self._submit = submit
        self.in_flight = False
        self.pending = False

    def request(self) -> None:
        if self.pending:
            return
        self.pending = True
        self._submit(self._run)

    def _run(self) -> None:
        if not self.pending:
            # Already satisfied by a synchronous flush.
            return
        if self.in_flight:
            self._submit(self._run)
            return
        self.pending = False
        self.run_now()

    def run_now(self) -> None:
        """Flush synchronously unless a flush is already executing."""
        if self.in_flight:
            logger.debug("Flush already in flight; deferring")
            self.request()
            return
        self.pending = False
        self.in_flight = True
        try:
            self._flush()
        finally:
            self.in_flight = False
