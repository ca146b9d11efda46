# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Delayed and deferred invocation.

``delay``/``defer`` never run anything themselves: they hand a thunk to a
:class:`Scheduler` and return its :class:`ScheduledCall` token. Three
schedulers are provided:

- ``LoopScheduler``: asyncio ``loop.call_later``.
- ``TaskGroupScheduler``: one anyio task per call, works on any anyio
  backend.
- ``ManualScheduler``: a virtual clock advanced by hand, for tests and
  simulations.

Whatever the delay, a scheduled call is dispatched on a later turn than
the one that scheduled it.
"""

from __future__ import annotations

import asyncio
import heapq
import inspect
import itertools
import logging
import math
import weakref
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import anyio
import anyio.abc

from ._errors import SchedulerUnavailableError, SchedulingError
from ._sentinel import Unset
from .config import get_settings
from .context import call_with_context

__all__ = (
    "LoopScheduler",
    "ManualScheduler",
    "ScheduledCall",
    "Scheduler",
    "TaskGroupScheduler",
    "cancel",
    "defer",
    "delay",
    "get_scheduler",
    "set_default_scheduler",
    "use_scheduler",
)

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


@dataclass(eq=False)
class ScheduledCall:
    """Cancellation handle for one pending invocation.

    Attributes:
        scheduler: The scheduler that owns the call.
        when: Due time on the scheduler's own clock.
        handle: Scheduler-specific native handle (TimerHandle, CancelScope).
        cancelled: Set once ``cancel()`` took effect before dispatch.
        done: Set when the call has been dispatched.
    """

    scheduler: Scheduler
    when: float
    handle: Any = None
    cancelled: bool = False
    done: bool = False
    id: int = field(default_factory=lambda: next(_ids))

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> None:
        self.scheduler.cancel(self)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "done" if self.done else "pending"
        return f"ScheduledCall(id={self.id}, when={self.when:.3f}, {state})"


@runtime_checkable
class Scheduler(Protocol):
    def schedule_after(
        self, delay: float, thunk: Callable[[], Any]
    ) -> ScheduledCall: ...

    def cancel(self, token: ScheduledCall) -> None: ...


def _check_delay(delay: Any) -> float:
    try:
        seconds = float(delay)
    except (TypeError, ValueError) as exc:
        raise SchedulingError(
            f"Delay must be a number of seconds, got {delay!r}",
            details={"delay": repr(delay)},
            cause=exc,
        ) from exc
    if math.isnan(seconds) or seconds < 0:
        raise SchedulingError(
            f"Delay must be a non-negative number of seconds, got {delay!r}",
            details={"delay": seconds},
        )
    return seconds


class LoopScheduler:
    """Schedule on an asyncio event loop via ``call_later``.

    Without an explicit loop, the loop running at scheduling time is used.
    A coroutine returned by the scheduled call is wrapped in a task, which
    the scheduler holds until it finishes. A failure in such a task is
    logged.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._tasks: set[asyncio.Future] = set()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    @property
    def tasks(self) -> frozenset[asyncio.Future]:
        """Tasks started by dispatched calls that have not finished yet."""
        return frozenset(self._tasks)

    def schedule_after(
        self, delay: float, thunk: Callable[[], Any]
    ) -> ScheduledCall:
        seconds = _check_delay(delay)
        loop = self.loop
        token = ScheduledCall(self, when=loop.time() + seconds)
        token.handle = loop.call_later(seconds, self._dispatch, token, thunk)
        return token

    def _dispatch(self, token: ScheduledCall, thunk: Callable[[], Any]) -> None:
        token.done = True
        logger.debug("Dispatching %r", token)
        result = thunk()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result, loop=self.loop)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        if (exc := task.exception()) is not None:
            logger.error("Scheduled coroutine failed: %s", exc, exc_info=exc)

    def cancel(self, token: ScheduledCall) -> None:
        if not token.pending:
            return
        token.cancelled = True
        token.handle.cancel()


class TaskGroupScheduler:
    """Schedule as tasks in an anyio task group.

    Each call sleeps inside its own ``CancelScope``; cancelling the token
    cancels that scope. Errors raised by the call propagate into the task
    group like any other task failure.

    Usage:
        ```python
        async with anyio.create_task_group() as tg:
            with use_scheduler(TaskGroupScheduler(tg)):
                token = delay(refresh, 0.5)
        ```
    """

    def __init__(self, task_group: anyio.abc.TaskGroup):
        self._task_group = task_group

    def schedule_after(
        self, delay: float, thunk: Callable[[], Any]
    ) -> ScheduledCall:
        seconds = _check_delay(delay)
        token = ScheduledCall(
            self, when=anyio.current_time() + seconds, handle=anyio.CancelScope()
        )
        self._task_group.start_soon(
            self._run, token, thunk, name=f"morphcall-scheduled-{token.id}"
        )
        return token

    async def _run(self, token: ScheduledCall, thunk: Callable[[], Any]) -> None:
        with token.handle:
            await anyio.sleep_until(token.when)
        if token.cancelled:
            return
        token.done = True
        logger.debug("Dispatching %r", token)
        result = thunk()
        if inspect.isawaitable(result):
            await result

    def cancel(self, token: ScheduledCall) -> None:
        if not token.pending:
            return
        token.cancelled = True
        token.handle.cancel()


class ManualScheduler:
    """Deterministic scheduler driven by a virtual clock.

    Nothing runs until :meth:`advance` or :meth:`run_pending` is called.
    Calls run in due-time order, ties in scheduling order. Exceptions
    raised by a call propagate to the caller of ``advance``/``run_pending``;
    calls still queued stay queued.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: list[tuple[float, int, ScheduledCall, Callable[[], Any]]] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> list[ScheduledCall]:
        return [entry[2] for entry in sorted(self._queue) if entry[2].pending]

    def schedule_after(
        self, delay: float, thunk: Callable[[], Any]
    ) -> ScheduledCall:
        seconds = _check_delay(delay)
        token = ScheduledCall(self, when=self._now + seconds)
        heapq.heappush(self._queue, (token.when, token.id, token, thunk))
        return token

    def cancel(self, token: ScheduledCall) -> None:
        if token.pending:
            token.cancelled = True

    def run_pending(self) -> int:
        """Dispatch calls already due, without moving the clock.

        Calls scheduled while dispatching wait for the next turn.
        """
        last_id = next(_ids)
        ran = 0
        while self._queue and self._queue[0][0] <= self._now:
            if self._queue[0][1] > last_id:
                break
            ran += self._dispatch_next()
        return ran

    def advance(self, seconds: float) -> int:
        """Move the clock forward, dispatching everything that falls due."""
        target = self._now + _check_delay(seconds)
        ran = 0
        try:
            while self._queue and self._queue[0][0] <= target:
                self._now = max(self._now, self._queue[0][0])
                ran += self._dispatch_next()
        finally:
            if not (self._queue and self._queue[0][0] <= target):
                self._now = target
        return ran

    def _dispatch_next(self) -> int:
        _, _, token, thunk = heapq.heappop(self._queue)
        if not token.pending:
            return 0
        token.done = True
        logger.debug("Dispatching %r", token)
        thunk()
        return 1


# scheduler selection

_active: ContextVar[Scheduler | None] = ContextVar(
    "morphcall_scheduler", default=None
)
_default: Scheduler | None = None

# one LoopScheduler per running loop, so its tasks stay reachable
_loop_schedulers: weakref.WeakKeyDictionary[
    asyncio.AbstractEventLoop, LoopScheduler
] = weakref.WeakKeyDictionary()


def set_default_scheduler(scheduler: Scheduler | None) -> None:
    """Install (or with ``None`` remove) the process-wide scheduler."""
    global _default
    _default = scheduler


@contextmanager
def use_scheduler(scheduler: Scheduler) -> Iterator[Scheduler]:
    """Use ``scheduler`` for delay/defer inside the block."""
    token = _active.set(scheduler)
    try:
        yield scheduler
    finally:
        _active.reset(token)


def get_scheduler() -> Scheduler:
    """Resolve the scheduler for the current context.

    Order: ``use_scheduler`` block, process default, running asyncio loop
    (one shared :class:`LoopScheduler` per loop).

    Raises:
        SchedulerUnavailableError: none of the above is available.
    """
    if (scheduler := _active.get()) is not None:
        return scheduler
    if _default is not None:
        return _default
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError as exc:
        raise SchedulerUnavailableError(cause=exc) from exc
    if (scheduler := _loop_schedulers.get(loop)) is None:
        scheduler = _loop_schedulers[loop] = LoopScheduler()
    return scheduler


# operations


def delay(
    func: Callable[..., Any], seconds: float, /, *args: Any, **kwargs: Any
) -> ScheduledCall:
    """Call ``func(*args, **kwargs)`` once, at least ``seconds`` from now.

    The call runs against the callable itself, which in Python means no
    separate receiver: ``func`` gets exactly the arguments given here.

    Returns:
        The token to pass to :func:`cancel`.
    """
    def thunk() -> Any:
        return call_with_context(func, Unset, *args, **kwargs)

    token = get_scheduler().schedule_after(seconds, thunk)
    logger.debug("Scheduled %r after %ss as %r", func, seconds, token)
    return token


def defer(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> ScheduledCall:
    """Call ``func`` as soon as the scheduler is idle.

    Same as ``delay(func, MorphSettings.defer_interval, *args, **kwargs)``.
    """
    return delay(func, get_settings().defer_interval, *args, **kwargs)


def cancel(token: ScheduledCall) -> None:
    """Prevent a pending call from running. No-op once run or cancelled."""
    if token.pending:
        logger.debug("Cancelling %r", token)
    token.cancel()
