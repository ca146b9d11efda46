# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Explicit execution-context model.

A *context* is the receiver a callable runs against. Python has no hidden
``this``; the receiver of a method is simply its first positional argument.
This module makes that explicit:

- ``call_with_context(func, ctx, *args)`` runs ``func(ctx, *args)``, or
  ``func(*args)`` when ``ctx`` is ``Unset`` (no context).
- ``Fn`` objects receive the context through ``Fn.call(ctx, ...)`` and decide
  for themselves what to do with it (fix it, forward it, prepend it).

Every transformer in the package returns an ``Fn``. Because ``Fn`` is a
descriptor, an ``Fn`` stored on a class receives the instance as its
context when called as ``obj.attr(...)``.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Any

from ._sentinel import Unset

if TYPE_CHECKING:
    from .methods import MethodizedFn
    from .scheduling import ScheduledCall

__all__ = (
    "Fn",
    "call_with_context",
    "current_event",
    "morph",
    "reset_current_event",
    "set_current_event",
    "using_event",
)


def call_with_context(
    func: Callable[..., Any], context: Any, /, *args: Any, **kwargs: Any
) -> Any:
    """Invoke ``func`` against ``context``.

    ``Unset`` means "no context": plain callables are then called with the
    arguments alone.
    """
    if isinstance(func, Fn):
        return func.call(context, *args, **kwargs)
    if context is Unset:
        return func(*args, **kwargs)
    return func(context, *args, **kwargs)


class Fn:
    """A callable that takes its execution context explicitly.

    ``Fn(func)`` on its own is transparent: ``Fn(func)(*a)`` is ``func(*a)``
    and ``Fn(func).call(ctx, *a)`` is ``func(ctx, *a)``. Subclasses override
    :meth:`call` to change how the context and arguments reach ``func``.

    The transformer operations are available as methods so they can be
    chained::

        handler = morph(on_click).curry("button").wrap(log_calls)
    """

    def __init__(self, func: Callable[..., Any]):
        functools.update_wrapper(self, func, updated=())
        self.func = func

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.call(Unset, *args, **kwargs)

    def call(self, context: Any, /, *args: Any, **kwargs: Any) -> Any:
        return call_with_context(self.func, context, *args, **kwargs)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return functools.partial(self.call, instance)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", None) or repr(self.func)
        return f"{type(self).__name__}({name})"

    # transformer surface

    def argument_names(self) -> list[str]:
        from .introspect import argument_names

        return argument_names(self)

    def bind(self, context: Any = Unset, /, *args: Any, **kwargs: Any) -> Fn:
        from .binding import bind

        return bind(self, context, *args, **kwargs)

    def bind_as_event_listener(
        self, context: Any = Unset, /, *args: Any, **kwargs: Any
    ) -> Fn:
        from .binding import bind_as_event_listener

        return bind_as_event_listener(self, context, *args, **kwargs)

    def curry(self, *args: Any, **kwargs: Any) -> Fn:
        from .partial import curry

        return curry(self, *args, **kwargs)

    def delay(self, seconds: float, /, *args: Any, **kwargs: Any) -> ScheduledCall:
        from .scheduling import delay

        return delay(self, seconds, *args, **kwargs)

    def defer(self, *args: Any, **kwargs: Any) -> ScheduledCall:
        from .scheduling import defer

        return defer(self, *args, **kwargs)

    def wrap(self, wrapper: Callable[..., Any]) -> Fn:
        from .wrapping import wrap

        return wrap(self, wrapper)

    def methodize(self) -> MethodizedFn:
        from .methods import methodize

        return methodize(self)


def morph(func: Callable[..., Any]) -> Fn:
    """Decorator exposing the transformer methods on ``func``."""
    if isinstance(func, Fn):
        return func
    return Fn(func)


# ambient current event

_current_event: ContextVar[Any] = ContextVar(
    "morphcall_current_event", default=None
)


def current_event() -> Any:
    """The event currently being dispatched, or ``None``."""
    return _current_event.get()


def set_current_event(event: Any) -> Token:
    return _current_event.set(event)


def reset_current_event(token: Token) -> None:
    _current_event.reset(token)


@contextmanager
def using_event(event: Any) -> Iterator[Any]:
    """Make ``event`` the ambient current event inside the block."""
    token = _current_event.set(event)
    try:
        yield event
    finally:
        _current_event.reset(token)
