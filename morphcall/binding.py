# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from typing_extensions import override

from ._errors import BindingError
from ._sentinel import Unset
from .args import merge_args, merge_kwargs, update_args
from .config import get_settings
from .context import Fn, call_with_context, current_event

__all__ = (
    "BoundFn",
    "EventListenerFn",
    "bind",
    "bind_as_event_listener",
)


class BoundFn(Fn):
    """
    Run ``func`` against a fixed context, with ``args``/``kwargs`` applied
    ahead of whatever the caller passes. The caller's own context is
    discarded.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        context: Any,
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
    ):
        super().__init__(func)
        self.context = context
        self.args = tuple(args)
        self.kwargs = dict(kwargs or {})

    @override
    def call(self, context: Any, /, *args: Any, **kwargs: Any) -> Any:
        return call_with_context(
            self.func,
            self.context,
            *merge_args(self.args, args),
            **merge_kwargs(self.kwargs, kwargs),
        )


class EventListenerFn(BoundFn):
    """
    Bound callable that takes a single event argument and passes it ahead
    of the preset arguments. A missing event falls back to the ambient
    :func:`current_event` unless ``MorphSettings.event_fallback`` is off.
    """

    @override
    def call(self, context: Any, event: Any = None, /) -> Any:
        if event is None and get_settings().event_fallback:
            event = current_event()
        return call_with_context(
            self.func,
            self.context,
            *update_args([event], self.args),
            **self.kwargs,
        )


def bind(
    func: Callable[..., Any], context: Any = Unset, /, *args: Any, **kwargs: Any
) -> Callable[..., Any]:
    """Fix the execution context of ``func``, optionally pre-applying args.

    ``bind(func)`` with nothing to bind returns ``func`` itself, or raises
    :class:`BindingError` when ``MorphSettings.bind_requires_context`` is set.

    Args:
        func: Callable to bind.
        context: Receiver every call runs against. ``None`` is a valid
            context; only an omitted context counts as missing.
        *args: Leading positional arguments applied to every call.
        **kwargs: Keyword arguments applied to every call; call-time
            keywords override them.

    Returns:
        A :class:`BoundFn`, or ``func`` unchanged.
    """
    if context is Unset:
        if get_settings().bind_requires_context:
            raise BindingError(details={"func": repr(func)})
        if not args and not kwargs:
            return func
    return BoundFn(func, context, args, kwargs)


def bind_as_event_listener(
    func: Callable[..., Any], context: Any = Unset, /, *args: Any, **kwargs: Any
) -> EventListenerFn:
    """Bind ``func`` for use as an event callback.

    The returned callable accepts one event; ``func`` is called against
    ``context`` with ``(event, *args)``.
    """
    return EventListenerFn(func, context, args, kwargs)
