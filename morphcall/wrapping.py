# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from typing_extensions import override

from ._sentinel import Unset
from .binding import BoundFn
from .context import Fn, call_with_context

__all__ = ("WrappedFn", "wrap")


class WrappedFn(Fn):
    """
    Route every call through ``wrapper``. The wrapper receives the original,
    already bound to the caller's context, followed by the call arguments,
    and decides whether and how to invoke it.
    """

    def __init__(self, func: Callable[..., Any], wrapper: Callable[..., Any]):
        super().__init__(func)
        self.wrapper = wrapper

    @override
    def call(self, context: Any, /, *args: Any, **kwargs: Any) -> Any:
        original = self.func if context is Unset else BoundFn(self.func, context)
        return call_with_context(self.wrapper, context, original, *args, **kwargs)


def wrap(func: Callable[..., Any], wrapper: Callable[..., Any]) -> WrappedFn:
    """Wrap ``func`` with ``wrapper(original, *args, **kwargs)``.

    Example:
        >>> def shout(original, text):
        ...     return original(text).upper()
        >>> wrap(str.strip, shout)("  hi ")
        'HI'
    """
    return WrappedFn(func, wrapper)
