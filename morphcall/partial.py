# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from typing_extensions import override

from .args import merge_args, merge_kwargs
from .context import Fn, call_with_context

__all__ = ("CurriedFn", "curry")


class CurriedFn(Fn):
    """Pre-applied arguments with the context left to the caller."""

    def __init__(
        self,
        func: Callable[..., Any],
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
    ):
        super().__init__(func)
        self.args = tuple(args)
        self.kwargs = dict(kwargs or {})

    @override
    def call(self, context: Any, /, *args: Any, **kwargs: Any) -> Any:
        return call_with_context(
            self.func,
            context,
            *merge_args(self.args, args),
            **merge_kwargs(self.kwargs, kwargs),
        )


def curry(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Callable[..., Any]:
    """Partially apply ``func``.

    Works like :func:`bind` without the context: the curried callable runs
    against whatever context it is called with, e.g. the instance when it
    is stored on a class. With no arguments ``func`` is returned as is.
    """
    if not args and not kwargs:
        return func
    return CurriedFn(func, args, kwargs)
