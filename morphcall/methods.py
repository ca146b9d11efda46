# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import inspect
import itertools
import logging
import threading
import weakref
from collections.abc import Callable
from typing import Any

from typing_extensions import override

from ._sentinel import Unset
from .context import Fn, call_with_context

__all__ = ("MethodizeCache", "MethodizedFn", "methodize")

logger = logging.getLogger(__name__)

_cache_ids = itertools.count(1)


class MethodizedFn(Fn):
    """Pass the receiver to ``func`` as its first argument.

    Lets one definition serve as a free function ``func(obj, x)`` and as a
    method ``obj.attr(x)``. ``func`` itself runs without a context; called
    without a receiver, ``None`` is passed in its place.
    """

    @override
    def call(self, context: Any, /, *args: Any, **kwargs: Any) -> Any:
        receiver = None if context is Unset else context
        return call_with_context(self.func, Unset, receiver, *args, **kwargs)


def _attribute_store(func: Any) -> dict[str, Any] | None:
    # bound methods proxy __dict__ to the shared underlying function
    if inspect.ismethod(func):
        return None
    store = getattr(func, "__dict__", None)
    return store if isinstance(store, dict) else None


class MethodizeCache:
    """Identity map from source callable to its methodized form.

    An entry is written once and lives as long as its source callable. It
    is stored as an attribute on the callable where the callable has an
    instance ``__dict__``, so the pair is collected together. Callables
    without one (builtins, classes, bound methods) are held in a strong
    map until :meth:`clear`.
    """

    def __init__(self):
        self._slot = f"_morphcall_methodized_{next(_cache_ids)}"
        self._strong: dict[int, MethodizedFn] = {}
        self._products: weakref.WeakSet[MethodizedFn] = weakref.WeakSet()
        self._lock = threading.Lock()

    def get(self, func: Callable[..., Any]) -> MethodizedFn | None:
        store = _attribute_store(func)
        if store is not None:
            product = store.get(self._slot)
        else:
            product = self._strong.get(id(func))
        # functools.wraps copies __dict__, so a stored product may belong
        # to the wrapped callable
        if product is not None and product.func is func:
            return product
        return None

    def get_or_create(self, func: Callable[..., Any]) -> MethodizedFn:
        if (product := self.get(func)) is not None:
            return product
        with self._lock:
            if (product := self.get(func)) is None:
                product = MethodizedFn(func)
                store = _attribute_store(func)
                if store is not None:
                    store[self._slot] = product
                else:
                    self._strong[id(func)] = product
                self._products.add(product)
                logger.debug("Methodized %r", func)
        return product

    def clear(self) -> None:
        with self._lock:
            for product in list(self._products):
                store = _attribute_store(product.func)
                if store is not None and store.get(self._slot) is product:
                    del store[self._slot]
            self._strong.clear()
            self._products.clear()

    def __contains__(self, func: object) -> bool:
        return self.get(func) is not None

    def __len__(self) -> int:
        return len(self._products)


def methodize(func: Callable[..., Any]) -> MethodizedFn:
    """Return the (cached) method form of ``func``.

    Repeated calls with the same callable return the identical object:

        >>> def area(shape, scale=1):
        ...     return shape.w * shape.h * scale
        >>> class Rect:
        ...     area = methodize(area)
        >>> methodize(area) is Rect.area
        True
    """
    return methodize.cache.get_or_create(func)


methodize.cache = MethodizeCache()
