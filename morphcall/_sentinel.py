# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Final, Literal

__all__ = (
    "SingletonType",
    "Unset",
    "UnsetType",
)


class _SingletonMeta(type):
    """Metaclass that guarantees exactly one instance per subclass."""

    _cache: dict[type, SingletonType] = {}

    def __call__(cls, *a, **kw):
        if cls not in cls._cache:
            cls._cache[cls] = super().__call__(*a, **kw)
        return cls._cache[cls]


class SingletonType(metaclass=_SingletonMeta):
    """Base class for singleton sentinel types.

    Sentinels keep their identity across copy/deepcopy/pickle so that
    ``is`` checks stay valid everywhere.
    """

    __slots__: tuple[str, ...] = ()

    def __deepcopy__(self, memo):
        return self

    def __copy__(self):
        return self

    def __bool__(self) -> bool: ...
    def __repr__(self) -> str: ...


class UnsetType(SingletonType):
    """Sentinel for an argument that was not supplied at all.

    Used wherever ``None`` is a legitimate value, most notably as the
    "absent" execution context:

        >>> bind(func) is func        # no context given
        True
        >>> bind(func, None)          # None is a real context
        BoundFn(...)
    """

    __slots__ = ()

    def __bool__(self) -> Literal[False]:
        return False

    def __repr__(self) -> Literal["Unset"]:
        return "Unset"

    def __str__(self) -> Literal["Unset"]:
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset: Final = UnsetType()
"""An argument that was not supplied."""
