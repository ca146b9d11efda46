# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Argument list helpers shared by every pre-applying transformer."""

from collections.abc import Iterable, Mapping
from typing import Any

__all__ = ("merge_args", "merge_kwargs", "update_args")


def update_args(target: list[Any], extra: Iterable[Any]) -> list[Any]:
    """Append ``extra`` onto ``target`` in place and return ``target``."""
    target.extend(extra)
    return target


def merge_args(base: Iterable[Any], extra: Iterable[Any]) -> tuple[Any, ...]:
    """Return ``base`` followed by ``extra`` as a new tuple.

    Neither input is modified; either may be empty.
    """
    return (*base, *extra)


def merge_kwargs(
    base: Mapping[str, Any] | None, extra: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Return a new dict of ``base`` updated by ``extra`` (``extra`` wins)."""
    if not base:
        return dict(extra or {})
    if not extra:
        return dict(base)
    return {**base, **extra}
