# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = (
    "MorphSettings",
    "get_settings",
    "override_settings",
    "reload_settings",
)


class MorphSettings(BaseSettings, frozen=True):
    """Library-wide policy switches, read from ``MORPHCALL_*`` env vars."""

    model_config = SettingsConfigDict(
        env_prefix="MORPHCALL_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    defer_interval: float = Field(
        default=0.01,
        ge=0,
        description="Delay in seconds used by defer()",
    )
    bind_requires_context: bool = Field(
        default=False,
        description=(
            "If True, bind() without a context raises BindingError "
            "instead of returning the callable unchanged"
        ),
    )
    event_fallback: bool = Field(
        default=True,
        description=(
            "If True, event listeners invoked without an event receive "
            "the ambient current event"
        ),
    )


_override: ContextVar[MorphSettings | None] = ContextVar(
    "morphcall_settings_override", default=None
)


@lru_cache(maxsize=1)
def _load_settings() -> MorphSettings:
    return MorphSettings()


def get_settings() -> MorphSettings:
    """Return the active settings (context override first, then env)."""
    return _override.get() or _load_settings()


def reload_settings() -> MorphSettings:
    """Drop the cached settings and re-read the environment."""
    _load_settings.cache_clear()
    return _load_settings()


@contextmanager
def override_settings(**changes: Any) -> Iterator[MorphSettings]:
    """Temporarily replace settings for the current context.

    Example:
        >>> with override_settings(bind_requires_context=True):
        ...     bind(func)  # raises BindingError
    """
    settings = MorphSettings(**{**get_settings().model_dump(), **changes})
    token = _override.set(settings)
    try:
        yield settings
    finally:
        _override.reset(token)
