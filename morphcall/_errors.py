# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "BindingError",
    "DeclarationError",
    "MorphError",
    "SchedulerUnavailableError",
    "SchedulingError",
)


class MorphError(Exception):
    default_message: ClassVar[str] = "morphcall error"
    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.get_cause()):
            data["cause"] = repr(cause)
        return data

    def get_cause(self) -> BaseException | None:
        """Get the cause of this error, if any."""
        return self.__cause__


class DeclarationError(MorphError, ValueError):
    """A callable's declaration could not be read or parsed."""

    default_message = "Could not read the callable's declared parameters"
    __slots__ = ()

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        snippet = text if len(text) <= 80 else text[:77] + "..."
        return cls(message, details={"declaration": snippet}, cause=cause)


class BindingError(MorphError, TypeError):
    """Binding was refused because no execution context was supplied."""

    default_message = "bind() requires an execution context"
    __slots__ = ()


class SchedulingError(MorphError, ValueError):
    """A scheduler rejected the requested delay."""

    default_message = "Invalid scheduling request"
    __slots__ = ()


class SchedulerUnavailableError(SchedulingError):
    default_message = (
        "No scheduler available: use use_scheduler(...), "
        "set_default_scheduler(...), or call from a running asyncio loop"
    )
    __slots__ = ()
