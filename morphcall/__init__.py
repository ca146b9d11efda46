# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

import logging

from ._errors import (
    BindingError,
    DeclarationError,
    MorphError,
    SchedulerUnavailableError,
    SchedulingError,
)
from ._sentinel import Unset
from .args import merge_args, merge_kwargs, update_args
from .binding import BoundFn, EventListenerFn, bind, bind_as_event_listener
from .config import MorphSettings, get_settings, override_settings
from .context import (
    Fn,
    call_with_context,
    current_event,
    morph,
    reset_current_event,
    set_current_event,
    using_event,
)
from .introspect import argument_names, parse_argument_names
from .methods import MethodizeCache, MethodizedFn, methodize
from .partial import CurriedFn, curry
from .scheduling import (
    LoopScheduler,
    ManualScheduler,
    ScheduledCall,
    Scheduler,
    TaskGroupScheduler,
    cancel,
    defer,
    delay,
    get_scheduler,
    set_default_scheduler,
    use_scheduler,
)
from .version import __version__
from .wrapping import WrappedFn, wrap

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

__all__ = (
    "__version__",
    "BindingError",
    "BoundFn",
    "CurriedFn",
    "DeclarationError",
    "EventListenerFn",
    "Fn",
    "LoopScheduler",
    "ManualScheduler",
    "MethodizeCache",
    "MethodizedFn",
    "MorphError",
    "MorphSettings",
    "ScheduledCall",
    "Scheduler",
    "SchedulerUnavailableError",
    "SchedulingError",
    "TaskGroupScheduler",
    "Unset",
    "WrappedFn",
    "argument_names",
    "bind",
    "bind_as_event_listener",
    "call_with_context",
    "cancel",
    "current_event",
    "curry",
    "defer",
    "delay",
    "get_scheduler",
    "get_settings",
    "merge_args",
    "merge_kwargs",
    "methodize",
    "morph",
    "override_settings",
    "parse_argument_names",
    "reset_current_event",
    "set_current_event",
    "set_default_scheduler",
    "update_args",
    "use_scheduler",
    "using_event",
    "wrap",
)
