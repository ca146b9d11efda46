"""Shared fixtures for morphcall tests.

Async tests run on both asyncio and trio through anyio's pytest plugin.
"""

import pytest

from morphcall import ManualScheduler, use_scheduler
from morphcall.config import reload_settings
from morphcall.scheduling import set_default_scheduler


@pytest.fixture(params=["asyncio", "trio"])
def anyio_backend(request):
    return request.param


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch):
    """Start every test from env-free settings and no default scheduler."""
    for name in (
        "MORPHCALL_DEFER_INTERVAL",
        "MORPHCALL_BIND_REQUIRES_CONTEXT",
        "MORPHCALL_EVENT_FALLBACK",
    ):
        monkeypatch.delenv(name, raising=False)
    reload_settings()
    set_default_scheduler(None)
    yield
    set_default_scheduler(None)
    reload_settings()


@pytest.fixture
def scheduler():
    """A ManualScheduler active for the duration of the test."""
    manual = ManualScheduler()
    with use_scheduler(manual):
        yield manual


class Recorder:
    """Callable that remembers every call it receives."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        return self.result

    @property
    def args(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def recorder():
    return Recorder()
