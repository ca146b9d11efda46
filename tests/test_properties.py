"""Behavioral properties of the transformers, checked end to end."""

from hypothesis import given
from hypothesis import strategies as st

from morphcall import (
    ManualScheduler,
    argument_names,
    bind,
    cancel,
    curry,
    defer,
    delay,
    methodize,
    use_scheduler,
    wrap,
)

values = st.one_of(st.integers(), st.text(max_size=5), st.none())


def echo(*args, **kwargs):
    return args, kwargs


def test_argument_names_of_three_and_none():
    def f(a, b, c):
        pass

    def g():
        pass

    assert argument_names(f) == ["a", "b", "c"]
    assert argument_names(g) == []


@given(ctx=values, xs=st.lists(values, max_size=5))
def test_bind_matches_direct_call_with_context(ctx, xs):
    assert bind(echo, ctx)(*xs) == echo(ctx, *xs)


def test_bind_without_context_is_identity():
    assert bind(echo) is echo


@given(
    ctx=values,
    preset=st.lists(values, min_size=1, max_size=3),
    xs=st.lists(values, max_size=3),
)
def test_curry_keeps_callers_context(ctx, preset, xs):
    curried = curry(echo, *preset)
    assert curried.call(ctx, *xs) == echo(ctx, *preset, *xs)
    assert curried(*xs) == echo(*preset, *xs)


def test_delay_cancel_and_dispatch():
    calls = []
    scheduler = ManualScheduler()
    with use_scheduler(scheduler):
        cancelled = delay(calls.append, 1.0, "cancelled")
        kept = delay(calls.append, 1.0, "x")
    scheduler.advance(0.5)
    cancel(cancelled)
    scheduler.advance(0.25)
    assert calls == []
    scheduler.advance(0.25)
    assert calls == ["x"]
    assert kept.done


def test_wrapper_decides_whether_original_runs():
    calls = []

    def original(value):
        calls.append(value)

    seen = []
    wrap(original, lambda bound, value: seen.append((bound, value)))(5)
    assert seen == [(original, 5)]
    assert calls == []


def test_methodize_identity_and_receiver():
    def f(receiver, x):
        return receiver, x

    m = methodize(f)
    assert methodize(f) is m

    class Receiver:
        method = m

    receiver = Receiver()
    assert receiver.method("x") == (receiver, "x")


def test_defer_and_zero_delay_never_synchronous():
    calls = []
    with use_scheduler(ManualScheduler()) as scheduler:
        defer(calls.append, "a")
        delay(calls.append, 0, "a")
        assert calls == []
        scheduler.advance(0.01)
    assert calls == ["a", "a"]
