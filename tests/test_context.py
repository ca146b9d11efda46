"""Tests for morphcall.context - the explicit execution-context model."""

import functools

from morphcall import (
    Fn,
    Unset,
    call_with_context,
    current_event,
    morph,
    reset_current_event,
    set_current_event,
    using_event,
)


def describe(*args, **kwargs):
    """Echo the received arguments."""
    return args, kwargs


class TestCallWithContext:
    def test_absent_context_passes_only_arguments(self):
        assert call_with_context(describe, Unset, 1, k=2) == ((1,), {"k": 2})

    def test_context_is_first_positional_argument(self):
        assert call_with_context(describe, "ctx", 1) == (("ctx", 1), {})

    def test_none_context_is_passed(self):
        assert call_with_context(describe, None) == ((None,), {})

    def test_fn_receives_context_through_call(self):
        class Spy(Fn):
            def call(self, context, /, *args, **kwargs):
                return "spy", context, args

        assert call_with_context(Spy(describe), "ctx", 1) == ("spy", "ctx", (1,))


class TestFn:
    def test_transparent_wrapper(self):
        fn = Fn(describe)
        assert fn(1, 2) == ((1, 2), {})
        assert fn.call("ctx", 1) == (("ctx", 1), {})

    def test_metadata_copied(self):
        fn = Fn(describe)
        assert fn.__name__ == "describe"
        assert fn.__doc__ == "Echo the received arguments."
        assert fn.__wrapped__ is describe
        assert fn.func is describe
        assert "describe" in repr(fn)

    def test_wrapper_attributes_not_inherited(self):
        inner = Fn(describe)
        outer = Fn(inner)
        assert outer.func is inner
        assert outer.__wrapped__ is inner

    def test_descriptor_supplies_receiver(self):
        class Host:
            method = Fn(describe)

        host = Host()
        assert host.method(1) == ((host, 1), {})
        assert Host.method is Host.__dict__["method"]
        assert isinstance(host.method, functools.partial)

    def test_morph_decorator(self):
        @morph
        def double(x):
            return x * 2

        assert isinstance(double, Fn)
        assert double(4) == 8
        assert morph(double) is double
        assert double.curry(5)() == 10

    def test_chained_transformers(self):
        calls = []

        def wrapper(original, *args):
            calls.append(args)
            return original(*args)

        chain = morph(describe).curry("a").wrap(wrapper)
        assert chain("b") == (("a", "b"), {})
        assert calls == [("b",)]


class TestCurrentEvent:
    def test_default_is_none(self):
        assert current_event() is None

    def test_using_event_restores_previous(self):
        with using_event("outer"):
            with using_event("inner"):
                assert current_event() == "inner"
            assert current_event() == "outer"
        assert current_event() is None

    def test_set_and_reset(self):
        token = set_current_event("evt")
        try:
            assert current_event() == "evt"
        finally:
            reset_current_event(token)
        assert current_event() is None
