"""Tests for morphcall.args - the argument merge primitive."""

from hypothesis import given
from hypothesis import strategies as st

from morphcall.args import merge_args, merge_kwargs, update_args


class TestMergeArgs:
    def test_appends_extra_after_base(self):
        assert merge_args((1, 2), (3, 4)) == (1, 2, 3, 4)

    def test_empty_sides(self):
        assert merge_args((), ()) == ()
        assert merge_args((1,), ()) == (1,)
        assert merge_args((), [1]) == (1,)

    def test_inputs_not_mutated(self):
        base, extra = [1, 2], [3]
        merged = merge_args(base, extra)
        assert base == [1, 2]
        assert extra == [3]
        assert merged == (1, 2, 3)

    @given(st.lists(st.integers()), st.lists(st.integers()))
    def test_order_and_length_preserved(self, base, extra):
        merged = merge_args(base, extra)
        assert list(merged) == base + extra
        assert merged[: len(base)] == tuple(base)


class TestUpdateArgs:
    def test_extends_in_place(self):
        target = ["event"]
        result = update_args(target, ("a", "b"))
        assert result is target
        assert target == ["event", "a", "b"]


class TestMergeKwargs:
    def test_extra_wins(self):
        assert merge_kwargs({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_returns_new_dict(self):
        base = {"a": 1}
        merged = merge_kwargs(base, None)
        assert merged == base
        assert merged is not base
        assert merge_kwargs(None, None) == {}
