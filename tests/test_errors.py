# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for morphcall error classes."""

import pytest

from morphcall import (
    BindingError,
    DeclarationError,
    MorphError,
    SchedulerUnavailableError,
    SchedulingError,
)


class TestMorphError:
    """Tests for base MorphError class."""

    def test_default_initialization(self):
        error = MorphError()
        assert str(error) == "morphcall error"
        assert error.message == "morphcall error"
        assert error.details == {}

    def test_custom_message_and_details(self):
        error = MorphError("Custom", details={"key": "value"})
        assert str(error) == "Custom"
        assert error.details == {"key": "value"}

    def test_with_cause(self):
        cause = ValueError("Original error")
        error = MorphError("Wrapped error", cause=cause)
        assert error.get_cause() is cause
        assert error.__cause__ is cause

    def test_to_dict(self):
        error = MorphError("Boom", details={"a": 1}, cause=KeyError("k"))
        assert error.to_dict() == {
            "error": "MorphError",
            "message": "Boom",
            "details": {"a": 1},
        }
        assert error.to_dict(include_cause=True)["cause"] == "KeyError('k')"

    def test_to_dict_omits_empty_details(self):
        assert "details" not in MorphError().to_dict()


class TestSubclasses:
    @pytest.mark.parametrize(
        ("error_cls", "builtin"),
        [
            (DeclarationError, ValueError),
            (BindingError, TypeError),
            (SchedulingError, ValueError),
            (SchedulerUnavailableError, SchedulingError),
        ],
    )
    def test_hierarchy(self, error_cls, builtin):
        error = error_cls()
        assert isinstance(error, MorphError)
        assert isinstance(error, builtin)
        assert error.message == error_cls.default_message

    def test_declaration_error_from_text_truncates(self):
        error = DeclarationError.from_text("x" * 200, message="bad")
        assert error.message == "bad"
        assert len(error.details["declaration"]) == 80
        assert error.details["declaration"].endswith("...")

    def test_catchable_as_builtin(self):
        with pytest.raises(ValueError):
            raise DeclarationError("nope")
