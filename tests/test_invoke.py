"""Tests for dataplatform._internal.invoke: outcome capture."""

import pytest

from dataplatform._internal.invoke import Failure, Success, invoke


class TestInvoke:
    def test_success(self) -> None:
        assert invoke(lambda: {"ok": True}) == Success({"ok": True})

    def test_positional_args(self) -> None:
        def handler(a: str, b: str) -> str:
            return a + b

        assert invoke(handler, "4", "2") == Success("42")

    def test_none_is_a_value(self) -> None:
        assert invoke(lambda: None) == Success(None)

    def test_exception_becomes_failure(self) -> None:
        def boom() -> None:
            raise RuntimeError("boom")

        outcome = invoke(boom)
        assert isinstance(outcome, Failure)
        assert outcome.message == "boom"
        assert isinstance(outcome.error, RuntimeError)

    def test_wrong_arity_is_failure(self) -> None:
        outcome = invoke(lambda: None, "extra")
        assert isinstance(outcome, Failure)
        assert isinstance(outcome.error, TypeError)

    def test_coroutine_result_is_failure(self) -> None:
        async def handler() -> str:
            return "never"

        outcome = invoke(handler)
        assert isinstance(outcome, Failure)
        assert "must be synchronous" in outcome.message

    def test_keyboard_interrupt_propagates(self) -> None:
        def handler() -> None:
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            invoke(handler)
