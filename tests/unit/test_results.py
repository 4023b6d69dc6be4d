"""Tests for result aggregation helpers."""

from __future__ import annotations

from muxhooks.errors import HookErrors, HookExecutionError
from muxhooks.hooks.results import ResultCounts, all_errors, any_failed, count_results
from muxhooks.types.hooks import CommandEvent, CommandHook, ExecutionResult


def _ok(label: str) -> ExecutionResult:
    return ExecutionResult(hook=CommandHook(CommandEvent.POST_SEND, "true", name=label), success=True, exit_code=0)


def _fail(label: str) -> ExecutionResult:
    return ExecutionResult(
        hook=CommandHook(CommandEvent.POST_SEND, "false", name=label),
        success=False,
        exit_code=1,
        error=HookExecutionError(label, f"hook {label!r} failed with exit code 1: "),
    )


def _skip(label: str) -> ExecutionResult:
    return ExecutionResult(hook=CommandHook(CommandEvent.POST_SEND, "x", name=label), skipped=True)


class TestAllErrors:
    def test_combines_failures(self) -> None:
        err = all_errors([_fail("a"), _ok("b"), _fail("c")])
        assert isinstance(err, HookErrors)
        assert err.labels == ["a", "c"]
        assert "'a'" in str(err)
        assert "'c'" in str(err)
        assert str(err).startswith("hook errors: ")

    def test_none_when_all_succeed(self) -> None:
        assert all_errors([_ok("a"), _ok("b")]) is None

    def test_none_when_all_skipped(self) -> None:
        assert all_errors([_skip("a"), _skip("b")]) is None

    def test_none_for_empty(self) -> None:
        assert all_errors([]) is None

    def test_failure_without_error_gets_one(self) -> None:
        result = ExecutionResult(hook=CommandHook(CommandEvent.POST_SEND, "x", name="q"), success=False)
        err = all_errors([result])
        assert err is not None
        assert "'q'" in str(err)


class TestAnyFailed:
    def test_detects_failure(self) -> None:
        assert any_failed([_ok("a"), _fail("b")])

    def test_skipped_is_not_failure(self) -> None:
        assert not any_failed([_ok("a"), _skip("b")])

    def test_empty(self) -> None:
        assert not any_failed([])


class TestCountResults:
    def test_mixed(self) -> None:
        counts = count_results([_ok("a"), _fail("b"), _skip("c"), _ok("d"), _skip("e")])
        assert counts == ResultCounts(success=2, failed=1, skipped=2)
        assert counts.success + counts.failed + counts.skipped == 5

    def test_empty(self) -> None:
        assert count_results([]) == (0, 0, 0)
