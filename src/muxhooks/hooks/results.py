"""Aggregation helpers over completed hook results."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from muxhooks.errors import HookErrors, HookExecutionError
from muxhooks.types.hooks import ExecutionResult


class ResultCounts(NamedTuple):
    success: int
    failed: int
    skipped: int


def _failed(result: ExecutionResult) -> bool:
    return not result.success and not result.skipped


def all_errors(results: Iterable[ExecutionResult]) -> HookErrors | None:
    """Combine the errors of every failed (non-skipped) result.

    Returns None when nothing failed.
    """
    failures: list[tuple[str, BaseException]] = []
    for r in results:
        if not _failed(r):
            continue
        error = r.error or HookExecutionError(r.hook.label, f"hook {r.hook.label!r} failed")
        failures.append((r.hook.label, error))
    if not failures:
        return None
    return HookErrors(failures)


def any_failed(results: Iterable[ExecutionResult]) -> bool:
    """True if any non-skipped result was not a success."""
    return any(_failed(r) for r in results)


def count_results(results: Iterable[ExecutionResult]) -> ResultCounts:
    """Count results by outcome; skipped results count only as skipped."""
    success = failed = skipped = 0
    for r in results:
        if r.skipped:
            skipped += 1
        elif r.success:
            success += 1
        else:
            failed += 1
    return ResultCounts(success, failed, skipped)
