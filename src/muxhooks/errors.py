"""Exceptions raised by muxhooks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from muxhooks.types.hooks import ExecutionResult


class HookError(Exception):
    """Base class for all hook engine errors."""


class HookConfigError(HookError):
    """A hook declaration source could not be read, parsed or validated."""


class HookValidationError(HookConfigError, ValueError):
    """A single hook failed field validation."""


class HookExecutionError(HookError):
    """Outcome error recorded on a failed ExecutionResult."""

    def __init__(
        self,
        label: str,
        message: str,
        *,
        exit_code: int = -1,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.label = label
        self.exit_code = exit_code
        self.timed_out = timed_out


class HookSequenceHalted(HookError):
    """A run of hooks for one event stopped before reaching the end.

    ``results`` holds every result produced before the halt, in order.
    """

    def __init__(self, message: str, results: list[ExecutionResult]) -> None:
        super().__init__(message)
        self.results = list(results)


class HookFailedError(HookSequenceHalted):
    """A hook without ``continue_on_error`` failed and halted the sequence."""

    def __init__(self, result: ExecutionResult, results: list[ExecutionResult]) -> None:
        super().__init__(str(result.error), results)
        self.result = result


class HooksCancelledError(HookSequenceHalted):
    """The invocation was cancelled before the next hook could start."""


class HookErrors(HookError):
    """Combined errors from several failed hooks.

    ``failures`` keeps the individual ``(label, error)`` pairs; the string
    form joins them for display.
    """

    def __init__(self, failures: list[tuple[str, BaseException]]) -> None:
        self.failures = list(failures)
        super().__init__("hook errors: " + "; ".join(str(e) for _, e in self.failures))

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self.failures]


class ScannerError(Exception):
    """The static-analysis scanner failed to produce a result."""


class ScannerNotInstalledError(ScannerError):
    """The scanner executable is not on PATH."""


class PreCommitError(Exception):
    """The pre-commit policy could not reach a verdict."""


class GitHookError(Exception):
    """Base class for git hook installation errors."""


class NotGitRepoError(GitHookError):
    def __init__(self, path: str = "") -> None:
        super().__init__(f"not a git repository: {path}" if path else "not a git repository")


class GitHookExistsError(GitHookError):
    def __init__(self, hook_type: str) -> None:
        super().__init__(f"{hook_type} hook already exists (use --force to overwrite)")


class GitHookNotInstalledError(GitHookError):
    def __init__(self, hook_type: str) -> None:
        super().__init__(f"{hook_type} hook not installed")


class ExecutableNotFoundError(GitHookError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name} executable not found in PATH")
