"""HookExecutor: sequential command hook execution with fail-fast policy."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from muxhooks.errors import HookExecutionError, HookFailedError, HooksCancelledError
from muxhooks.hooks.config import CommandHooksConfig, load_all_command_hooks
from muxhooks.hooks.duration import format_duration
from muxhooks.hooks.scope import InvocationScope
from muxhooks.process import ProcessResult, ProcessRunner, ShellProcessRunner
from muxhooks.types.hooks import CommandEvent, CommandHook, ExecutionContext, ExecutionResult

logger = logging.getLogger(__name__)

MESSAGE_ENV_LIMIT = 1000
MESSAGE_ELLIPSIS = "..."

ENV_SESSION = "MUX_SESSION"
ENV_PROJECT_DIR = "MUX_PROJECT_DIR"
ENV_PANE = "MUX_PANE"
ENV_HOOK_EVENT = "MUX_HOOK_EVENT"
ENV_HOOK_NAME = "MUX_HOOK_NAME"
ENV_MESSAGE = "MUX_MESSAGE"


def truncate_message(message: str) -> str:
    """Cap *message* at 1000 characters, marking truncation with ``...``."""
    if len(message) > MESSAGE_ENV_LIMIT:
        return message[:MESSAGE_ENV_LIMIT] + MESSAGE_ELLIPSIS
    return message


def build_environment(
    hook: CommandHook,
    exec_ctx: ExecutionContext,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the process environment for *hook*.

    Layers, later winning on collision: ambient environment, injected
    ``MUX_*`` variables, the hook's ``env``, the context's additional env.
    """
    env = dict(os.environ if base_env is None else base_env)

    env[ENV_SESSION] = exec_ctx.session_name
    env[ENV_PROJECT_DIR] = exec_ctx.project_dir
    env[ENV_PANE] = exec_ctx.pane
    env[ENV_HOOK_EVENT] = hook.event_name
    if hook.name:
        env[ENV_HOOK_NAME] = hook.name
    env[ENV_MESSAGE] = truncate_message(exec_ctx.message)

    env.update(hook.env)
    env.update(exec_ctx.additional_env)
    return env


class HookExecutor:
    """Runs the command hooks bound to an event, one at a time, in order."""

    def __init__(
        self,
        config: CommandHooksConfig | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self._config = config if config is not None else CommandHooksConfig.empty()
        self._runner = runner or ShellProcessRunner()

    @classmethod
    def from_config(
        cls,
        hooks_path: str | Path | None = None,
        main_config_path: str | Path | None = None,
        runner: ProcessRunner | None = None,
    ) -> HookExecutor:
        """Load hooks from the default (or given) files and build an executor."""
        return cls(load_all_command_hooks(hooks_path, main_config_path), runner)

    @property
    def config(self) -> CommandHooksConfig:
        return self._config

    def has_hooks_for_event(self, event: CommandEvent | str) -> bool:
        return self._config.has_hooks_for_event(event)

    def get_hooks_for_event(self, event: CommandEvent | str) -> list[CommandHook]:
        return self._config.get_hooks_for_event(event)

    async def run_hooks_for_event(
        self,
        event: CommandEvent | str,
        exec_ctx: ExecutionContext,
        *,
        scope: InvocationScope | None = None,
    ) -> list[ExecutionResult]:
        """Run every enabled hook for *event* and return their results.

        Returns an empty list when nothing is bound to the event. Raises
        HookFailedError when a hook without ``continue_on_error`` fails and
        HooksCancelledError when *scope* is cancelled before a hook starts;
        both carry the results produced so far.
        """
        hooks = self._config.get_hooks_for_event(event)
        if not hooks:
            return []

        scope = scope or InvocationScope()
        results: list[ExecutionResult] = []

        for hook in hooks:
            if scope.cancelled:
                logger.info(
                    "Stopping %s hooks after %d of %d: %s",
                    hook.event_name, len(results), len(hooks), scope.reason(),
                )
                raise HooksCancelledError(scope.reason(), results)

            result = await self._run_single_hook(hook, exec_ctx, scope)
            results.append(result)

            if not result.success and not result.skipped and not hook.continue_on_error:
                logger.info(
                    "Hook %r failed, skipping %d remaining %s hook(s)",
                    hook.label, len(hooks) - len(results), hook.event_name,
                )
                raise HookFailedError(result, results)

        return results

    async def _run_single_hook(
        self,
        hook: CommandHook,
        exec_ctx: ExecutionContext,
        scope: InvocationScope,
    ) -> ExecutionResult:
        timeout = scope.bound(hook.effective_timeout())
        workdir = hook.expand_workdir(exec_ctx.session_name, exec_ctx.project_dir)

        logger.debug("Running %s hook %r (timeout %s)", hook.event_name, hook.label, timeout)
        proc = await self._runner.run(
            hook.command,
            env=build_environment(hook, exec_ctx),
            cwd=workdir or None,
            timeout_sec=timeout,
        )
        return self._classify(hook, proc, timeout)

    @staticmethod
    def _classify(hook: CommandHook, proc: ProcessResult, timeout: float) -> ExecutionResult:
        error: HookExecutionError | None = None

        if proc.timed_out:
            error = HookExecutionError(
                hook.label,
                f"hook {hook.label!r} timed out after {format_duration(timeout)}",
                timed_out=True,
            )
            logger.warning("%s", error)
        elif proc.error is not None:
            error = HookExecutionError(hook.label, f"hook {hook.label!r} failed: {proc.error}")
            logger.warning("%s", error)
        elif proc.exit_code != 0:
            error = HookExecutionError(
                hook.label,
                f"hook {hook.label!r} failed with exit code {proc.exit_code}: "
                f"{proc.stderr.strip()}",
                exit_code=proc.exit_code,
            )
            logger.warning("%s", error)
        else:
            logger.debug("Hook %r succeeded in %.3fs", hook.label, proc.duration)

        return ExecutionResult(
            hook=hook,
            success=error is None,
            error=error,
            exit_code=proc.exit_code,
            stdout=proc.stdout,
            stderr=proc.stderr,
            duration=proc.duration,
            timed_out=proc.timed_out,
        )
