"""muxhooks: lifecycle command hooks for multi-agent terminal sessions.

Usage:
    from muxhooks import ExecutionContext, HookExecutor, all_errors

    executor = HookExecutor.from_config()
    try:
        results = await executor.run_hooks_for_event(
            "pre-spawn", ExecutionContext(session_name="api", project_dir="/src/api"),
        )
    except HookSequenceHalted as exc:
        results = exc.results
    if err := all_errors(results):
        print(err)
"""

from muxhooks.errors import (
    HookConfigError,
    HookError,
    HookErrors,
    HookExecutionError,
    HookFailedError,
    HooksCancelledError,
    HookSequenceHalted,
    HookValidationError,
)
from muxhooks.hooks import (
    CommandHooksConfig,
    HookExecutor,
    InvocationScope,
    all_errors,
    any_failed,
    count_results,
    load_all_command_hooks,
)
from muxhooks.types import (
    CommandEvent,
    CommandHook,
    EnabledState,
    ExecutionContext,
    ExecutionResult,
)

__version__ = "0.3.0"

__all__ = [
    # Engine
    "CommandHooksConfig",
    "HookExecutor",
    "InvocationScope",
    "load_all_command_hooks",
    # Aggregation
    "all_errors",
    "any_failed",
    "count_results",
    # Types
    "CommandEvent",
    "CommandHook",
    "EnabledState",
    "ExecutionContext",
    "ExecutionResult",
    # Errors
    "HookConfigError",
    "HookError",
    "HookErrors",
    "HookExecutionError",
    "HookFailedError",
    "HookSequenceHalted",
    "HookValidationError",
    "HooksCancelledError",
]
