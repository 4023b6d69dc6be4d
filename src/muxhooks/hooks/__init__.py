"""Command hook engine: configuration, execution and result aggregation."""

from muxhooks.hooks.config import (
    CommandHooksConfig,
    default_command_hooks_path,
    default_config_dir,
    default_main_config_path,
    load_all_command_hooks,
    load_command_hooks,
    load_command_hooks_from_main_config,
    load_command_hooks_from_toml,
    parse_command_hook,
)
from muxhooks.hooks.duration import format_duration, parse_duration
from muxhooks.hooks.executor import HookExecutor, build_environment, truncate_message
from muxhooks.hooks.results import ResultCounts, all_errors, any_failed, count_results
from muxhooks.hooks.scope import InvocationScope

__all__ = [
    "CommandHooksConfig",
    "HookExecutor",
    "InvocationScope",
    "ResultCounts",
    "all_errors",
    "any_failed",
    "build_environment",
    "count_results",
    "default_command_hooks_path",
    "default_config_dir",
    "default_main_config_path",
    "format_duration",
    "load_all_command_hooks",
    "load_command_hooks",
    "load_command_hooks_from_main_config",
    "load_command_hooks_from_toml",
    "parse_command_hook",
    "parse_duration",
    "truncate_message",
]
