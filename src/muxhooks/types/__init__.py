"""Type definitions for muxhooks."""

from muxhooks.types.hooks import (
    HOOK_DEFAULT_TIMEOUT,
    HOOK_MAX_TIMEOUT,
    CommandEvent,
    CommandHook,
    EnabledState,
    ExecutionContext,
    ExecutionResult,
    all_command_events,
    is_valid_command_event,
)
from muxhooks.types.scanner import Finding, ScanOptions, ScanResult, ScanTotals, Severity

__all__ = [
    "HOOK_DEFAULT_TIMEOUT",
    "HOOK_MAX_TIMEOUT",
    "CommandEvent",
    "CommandHook",
    "EnabledState",
    "ExecutionContext",
    "ExecutionResult",
    "Finding",
    "ScanOptions",
    "ScanResult",
    "ScanTotals",
    "Severity",
    "all_command_events",
    "is_valid_command_event",
]
