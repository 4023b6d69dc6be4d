"""Command hook types: events, hook declarations, execution context and results."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from muxhooks.errors import HookExecutionError, HookValidationError

HOOK_DEFAULT_TIMEOUT = 30.0
HOOK_MAX_TIMEOUT = 600.0

_ENV_REF = re.compile(r"\$\{(\w+)\}|\$(\w+)")


class CommandEvent(Enum):
    """Lifecycle trigger points a command hook can bind to."""

    PRE_SPAWN = "pre-spawn"
    POST_SPAWN = "post-spawn"
    PRE_SEND = "pre-send"
    POST_SEND = "post-send"
    PRE_ADD = "pre-add"
    POST_ADD = "post-add"
    PRE_CREATE = "pre-create"
    POST_CREATE = "post-create"
    PRE_SHUTDOWN = "pre-shutdown"
    POST_SHUTDOWN = "post-shutdown"


def all_command_events() -> list[CommandEvent]:
    """Return every valid command event, in declaration order."""
    return list(CommandEvent)


def is_valid_command_event(event: str) -> bool:
    """Check if an event string names a command event."""
    return event in {e.value for e in CommandEvent}


class EnabledState(Enum):
    """Tri-state ``enabled`` flag: unset, explicitly on, explicitly off."""

    UNSET = "unset"
    ON = "on"
    OFF = "off"

    @classmethod
    def from_value(cls, value: bool | None) -> EnabledState:
        if value is None:
            return cls.UNSET
        return cls.ON if value else cls.OFF

    def resolve(self, default: bool = True) -> bool:
        if self is EnabledState.UNSET:
            return default
        return self is EnabledState.ON


@dataclass(frozen=True, slots=True)
class CommandHook:
    """A shell command bound to a command event.

    ``timeout`` is in seconds; zero or negative means "unset" and resolves
    to the 30 second default.
    """

    event: CommandEvent | str
    command: str
    timeout: float = 0.0
    enabled: EnabledState = EnabledState.UNSET
    workdir: str = ""
    description: str = ""
    name: str = ""
    continue_on_error: bool = False
    env: dict[str, str] = field(default_factory=dict)

    @property
    def event_name(self) -> str:
        return self.event.value if isinstance(self.event, CommandEvent) else str(self.event)

    @property
    def label(self) -> str:
        """Identifier used in logs and error messages."""
        return self.name or self.command

    def effective_timeout(self) -> float:
        """Return the declared timeout if strictly positive, else the default."""
        if self.timeout <= 0:
            return HOOK_DEFAULT_TIMEOUT
        return self.timeout

    def is_enabled(self) -> bool:
        return self.enabled.resolve(True)

    def validate(self) -> None:
        """Raise HookValidationError if the hook cannot be run."""
        if not self.command:
            raise HookValidationError("hook command cannot be empty")
        if not is_valid_command_event(self.event_name):
            valid = ", ".join(e.value for e in CommandEvent)
            raise HookValidationError(
                f"invalid hook event: {self.event_name!r} (valid: {valid})"
            )
        if not math.isfinite(self.timeout):
            raise HookValidationError(f"hook timeout must be finite, got {self.timeout!r}")
        if self.effective_timeout() > HOOK_MAX_TIMEOUT:
            raise HookValidationError(
                f"hook timeout exceeds maximum ({HOOK_MAX_TIMEOUT:g}s)"
            )

    def expand_workdir(self, session_name: str, project_dir: str) -> str:
        """Resolve the working directory for this hook.

        Expansion order: ``~/`` prefix, then ``${SESSION}`` / ``${PROJECT}``,
        then any remaining environment references. Unset variables expand
        to the empty string.
        """
        if not self.workdir:
            return project_dir

        workdir = self.workdir
        if workdir.startswith("~/"):
            workdir = str(Path.home() / workdir[2:])

        workdir = workdir.replace("${SESSION}", session_name)
        workdir = workdir.replace("${PROJECT}", project_dir)
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1) or m.group(2), ""), workdir)


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """Per-invocation data supplied to every hook run for one action."""

    session_name: str = ""
    project_dir: str = ""
    pane: str = ""
    message: str = ""
    additional_env: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of running one hook. ``exit_code`` is -1 when not applicable."""

    hook: CommandHook
    success: bool = False
    skipped: bool = False
    error: HookExecutionError | None = None
    exit_code: int = -1
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    timed_out: bool = False
