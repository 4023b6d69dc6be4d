"""Command hook configuration loading (hooks.toml and config.toml)."""

from __future__ import annotations

import logging
import math
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from muxhooks.errors import HookConfigError
from muxhooks.hooks.duration import parse_duration
from muxhooks.types.hooks import CommandEvent, CommandHook, EnabledState

logger = logging.getLogger(__name__)

HOOKS_KEY = "command_hooks"
APP_DIR_NAME = "muxhooks"


@dataclass(slots=True)
class CommandHooksConfig:
    """Ordered set of command hooks. Order is execution order."""

    hooks: list[CommandHook] = field(default_factory=list)

    @classmethod
    def empty(cls) -> CommandHooksConfig:
        return cls(hooks=[])

    def get_hooks_for_event(self, event: CommandEvent | str) -> list[CommandHook]:
        """Return enabled hooks bound to *event*, preserving order."""
        name = event.value if isinstance(event, CommandEvent) else event
        return [h for h in self.hooks if h.event_name == name and h.is_enabled()]

    def has_hooks_for_event(self, event: CommandEvent | str) -> bool:
        name = event.value if isinstance(event, CommandEvent) else event
        return any(h.event_name == name and h.is_enabled() for h in self.hooks)

    def validate(self) -> None:
        """Validate every hook; the first failure raises HookConfigError."""
        for i, hook in enumerate(self.hooks):
            try:
                hook.validate()
            except HookConfigError as exc:
                raise HookConfigError(f"{HOOKS_KEY}[{i}]: {exc}") from exc

    def __len__(self) -> int:
        return len(self.hooks)


# ---------------------------------------------------------------------------
# Default locations
# ---------------------------------------------------------------------------


def default_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/muxhooks`` or ``~/.config/muxhooks``."""
    if xdg := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def default_command_hooks_path() -> Path:
    return default_config_dir() / "hooks.toml"


def default_main_config_path() -> Path:
    return default_config_dir() / "config.toml"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse_timeout(value: Any, index: int) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise HookConfigError(f"{HOOKS_KEY}[{index}]: timeout must be a duration, got {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise HookConfigError(f"{HOOKS_KEY}[{index}]: timeout must be finite, got {value!r}")
        return float(value)
    if isinstance(value, str):
        try:
            return parse_duration(value)
        except ValueError as exc:
            raise HookConfigError(f"{HOOKS_KEY}[{index}]: {exc}") from exc
    raise HookConfigError(f"{HOOKS_KEY}[{index}]: timeout must be a duration, got {value!r}")


def _expect(raw: dict[str, Any], key: str, kind: type, index: int, default: Any) -> Any:
    value = raw.get(key, default)
    if not isinstance(value, kind):
        raise HookConfigError(
            f"{HOOKS_KEY}[{index}]: {key} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def parse_command_hook(raw: dict[str, Any], index: int = 0) -> CommandHook:
    """Build a CommandHook from one ``[[command_hooks]]`` table."""
    if not isinstance(raw, dict):
        raise HookConfigError(f"{HOOKS_KEY}[{index}]: expected a table")

    event_str = _expect(raw, "event", str, index, "")
    try:
        event: CommandEvent | str = CommandEvent(event_str)
    except ValueError:
        # Kept as text so validate() reports it with the list of valid events.
        event = event_str

    enabled = raw.get("enabled")
    if enabled is not None and not isinstance(enabled, bool):
        raise HookConfigError(f"{HOOKS_KEY}[{index}]: enabled must be bool")

    env = _expect(raw, "env", dict, index, {})
    for k, v in env.items():
        if not isinstance(v, str):
            raise HookConfigError(f"{HOOKS_KEY}[{index}]: env.{k} must be a string")

    timeout = _parse_timeout(raw.get("timeout"), index)
    if timeout < 0:
        logger.warning(
            "%s[%d]: negative timeout %r treated as unset", HOOKS_KEY, index, raw.get("timeout"),
        )

    return CommandHook(
        event=event,
        command=_expect(raw, "command", str, index, ""),
        timeout=timeout,
        enabled=EnabledState.from_value(enabled),
        workdir=_expect(raw, "workdir", str, index, ""),
        description=_expect(raw, "description", str, index, ""),
        name=_expect(raw, "name", str, index, ""),
        continue_on_error=_expect(raw, "continue_on_error", bool, index, False),
        env=dict(env),
    )


def _build_config(data: dict[str, Any]) -> CommandHooksConfig:
    raw_hooks = data.get(HOOKS_KEY, [])
    if not isinstance(raw_hooks, list):
        raise HookConfigError(f"{HOOKS_KEY} must be an array of tables")
    return CommandHooksConfig(
        hooks=[parse_command_hook(raw, i) for i, raw in enumerate(raw_hooks)],
    )


def load_command_hooks_from_toml(content: str) -> CommandHooksConfig:
    """Parse and validate command hooks from TOML text."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise HookConfigError(f"parsing hooks TOML: {exc}") from exc

    cfg = _build_config(data)
    try:
        cfg.validate()
    except HookConfigError as exc:
        raise HookConfigError(f"invalid hooks config: {exc}") from exc
    return cfg


# ---------------------------------------------------------------------------
# File sources
# ---------------------------------------------------------------------------


def load_command_hooks(path: str | Path | None = None) -> CommandHooksConfig:
    """Load the dedicated hooks file.

    A missing file yields an empty config; any other failure raises
    HookConfigError and no hooks from the file are returned.
    """
    path = Path(path) if path else default_command_hooks_path()
    if not path.exists():
        logger.debug("No hooks file at %s", path)
        return CommandHooksConfig.empty()

    try:
        content = path.read_text()
    except OSError as exc:
        raise HookConfigError(f"reading hooks config {path}: {exc}") from exc

    cfg = load_command_hooks_from_toml(content)
    logger.debug("Loaded %d command hooks from %s", len(cfg), path)
    return cfg


def load_command_hooks_from_main_config(path: str | Path | None = None) -> CommandHooksConfig:
    """Load hooks declared inline in the main config file.

    A missing or unparseable file, or one without a ``command_hooks``
    section, yields an empty config. Hooks that are present must validate.
    """
    path = Path(path) if path else default_main_config_path()
    if not path.exists():
        return CommandHooksConfig.empty()

    try:
        data = tomllib.loads(path.read_text())
    except OSError as exc:
        raise HookConfigError(f"reading main config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        logger.debug("Main config %s is not valid TOML, ignoring hooks: %s", path, exc)
        return CommandHooksConfig.empty()

    if not data.get(HOOKS_KEY):
        return CommandHooksConfig.empty()

    try:
        cfg = _build_config(data)
        cfg.validate()
    except HookConfigError as exc:
        raise HookConfigError(f"invalid hooks in main config: {exc}") from exc

    logger.debug("Loaded %d command hooks from %s", len(cfg), path)
    return cfg


def load_all_command_hooks(
    hooks_path: str | Path | None = None,
    main_config_path: str | Path | None = None,
) -> CommandHooksConfig:
    """Load hooks.toml then config.toml hooks, concatenated in that order.

    Errors from the dedicated hooks file propagate; errors from the main
    config are logged and its hooks are dropped.
    """
    dedicated = load_command_hooks(hooks_path)

    try:
        inline = load_command_hooks_from_main_config(main_config_path)
    except HookConfigError as exc:
        logger.warning("Ignoring command hooks from main config: %s", exc)
        return dedicated

    return CommandHooksConfig(hooks=[*dedicated.hooks, *inline.hooks])
