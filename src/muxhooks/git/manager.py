"""GitHookManager: install and inspect muxhooks-managed git hooks."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from muxhooks.errors import (
    ExecutableNotFoundError,
    GitHookError,
    GitHookExistsError,
    GitHookNotInstalledError,
    NotGitRepoError,
)

logger = logging.getLogger(__name__)

MANAGED_MARKER = "MUXHOOKS_MANAGED_HOOK"
CLI_NAME = "muxhooks"


class GitHookType(Enum):
    """Git hooks muxhooks knows about."""

    PRE_COMMIT = "pre-commit"
    PRE_PUSH = "pre-push"
    COMMIT_MSG = "commit-msg"
    POST_COMMIT = "post-commit"


@dataclass(frozen=True, slots=True)
class GitHookInfo:
    """Installation state of one git hook."""

    type: GitHookType
    path: str
    installed: bool = False
    managed: bool = False
    has_backup: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


def find_git_root(path: str | Path) -> Path:
    """Return the top-level directory of the repository containing *path*."""
    try:
        proc = subprocess.run(
            ["git", "-C", str(path), "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise NotGitRepoError(str(path)) from exc
    if proc.returncode != 0:
        raise NotGitRepoError(str(path))
    return Path(proc.stdout.strip())


def is_managed_hook(content: str) -> bool:
    return MANAGED_MARKER in content


def generate_pre_commit_script(cli_path: str, repo_root: str) -> str:
    """Render the pre-commit script that calls ``muxhooks git run pre-commit``."""
    safe_root = repo_root.replace("\n", " ").replace("\r", " ")
    return f"""#!/bin/sh
# {MANAGED_MARKER} - Do not edit manually
# Installed by: {CLI_NAME} git install pre-commit
# Repository: {safe_root}

{shlex.quote(cli_path)} git run pre-commit "$@"
MUX_EXIT=$?

# Chain to the hook that was here before, if any
BACKUP_HOOK="$(dirname "$0")/pre-commit.backup"
if [ -x "$BACKUP_HOOK" ]; then
    "$BACKUP_HOOK" "$@"
    BACKUP_EXIT=$?
    if [ $MUX_EXIT -ne 0 ] || [ $BACKUP_EXIT -ne 0 ]; then
        exit 1
    fi
elif [ $MUX_EXIT -ne 0 ]; then
    exit $MUX_EXIT
fi

exit 0
"""


class GitHookManager:
    """Installs, removes and reports on hooks in ``.git/hooks``."""

    def __init__(self, repo_path: str | Path | None = None) -> None:
        self._repo_root = find_git_root(repo_path or Path.cwd())
        self._hooks_dir = self._repo_root / ".git" / "hooks"

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    @property
    def hooks_dir(self) -> Path:
        return self._hooks_dir

    def _paths(self, hook_type: GitHookType) -> tuple[Path, Path]:
        hook_path = self._hooks_dir / hook_type.value
        return hook_path, hook_path.with_name(hook_path.name + ".backup")

    def generate_script(self, hook_type: GitHookType) -> str:
        cli_path = shutil.which(CLI_NAME)
        if cli_path is None:
            raise ExecutableNotFoundError(CLI_NAME)
        if hook_type is GitHookType.PRE_COMMIT:
            return generate_pre_commit_script(cli_path, str(self._repo_root))
        raise GitHookError(f"hook type {hook_type.value} not yet implemented")

    def install(self, hook_type: GitHookType, *, force: bool = False) -> Path:
        """Install *hook_type*, backing up a foreign hook when *force* is set."""
        hook_path, backup_path = self._paths(hook_type)

        if hook_path.exists():
            if is_managed_hook(hook_path.read_text(errors="replace")):
                logger.debug("Replacing managed hook at %s", hook_path)
            elif not force:
                raise GitHookExistsError(hook_type.value)
            else:
                logger.info("Backing up existing hook to %s", backup_path)
                hook_path.rename(backup_path)

        script = self.generate_script(hook_type)
        self._hooks_dir.mkdir(parents=True, exist_ok=True)
        hook_path.write_text(script)
        os.chmod(hook_path, 0o755)
        return hook_path

    def uninstall(self, hook_type: GitHookType, *, restore: bool = True) -> bool:
        """Remove a managed hook. Returns True if a backup was restored."""
        hook_path, backup_path = self._paths(hook_type)

        if not hook_path.exists():
            raise GitHookNotInstalledError(hook_type.value)
        if not is_managed_hook(hook_path.read_text(errors="replace")):
            raise GitHookError(f"{hook_type.value} hook exists but is not managed by {CLI_NAME}")

        hook_path.unlink()

        if restore and backup_path.exists():
            backup_path.rename(hook_path)
            return True
        return False

    def status(self, hook_type: GitHookType) -> GitHookInfo:
        hook_path, backup_path = self._paths(hook_type)
        if not hook_path.exists():
            return GitHookInfo(type=hook_type, path=str(hook_path))
        return GitHookInfo(
            type=hook_type,
            path=str(hook_path),
            installed=True,
            managed=is_managed_hook(hook_path.read_text(errors="replace")),
            has_backup=backup_path.exists(),
        )

    def list_all(self) -> list[GitHookInfo]:
        return [self.status(t) for t in GitHookType]
