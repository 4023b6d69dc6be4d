"""ProcessRunner ABC: the capability hooks are spawned through."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(slots=True)
class ProcessResult:
    """Captured outcome of one shell command."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = -1
    timed_out: bool = False
    duration: float = 0.0
    error: str | None = None


class ProcessRunner(ABC):
    """Runs a shell command with a bounded lifetime.

    Implementations must capture stdout and stderr separately, kill the
    process when *timeout_sec* expires, and reap it on every exit path.
    """

    @abstractmethod
    async def run(
        self,
        command: str,
        *,
        env: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout_sec: float = 30.0,
    ) -> ProcessResult:
        """Run *command* through the host shell."""
        ...
