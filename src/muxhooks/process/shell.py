"""ShellProcessRunner: asyncio subprocess execution through ``sh -c``."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
import time

from muxhooks.process.runner import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


# Upper bound on reading what is left in the pipes once the group is killed.
KILL_DRAIN_TIMEOUT = 1.0


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def _drain(stream: asyncio.StreamReader | None, buf: bytearray) -> None:
    """Append everything read from *stream* to *buf* until EOF."""
    if stream is None:
        return
    while chunk := await stream.read(65536):
        buf.extend(chunk)


async def _drain_after_kill(
    proc: asyncio.subprocess.Process, out_buf: bytearray, err_buf: bytearray,
) -> None:
    # A descendant outside the killed group may keep the pipes open.
    try:
        await asyncio.wait_for(
            asyncio.gather(_drain(proc.stdout, out_buf), _drain(proc.stderr, err_buf)),
            timeout=KILL_DRAIN_TIMEOUT,
        )
    except TimeoutError:
        logger.debug("Pipes still open after kill, keeping partial output")


class ShellProcessRunner(ProcessRunner):
    """Runs commands via the host shell with separate stdout/stderr pipes.

    Each command runs in its own session so a timeout can kill the whole
    process group. Kills are best-effort: a descendant that moved to another
    group may briefly outlive the shell.
    """

    async def run(
        self,
        command: str,
        *,
        env: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout_sec: float = 30.0,
    ) -> ProcessResult:
        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd or None,
                env=env,
                start_new_session=sys.platform != "win32",
            )
        except OSError as exc:
            return ProcessResult(
                exit_code=-1,
                duration=time.monotonic() - start,
                error=f"failed to start process: {exc}",
            )

        out_buf = bytearray()
        err_buf = bytearray()
        try:
            await asyncio.wait_for(
                asyncio.gather(
                    _drain(proc.stdout, out_buf),
                    _drain(proc.stderr, err_buf),
                    proc.wait(),
                ),
                timeout=max(timeout_sec, 0.0),
            )
        except TimeoutError:
            await self._kill(proc)
            await _drain_after_kill(proc, out_buf, err_buf)
            logger.debug("Command timed out after %.2fs: %s", timeout_sec, command)
            return ProcessResult(
                stdout=_decode(bytes(out_buf)),
                stderr=_decode(bytes(err_buf)),
                exit_code=-1,
                timed_out=True,
                duration=time.monotonic() - start,
                error=f"timed out after {timeout_sec:g}s",
            )
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        exit_code = proc.returncode if proc.returncode is not None else -1
        return ProcessResult(
            stdout=_decode(bytes(out_buf)),
            stderr=_decode(bytes(err_buf)),
            exit_code=exit_code,
            duration=time.monotonic() - start,
        )

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        """Kill *proc* and its process group, then reap it."""
        try:
            if sys.platform != "win32":
                os.killpg(proc.pid, signal.SIGKILL)
            else:
                proc.kill()
        except (ProcessLookupError, PermissionError):
            pass
        await proc.wait()
