"""Scanner protocol and the ``ubs`` command-line adapter."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
import time
from typing import Any, Protocol, runtime_checkable

from muxhooks.errors import ScannerError, ScannerNotInstalledError
from muxhooks.types.scanner import Finding, ScanOptions, ScanResult, ScanTotals

logger = logging.getLogger(__name__)

UBS_BINARY = "ubs"


@runtime_checkable
class Scanner(Protocol):
    """External static-analysis capability used by the pre-commit policy."""

    def is_available(self) -> bool: ...

    async def scan(self, path: str, options: ScanOptions) -> ScanResult: ...


def build_scan_args(path: str, options: ScanOptions) -> list[str]:
    """Translate ScanOptions into ``ubs`` command-line arguments."""
    args = ["--format=json"]
    if options.languages:
        args.append("--only=" + ",".join(options.languages))
    if options.exclude_languages:
        args.append("--exclude=" + ",".join(options.exclude_languages))
    if options.ci:
        args.append("--ci")
    if options.fail_on_warning:
        args.append("--fail-on-warning")
    if options.verbose:
        args.append("-v")
    if options.staged_only:
        args.append("--staged")
    if options.diff_only:
        args.append("--diff")
    args.append(path)
    return args


def parse_scan_output(data: str, project: str = "") -> ScanResult:
    """Parse ``ubs --format=json`` output. Empty output is an empty result."""
    if not data.strip():
        return ScanResult(project=project)

    raw: Any = json.loads(data)
    if not isinstance(raw, dict):
        raise ValueError("scan output is not a JSON object")

    totals = raw.get("totals") or {}
    return ScanResult(
        project=str(raw.get("project", project)),
        totals=ScanTotals(
            critical=int(totals.get("critical", 0)),
            warning=int(totals.get("warning", 0)),
            info=int(totals.get("info", 0)),
            files=int(totals.get("files", 0)),
        ),
        findings=[Finding.from_dict(f) for f in raw.get("findings") or [] if isinstance(f, dict)],
        exit_code=int(raw.get("exit_code", 0)),
    )


class UbsScanner:
    """Runs the ``ubs`` executable and parses its JSON report."""

    def __init__(self, binary: str = UBS_BINARY) -> None:
        self._binary = binary

    def is_available(self) -> bool:
        return shutil.which(self._binary) is not None

    async def scan(self, path: str, options: ScanOptions) -> ScanResult:
        binary_path = shutil.which(self._binary)
        if binary_path is None:
            raise ScannerNotInstalledError(f"{self._binary} is not installed")

        args = build_scan_args(path, options)
        logger.debug("Running %s %s", binary_path, " ".join(args))

        start = time.monotonic()
        proc = await asyncio.create_subprocess_exec(
            binary_path, *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout_bytes, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
            raise
        duration = time.monotonic() - start

        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        try:
            result = parse_scan_output(stdout, project=path)
        except ValueError as exc:
            if proc.returncode == 0:
                return ScanResult(project=path, duration=duration)
            raise ScannerError(f"parsing scan output: {exc} (stderr: {stderr.strip()})") from exc

        result.duration = duration
        result.exit_code = proc.returncode if proc.returncode is not None else -1
        return result
