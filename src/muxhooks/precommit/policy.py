"""Pre-commit policy: scan staged files and enforce severity thresholds."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from muxhooks.errors import PreCommitError, ScannerError
from muxhooks.precommit.scanner import Scanner, UbsScanner
from muxhooks.types.scanner import ScanOptions, ScanResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PreCommitConfig:
    """Thresholds and behaviour for the pre-commit check."""

    max_critical: int = 0
    max_warning: int = 0
    fail_on_warning: bool = True
    timeout: float = 60.0
    verbose: bool = False
    skip_empty: bool = True


@dataclass(slots=True)
class PreCommitResult:
    """Verdict of one pre-commit check."""

    passed: bool = True
    staged_files: list[str] = field(default_factory=list)
    scan_result: ScanResult | None = None
    block_reason: str = ""
    duration: float = 0.0
    scanner_available: bool = True

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "staged_files": list(self.staged_files),
            "scan_result": self.scan_result.to_dict() if self.scan_result else None,
            "block_reason": self.block_reason,
            "duration": self.duration,
            "scanner_available": self.scanner_available,
        }


async def get_staged_files(repo_path: str) -> list[str]:
    """Return paths added, copied, modified or renamed in the git index."""
    try:
        proc = await asyncio.create_subprocess_exec(
            "git", "-C", repo_path, "diff", "--name-only", "--cached", "--diff-filter=ACMR",
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise PreCommitError(f"getting staged files: {exc}") from exc
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise PreCommitError(
            f"getting staged files: {stderr.decode('utf-8', errors='replace').strip()}"
        )
    return [line for line in stdout.decode("utf-8", errors="replace").splitlines() if line.strip()]


def evaluate_thresholds(scan: ScanResult, config: PreCommitConfig) -> str:
    """Return a block reason if *scan* exceeds the thresholds, else ``""``."""
    totals = scan.totals
    if totals.critical > config.max_critical:
        return (
            f"critical issues exceeded threshold: {totals.critical} > {config.max_critical}"
        )
    if config.fail_on_warning and totals.warning > config.max_warning:
        return (
            f"warning issues exceeded threshold: {totals.warning} > {config.max_warning}"
        )
    return ""


async def run_pre_commit(
    repo_path: str,
    config: PreCommitConfig | None = None,
    *,
    scanner: Scanner | None = None,
) -> PreCommitResult:
    """Run the pre-commit check over the staged files of *repo_path*.

    Passes without scanning when nothing is staged (and ``skip_empty`` is
    set) or when the scanner is not installed. Raises PreCommitError when
    the scan itself fails or times out.
    """
    config = config or PreCommitConfig()
    scanner = scanner or UbsScanner()

    start = time.monotonic()
    available = scanner.is_available()
    result = PreCommitResult(passed=True, scanner_available=available)

    result.staged_files = await get_staged_files(repo_path)

    if not result.staged_files and config.skip_empty:
        logger.debug("No staged files, skipping scan")
        result.duration = 0.0
        return result

    if not available:
        logger.info("Scanner not installed, pre-commit check passes without scanning")
        result.duration = time.monotonic() - start
        return result

    options = ScanOptions(
        staged_only=True,
        fail_on_warning=config.fail_on_warning,
        verbose=config.verbose,
        timeout=config.timeout,
    )
    try:
        if config.timeout > 0:
            scan = await asyncio.wait_for(scanner.scan(repo_path, options), timeout=config.timeout)
        else:
            scan = await scanner.scan(repo_path, options)
    except TimeoutError as exc:
        raise PreCommitError(f"scan timed out after {config.timeout:g}s") from exc
    except ScannerError as exc:
        raise PreCommitError(f"running scan: {exc}") from exc

    result.scan_result = scan
    result.duration = time.monotonic() - start

    reason = evaluate_thresholds(scan, config)
    if reason:
        result.passed = False
        result.block_reason = reason
        logger.info("Pre-commit check blocked: %s", reason)
    return result
