"""Pre-commit quality gate built on an external scanner."""

from muxhooks.precommit.policy import (
    PreCommitConfig,
    PreCommitResult,
    evaluate_thresholds,
    get_staged_files,
    run_pre_commit,
)
from muxhooks.precommit.scanner import Scanner, UbsScanner, build_scan_args, parse_scan_output

__all__ = [
    "PreCommitConfig",
    "PreCommitResult",
    "Scanner",
    "UbsScanner",
    "build_scan_args",
    "evaluate_thresholds",
    "get_staged_files",
    "parse_scan_output",
    "run_pre_commit",
]
