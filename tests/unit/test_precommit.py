"""Tests for the pre-commit policy and the ubs scanner adapter."""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from muxhooks.errors import PreCommitError, ScannerError, ScannerNotInstalledError
from muxhooks.precommit import policy
from muxhooks.precommit.policy import (
    PreCommitConfig,
    PreCommitResult,
    evaluate_thresholds,
    get_staged_files,
    run_pre_commit,
)
from muxhooks.precommit.scanner import Scanner, UbsScanner, build_scan_args, parse_scan_output
from muxhooks.types.scanner import ScanOptions, ScanResult, ScanTotals, Severity
from tests.conftest import MockScanner

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def staged(monkeypatch: pytest.MonkeyPatch):
    """Replace get_staged_files with a fixed list."""
    files: list[str] = ["app.py"]

    async def fake(repo_path: str) -> list[str]:
        return list(files)

    monkeypatch.setattr(policy, "get_staged_files", fake)
    return files


def _scan(critical: int = 0, warning: int = 0, info: int = 0) -> ScanResult:
    return ScanResult(totals=ScanTotals(critical=critical, warning=warning, info=info))


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


class TestEvaluateThresholds:
    def test_clean_scan(self) -> None:
        assert evaluate_thresholds(_scan(), PreCommitConfig()) == ""

    def test_critical_over_threshold(self) -> None:
        reason = evaluate_thresholds(_scan(critical=2), PreCommitConfig(max_critical=1))
        assert reason == "critical issues exceeded threshold: 2 > 1"

    def test_critical_at_threshold(self) -> None:
        assert evaluate_thresholds(_scan(critical=1), PreCommitConfig(max_critical=1)) == ""

    def test_warning_blocks_when_enabled(self) -> None:
        reason = evaluate_thresholds(_scan(warning=3), PreCommitConfig(max_warning=2))
        assert reason == "warning issues exceeded threshold: 3 > 2"

    def test_warning_ignored_when_disabled(self) -> None:
        cfg = PreCommitConfig(fail_on_warning=False)
        assert evaluate_thresholds(_scan(warning=50), cfg) == ""

    def test_critical_checked_first(self) -> None:
        reason = evaluate_thresholds(_scan(critical=1, warning=1), PreCommitConfig())
        assert reason.startswith("critical")

    def test_info_never_blocks(self) -> None:
        assert evaluate_thresholds(_scan(info=99), PreCommitConfig()) == ""


# ---------------------------------------------------------------------------
# run_pre_commit
# ---------------------------------------------------------------------------


class TestRunPreCommit:
    @pytest.mark.asyncio
    async def test_clean_scan_passes(self, staged: list[str]) -> None:
        scanner = MockScanner(_scan(info=2))
        result = await run_pre_commit("/repo", scanner=scanner)
        assert result.passed
        assert result.exit_code == 0
        assert result.staged_files == ["app.py"]
        assert result.scan_result is not None
        path, options = scanner.calls[0]
        assert path == "/repo"
        assert options.staged_only
        assert options.fail_on_warning

    @pytest.mark.asyncio
    async def test_blocks_on_critical(self, staged: list[str]) -> None:
        result = await run_pre_commit("/repo", scanner=MockScanner(_scan(critical=1)))
        assert not result.passed
        assert result.exit_code == 1
        assert "critical" in result.block_reason

    @pytest.mark.asyncio
    async def test_nothing_staged_skips_scan(self, staged: list[str]) -> None:
        staged.clear()
        scanner = MockScanner(_scan(critical=5))
        result = await run_pre_commit("/repo", scanner=scanner)
        assert result.passed
        assert result.duration == 0.0
        assert scanner.calls == []

    @pytest.mark.asyncio
    async def test_nothing_staged_scans_when_not_skipping(self, staged: list[str]) -> None:
        staged.clear()
        scanner = MockScanner(_scan())
        await run_pre_commit("/repo", PreCommitConfig(skip_empty=False), scanner=scanner)
        assert len(scanner.calls) == 1

    @pytest.mark.asyncio
    async def test_missing_scanner_passes(self, staged: list[str]) -> None:
        scanner = MockScanner(_scan(critical=5), available=False)
        result = await run_pre_commit("/repo", scanner=scanner)
        assert result.passed
        assert not result.scanner_available
        assert result.scan_result is None
        assert scanner.calls == []

    @pytest.mark.asyncio
    async def test_scan_timeout(self, staged: list[str]) -> None:
        scanner = MockScanner(_scan(), delay=5.0)
        with pytest.raises(PreCommitError, match="timed out"):
            await run_pre_commit("/repo", PreCommitConfig(timeout=0.05), scanner=scanner)

    @pytest.mark.asyncio
    async def test_scanner_error_wrapped(self, staged: list[str]) -> None:
        scanner = MockScanner(error=ScannerError("bad json"))
        with pytest.raises(PreCommitError, match="running scan: bad json"):
            await run_pre_commit("/repo", scanner=scanner)

    @pytest.mark.asyncio
    async def test_staged_files_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def broken(repo_path: str) -> list[str]:
            raise PreCommitError("getting staged files: not a git repository")

        monkeypatch.setattr(policy, "get_staged_files", broken)
        with pytest.raises(PreCommitError, match="staged"):
            await run_pre_commit("/repo", scanner=MockScanner())

    def test_mock_scanner_satisfies_protocol(self) -> None:
        assert isinstance(MockScanner(), Scanner)
        assert isinstance(UbsScanner(), Scanner)


class TestPreCommitResult:
    def test_to_dict(self) -> None:
        result = PreCommitResult(passed=False, staged_files=["a"], block_reason="r")
        data = result.to_dict()
        assert data["passed"] is False
        assert data["block_reason"] == "r"
        assert data["scan_result"] is None
        json.dumps(data)


class TestGetStagedFilesWithoutGit:
    @pytest.mark.asyncio
    async def test_git_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATH", str(tmp_path))
        with pytest.raises(PreCommitError, match="getting staged files"):
            await get_staged_files(str(tmp_path))


@requires_git
class TestGetStagedFiles:
    def _git(self, repo: Path, *args: str) -> None:
        subprocess.run(["git", "-C", str(repo), *args], check=True, capture_output=True)

    @pytest.mark.asyncio
    async def test_lists_staged(self, tmp_path: Path) -> None:
        self._git(tmp_path, "init", "-q")
        (tmp_path / "a.py").write_text("x = 1\n")
        (tmp_path / "b.py").write_text("y = 2\n")
        self._git(tmp_path, "add", "a.py")
        assert await get_staged_files(str(tmp_path)) == ["a.py"]

    @pytest.mark.asyncio
    async def test_not_a_repo(self, tmp_path: Path) -> None:
        with pytest.raises(PreCommitError):
            await get_staged_files(str(tmp_path / "missing"))


# ---------------------------------------------------------------------------
# ubs adapter
# ---------------------------------------------------------------------------


class TestBuildScanArgs:
    def test_defaults(self) -> None:
        assert build_scan_args("/r", ScanOptions()) == ["--format=json", "/r"]

    def test_all_options(self) -> None:
        options = ScanOptions(
            languages=("py", "go"),
            exclude_languages=("js",),
            ci=True,
            fail_on_warning=True,
            verbose=True,
            staged_only=True,
            diff_only=True,
        )
        assert build_scan_args("/r", options) == [
            "--format=json", "--only=py,go", "--exclude=js", "--ci",
            "--fail-on-warning", "-v", "--staged", "--diff", "/r",
        ]


class TestParseScanOutput:
    def test_empty(self) -> None:
        result = parse_scan_output("  ", project="/r")
        assert result.project == "/r"
        assert result.total_issues == 0

    def test_report(self) -> None:
        data = json.dumps({
            "project": "demo",
            "totals": {"critical": 1, "warning": 2, "info": 0, "files": 3},
            "findings": [
                {"file": "a.py", "line": 4, "severity": "critical", "message": "eval"},
                {"file": "b.py", "severity": "warning"},
            ],
        })
        result = parse_scan_output(data)
        assert result.project == "demo"
        assert result.totals.files == 3
        assert len(result.filter_by_severity(Severity.CRITICAL)) == 1
        assert not result.is_healthy

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError):
            parse_scan_output("{not json")

    def test_non_object(self) -> None:
        with pytest.raises(ValueError):
            parse_scan_output("[1, 2]")


class TestUbsScanner:
    def test_unavailable(self) -> None:
        assert not UbsScanner(binary="definitely-not-a-real-scanner-xyz").is_available()

    @pytest.mark.asyncio
    async def test_scan_raises_when_missing(self) -> None:
        scanner = UbsScanner(binary="definitely-not-a-real-scanner-xyz")
        with pytest.raises(ScannerNotInstalledError):
            await scanner.scan("/r", ScanOptions())

    @pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX shell")
    @pytest.mark.asyncio
    async def test_scan_runs_binary(self, tmp_path: Path) -> None:
        report = json.dumps({"totals": {"warning": 1}, "findings": []})
        script = tmp_path / "fake-ubs"
        script.write_text(f"#!/bin/sh\necho '{report}'\n")
        script.chmod(0o755)

        result = await UbsScanner(binary=str(script)).scan(str(tmp_path), ScanOptions())

        assert result.totals.warning == 1
        assert result.exit_code == 0
        assert result.duration >= 0

    @pytest.mark.skipif(shutil.which("sh") is None, reason="needs a POSIX shell")
    @pytest.mark.asyncio
    async def test_scan_bad_output_nonzero_exit(self, tmp_path: Path) -> None:
        script = tmp_path / "fake-ubs"
        script.write_text("#!/bin/sh\necho garbage\necho oops >&2\nexit 2\n")
        script.chmod(0o755)

        with pytest.raises(ScannerError, match="oops"):
            await UbsScanner(binary=str(script)).scan(str(tmp_path), ScanOptions())
