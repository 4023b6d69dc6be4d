"""Test fixtures including MockProcessRunner and MockScanner for deterministic testing."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from muxhooks.process.runner import ProcessResult, ProcessRunner
from muxhooks.types.scanner import ScanOptions, ScanResult


class MockProcessRunner(ProcessRunner):
    """A process runner that returns scripted results instead of spawning.

    Usage:
        runner = MockProcessRunner([
            ProcessResult(stdout="ok", exit_code=0),
            ProcessResult(stderr="boom", exit_code=2),
        ])
    """

    def __init__(self, results: list[ProcessResult] | None = None) -> None:
        self._results = list(results or [])
        self._call_index = 0
        self._calls: list[dict[str, Any]] = []

    async def run(
        self,
        command: str,
        *,
        env: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout_sec: float = 30.0,
    ) -> ProcessResult:
        self._calls.append({
            "command": command, "env": env, "cwd": cwd, "timeout_sec": timeout_sec,
        })
        if self._call_index < len(self._results):
            result = self._results[self._call_index]
            self._call_index += 1
            return result
        return ProcessResult(stdout="ok", exit_code=0)

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self._calls

    @property
    def commands(self) -> list[str]:
        return [c["command"] for c in self._calls]


class MockScanner:
    """A scanner double with a fixed availability and scripted result."""

    def __init__(
        self,
        result: ScanResult | None = None,
        *,
        available: bool = True,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._result = result or ScanResult()
        self._available = available
        self._error = error
        self._delay = delay
        self.calls: list[tuple[str, ScanOptions]] = []

    def is_available(self) -> bool:
        return self._available

    async def scan(self, path: str, options: ScanOptions) -> ScanResult:
        self.calls.append((path, options))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._result


@pytest.fixture
def mock_runner() -> MockProcessRunner:
    return MockProcessRunner()


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temp dir and return the muxhooks config dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    app_dir = tmp_path / "muxhooks"
    app_dir.mkdir()
    return app_dir
