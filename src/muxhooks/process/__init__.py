"""Subprocess execution for command hooks."""

from muxhooks.process.runner import ProcessResult, ProcessRunner
from muxhooks.process.shell import ShellProcessRunner

__all__ = ["ProcessResult", "ProcessRunner", "ShellProcessRunner"]
