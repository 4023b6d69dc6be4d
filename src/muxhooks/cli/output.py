"""Rich-powered terminal output for hook and pre-commit results."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from muxhooks.hooks.duration import format_duration
from muxhooks.hooks.results import count_results
from muxhooks.precommit.policy import PreCommitResult
from muxhooks.types.hooks import CommandHook, ExecutionResult
from muxhooks.types.scanner import Severity

STYLE_OK = "bold #34d399"
STYLE_FAIL = "bold #f87171"
STYLE_WARN = "bold #fbbf24"
STYLE_DIM = "dim #7c7c8a"
STYLE_LABEL = "bold #94a3b8"

MAX_FINDINGS_SHOWN = 5


def print_hooks_table(hooks: list[CommandHook], console: Console | None = None) -> None:
    """Print configured hooks in merge order."""
    console = console or Console()
    if not hooks:
        console.print("No command hooks configured.", style=STYLE_DIM)
        return

    table = Table(show_header=True, header_style=STYLE_LABEL)
    table.add_column("#", justify="right")
    table.add_column("Event")
    table.add_column("Name")
    table.add_column("Command")
    table.add_column("Timeout")
    table.add_column("Enabled")
    table.add_column("On error")

    for i, hook in enumerate(hooks):
        table.add_row(
            str(i),
            hook.event_name,
            hook.name or "-",
            hook.command,
            format_duration(hook.effective_timeout()),
            "yes" if hook.is_enabled() else "no",
            "continue" if hook.continue_on_error else "stop",
        )
    console.print(table)


def print_execution_results(
    results: list[ExecutionResult],
    *,
    halted_reason: str = "",
    verbose: bool = False,
    console: Console | None = None,
) -> None:
    """Print one line per attempted hook plus a summary."""
    console = console or Console()

    for r in results:
        line = Text("  ")
        if r.skipped:
            line.append("- ", style=STYLE_DIM)
        elif r.success:
            line.append("✓ ", style=STYLE_OK)
        else:
            line.append("✗ ", style=STYLE_FAIL)
        line.append(r.hook.label)
        line.append(f"  {format_duration(round(r.duration, 3))}", style=STYLE_DIM)
        if r.timed_out:
            line.append("  timed out", style=STYLE_WARN)
        elif not r.success and not r.skipped:
            line.append(f"  exit {r.exit_code}", style=STYLE_FAIL)
        console.print(line)

        if verbose or not r.success:
            for stream in (r.stdout.strip(), r.stderr.strip()):
                if stream:
                    console.print(Text(stream, style=STYLE_DIM), soft_wrap=True)

    counts = count_results(results)
    console.print(
        f"\n{counts.success} succeeded, {counts.failed} failed, {counts.skipped} skipped",
        style=STYLE_LABEL,
    )
    if halted_reason:
        console.print(f"Stopped: {halted_reason}", style=STYLE_FAIL)


def print_pre_commit_result(result: PreCommitResult, console: Console | None = None) -> None:
    """Print a human-readable pre-commit report."""
    console = console or Console()

    console.print()
    console.print("Pre-commit Check", style="bold")
    console.print("═" * 40, style=STYLE_DIM)
    console.print(f"  Staged files: {len(result.staged_files)}")
    console.print(f"  Duration:     {format_duration(round(result.duration, 3))}\n")

    if not result.scanner_available:
        console.print("  ⚠ Scanner not installed - skipping scan", style=STYLE_WARN)
        return

    if not result.staged_files:
        console.print("  • No staged files to check\n", style=STYLE_DIM)
        return

    scan = result.scan_result
    if scan is not None:
        totals = scan.totals
        console.print(
            Text.assemble(
                ("  Critical: ", STYLE_LABEL),
                (str(totals.critical), STYLE_FAIL if totals.critical else ""),
            )
        )
        console.print(
            Text.assemble(
                ("  Warning:  ", STYLE_LABEL),
                (str(totals.warning), STYLE_WARN if totals.warning else ""),
            )
        )
        console.print(Text.assemble(("  Info:     ", STYLE_LABEL), str(totals.info)))

        if scan.findings:
            console.print("\nFindings:", style="bold")
            for f in scan.findings[:MAX_FINDINGS_SHOWN]:
                style = {
                    Severity.CRITICAL: STYLE_FAIL,
                    Severity.WARNING: STYLE_WARN,
                }.get(f.severity, "")
                console.print(
                    Text.assemble(
                        ("  ", ""),
                        (f.severity.value, style),
                        f" {f.file}:{f.line} - {f.message}",
                    )
                )
            if len(scan.findings) > MAX_FINDINGS_SHOWN:
                console.print(
                    f"  ... and {len(scan.findings) - MAX_FINDINGS_SHOWN} more", style=STYLE_DIM,
                )

    console.print("─" * 40, style=STYLE_DIM)
    if result.passed:
        console.print("✓ Pre-commit check passed\n", style=STYLE_OK)
    else:
        console.print("✗ Pre-commit check failed", style=STYLE_FAIL)
        console.print(f"  {result.block_reason}\n", style=STYLE_FAIL)
        console.print("  Fix the issues above and try again.")
