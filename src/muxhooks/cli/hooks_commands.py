"""CLI subcommands for command hooks (list, validate, run)."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from muxhooks.types.hooks import CommandEvent

EVENT_CHOICES = [e.value for e in CommandEvent]


def _parse_env_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--env")
        env[key] = value
    return env


def _load_config(hooks_file: str | None, main_config: str | None):
    from muxhooks.errors import HookConfigError
    from muxhooks.hooks.config import load_all_command_hooks

    try:
        return load_all_command_hooks(hooks_file, main_config)
    except HookConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


@click.group()
@click.option("--hooks-file", default=None, type=click.Path(dir_okay=False), help="hooks.toml path")
@click.option("--main-config", default=None, type=click.Path(dir_okay=False), help="config.toml path")
@click.pass_context
def hooks_cmd(ctx: click.Context, hooks_file: str | None, main_config: str | None) -> None:
    """Manage command hooks bound to session lifecycle events."""
    ctx.ensure_object(dict)
    ctx.obj["hooks_file"] = hooks_file
    ctx.obj["main_config"] = main_config


@hooks_cmd.command("list")
@click.option("--event", "-e", type=click.Choice(EVENT_CHOICES), default=None, help="Filter by event")
@click.option("--json", "as_json", is_flag=True, help="JSON output")
@click.pass_context
def hooks_list(ctx: click.Context, event: str | None, as_json: bool) -> None:
    """List configured command hooks in execution order."""
    from muxhooks.cli.output import print_hooks_table

    config = _load_config(ctx.obj["hooks_file"], ctx.obj["main_config"])
    hooks = config.get_hooks_for_event(event) if event else list(config.hooks)

    if as_json:
        click.echo(json.dumps([
            {
                "event": h.event_name,
                "name": h.name,
                "command": h.command,
                "timeout": h.effective_timeout(),
                "enabled": h.is_enabled(),
                "workdir": h.workdir,
                "continue_on_error": h.continue_on_error,
                "description": h.description,
            }
            for h in hooks
        ], indent=2))
        return

    print_hooks_table(hooks)


@hooks_cmd.command("validate")
@click.option("--file", "file_path", default=None, type=click.Path(dir_okay=False), help="File to check")
@click.pass_context
def hooks_validate(ctx: click.Context, file_path: str | None) -> None:
    """Validate hook declarations without running them."""
    from muxhooks.errors import HookConfigError
    from muxhooks.hooks.config import load_command_hooks_from_toml

    if file_path:
        path = Path(file_path)
        if not path.exists():
            click.echo(f"Error: {path} does not exist", err=True)
            raise SystemExit(1)
        try:
            config = load_command_hooks_from_toml(path.read_text())
        except HookConfigError as exc:
            click.echo(f"Invalid: {exc}", err=True)
            raise SystemExit(1) from exc
        click.echo(f"{path}: {len(config)} hook(s) OK")
        return

    config = _load_config(ctx.obj["hooks_file"], ctx.obj["main_config"])
    click.echo(f"{len(config)} hook(s) OK")


@hooks_cmd.command("run")
@click.argument("event", type=click.Choice(EVENT_CHOICES))
@click.option("--session", "-s", default="", help="Session name")
@click.option("--project-dir", default=None, help="Project directory (default: cwd)")
@click.option("--pane", default="", help="Pane identifier")
@click.option("--message", default="", help="Message text (send events)")
@click.option("--env", "env_pairs", multiple=True, help="Extra KEY=VALUE environment")
@click.option("--timeout", type=float, default=None, help="Overall deadline in seconds")
@click.option("--json", "as_json", is_flag=True, help="JSON output")
@click.option("--verbose", "-v", is_flag=True, help="Show hook output")
@click.pass_context
def hooks_run(
    ctx: click.Context,
    event: str,
    session: str,
    project_dir: str | None,
    pane: str,
    message: str,
    env_pairs: tuple[str, ...],
    timeout: float | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """Run the hooks bound to EVENT, as the session commands would."""
    from muxhooks.cli.output import print_execution_results
    from muxhooks.errors import HookSequenceHalted
    from muxhooks.hooks.executor import HookExecutor
    from muxhooks.hooks.results import any_failed
    from muxhooks.hooks.scope import InvocationScope
    from muxhooks.types.hooks import ExecutionContext

    executor = HookExecutor(_load_config(ctx.obj["hooks_file"], ctx.obj["main_config"]))
    exec_ctx = ExecutionContext(
        session_name=session,
        project_dir=project_dir or str(Path.cwd()),
        pane=pane,
        message=message,
        additional_env=_parse_env_pairs(env_pairs),
    )
    scope = InvocationScope.with_timeout(timeout) if timeout else InvocationScope()

    halted = ""
    try:
        results = asyncio.run(executor.run_hooks_for_event(event, exec_ctx, scope=scope))
    except HookSequenceHalted as exc:
        results = exc.results
        halted = str(exc)

    if as_json:
        click.echo(json.dumps({
            "event": event,
            "halted": halted or None,
            "results": [
                {
                    "hook": r.hook.label,
                    "success": r.success,
                    "skipped": r.skipped,
                    "exit_code": r.exit_code,
                    "timed_out": r.timed_out,
                    "duration": r.duration,
                    "stdout": r.stdout,
                    "stderr": r.stderr,
                    "error": str(r.error) if r.error else None,
                }
                for r in results
            ],
        }, indent=2))
    elif not results and not halted:
        click.echo(f"No enabled hooks for {event}")
    else:
        print_execution_results(results, halted_reason=halted, verbose=verbose)

    if halted or any_failed(results):
        raise SystemExit(1)
