"""CLI subcommands for git hook integration (install, status, run)."""

from __future__ import annotations

import asyncio
import json

import click

from muxhooks.git.manager import GitHookType

HOOK_TYPE_CHOICES = [t.value for t in GitHookType]


def _manager():
    from muxhooks.errors import GitHookError
    from muxhooks.git.manager import GitHookManager

    try:
        return GitHookManager()
    except GitHookError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc


@click.group()
def git_cmd() -> None:
    """Manage git hooks that run quality checks before commits."""


@git_cmd.command("install")
@click.argument("hook_type", type=click.Choice(HOOK_TYPE_CHOICES), default="pre-commit")
@click.option("--force", "-f", is_flag=True, help="Overwrite (and back up) an existing hook")
def git_install(hook_type: str, force: bool) -> None:
    """Install a git hook (default: pre-commit)."""
    from muxhooks.errors import GitHookError, GitHookExistsError

    mgr = _manager()
    try:
        path = mgr.install(GitHookType(hook_type), force=force)
    except GitHookExistsError:
        click.echo("Hook already exists. Use --force to overwrite.", err=True)
        raise SystemExit(1)
    except GitHookError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(f"Installed {hook_type} hook")
    click.echo(f"  Location: {path}")


@git_cmd.command("uninstall")
@click.argument("hook_type", type=click.Choice(HOOK_TYPE_CHOICES), default="pre-commit")
@click.option("--restore/--no-restore", default=True, help="Restore backup if it exists")
def git_uninstall(hook_type: str, restore: bool) -> None:
    """Remove a muxhooks-managed git hook."""
    from muxhooks.errors import GitHookError, GitHookNotInstalledError

    mgr = _manager()
    try:
        restored = mgr.uninstall(GitHookType(hook_type), restore=restore)
    except GitHookNotInstalledError:
        click.echo("Hook not installed")
        return
    except GitHookError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(f"Uninstalled {hook_type} hook")
    if restored:
        click.echo("  Previous hook restored from backup")


@git_cmd.command("status")
@click.option("--json", "as_json", is_flag=True, help="JSON output")
def git_status(as_json: bool) -> None:
    """Show status of git hooks."""
    mgr = _manager()
    infos = mgr.list_all()

    if as_json:
        click.echo(json.dumps({
            "repo_root": str(mgr.repo_root),
            "hooks_dir": str(mgr.hooks_dir),
            "hooks": [i.to_dict() for i in infos],
        }, indent=2))
        return

    click.echo(f"Repository: {mgr.repo_root}")
    click.echo(f"Hooks dir:  {mgr.hooks_dir}\n")
    for info in infos:
        if not info.installed:
            status = "not installed"
        elif info.managed:
            status = "installed (muxhooks)"
        else:
            status = "installed (other)"
        backup = " (backup exists)" if info.has_backup else ""
        click.echo(f"  {info.type.value:<12} {status}{backup}")


@git_cmd.command("run")
@click.argument("hook_type", type=click.Choice(["pre-commit"]))
@click.option("--fail-on-warning/--no-fail-on-warning", default=True, help="Fail on warnings")
@click.option("--max-critical", type=int, default=0, help="Allowed critical issues")
@click.option("--max-warning", type=int, default=0, help="Allowed warning issues")
@click.option("--timeout", type=float, default=60.0, help="Scan timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Verbose scanner output")
@click.option("--json", "as_json", is_flag=True, help="JSON output")
def git_run(
    hook_type: str,
    fail_on_warning: bool,
    max_critical: int,
    max_warning: int,
    timeout: float,
    verbose: bool,
    as_json: bool,
) -> None:
    """Run a git hook's checks manually (also called by the installed hook)."""
    from muxhooks.cli.output import print_pre_commit_result
    from muxhooks.errors import PreCommitError
    from muxhooks.precommit.policy import PreCommitConfig, run_pre_commit

    mgr = _manager()
    config = PreCommitConfig(
        max_critical=max_critical,
        max_warning=max_warning,
        fail_on_warning=fail_on_warning,
        timeout=timeout,
        verbose=verbose,
    )

    try:
        result = asyncio.run(run_pre_commit(str(mgr.repo_root), config))
    except PreCommitError as exc:
        if as_json:
            click.echo(json.dumps({"passed": False, "error": str(exc)}))
        else:
            click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_pre_commit_result(result)
    raise SystemExit(result.exit_code)
