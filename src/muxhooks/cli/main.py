"""CLI entry point for muxhooks."""

from __future__ import annotations

import logging

import click
from dotenv import load_dotenv

from muxhooks import __version__


@click.group()
@click.version_option(__version__, prog_name="muxhooks")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose: bool) -> None:
    """muxhooks -- lifecycle command hooks for multi-agent sessions.

    \b
    Usage:
      muxhooks hooks list
      muxhooks hooks run pre-spawn --session myproj
      muxhooks git install pre-commit
      muxhooks git run pre-commit
    """
    # .env may point XDG_CONFIG_HOME at a project-local hooks directory
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _register_subcommands() -> None:
    """Register CLI subcommands."""
    from muxhooks.cli.git_commands import git_cmd
    from muxhooks.cli.hooks_commands import hooks_cmd

    cli.add_command(hooks_cmd, "hooks")
    cli.add_command(git_cmd, "git")


_register_subcommands()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
