"""CLI entry point for codecoach.

Commands:
  report   — parse build logs and report findings onto a pull/merge request
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from codecoach_cli.commands.report import report_cmd

console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("codecoach"),
    prog_name="codecoach",
)
@click.option(
    "--config",
    "config_path",
    default=".codecoach.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODECOACH_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every step, including platform calls.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Report linter findings onto GitHub pull requests and GitLab merge requests."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(report_cmd)
