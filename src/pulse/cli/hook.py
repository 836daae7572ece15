"""Pulse hook commands.

Thin wrappers so hooks can be registered as ``pulse hook <name>``.
"""

import click

from pulse.diagnostics.models import ReportContext
from pulse.hooks.ports import run_hook
from pulse.hooks.subagent_stop import main as subagent_stop_main


@click.group()
def hook() -> None:
    """Run a lifecycle hook (always exits 0)."""
    pass


@hook.command()
def start() -> None:
    """Session start: list dev servers already listening."""
    run_hook(ReportContext.START)


@hook.command()
def end() -> None:
    """Session end: list dev servers still running."""
    run_hook(ReportContext.END)


@hook.command("subagent-stop")
def subagent_stop() -> None:
    """Subagent stop: report completion from SUBAGENT_* variables."""
    subagent_stop_main()
