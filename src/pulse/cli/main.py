"""Pulse CLI main entry point.

This module provides the main CLI interface for Pulse.
"""

import click

from pulse import __version__


@click.group()
@click.version_option(version=__version__, prog_name="pulse")
def cli() -> None:
    """Pulse - diagnostic hooks for coding-agent sessions.

    Detects running dev servers and reports subagent completion.
    """
    pass


# Import and register subcommands
from pulse.cli.config_cmd import config  # noqa: E402
from pulse.cli.hook import hook  # noqa: E402
from pulse.cli.init_cmd import init  # noqa: E402
from pulse.cli.ports import ports  # noqa: E402

cli.add_command(init)
cli.add_command(hook)
cli.add_command(ports)
cli.add_command(config)
