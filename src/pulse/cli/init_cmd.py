"""Pulse init command.

Writes the default hook configuration files.
"""

import click

from pulse.config import DEFAULT_PROCESSES_CONFIG, DEFAULT_SUBAGENT_CONFIG, get_settings


@click.command("init")
def init() -> None:
    """Create ~/.pulse with default hook configuration.

    Creates:
    - ~/.pulse/config/processes.jsonc (port monitoring)
    - ~/.pulse/config/subagent.jsonc (subagent completion)
    - ~/.pulse/debug/ (monitoring logs)
    - ~/.pulse/activity/ (session activity streams)

    Existing config files are never overwritten.
    """
    settings = get_settings()

    for directory in (settings.config_dir, settings.debug_dir, settings.activity_dir):
        directory.mkdir(parents=True, exist_ok=True)
        click.echo(f"  Created {directory}")

    templates = [
        (settings.processes_config, DEFAULT_PROCESSES_CONFIG),
        (settings.subagent_config, DEFAULT_SUBAGENT_CONFIG),
    ]
    for path, content in templates:
        if path.exists():
            click.echo(f"  Config already exists at {path}")
        else:
            path.write_text(content, encoding="utf-8")
            click.echo(f"  Created config at {path}")

    click.echo()
    click.echo(f"Pulse initialized at {settings.home}")
