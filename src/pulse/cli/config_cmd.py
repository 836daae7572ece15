"""Pulse config command."""

import json

import click

from pulse.config import get_settings
from pulse.diagnostics.settings import (
    PortMonitorSettings,
    SubagentSettings,
    load_settings,
)


@click.command("config")
def config() -> None:
    """Show the resolved hook settings as JSON.

    Reports which source each file resolved from (loaded, missing or
    invalid); missing and invalid files fall back to defaults.
    """
    settings = get_settings()
    processes, processes_source = load_settings(
        settings.processes_config, PortMonitorSettings
    )
    subagent, subagent_source = load_settings(settings.subagent_config, SubagentSettings)

    document = {
        "processes": {
            "path": str(settings.processes_config),
            "source": processes_source.value,
            "settings": processes.model_dump(mode="json"),
        },
        "subagent": {
            "path": str(settings.subagent_config),
            "source": subagent_source.value,
            "settings": subagent.model_dump(mode="json"),
        },
    }
    click.echo(json.dumps(document, indent=2, ensure_ascii=False))
