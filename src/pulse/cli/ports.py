"""Pulse ports command."""

import click

from pulse.config import get_settings
from pulse.diagnostics.models import Phase, ReportContext
from pulse.diagnostics.runner import run_port_hook
from pulse.logging import configure_from_settings


@click.command()
@click.option("--end", "at_end", is_flag=True, help="Use the session end message.")
def ports(at_end: bool) -> None:
    """Probe watched ports and show per-port state and health.

    Runs the same sequence as the session hooks without writing any
    logging sink.
    """
    settings = get_settings()
    configure_from_settings(settings)
    context = ReportContext.END if at_end else ReportContext.START
    summaries: list[str] = []

    outcome = run_port_hook(settings.processes_config, context, output=summaries.append)
    if outcome is None:
        click.echo("Port monitoring is disabled.")
        return

    click.echo(f"{'Port':<8} {'Label':<28} {'State'}")
    click.echo("-" * 50)
    for result in outcome.results:
        click.echo(f"{result.target.id:<8} {result.target.label:<28} {result.state.value}")

    click.echo()
    health = outcome.health
    click.echo(
        f"Health: {health.total()} "
        f"(config {health.points(Phase.CONFIG)}, "
        f"probe {health.points(Phase.GATHER)}, "
        f"display {health.points(Phase.DISPLAY)})"
    )
    if outcome.text:
        click.echo()
        click.echo(outcome.text)
