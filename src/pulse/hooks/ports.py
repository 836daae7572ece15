"""Shared entry sequence for the port monitoring hooks.

Session start and session end run the same probe with a different message
and show switch.
"""

from __future__ import annotations

from pulse.config import get_settings
from pulse.diagnostics.models import ReportContext
from pulse.diagnostics.runner import EVENT_NAMES, run_guarded, run_port_hook
from pulse.diagnostics.sinks import PROCESSES_LOG, default_sinks
from pulse.hooks.common import get_session_id, read_json_input
from pulse.logging import configure_from_settings


def _run(context: ReportContext) -> None:
    settings = get_settings()
    configure_from_settings(settings, EVENT_NAMES[context])

    input_data = read_json_input()
    sinks = default_sinks(settings, get_session_id(input_data), PROCESSES_LOG)
    run_port_hook(settings.processes_config, context, sinks)


def run_hook(context: ReportContext) -> None:
    """Run a port monitoring hook; never raises."""
    run_guarded(EVENT_NAMES[context], _run, context)
