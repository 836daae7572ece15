"""Non-blocking diagnostic hook engine.

Components, leaves first:
- settings: per-invocation settings resolution with default fallback
- probe / facts: deadline-bounded fact gathering
- health: per-phase health scoring
- sinks: isolated fan-out of completion records
- report: rendering and emitting the user-visible summary
- runner: the hook sequence tying them together
"""

from pulse.diagnostics.health import HealthScore
from pulse.diagnostics.models import (
    CompletionRecord,
    ConfigOutcome,
    DisplayOutcome,
    GatherOutcome,
    Outcome,
    Phase,
    ProbeResult,
    ProbeState,
    ReportContext,
    Target,
)
from pulse.diagnostics.probe import probe_all
from pulse.diagnostics.settings import (
    PortMonitorSettings,
    SubagentSettings,
    load_settings,
    resolve,
)
from pulse.diagnostics.sinks import Sink, dispatch

__all__ = [
    "CompletionRecord",
    "ConfigOutcome",
    "DisplayOutcome",
    "GatherOutcome",
    "HealthScore",
    "Outcome",
    "Phase",
    "PortMonitorSettings",
    "ProbeResult",
    "ProbeState",
    "ReportContext",
    "Sink",
    "SubagentSettings",
    "Target",
    "dispatch",
    "load_settings",
    "probe_all",
    "resolve",
]
