"""User-visible summaries.

Rendering and emitting are separate steps so the orchestrator can score the
display phase and log the record before anything reaches stdout. Neither
step raises: a formatting problem degrades to no output.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import structlog

from pulse.diagnostics.facts import subagent_outcome
from pulse.diagnostics.models import (
    DisplayOutcome,
    Outcome,
    ProbeResult,
    ReportContext,
)
from pulse.diagnostics.probe import listening_targets
from pulse.diagnostics.settings import AgentSection, DisplaySection
from pulse.errors import FormatError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Rendering:
    """Rendered summary plus how rendering went."""

    text: str
    outcome: DisplayOutcome


EMPTY_RENDERING = Rendering("", DisplayOutcome.FAILED)


class _Placeholders(dict[str, str]):
    # Unknown {names} in templates are left as written
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def format_template(template: str, values: Mapping[str, str]) -> str:
    """Fill ``{name}`` placeholders in a configured message.

    Raises:
        FormatError: If the template is malformed
    """
    try:
        return template.format_map(_Placeholders(values))
    except (ValueError, IndexError, AttributeError) as e:
        raise FormatError(f"Bad template {template!r}: {e}") from e


def format_port_summary(
    results: Sequence[ProbeResult],
    display: DisplaySection,
    context: ReportContext,
) -> str:
    """Format the listening-ports line for session start or end.

    Args:
        results: Probe results in target order
        display: Display settings
        context: START or END

    Returns:
        Summary line, or empty string when there is nothing to show
    """
    show = display.show_at_end if context is ReportContext.END else display.show_at_start
    running = listening_targets(results)
    if not show or not running:
        return ""

    message = display.end_message if context is ReportContext.END else display.start_message
    ports = []
    for target in running:
        if display.show_descriptions and target.label:
            ports.append(f"{target.id} ({target.label})")
        else:
            ports.append(target.id)

    parts = [p for p in (display.icon, message, display.separator.join(ports)) if p]
    return " ".join(parts)


def format_completion_banner(facts: Mapping[str, str], agent: AgentSection) -> str:
    """Format the subagent completion banner.

    Args:
        facts: Subagent facts (type, status, exit_code, error)
        agent: Subagent display settings

    Returns:
        Banner text, or empty string when completion display is off
    """
    if not agent.show_completion:
        return ""

    outcome = subagent_outcome(facts)
    if outcome is Outcome.SUCCESS:
        template = agent.success
    elif outcome is Outcome.FAILURE:
        template = agent.failure
    else:
        template = agent.default

    message = format_template(
        template,
        {"type": facts.get("type", ""), "code": facts.get("exit_code", "")},
    )
    lines = ["", agent.header, f"  {message}"]
    error = facts.get("error", "")
    if error and agent.show_errors:
        lines.append(f"     Error: {error}")
    return "\n".join(lines)


def _builtin_messages(agent: AgentSection) -> AgentSection:
    defaults = AgentSection()
    return agent.model_copy(
        update={
            "success": defaults.success,
            "failure": defaults.failure,
            "default": defaults.default,
        }
    )


def render(
    context: ReportContext,
    *,
    results: Sequence[ProbeResult] = (),
    display: DisplaySection | None = None,
    facts: Mapping[str, str] | None = None,
    agent: AgentSection | None = None,
) -> Rendering:
    """Render the summary for a lifecycle context. Never raises.

    Probe contexts need ``results`` and ``display``; the completion context
    needs ``facts`` and ``agent``. A broken configured message template
    falls back to the built-in messages and scores as DEGRADED.
    """
    try:
        if context is ReportContext.SUBAGENT_COMPLETION:
            if facts is None or agent is None:
                raise FormatError("completion report needs facts and agent settings")
            try:
                return Rendering(format_completion_banner(facts, agent), DisplayOutcome.OK)
            except FormatError as e:
                logger.info("report_template_invalid", error=str(e))
                text = format_completion_banner(facts, _builtin_messages(agent))
                return Rendering(text, DisplayOutcome.DEGRADED)

        if display is None:
            raise FormatError("port report needs display settings")
        return Rendering(format_port_summary(results, display, context), DisplayOutcome.OK)
    except Exception as e:
        logger.info("report_render_failed", context=context.value, error=str(e))
        return EMPTY_RENDERING


def emit(text: str) -> None:
    """Write a summary to stdout. Empty text writes nothing; never raises."""
    if not text:
        return
    try:
        sys.stdout.write(text + "\n")
        sys.stdout.flush()
    except (OSError, ValueError) as e:
        logger.info("report_emit_failed", error=str(e))
