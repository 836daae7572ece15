"""Hook orchestration.

A hook run is a fixed sequence of steps:

    resolve settings -> gather facts -> render -> build record
        -> dispatch to sinks -> emit summary

Each step goes through ``HookRun.step``, the single place where errors are
suppressed: a failing step is logged and replaced by its fallback value, and
the sequence carries on. The only early return is a disabled hook, which
probes nothing, writes no sink and prints nothing.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import structlog

from pulse.diagnostics.facts import facts_outcome, read_subagent_facts, subagent_outcome
from pulse.diagnostics.health import HealthScore
from pulse.diagnostics.models import (
    CompletionRecord,
    ConfigOutcome,
    GatherOutcome,
    Outcome,
    Phase,
    ProbeResult,
    ProbeState,
    ReportContext,
)
from pulse.diagnostics.probe import listening_targets, probe_all, probe_outcome
from pulse.diagnostics.report import EMPTY_RENDERING, Rendering, emit, render
from pulse.diagnostics.settings import (
    PortMonitorSettings,
    SubagentSettings,
    load_settings,
)
from pulse.diagnostics.sinks import Sink, dispatch
from pulse.hooks.common import log_hook_error

logger = structlog.get_logger(__name__)

T = TypeVar("T")

EVENT_NAMES: dict[ReportContext, str] = {
    ReportContext.START: "SessionStart",
    ReportContext.END: "SessionEnd",
    ReportContext.SUBAGENT_COMPLETION: "SubagentStop",
}


@dataclass
class HookRun:
    """State for one hook invocation.

    Attributes:
        hook_name: Name used in logs and the hook error log
        silent: Log step failures at debug instead of warning
        health: Health accumulator for this invocation
        failed_steps: Names of steps that fell back
    """

    hook_name: str
    silent: bool = True
    health: HealthScore = field(default_factory=HealthScore)
    failed_steps: list[str] = field(default_factory=list)

    def step(
        self,
        name: str,
        fallback: T,
        func: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run one step, substituting ``fallback`` if it raises.

        Args:
            name: Step name for logging
            fallback: Value returned when the step fails
            func: Step callable
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            The step's result, or fallback on any exception
        """
        try:
            return func(*args, **kwargs)
        except Exception as e:
            self.failed_steps.append(name)
            log = logger.debug if self.silent else logger.warning
            log(
                "hook_step_failed",
                hook=self.hook_name,
                step=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            log_hook_error(f"{self.hook_name}:{name}", e)
            return fallback

    def score(self, phase: Phase, outcome: Enum) -> None:
        """Record a phase outcome through the step guard."""
        self.step(f"score_{phase.value}", None, self.health.record, phase, outcome)


def run_guarded(hook_name: str, func: Callable[..., Any], *args: Any) -> None:
    """Run a hook's whole entry sequence under the step guard.

    Used by hook ``main()`` functions so that even bootstrap failures
    (settings, logging setup) end in a logged, silent exit 0.
    """
    HookRun(hook_name=hook_name).step("main", None, func, *args)


@dataclass(frozen=True)
class HookOutcome:
    """What a hook run produced, for callers that want to inspect it."""

    text: str
    health: HealthScore
    record: CompletionRecord | None
    results: tuple[ProbeResult, ...] = ()
    facts: Mapping[str, str] = field(default_factory=dict)
    failed_steps: tuple[str, ...] = ()


def build_port_record(
    context: ReportContext,
    results: Sequence[ProbeResult],
    health: HealthScore,
) -> CompletionRecord:
    """Build the record logged by the session start/end hooks."""
    gather = health.outcome(Phase.GATHER)
    if gather is GatherOutcome.ALL_OK:
        outcome = Outcome.SUCCESS
    elif gather is GatherOutcome.ALL_FAILED:
        outcome = Outcome.FAILURE
    else:
        outcome = Outcome.UNKNOWN

    states = [r.state for r in results]
    return CompletionRecord(
        event_name=EVENT_NAMES[context],
        context={
            "listening": ",".join(t.id for t in listening_targets(results)),
            "checked": str(len(results)),
            "check_failed": str(states.count(ProbeState.CHECK_FAILED)),
            "timed_out": str(states.count(ProbeState.TIMED_OUT)),
            "health": str(health.total()),
        },
        outcome=outcome,
    )


def build_subagent_record(
    facts: Mapping[str, str],
    health: HealthScore,
) -> CompletionRecord:
    """Build the record logged by the subagent stop hook."""
    context = {
        "type": facts.get("type", ""),
        "status": facts.get("status", ""),
        "exit_code": facts.get("exit_code", ""),
    }
    if facts.get("error"):
        context["error"] = facts["error"]
    context["health"] = str(health.total())
    return CompletionRecord(
        event_name=EVENT_NAMES[ReportContext.SUBAGENT_COMPLETION],
        context=context,
        outcome=subagent_outcome(facts),
    )


def run_port_hook(
    source_path: Path,
    context: ReportContext,
    sinks: Sequence[Sink] = (),
    runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    output: Callable[[str], None] = emit,
) -> HookOutcome | None:
    """Run the session start/end port monitoring hook.

    Args:
        source_path: processes.jsonc settings file
        context: START or END
        sinks: Logging sinks for the completion record
        runner: subprocess.run compatible callable for probes
        output: Writes the summary to the user

    Returns:
        HookOutcome, or None when monitoring is disabled
    """
    run = HookRun(hook_name=EVENT_NAMES[context])

    settings, config_outcome = run.step(
        "resolve",
        (PortMonitorSettings(), ConfigOutcome.INVALID),
        load_settings,
        source_path,
        PortMonitorSettings,
    )
    if not settings.enabled:
        return None
    run.silent = settings.silent_failures
    run.score(Phase.CONFIG, config_outcome)

    enabled = [t for t in settings.targets if t.enabled]
    results = run.step(
        "probe",
        [ProbeResult(t, ProbeState.CHECK_FAILED) for t in enabled],
        probe_all,
        settings.targets,
        settings.timeout,
        settings.probe_command,
        require_command=settings.require_probe_command,
        concurrent=settings.behavior.concurrent,
        runner=runner,
    )
    gathered = run.step("probe_outcome", GatherOutcome.ALL_FAILED, probe_outcome, results)
    run.score(Phase.GATHER, gathered)

    rendering: Rendering = run.step(
        "render",
        EMPTY_RENDERING,
        render,
        context,
        results=results,
        display=settings.display,
    )
    run.score(Phase.DISPLAY, rendering.outcome)

    record = run.step("record", None, build_port_record, context, results, run.health)
    if record is not None:
        run.step("dispatch", None, dispatch, record, sinks)
    run.step("emit", None, output, rendering.text)

    return HookOutcome(
        text=rendering.text,
        health=run.health,
        record=record,
        results=tuple(results),
        failed_steps=tuple(run.failed_steps),
    )


def run_subagent_hook(
    source_path: Path,
    sinks: Sequence[Sink] = (),
    environ: Mapping[str, str] | None = None,
    output: Callable[[str], None] = emit,
) -> HookOutcome | None:
    """Run the subagent stop hook.

    Args:
        source_path: subagent.jsonc settings file
        sinks: Logging sinks for the completion record
        environ: Environment to read facts from (defaults to os.environ)
        output: Writes the banner to the user

    Returns:
        HookOutcome, or None when the hook is disabled
    """
    run = HookRun(hook_name=EVENT_NAMES[ReportContext.SUBAGENT_COMPLETION])

    settings, config_outcome = run.step(
        "resolve",
        (SubagentSettings(), ConfigOutcome.INVALID),
        load_settings,
        source_path,
        SubagentSettings,
    )
    if not settings.enabled:
        return None
    run.silent = settings.silent_failures
    run.score(Phase.CONFIG, config_outcome)

    facts = run.step(
        "facts",
        read_subagent_facts({}),
        read_subagent_facts,
        environ,
    )
    gathered = run.step("facts_outcome", GatherOutcome.ALL_FAILED, facts_outcome, facts)
    run.score(Phase.GATHER, gathered)

    rendering: Rendering = run.step(
        "render",
        EMPTY_RENDERING,
        render,
        ReportContext.SUBAGENT_COMPLETION,
        facts=facts,
        agent=settings.agent,
    )
    run.score(Phase.DISPLAY, rendering.outcome)

    record = run.step("record", None, build_subagent_record, facts, run.health)
    if record is not None:
        run.step("dispatch", None, dispatch, record, sinks)
    run.step("emit", None, output, rendering.text)

    return HookOutcome(
        text=rendering.text,
        health=run.health,
        record=record,
        facts=facts,
        failed_steps=tuple(run.failed_steps),
    )
