"""Deadline-bounded port probing.

Each enabled target is checked with one external command run under its own
timeout. Probes are independent: a failing or hung probe never affects its
siblings, and results always come back in input order.

Classification:
    exit 0, non-empty stdout   -> LISTENING
    exit 0, empty stdout       -> NOT_LISTENING
    non-zero exit / OS error   -> CHECK_FAILED
    command not installed      -> CHECK_FAILED
    deadline exceeded          -> TIMED_OUT
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from pulse.diagnostics.models import GatherOutcome, ProbeResult, ProbeState, Target
from pulse.errors import (
    ProbeExecutionError,
    ProbeTimeoutError,
    ProbeUnavailableError,
)

logger = structlog.get_logger(__name__)

# Upper bound on probe threads; port lists are short
MAX_PROBE_WORKERS = 8

Runner = Callable[..., subprocess.CompletedProcess[str]]


def build_probe_args(command: str, port: str) -> list[str]:
    """Build the argv that checks one port for a listening socket.

    Args:
        command: Probe command name or path (lsof, ss, or any executable)
        port: Port number

    Returns:
        Argument list for subprocess
    """
    name = Path(command).name
    if name == "lsof":
        return [command, "-i", f":{port}", "-sTCP:LISTEN", "-t"]
    if name == "ss":
        return [command, "-H", "-ltn", "sport", "=", f":{port}"]
    return [command, port]


def is_command_available(command: str) -> bool:
    """Check whether the probe command can be found on PATH."""
    return shutil.which(command) is not None


def _run_probe(
    command: str,
    port: str,
    timeout: float,
    runner: Runner,
) -> bool:
    """Run one probe and report whether the port is listening.

    Raises:
        ProbeUnavailableError: Command not installed
        ProbeTimeoutError: Deadline exceeded
        ProbeExecutionError: Command failed or exited non-zero
    """
    try:
        result = runner(
            build_probe_args(command, port),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ProbeTimeoutError(f"{command} :{port} exceeded {timeout}s") from e
    except FileNotFoundError as e:
        raise ProbeUnavailableError(f"{command} not found") from e
    except OSError as e:
        raise ProbeExecutionError(f"{command} :{port} failed: {e}") from e

    if result.returncode != 0:
        raise ProbeExecutionError(
            f"{command} :{port} exited with {result.returncode}"
        )
    return bool(result.stdout.strip())


def probe_target(
    target: Target,
    timeout: float,
    command: str,
    runner: Runner = subprocess.run,
) -> ProbeResult:
    """Probe a single target and classify the outcome. Never raises."""
    try:
        listening = _run_probe(command, target.id, timeout, runner)
    except ProbeTimeoutError as e:
        logger.debug("probe_timed_out", port=target.id, error=str(e))
        return ProbeResult(target, ProbeState.TIMED_OUT)
    except (ProbeUnavailableError, ProbeExecutionError) as e:
        logger.debug("probe_failed", port=target.id, error=str(e))
        return ProbeResult(target, ProbeState.CHECK_FAILED)

    state = ProbeState.LISTENING if listening else ProbeState.NOT_LISTENING
    return ProbeResult(target, state)


def probe_all(
    targets: Sequence[Target],
    timeout: float,
    command: str,
    require_command: bool = False,
    concurrent: bool = True,
    runner: Runner = subprocess.run,
) -> list[ProbeResult]:
    """Probe every enabled target.

    Args:
        targets: Targets in configuration order
        timeout: Per-probe deadline in seconds
        command: Probe command
        require_command: If set and the command is missing, report every
            target as CHECK_FAILED without running anything
        concurrent: Run probes on a thread pool instead of one by one
        runner: subprocess.run compatible callable

    Returns:
        One result per enabled target, in input order
    """
    enabled = [t for t in targets if t.enabled]
    if not enabled:
        return []

    if require_command and not is_command_available(command):
        logger.info("probe_command_missing", command=command)
        return [ProbeResult(t, ProbeState.CHECK_FAILED) for t in enabled]

    def check(target: Target) -> ProbeResult:
        return probe_target(target, timeout, command, runner)

    if not concurrent or len(enabled) == 1:
        return [check(t) for t in enabled]

    workers = min(len(enabled), MAX_PROBE_WORKERS)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pulse-probe") as pool:
        # map() yields in submission order regardless of completion order
        return list(pool.map(check, enabled))


def probe_outcome(results: Sequence[ProbeResult]) -> GatherOutcome:
    """Summarize a result set for health scoring.

    An empty result set counts as ALL_OK since nothing failed.
    """
    failed = sum(1 for r in results if not r.state.succeeded)
    if failed == 0:
        return GatherOutcome.ALL_OK
    if failed == len(results):
        return GatherOutcome.ALL_FAILED
    return GatherOutcome.PARTIAL


def listening_targets(results: Sequence[ProbeResult]) -> list[Target]:
    """Targets found listening, in probe order."""
    return [r.target for r in results if r.state is ProbeState.LISTENING]
