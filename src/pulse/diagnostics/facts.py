"""Environment fact extraction for the subagent stop hook.

All environment reads happen here, once, producing an immutable mapping that
later phases consume.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from types import MappingProxyType

from pulse.diagnostics.models import GatherOutcome, Outcome

UNKNOWN_SUBAGENT = "unknown"

# Fact key -> environment variable
SUBAGENT_ENV_KEYS: dict[str, str] = {
    "type": "SUBAGENT_TYPE",
    "status": "SUBAGENT_STATUS",
    "exit_code": "SUBAGENT_EXIT_CODE",
    "error": "SUBAGENT_ERROR",
}


def read_subagent_facts(environ: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Read subagent completion facts from the environment.

    Missing values default to empty strings, except the subagent type which
    defaults to "unknown".

    Args:
        environ: Environment to read (defaults to os.environ)

    Returns:
        Read-only mapping with keys type, status, exit_code, error
    """
    env = os.environ if environ is None else environ
    facts = {key: env.get(var, "").strip() for key, var in SUBAGENT_ENV_KEYS.items()}
    if not facts["type"]:
        facts["type"] = UNKNOWN_SUBAGENT
    return MappingProxyType(facts)


def subagent_outcome(facts: Mapping[str, str]) -> Outcome:
    """Derive the completion outcome from status and exit code.

    A failure status or any non-zero exit code wins over a success status.
    """
    status = facts.get("status", "").lower()
    exit_code = facts.get("exit_code", "")
    if status == "failure" or (exit_code and exit_code != "0"):
        return Outcome.FAILURE
    if status == "success" or exit_code == "0":
        return Outcome.SUCCESS
    return Outcome.UNKNOWN


def facts_outcome(facts: Mapping[str, str]) -> GatherOutcome:
    """Score fact gathering from already-read facts.

    PARTIAL when the subagent type is unknown, whether it was missing from
    the environment or reported as "unknown".
    """
    if facts.get("type", UNKNOWN_SUBAGENT) != UNKNOWN_SUBAGENT:
        return GatherOutcome.ALL_OK
    return GatherOutcome.PARTIAL
