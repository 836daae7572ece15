"""SubagentStop hook for Pulse.

Reports how an autonomous subagent finished, from environment variables set
by the host.

Environment:
    SUBAGENT_TYPE       Subagent type (default "unknown")
    SUBAGENT_STATUS     "success" or "failure"
    SUBAGENT_EXIT_CODE  Exit code as text
    SUBAGENT_ERROR      Error message, if any

Output (stdout): completion banner (max 1000 chars), or nothing
"""

from __future__ import annotations

from pulse.config import get_settings
from pulse.diagnostics.report import emit
from pulse.diagnostics.runner import run_guarded, run_subagent_hook
from pulse.diagnostics.sinks import SUBAGENTS_LOG, default_sinks
from pulse.hooks.common import get_session_id, read_json_input, truncate_output
from pulse.logging import configure_from_settings

HOOK_NAME = "SubagentStop"
MAX_OUTPUT_CHARS = 1000


def write_banner(text: str) -> None:
    """Emit the banner, truncated to MAX_OUTPUT_CHARS."""
    emit(truncate_output(text, MAX_OUTPUT_CHARS))


def _run() -> None:
    settings = get_settings()
    configure_from_settings(settings, HOOK_NAME)

    input_data = read_json_input()
    sinks = default_sinks(settings, get_session_id(input_data), SUBAGENTS_LOG)
    run_subagent_hook(settings.subagent_config, sinks, output=write_banner)


def main() -> None:
    """Main entry point for SubagentStop hook."""
    run_guarded(HOOK_NAME, _run)


if __name__ == "__main__":
    main()
