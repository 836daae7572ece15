"""Pulse hooks for coding-agent session lifecycle events.

Hooks communicate via stdin/stdout:
- Input: optional JSON payload from the host (only ``session_id`` is used)
- Output: Plain text summary shown to the user (or nothing)

Available hooks:
- SessionStart: Lists development servers listening on watched ports
- SessionEnd: Reminds about development servers still running
- SubagentStop: Reports subagent completion status

Every hook exits 0, whatever fails internally.
"""

from pulse.hooks.common import (
    get_hook_error_log_path,
    get_pulse_home,
    get_session_id,
    log_hook_error,
    read_json_input,
    truncate_output,
)

__all__ = [
    "get_hook_error_log_path",
    "get_pulse_home",
    "get_session_id",
    "log_hook_error",
    "read_json_input",
    "truncate_output",
]
