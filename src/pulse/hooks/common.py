"""Shared utilities for Pulse hooks.

Hooks communicate via stdin/stdout:
- Input: JSON object with hook-specific fields (optional)
- Output: Plain text shown to the user (or nothing)

A hook must never break the host: every helper here swallows its own I/O
errors and hooks always exit 0.
"""

from __future__ import annotations

import json
import os
import sys
import traceback
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pulse.config import get_settings

# Maximum size for hook error log before rotation (1 MB)
_HOOK_LOG_MAX_BYTES = 1_048_576


def get_pulse_home() -> Path:
    """Get path to Pulse home directory.

    Returns:
        Path to Pulse home (from settings or default ~/.pulse)
    """
    return get_settings().home


def get_hook_error_log_path() -> Path:
    """Get path to hook error log file.

    Returns:
        Path to hook_errors.log in Pulse home directory
    """
    return get_pulse_home() / "hook_errors.log"


def log_hook_error(hook_name: str, exc: BaseException) -> None:
    """Log a hook error to the hook error log file.

    Writes timestamp, hook name, exception type, message, and traceback
    to ~/.pulse/hook_errors.log. Performs log rotation if the file exceeds
    1 MB (renames to hook_errors.log.1, keeping only 1 backup).

    This function never raises exceptions -- it silently ignores any I/O
    errors during logging itself.

    Args:
        hook_name: Name of the hook (and step) that encountered the error
        exc: The exception that was caught
    """
    try:
        log_path = get_hook_error_log_path()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if log_path.exists():
            try:
                file_size = log_path.stat().st_size
            except OSError:
                file_size = 0
            if file_size >= _HOOK_LOG_MAX_BYTES:
                backup_path = log_path.with_suffix(".log.1")
                try:
                    log_path.replace(backup_path)
                except OSError:
                    pass  # If rotation fails, just keep writing

        timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
        tb_str = "".join(tb).rstrip()

        entry = (
            f"[{timestamp}] hook={hook_name} "
            f"exception={type(exc).__name__} message={exc}\n"
            f"{tb_str}\n\n"
        )

        with open(log_path, "a", encoding="utf-8") as f:
            f.write(entry)
    except Exception:
        pass  # Never let logging itself break a hook


def read_json_input() -> dict[str, Any]:
    """Read the host's JSON payload from stdin.

    Returns:
        Parsed JSON object, or empty dict when stdin is a terminal, empty,
        or not a JSON object
    """
    try:
        if sys.stdin is None or sys.stdin.isatty():
            return {}
        raw = sys.stdin.read()
        if not raw.strip():
            return {}
        result = json.loads(raw)
        if not isinstance(result, dict):
            return {}
        return result
    except (json.JSONDecodeError, OSError, ValueError):
        return {}


def get_session_id(
    input_data: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Get the current session ID.

    Prefers the ``session_id`` field of the hook payload, then
    CLAUDE_SESSION_ID from the environment.

    Returns:
        Session ID string, or empty string if not available
    """
    if input_data:
        session_id = input_data.get("session_id")
        if isinstance(session_id, str) and session_id.strip():
            return session_id.strip()
    env = os.environ if environ is None else environ
    return env.get("CLAUDE_SESSION_ID", "").strip()


def truncate_output(text: str, max_chars: int) -> str:
    """Truncate output to character limit.

    Args:
        text: Text to truncate
        max_chars: Maximum characters allowed

    Returns:
        Truncated text (with ellipsis if truncated)
    """
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 3] + "..."
