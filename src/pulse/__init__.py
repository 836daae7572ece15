"""Pulse - non-blocking diagnostic hooks for coding-agent sessions.

Hooks detect locally running development servers at session start/end and
report subagent completion. Every hook always finishes and exits 0.
"""

__version__ = "0.1.0"
