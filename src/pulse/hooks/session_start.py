"""SessionStart hook for Pulse.

Reports development servers already listening when a session begins.

Input (stdin): optional host payload, e.g. {"session_id": "..."}
Output (stdout): "🔌 Active dev servers on ports: 3000, 8080", or nothing
"""

from __future__ import annotations

from pulse.diagnostics.models import ReportContext
from pulse.hooks.ports import run_hook


def main() -> None:
    """Main entry point for SessionStart hook."""
    run_hook(ReportContext.START)


if __name__ == "__main__":
    main()
