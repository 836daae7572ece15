"""SessionEnd hook for Pulse.

Reminds about development servers still listening when a session ends.

Input (stdin): optional host payload, e.g. {"session_id": "..."}
Output (stdout): "🔌 Dev servers still running on ports: 8080", or nothing
"""

from __future__ import annotations

from pulse.diagnostics.models import ReportContext
from pulse.hooks.ports import run_hook


def main() -> None:
    """Main entry point for SessionEnd hook."""
    run_hook(ReportContext.END)


if __name__ == "__main__":
    main()
