"""Tests for rendering and emitting summaries."""

from __future__ import annotations

import io

import pytest

from pulse.diagnostics.models import (
    DisplayOutcome,
    ProbeResult,
    ProbeState,
    ReportContext,
    Target,
)
from pulse.diagnostics.report import (
    EMPTY_RENDERING,
    emit,
    format_completion_banner,
    format_port_summary,
    format_template,
    render,
)
from pulse.diagnostics.settings import AgentSection, DisplaySection
from pulse.errors import FormatError

RESULTS = (
    ProbeResult(Target("3000", "React/Next.js"), ProbeState.LISTENING),
    ProbeResult(Target("8000", "Django"), ProbeState.CHECK_FAILED),
    ProbeResult(Target("8080", "Generic HTTP server"), ProbeState.LISTENING),
    ProbeResult(Target("5173", "Vite"), ProbeState.NOT_LISTENING),
)


class TestFormatTemplate:
    """Tests for format_template function."""

    def test_fills_placeholders(self) -> None:
        """Test known placeholders are substituted."""
        assert format_template("[{type}] {code}", {"type": "a", "code": "1"}) == "[a] 1"

    def test_unknown_placeholder_left_alone(self) -> None:
        """Test unknown names stay as written."""
        assert format_template("{type} {other}", {"type": "a"}) == "a {other}"

    def test_malformed_template_raises(self) -> None:
        """Test an unbalanced brace raises FormatError."""
        with pytest.raises(FormatError):
            format_template("broken {type", {"type": "a"})


class TestFormatPortSummary:
    """Tests for format_port_summary function."""

    def test_start_summary(self) -> None:
        """Test the start line lists listening ports in order."""
        text = format_port_summary(RESULTS, DisplaySection(), ReportContext.START)
        assert text == "🔌 Active dev servers on ports: 3000, 8080"

    def test_end_summary(self) -> None:
        """Test the end context uses the end message."""
        text = format_port_summary(RESULTS, DisplaySection(), ReportContext.END)
        assert text == "🔌 Dev servers still running on ports: 3000, 8080"

    def test_descriptions(self) -> None:
        """Test labels are appended when enabled."""
        display = DisplaySection(show_descriptions=True, separator=" | ")
        text = format_port_summary(RESULTS, display, ReportContext.START)
        assert text.endswith("3000 (React/Next.js) | 8080 (Generic HTTP server)")

    def test_nothing_listening(self) -> None:
        """Test an empty summary when no port is listening."""
        results = [ProbeResult(Target("3000"), ProbeState.NOT_LISTENING)]
        assert format_port_summary(results, DisplaySection(), ReportContext.START) == ""

    @pytest.mark.parametrize(
        "display,context",
        [
            (DisplaySection(show_at_start=False), ReportContext.START),
            (DisplaySection(show_at_end=False), ReportContext.END),
        ],
    )
    def test_show_flags(self, display: DisplaySection, context: ReportContext) -> None:
        """Test the show switch for each context suppresses output."""
        assert format_port_summary(RESULTS, display, context) == ""

    def test_empty_icon_has_no_leading_space(self) -> None:
        """Test an empty icon is dropped cleanly."""
        text = format_port_summary(RESULTS, DisplaySection(icon=""), ReportContext.START)
        assert text == "Active dev servers on ports: 3000, 8080"


class TestFormatCompletionBanner:
    """Tests for format_completion_banner function."""

    def test_success(self) -> None:
        """Test the success message and banner layout."""
        facts = {"type": "research", "status": "success", "exit_code": "0", "error": ""}
        text = format_completion_banner(facts, AgentSection())
        assert text == (
            "\nSUBAGENT COMPLETION\n  ✓ Subagent [research] completed successfully"
        )

    def test_failure_with_error(self) -> None:
        """Test the failure message includes code and error line."""
        facts = {"type": "build", "status": "failure", "exit_code": "2", "error": "oops"}
        lines = format_completion_banner(facts, AgentSection()).splitlines()
        assert lines[2] == "  ⚠️  Subagent [build] completed with errors (exit code: 2)"
        assert lines[3] == "     Error: oops"

    def test_nonzero_exit_overrides_success_status(self) -> None:
        """Test a failing exit code selects the failure message over success."""
        facts = {"type": "build", "status": "success", "exit_code": "3", "error": ""}
        lines = format_completion_banner(facts, AgentSection()).splitlines()
        assert lines[2] == "  ⚠️  Subagent [build] completed with errors (exit code: 3)"
        assert "completed successfully" not in lines[2]

    def test_errors_hidden(self) -> None:
        """Test show_errors off drops the error line."""
        facts = {"type": "build", "status": "failure", "exit_code": "2", "error": "oops"}
        text = format_completion_banner(facts, AgentSection(show_errors=False))
        assert "Error:" not in text

    def test_default_message(self) -> None:
        """Test unknown outcome uses the default message."""
        facts = {"type": "unknown", "status": "", "exit_code": "", "error": ""}
        text = format_completion_banner(facts, AgentSection())
        assert text.endswith("  ✓ Subagent [unknown] completed")

    def test_completion_hidden(self) -> None:
        """Test show_completion off renders nothing."""
        facts = {"type": "x", "status": "success"}
        assert format_completion_banner(facts, AgentSection(show_completion=False)) == ""


class TestRender:
    """Tests for render function."""

    def test_port_context(self) -> None:
        """Test port rendering scores OK."""
        rendering = render(ReportContext.START, results=RESULTS, display=DisplaySection())
        assert rendering.text == "🔌 Active dev servers on ports: 3000, 8080"
        assert rendering.outcome == DisplayOutcome.OK

    def test_empty_summary_still_ok(self) -> None:
        """Test rendering nothing successfully is not a failure."""
        rendering = render(ReportContext.END, results=(), display=DisplaySection())
        assert rendering.text == ""
        assert rendering.outcome == DisplayOutcome.OK

    def test_bad_template_degrades_to_builtin(self) -> None:
        """Test a malformed configured message falls back to the default."""
        agent = AgentSection(success="Done {type")
        facts = {"type": "research", "status": "success", "exit_code": "0", "error": ""}
        rendering = render(ReportContext.SUBAGENT_COMPLETION, facts=facts, agent=agent)
        assert rendering.outcome == DisplayOutcome.DEGRADED
        assert "✓ Subagent [research] completed successfully" in rendering.text

    def test_missing_inputs_fail_without_raising(self) -> None:
        """Test missing inputs yield the empty failed rendering."""
        assert render(ReportContext.START) == EMPTY_RENDERING
        assert render(ReportContext.SUBAGENT_COMPLETION) == EMPTY_RENDERING


class TestEmit:
    """Tests for emit function."""

    def test_writes_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test text is written with a trailing newline."""
        emit("hello")
        assert capsys.readouterr().out == "hello\n"

    def test_empty_writes_nothing(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test empty text produces no output."""
        emit("")
        assert capsys.readouterr().out == ""

    def test_closed_stdout_does_not_raise(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a closed stdout is tolerated."""
        closed = io.StringIO()
        closed.close()
        monkeypatch.setattr("sys.stdout", closed)
        emit("hello")
