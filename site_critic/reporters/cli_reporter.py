"""Terminal summary of assessments and sessions.

Colors follow the NO_COLOR convention (https://no-color.org/): an
explicit flag wins, then NO_COLOR / FORCE_COLOR, then TTY detection.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import TextIO

import click

from ..models import ALL_CATEGORIES, FinalAssessment, Severity, Verdict
from ..session import ImprovementSession


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Determine if color output should be used.

    Args:
        explicit_flag: True/False to force, None to auto-detect.
        stream: Stream checked for a TTY; stdout by default.
    """
    if explicit_flag is not None:
        return explicit_flag
    # Any value, including empty, disables color
    if "NO_COLOR" in os.environ:
        return False
    if "FORCE_COLOR" in os.environ:
        return True
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()


@dataclass
class CLIReportConfig:
    """Configuration for terminal output."""

    use_color: bool = True
    quiet: bool = False
    max_issues: int = 10
    stream: TextIO = field(default_factory=lambda: sys.stdout)

    @classmethod
    def from_flags(cls, quiet: bool = False, no_color: bool = False) -> "CLIReportConfig":
        use_color = should_use_color(explicit_flag=False if no_color else None)
        return cls(use_color=use_color, quiet=quiet)


class CLIReporter:
    """Prints a compact, optionally colored summary."""

    COLORS = {
        "green": "\033[92m",
        "red": "\033[91m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "bold": "\033[1m",
        "dim": "\033[2m",
        "reset": "\033[0m",
    }

    VERDICT_COLORS = {
        Verdict.WORLD_CLASS: "green",
        Verdict.EXCELLENT: "green",
        Verdict.GOOD: "yellow",
        Verdict.POOR: "red",
    }

    SEVERITY_COLORS = {
        Severity.CRITICAL: "red",
        Severity.HIGH: "red",
        Severity.MEDIUM: "yellow",
        Severity.LOW: "dim",
    }

    def __init__(self, config: CLIReportConfig | None = None):
        self.config = config or CLIReportConfig()

    def _colorize(self, text: str, color: str) -> str:
        if not self.config.use_color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def _echo(self, line: str = "") -> None:
        click.echo(line, file=self.config.stream)

    def render_assessment(self, assessment: FinalAssessment) -> list[str]:
        """Summary lines for one assessment."""
        verdict = self._colorize(
            assessment.verdict.value, self.VERDICT_COLORS[assessment.verdict]
        )
        lines = [
            f"{self._colorize('Verdict:', 'bold')} {verdict}  "
            f"{assessment.weighted_score:.1f}/100  "
            f"(agreement {assessment.agreement_level.value}, "
            f"perception {assessment.perception.total:.1f})"
        ]
        if self.config.quiet:
            return lines

        lines.append("")
        for category in ALL_CATEGORIES:
            score = assessment.score_for(category)
            value = "n/a" if score is None else f"{score:4.1f}"
            lines.append(f"  {category.value:<16} {value}")

        if assessment.issues:
            lines += ["", self._colorize(f"Issues ({len(assessment.issues)}):", "bold")]
            for issue in assessment.issues[: self.config.max_issues]:
                severity = self._colorize(
                    f"[{issue.severity.value}]", self.SEVERITY_COLORS[issue.severity]
                )
                lines.append(f"  {severity} {issue.description} ({issue.location_hint})")
            hidden = len(assessment.issues) - self.config.max_issues
            if hidden > 0:
                lines.append(self._colorize(f"  ...and {hidden} more", "dim"))

        for failure in assessment.failures:
            lines.append(
                self._colorize(
                    f"  evaluator {failure.evaluator_id} abstained: {failure.reason}",
                    "yellow",
                )
            )
        return lines

    def render_session(self, session: ImprovementSession) -> list[str]:
        """Summary lines for an improvement session."""
        reason = session.termination_reason.value if session.termination_reason else "running"
        status_color = "green" if session.status == "converged" else "yellow"
        lines = [
            f"{self._colorize('Session:', 'bold')} {session.session_id} "
            f"{self._colorize(session.status, status_color)} ({reason}), "
            f"{len(session.iterations)} iteration(s)"
        ]
        if not self.config.quiet:
            for record in session.iterations:
                kind = record.fix_applied.kind if record.fix_applied else "-"
                delta = f"{record.score_delta:+.1f}"
                if record.regression_flagged:
                    delta = self._colorize(f"{delta} regression", "red")
                lines.append(
                    f"  {record.iteration:>2}. {kind:<36} "
                    f"{record.score_before:5.1f} -> {record.score_after:5.1f} ({delta})"
                )
            lines.append("")
        if session.final_assessment:
            lines += self.render_assessment(session.final_assessment)
        return lines

    def report(self, result: FinalAssessment | ImprovementSession) -> None:
        """Print the summary."""
        if isinstance(result, ImprovementSession):
            lines = self.render_session(result)
        else:
            lines = self.render_assessment(result)
        for line in lines:
            self._echo(line)
