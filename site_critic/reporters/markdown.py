"""Markdown report for humans reviewing an assessment or a session."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..models import ALL_CATEGORIES, FinalAssessment
from ..session import ImprovementSession


@dataclass
class MarkdownReportConfig:
    """Configuration for Markdown output."""

    title: str = "Website Quality Report"
    max_issues: int = 50
    include_timestamp: bool = True


def _score(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.1f}"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class MarkdownReporter:
    """Renders assessments and sessions as Markdown."""

    def __init__(self, config: MarkdownReportConfig | None = None):
        self.config = config or MarkdownReportConfig()

    def _render_summary(self, assessment: FinalAssessment) -> list[str]:
        return [
            f"**Verdict:** {assessment.verdict.value}  ",
            f"**Weighted score:** {assessment.weighted_score:.1f} / 100  ",
            f"**Agreement:** {assessment.agreement_level.value}",
            "",
        ]

    def _render_categories(self, assessment: FinalAssessment) -> list[str]:
        lines = ["## Category Scores", "", "| Category | Score | Variance |", "|---|---:|---:|"]
        variance = assessment.consensus.category_variance if assessment.consensus else {}
        for category in ALL_CATEGORIES:
            spread = variance.get(category)
            lines.append(
                f"| {category.value} | {_score(assessment.score_for(category))} "
                f"| {'-' if spread is None else f'{spread:.2f}'} |"
            )
        lines.append("")
        return lines

    def _render_perception(self, assessment: FinalAssessment) -> list[str]:
        perception = assessment.perception
        breakdown = perception.breakdown
        return [
            "## Perception",
            "",
            f"Total: **{perception.total:.1f} / 100** "
            f"(trust {breakdown['trust']}, premium {breakdown['premium']}, "
            f"memorable {breakdown['memorable']})",
            "",
            "| Dimension | Score |",
            "|---|---:|",
            f"| First impression | {perception.first_impression:.1f} / 25 |",
            f"| Emotional resonance | {perception.emotional_resonance:.1f} / 25 |",
            f"| Cohesion | {perception.cohesion:.1f} / 25 |",
            f"| Identity recognition | {perception.identity_recognition:.1f} / 25 |",
            "",
        ]

    def _render_agreement(self, assessment: FinalAssessment) -> list[str]:
        consensus = assessment.consensus
        if consensus is None or not consensus.outliers:
            return []
        lines = ["## Outlier Evaluators", ""]
        for flag in consensus.outliers:
            lines.append(
                f"- `{flag.evaluator_id}` scored {flag.category.value} "
                f"{flag.score:.1f} vs consensus {flag.consensus:.1f} "
                f"({flag.deviation:.1f} std devs)"
            )
        lines.append("")
        return lines

    def _render_issues(self, assessment: FinalAssessment) -> list[str]:
        lines = [f"## Remaining Issues ({len(assessment.issues)})", ""]
        if not assessment.issues:
            return lines + ["No issues found.", ""]

        lines += ["| # | Severity | Category | Issue | Location |", "|---:|---|---|---|---|"]
        for index, issue in enumerate(assessment.issues[: self.config.max_issues], 1):
            lines.append(
                f"| {index} | {issue.severity.value} | {issue.category.value} "
                f"| {_cell(issue.description)} | {_cell(issue.location_hint)} |"
            )
        hidden = len(assessment.issues) - self.config.max_issues
        if hidden > 0:
            lines.append(f"\n_...and {hidden} more._")
        lines.append("")
        return lines

    def _render_failures(self, assessment: FinalAssessment) -> list[str]:
        if not assessment.failures:
            return []
        lines = ["## Evaluation Failures", ""]
        for failure in assessment.failures:
            kind = f" ({failure.exception_type})" if failure.exception_type else ""
            lines.append(f"- `{failure.evaluator_id}`{kind}: {failure.reason}")
        lines.append("")
        return lines

    def _render_assessment(self, assessment: FinalAssessment) -> list[str]:
        return (
            self._render_summary(assessment)
            + self._render_categories(assessment)
            + self._render_perception(assessment)
            + self._render_agreement(assessment)
            + self._render_issues(assessment)
            + self._render_failures(assessment)
        )

    def _render_iterations(self, session: ImprovementSession) -> list[str]:
        lines = ["## Iterations", ""]
        if not session.iterations:
            return lines + ["No fixes were applied.", ""]

        lines += [
            "| # | Issue fixed | Fixer | Before | After | Delta |",
            "|---:|---|---|---:|---:|---:|",
        ]
        for record in session.iterations:
            issue = record.fix_applied
            label = f"{issue.kind} ({issue.location_hint})" if issue else "-"
            flag = " ⚠" if record.regression_flagged else ""
            lines.append(
                f"| {record.iteration} | {_cell(label)} | {record.fixer_id or '-'} "
                f"| {record.score_before:.1f} | {record.score_after:.1f} "
                f"| {record.score_delta:+.1f}{flag} |"
            )
        lines.append("")
        return lines

    def render(self, result: FinalAssessment | ImprovementSession) -> str:
        """Render a report as Markdown text."""
        lines = [f"# {self.config.title}", ""]
        if self.config.include_timestamp:
            lines += [f"_Generated {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}_", ""]

        if isinstance(result, ImprovementSession):
            reason = result.termination_reason.value if result.termination_reason else "running"
            lines += [
                f"**Session:** `{result.session_id}`  ",
                f"**Status:** {result.status} ({reason})  ",
                f"**Target:** {result.config.target_score:.1f} with every category "
                f">= {result.config.min_category_score:.1f}",
                "",
            ]
            if result.initial_assessment and result.final_assessment:
                lines += [
                    f"Score moved from {result.initial_assessment.weighted_score:.1f} "
                    f"to {result.final_assessment.weighted_score:.1f} over "
                    f"{len(result.iterations)} iteration(s).",
                    "",
                ]
            lines += self._render_iterations(result)
            if result.final_assessment:
                lines += ["## Final Assessment", ""]
                lines += self._render_assessment(result.final_assessment)
        else:
            lines += self._render_assessment(result)

        return "\n".join(lines).rstrip() + "\n"

    def generate(
        self, result: FinalAssessment | ImprovementSession, output_path: Path
    ) -> Path:
        """Write the Markdown report to a file."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(result), encoding="utf-8")
        return output_path
