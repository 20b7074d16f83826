"""Structural and usability rubric.

Looks at the page outline (h1, heading hierarchy), navigation and
footer landmarks, mobile readiness, copy depth and whether the landing
page leads the visitor to a call-to-action.
"""

from ..artifact import ArtifactSnapshot
from ..features import PageFeatures
from ..models import Category, Severity
from .base import BaseEvaluator, ScoreLedger


class UXStructureEvaluator(BaseEvaluator):
    """Scores structure, content and persuasion from a UX perspective."""

    @property
    def evaluator_id(self) -> str:
        return "ux_structure"

    @property
    def name(self) -> str:
        return "UX & Structure"

    @property
    def categories(self) -> tuple[Category, ...]:
        return (Category.STRUCTURE, Category.CONTENT, Category.PERSUASION)

    @property
    def focus(self) -> str:
        return "Page outline, landmarks, mobile readiness and the visitor journey"

    def _check(
        self,
        pages: list[PageFeatures],
        snapshot: ArtifactSnapshot,
        ledger: ScoreLedger,
    ) -> None:
        # Outline
        ledger.check_pages("STRUCTURE.MISSING_H1", pages)
        ledger.check_pages("STRUCTURE.MULTIPLE_H1", pages)
        ledger.check_pages("STRUCTURE.HEADING_SKIP", pages)

        # Landmarks; a single-page site can get by with in-page anchors
        nav_severity = Severity.HIGH if len(snapshot.pages) > 1 else Severity.MEDIUM
        ledger.check_pages("STRUCTURE.MISSING_NAV", pages, severity=nav_severity)
        ledger.check_pages("STRUCTURE.MISSING_FOOTER", pages)

        # Mobile and accessibility basics
        ledger.check_pages("STRUCTURE.MISSING_VIEWPORT", pages)
        ledger.check_pages("STRUCTURE.MISSING_LANG", pages)

        # Copy depth
        ledger.check_pages("CONTENT.THIN", pages)
        ledger.check_pages("CONTENT.DUPLICATE_HEADINGS", pages)

        # Journey: the landing page must end in an action
        ledger.check_landing("PERSUASION.MISSING_CTA", pages)
