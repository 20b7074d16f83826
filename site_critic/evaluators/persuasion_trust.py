"""Persuasion and trust rubric.

Can a visitor reach the business, is there a reason to believe it, and
is there an obvious next step? Missing contact information is the one
defect rated Critical: a site nobody can contact cannot convert.
"""

from ..artifact import ArtifactSnapshot
from ..features import PageFeatures
from ..models import Category
from .base import BaseEvaluator, ScoreLedger


class PersuasionTrustEvaluator(BaseEvaluator):
    """Scores persuasion and content from a conversion perspective."""

    @property
    def evaluator_id(self) -> str:
        return "persuasion_trust"

    @property
    def name(self) -> str:
        return "Persuasion & Trust"

    @property
    def categories(self) -> tuple[Category, ...]:
        return (Category.PERSUASION, Category.CONTENT)

    @property
    def focus(self) -> str:
        return "Contact paths, calls-to-action, social proof and credible copy"

    def _check(
        self,
        pages: list[PageFeatures],
        snapshot: ArtifactSnapshot,
        ledger: ScoreLedger,
    ) -> None:
        ledger.check_site("PERSUASION.MISSING_CONTACT", pages)
        ledger.check_landing("PERSUASION.MISSING_CTA", pages)
        ledger.check_site("PERSUASION.MISSING_SOCIAL_PROOF", pages)
        ledger.check_site("PERSUASION.MISSING_FORM", pages)

        ledger.check_pages("CONTENT.PLACEHOLDER_TEXT", pages)
