"""Distinctiveness rubric.

Catches sites that are technically sound but could belong to anyone:
stock phrasing, placeholder imagery, no story and no brand mark.
"""

from ..artifact import ArtifactSnapshot
from ..checks import generic_copy
from ..features import PageFeatures
from ..models import Category
from .base import BaseEvaluator, ScoreLedger

# Generic phrases beyond which the full penalty applies
GENERIC_PHRASE_SATURATION = 3


class DistinctivenessEvaluator(BaseEvaluator):
    """Scores distinctiveness, visual, content and persuasion from a brand perspective."""

    @property
    def evaluator_id(self) -> str:
        return "distinctiveness"

    @property
    def name(self) -> str:
        return "Distinctiveness"

    @property
    def categories(self) -> tuple[Category, ...]:
        return (
            Category.DISTINCTIVENESS,
            Category.VISUAL,
            Category.CONTENT,
            Category.PERSUASION,
        )

    @property
    def focus(self) -> str:
        return "Brand voice, original imagery and memorable identity"

    def _check(
        self,
        pages: list[PageFeatures],
        snapshot: ArtifactSnapshot,
        ledger: ScoreLedger,
    ) -> None:
        generic_pages = [page for page in pages if generic_copy(page)]
        if generic_pages:
            phrase_count = sum(len(page.generic_phrases) for page in generic_pages)
            weight = min(1.0, 0.5 + 0.5 * phrase_count / GENERIC_PHRASE_SATURATION)
            ledger.penalize(
                "DISTINCT.GENERIC_COPY",
                ", ".join(page.path for page in generic_pages),
                weight=weight,
            )

        ledger.check_pages("DISTINCT.TEMPLATE_IMAGERY", pages)
        ledger.check_site("DISTINCT.MISSING_BRAND_STORY", pages)
        ledger.check_pages("DISTINCT.MISSING_LOGO", pages)

        ledger.check_pages("VISUAL.NO_COLOR_PALETTE", pages)
        ledger.check_pages("CONTENT.PLACEHOLDER_TEXT", pages)
        ledger.check_site("PERSUASION.MISSING_SOCIAL_PROOF", pages)
