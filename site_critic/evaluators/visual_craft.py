"""Visual craft rubric.

Scores styling quality from the stylesheet: palette, typography,
responsiveness, imagery, cross-page cohesion and brand marks.
"""

from ..artifact import ArtifactSnapshot
from ..checks import palette_diverges
from ..features import PageFeatures
from ..models import Category
from .base import BaseEvaluator, ScoreLedger


class VisualCraftEvaluator(BaseEvaluator):
    """Scores visual, structure and distinctiveness from a design perspective."""

    @property
    def evaluator_id(self) -> str:
        return "visual_craft"

    @property
    def name(self) -> str:
        return "Visual Craft"

    @property
    def categories(self) -> tuple[Category, ...]:
        return (Category.VISUAL, Category.STRUCTURE, Category.DISTINCTIVENESS)

    @property
    def focus(self) -> str:
        return "Palette, typography, responsive layout and imagery"

    def _check(
        self,
        pages: list[PageFeatures],
        snapshot: ArtifactSnapshot,
        ledger: ScoreLedger,
    ) -> None:
        unstyled = ledger.check_pages("VISUAL.MISSING_STYLESHEET", pages)

        # Palette, type and responsiveness only mean something once styled
        styled = [page for page in pages if page.path not in unstyled]
        ledger.check_pages("VISUAL.NO_COLOR_PALETTE", styled)
        ledger.check_pages("VISUAL.TOO_MANY_FONTS", styled)
        ledger.check_pages("VISUAL.NO_RESPONSIVE", styled)

        ledger.check_landing("VISUAL.MISSING_IMAGERY", pages)

        if len(styled) > 1:
            landing = styled[0]
            ledger.check_pages(
                "VISUAL.INCONSISTENT_PALETTE",
                styled,
                lambda page: palette_diverges(page, landing),
            )

        # A layout without a viewport meta breaks on phones however good the CSS
        ledger.check_pages("STRUCTURE.MISSING_VIEWPORT", pages)

        ledger.check_pages("DISTINCT.MISSING_LOGO", pages)
