"""Search discoverability rubric."""

from ..artifact import ArtifactSnapshot
from ..features import PageFeatures
from ..models import Category
from .base import BaseEvaluator, ScoreLedger


class DiscoverabilityEvaluator(BaseEvaluator):
    """Scores discoverability, structure and content from an SEO perspective.

    Titles and meta descriptions are checked on every page; structured
    data only on the landing page, where search engines expect the
    business description.
    """

    @property
    def evaluator_id(self) -> str:
        return "discoverability"

    @property
    def name(self) -> str:
        return "Discoverability"

    @property
    def categories(self) -> tuple[Category, ...]:
        return (Category.DISCOVERABILITY, Category.STRUCTURE, Category.CONTENT)

    @property
    def focus(self) -> str:
        return "Titles, meta descriptions, structured data and image alt text"

    def _check(
        self,
        pages: list[PageFeatures],
        snapshot: ArtifactSnapshot,
        ledger: ScoreLedger,
    ) -> None:
        ledger.check_pages("SEO.MISSING_TITLE", pages)
        ledger.check_pages("SEO.TITLE_LENGTH", pages)
        ledger.check_pages("SEO.MISSING_META_DESCRIPTION", pages)
        ledger.check_pages("SEO.MISSING_ALT", pages)
        ledger.check_landing("SEO.MISSING_SCHEMA", pages)

        # Crawlers rely on one h1 per page to find the topic
        ledger.check_pages("STRUCTURE.MISSING_H1", pages)
        ledger.check_pages("STRUCTURE.MULTIPLE_H1", pages)

        ledger.check_pages("CONTENT.THIN", pages)
