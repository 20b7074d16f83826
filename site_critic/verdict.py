"""Verdict classification.

Blends the weighted consensus score with the perception total and maps
the result onto a tier. Tiers are checked strictly from the top and
every condition of a tier must hold: one weak category or low
agreement can never be averaged away by strong scores elsewhere.
"""

import logging

from .config import VerdictConfig
from .consensus import weighted_category_score
from .models import (
    AgreementLevel,
    Category,
    ConsensusResult,
    PerceptionScore,
    Verdict,
)

logger = logging.getLogger(__name__)


class VerdictClassifier:
    """Maps consensus, perception and agreement to a weighted score and verdict."""

    def __init__(self, config: VerdictConfig | None = None):
        self.config = config or VerdictConfig()

    def weighted_score(
        self,
        category_scores: dict[Category, float | None],
        perception: PerceptionScore,
        weights: dict[Category, float] | None = None,
    ) -> float:
        """Blend the weighted category score (scaled to 0-100) with perception."""
        category_part = weighted_category_score(category_scores, weights) * 10.0
        blend = self.config.blend
        return blend * category_part + (1.0 - blend) * perception.total

    def _all_at_least(
        self, category_scores: dict[Category, float | None], minimums: dict[Category, float]
    ) -> bool:
        return all(
            category_scores.get(category) is not None
            and category_scores[category] >= minimum
            for category, minimum in minimums.items()
        )

    def tier(
        self,
        weighted: float,
        category_scores: dict[Category, float | None],
        perception_total: float,
        agreement_level: AgreementLevel,
    ) -> Verdict:
        """First tier whose every condition holds."""
        c = self.config

        world_class_minimums = {cat: c.world_class_category for cat in c.minimums}
        if (
            weighted >= c.world_class_score
            and self._all_at_least(category_scores, world_class_minimums)
            and perception_total >= c.world_class_perception
            and agreement_level == AgreementLevel.HIGH
        ):
            return Verdict.WORLD_CLASS

        if (
            weighted >= c.excellent_score
            and self._all_at_least(category_scores, c.minimums)
            and perception_total >= c.excellent_perception
            and agreement_level in (AgreementLevel.HIGH, AgreementLevel.MEDIUM)
        ):
            return Verdict.EXCELLENT

        if weighted >= c.good_score:
            return Verdict.GOOD

        return Verdict.POOR

    def classify(
        self,
        consensus: ConsensusResult,
        perception: PerceptionScore,
        agreement_level: AgreementLevel | None = None,
        weights: dict[Category, float] | None = None,
    ) -> tuple[float, Verdict]:
        """Classify a consensus result.

        Args:
            consensus: Combined category scores.
            perception: Perception score for the same snapshot.
            agreement_level: Agreement to judge by; defaults to the consensus level.
            weights: Domain weights for the category part of the score.

        Returns:
            Tuple of (weighted_score 0-100, verdict).
        """
        level = agreement_level or consensus.agreement_level
        weighted = self.weighted_score(consensus.category_scores, perception, weights)
        verdict = self.tier(weighted, consensus.category_scores, perception.total, level)
        logger.debug(f"Verdict {verdict.value} at weighted score {weighted:.2f}")
        return weighted, verdict


def classify(
    consensus: ConsensusResult,
    perception: PerceptionScore,
    agreement_level: AgreementLevel | None = None,
    config: VerdictConfig | None = None,
    weights: dict[Category, float] | None = None,
) -> tuple[float, Verdict]:
    """Classify with a default-configured classifier."""
    return VerdictClassifier(config).classify(
        consensus, perception, agreement_level, weights
    )
