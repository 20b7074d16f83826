"""Consensus engine.

Reconciles the rubric evaluations into one score per category, derives
an agreement signal from inter-evaluator variance and flags outliers.
Outliers are reported, never excluded: disagreement stays auditable.
"""

import logging
import math

from .config import ConsensusConfig
from .domain import equal_weights, validate_weights
from .models import (
    ALL_CATEGORIES,
    AgreementLevel,
    Category,
    ConsensusResult,
    OutlierFlag,
    RubricEvaluation,
)

logger = logging.getLogger(__name__)


def _contributions(
    evaluations: list[RubricEvaluation], category: Category
) -> list[tuple[str, float, float]]:
    """(evaluator_id, score, confidence) for every evaluator scoring a category."""
    contributions = []
    for evaluation in evaluations:
        if evaluation.confidence <= 0.0:
            continue
        score = evaluation.score_for(category)
        if score is None:
            continue
        contributions.append((evaluation.evaluator_id, score, evaluation.confidence))
    return contributions


def _variance(scores: list[float]) -> float:
    mean = sum(scores) / len(scores)
    return sum((s - mean) ** 2 for s in scores) / len(scores)


def weighted_category_score(
    scores: dict[Category, float | None],
    weights: dict[Category, float] | None = None,
) -> float:
    """Weighted mean of category scores (0-10).

    Weights are renormalized over the categories that have a score, so
    an unscored category neither counts as zero nor inflates the rest.
    Returns 0 when nothing was scored.
    """
    weights = weights or equal_weights()
    total_weight = 0.0
    weighted = 0.0
    for category, score in scores.items():
        if score is None:
            continue
        weight = weights.get(category, 0.0)
        weighted += score * weight
        total_weight += weight
    if total_weight <= 0.0:
        return 0.0
    return weighted / total_weight


class ConsensusEngine:
    """Combines rubric evaluations into a ConsensusResult."""

    def __init__(self, config: ConsensusConfig | None = None):
        self.config = config or ConsensusConfig()

    def combine(
        self,
        evaluations: list[RubricEvaluation],
        domain_weights: dict[Category, float] | None = None,
    ) -> ConsensusResult:
        """Combine evaluations.

        Args:
            evaluations: Rubric evaluations; abstaining ones contribute nothing.
            domain_weights: Optional industry weights, validated here so a
                bad weight map is rejected before any scoring is trusted.

        Returns:
            ConsensusResult with a score (or None) for every category.

        Raises:
            ConfigurationError: If domain weights are invalid.
        """
        if domain_weights is not None:
            validate_weights(domain_weights)

        category_scores: dict[Category, float | None] = {}
        category_variance: dict[Category, float] = {}
        outliers: list[OutlierFlag] = []

        for category in ALL_CATEGORIES:
            contributions = _contributions(evaluations, category)
            if not contributions:
                category_scores[category] = None
                continue

            total_confidence = sum(conf for _, _, conf in contributions)
            combined = (
                sum(score * conf for _, score, conf in contributions) / total_confidence
            )
            category_scores[category] = combined

            if len(contributions) < 2:
                continue

            scores = [score for _, score, _ in contributions]
            variance = _variance(scores)
            category_variance[category] = variance
            outliers.extend(self._flag_outliers(category, contributions))

        agreement_score, level = self._agreement(category_variance)

        if outliers:
            logger.debug(
                f"Consensus flagged {len(outliers)} outlier score(s): "
                + ", ".join(f"{o.evaluator_id}/{o.category.value}" for o in outliers)
            )

        return ConsensusResult(
            category_scores=category_scores,
            agreement_level=level,
            agreement_score=agreement_score,
            category_variance=category_variance,
            outliers=outliers,
        )

    def _flag_outliers(
        self,
        category: Category,
        contributions: list[tuple[str, float, float]],
    ) -> list[OutlierFlag]:
        """Flag scores far from the consensus of the other contributors.

        Each score is compared against the confidence-weighted mean and
        the spread of the remaining scores. The spread is floored
        at ``outlier_min_gap / outlier_std_devs``: when the others agree
        exactly, any gap wider than ``outlier_min_gap`` points is flagged.
        With two contributors a wide gap flags both.
        """
        spread_floor = self.config.outlier_min_gap / self.config.outlier_std_devs
        flags = []
        for index, (evaluator_id, score, _) in enumerate(contributions):
            others = contributions[:index] + contributions[index + 1 :]
            total_confidence = sum(conf for _, _, conf in others)
            reference = sum(s * conf for _, s, conf in others) / total_confidence
            spread = math.sqrt(_variance([s for _, s, _ in others]))
            deviation = abs(score - reference) / max(spread, spread_floor)
            if deviation > self.config.outlier_std_devs:
                flags.append(
                    OutlierFlag(
                        evaluator_id=evaluator_id,
                        category=category,
                        score=score,
                        consensus=reference,
                        deviation=deviation,
                    )
                )
        return flags

    def _agreement(
        self, category_variance: dict[Category, float]
    ) -> tuple[float, AgreementLevel]:
        """Aggregate per-category variance into a score and a level.

        Per-category agreement is ``1 / (1 + variance)``, averaged over
        categories with at least two contributors. The level is
        discretized on the mean variance. Without any overlap there is
        no evidence of agreement, so the level is Low.
        """
        if not category_variance:
            return 0.0, AgreementLevel.LOW

        variances = list(category_variance.values())
        agreement_score = sum(1.0 / (1.0 + v) for v in variances) / len(variances)
        mean_variance = sum(variances) / len(variances)

        if mean_variance < self.config.high_agreement_variance:
            level = AgreementLevel.HIGH
        elif mean_variance < self.config.medium_agreement_variance:
            level = AgreementLevel.MEDIUM
        else:
            level = AgreementLevel.LOW
        return agreement_score, level


def combine(
    evaluations: list[RubricEvaluation],
    domain_weights: dict[Category, float] | None = None,
    config: ConsensusConfig | None = None,
) -> ConsensusResult:
    """Combine evaluations with a default-configured engine."""
    return ConsensusEngine(config).combine(evaluations, domain_weights)
