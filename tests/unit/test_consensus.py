"""Unit tests for the consensus engine."""

import pytest

from site_critic.config import ConsensusConfig
from site_critic.consensus import ConsensusEngine, combine, weighted_category_score
from site_critic.errors import ConfigurationError
from site_critic.models import AgreementLevel, Category, RubricEvaluation


def evaluation(evaluator_id: str, confidence: float = 1.0, **scores: float) -> RubricEvaluation:
    """Build an evaluation from keyword scores, e.g. content=8.0."""
    return RubricEvaluation(
        evaluator_id=evaluator_id,
        category_scores={Category[name.upper()]: value for name, value in scores.items()},
        confidence=confidence,
    )


class TestWeightedCategoryScore:
    """Tests for weighted_category_score."""

    def test_equal_weights_by_default(self):
        """Test the plain mean with default weights."""
        scores = {c: 8.0 for c in Category}

        assert weighted_category_score(scores) == pytest.approx(8.0)

    def test_unscored_categories_renormalized(self):
        """Test that a missing category neither counts as zero nor inflates others."""
        scores = {c: 9.0 for c in Category}
        scores[Category.VISUAL] = None

        assert weighted_category_score(scores) == pytest.approx(9.0)

    def test_nothing_scored(self):
        """Test that no scores at all yields zero."""
        assert weighted_category_score({c: None for c in Category}) == 0.0

    def test_weights_applied(self):
        """Test that a heavier category pulls the mean toward its score."""
        scores = {Category.VISUAL: 10.0, Category.CONTENT: 0.0}
        weights = {Category.VISUAL: 0.75, Category.CONTENT: 0.25}

        assert weighted_category_score(scores, weights) == pytest.approx(7.5)


class TestConsensusEngine:
    """Tests for ConsensusEngine.combine()."""

    @pytest.fixture
    def engine(self):
        return ConsensusEngine()

    def test_every_category_present(self, engine):
        """Test that every category has an entry, None when nobody scored it."""
        result = engine.combine([evaluation("a", visual=8.0)])

        assert set(result.category_scores) == set(Category)
        assert result.category_scores[Category.VISUAL] == 8.0
        assert result.category_scores[Category.CONTENT] is None

    def test_confidence_weighted_mean(self, engine):
        """Test that scores are weighted by evaluator confidence."""
        result = engine.combine(
            [
                evaluation("a", confidence=1.0, content=9.0),
                evaluation("b", confidence=0.5, content=6.0),
            ]
        )

        assert result.category_scores[Category.CONTENT] == pytest.approx(8.0)

    def test_abstaining_evaluators_ignored(self, engine):
        """Test that zero-confidence evaluations contribute nothing."""
        result = engine.combine(
            [
                evaluation("a", content=9.0),
                evaluation("b", confidence=0.0, content=1.0),
            ]
        )

        assert result.category_scores[Category.CONTENT] == 9.0
        assert Category.CONTENT not in result.category_variance

    def test_high_agreement(self, engine):
        """Test that near-identical scores agree highly."""
        result = engine.combine(
            [evaluation("a", content=8.0, visual=7.0), evaluation("b", content=8.5, visual=7.0)]
        )

        assert result.agreement_level == AgreementLevel.HIGH
        assert result.category_variance[Category.CONTENT] == pytest.approx(0.0625)

    def test_medium_agreement(self, engine):
        """Test agreement between the high and medium variance bounds."""
        result = engine.combine([evaluation("a", content=9.0), evaluation("b", content=6.0)])

        # Population variance of 9 and 6 is 2.25
        assert result.agreement_level == AgreementLevel.MEDIUM

    def test_low_agreement(self, engine):
        """Test that wildly different scores disagree."""
        result = engine.combine([evaluation("a", content=10.0), evaluation("b", content=2.0)])

        assert result.agreement_level == AgreementLevel.LOW
        assert result.agreement_score == pytest.approx(1 / 17)

    def test_no_overlap_is_low_agreement(self, engine):
        """Test that without shared categories there is no evidence of agreement."""
        result = engine.combine([evaluation("a", content=9.0), evaluation("b", visual=9.0)])

        assert result.agreement_level == AgreementLevel.LOW
        assert result.agreement_score == 0.0

    def test_outlier_flagged_not_excluded(self, engine):
        """Test that a lone dissenter is flagged but still counted."""
        result = engine.combine(
            [
                evaluation("a", content=10.0),
                evaluation("b", content=10.0),
                evaluation("c", content=10.0),
                evaluation("d", content=4.0),
            ]
        )

        assert result.category_scores[Category.CONTENT] == pytest.approx(8.5)
        assert result.outlier_evaluators == ["d"]
        flag = result.outliers[0]
        assert flag.category == Category.CONTENT
        assert flag.score == 4.0
        # Measured against the other three, who agree exactly
        assert flag.consensus == 10.0
        assert flag.deviation == pytest.approx(6.0 / (2.0 / 1.5))

    def test_three_evaluators_one_dissenter(self, engine):
        """Test that one score far from two agreeing peers is flagged."""
        result = engine.combine(
            [
                evaluation("a", structure=10.0),
                evaluation("b", structure=10.0),
                evaluation("c", structure=0.0),
            ]
        )

        assert result.outlier_evaluators == ["c"]
        assert result.outliers[0].category == Category.STRUCTURE

    def test_two_evaluators_far_apart(self, engine):
        """Test that a wide gap between two scores flags both."""
        result = engine.combine([evaluation("a", visual=10.0), evaluation("b", visual=4.0)])

        assert sorted(result.outlier_evaluators) == ["a", "b"]

    def test_small_gap_not_flagged(self, engine):
        """Test that gaps within the minimum are ordinary disagreement."""
        result = engine.combine(
            [
                evaluation("a", persuasion=10.0),
                evaluation("b", persuasion=10.0),
                evaluation("c", persuasion=8.5),
            ]
        )

        assert result.outliers == []

    def test_spread_among_peers_raises_the_bar(self, engine):
        """Test that noisy peers tolerate a larger gap."""
        result = engine.combine(
            [
                evaluation("a", content=10.0),
                evaluation("b", content=6.0),
                evaluation("c", content=5.0),
            ]
        )

        # Peers of c average 8.0 with a spread of 2.0: a 3-point gap is 1.5 deviations
        assert "c" not in result.outlier_evaluators

    def test_outlier_thresholds_configurable(self):
        """Test that the minimum gap comes from configuration."""
        engine = ConsensusEngine(ConsensusConfig(outlier_min_gap=7.0))

        result = engine.combine(
            [
                evaluation("a", structure=10.0),
                evaluation("b", structure=10.0),
                evaluation("c", structure=4.0),
            ]
        )

        assert result.outliers == []

    def test_custom_thresholds(self):
        """Test that agreement bounds come from configuration."""
        engine = ConsensusEngine(
            ConsensusConfig(high_agreement_variance=3.0, medium_agreement_variance=5.0)
        )

        result = engine.combine([evaluation("a", content=9.0), evaluation("b", content=6.0)])

        assert result.agreement_level == AgreementLevel.HIGH

    def test_invalid_domain_weights_rejected(self, engine):
        """Test that bad weights fail before any scoring."""
        with pytest.raises(ConfigurationError, match="sum to 1"):
            engine.combine([evaluation("a", content=9.0)], {Category.CONTENT: 0.5})

    def test_module_level_combine(self):
        """Test the default-configured helper."""
        result = combine([evaluation("a", content=9.0), evaluation("b", content=9.0)])

        assert result.agreement_level == AgreementLevel.HIGH
        assert result.to_dict()["category_scores"]["Content"] == 9.0
