"""Quality assessment: one snapshot in, one FinalAssessment out.

Runs the evaluator panel and the perception scorer concurrently, then
feeds their results through consensus, verdict classification and
issue prioritization. Deterministic for a given snapshot.
"""

import logging
import time

from .artifact import ArtifactSnapshot
from .config import CriticConfig
from .consensus import ConsensusEngine
from .critic_logging import LogCategory, get_category_logger
from .domain import DomainContext
from .evaluators import EvaluatorPanel, create_panel
from .models import FinalAssessment, PerceptionScore
from .perception import NEUTRAL, perceive
from .prioritizer import IssuePrioritizer
from .verdict import VerdictClassifier

logger = get_category_logger(LogCategory.ASSESSMENT)


class QualityAssessor:
    """Wires the panel, consensus, verdict and prioritizer together.

    The domain weights are resolved (and validated) at construction, so
    a bad configuration fails before any snapshot is scored.
    """

    def __init__(
        self,
        config: CriticConfig | None = None,
        domain: DomainContext | None = None,
        panel: EvaluatorPanel | None = None,
    ):
        """Initialize the assessor.

        Args:
            config: Full configuration; defaults when omitted.
            domain: Industry context; falls back to the config's industry/weights.
            panel: Evaluator panel; the five standard rubrics when omitted.

        Raises:
            ConfigurationError: If the domain weights are invalid.
        """
        self.config = config or CriticConfig()
        self.domain = domain or DomainContext(
            industry=self.config.industry, weights=self.config.weights
        )
        self.weights = self.domain.resolve_weights()
        self.panel = panel or create_panel(
            timeout_seconds=self.config.panel.timeout_seconds,
            max_workers=self.config.panel.max_workers,
        )
        self.consensus_engine = ConsensusEngine(self.config.consensus)
        self.classifier = VerdictClassifier(self.config.verdict)
        self.prioritizer = IssuePrioritizer(
            self.config.prioritizer, self.config.verdict.minimums
        )

    def assess(
        self,
        snapshot: ArtifactSnapshot,
        timeout_seconds: float | None = None,
    ) -> FinalAssessment:
        """Assess one snapshot.

        Args:
            snapshot: Immutable snapshot to score.
            timeout_seconds: Cap on the concurrent evaluation phase.

        Returns:
            FinalAssessment with prioritized issues.
        """
        start = time.perf_counter()

        panel_result = self.panel.run(
            snapshot, perceiver=perceive, timeout_seconds=timeout_seconds
        )
        # A failed perceiver counts as no evidence either way
        perception = panel_result.perception or PerceptionScore(
            NEUTRAL, NEUTRAL, NEUTRAL, NEUTRAL
        )

        consensus = self.consensus_engine.combine(panel_result.evaluations, self.weights)
        weighted, verdict = self.classifier.classify(
            consensus, perception, weights=self.weights
        )

        all_issues = [
            issue for evaluation in panel_result.evaluations for issue in evaluation.issues
        ]
        issues = self.prioritizer.prioritize(all_issues, consensus.category_scores)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Assessed snapshot v{snapshot.version}: {verdict.value} "
            f"({weighted:.1f}/100), {len(issues)} issue(s)",
            extra={"weighted_score": round(weighted, 2), "duration_ms": round(elapsed_ms, 1)},
        )

        return FinalAssessment(
            weighted_score=weighted,
            category_scores=dict(consensus.category_scores),
            perception=perception,
            agreement_level=consensus.agreement_level,
            verdict=verdict,
            issues=issues,
            consensus=consensus,
            evaluations=panel_result.evaluations,
            failures=panel_result.failures,
            snapshot_version=snapshot.version,
            analysis_time_ms=elapsed_ms,
        )


def assess(
    snapshot: ArtifactSnapshot,
    domain_context: DomainContext | None = None,
    config: CriticConfig | None = None,
) -> FinalAssessment:
    """Assess a snapshot with the standard rubrics.

    Raises:
        ConfigurationError: If the domain weights are invalid.
    """
    return QualityAssessor(config=config, domain=domain_context).assess(snapshot)
