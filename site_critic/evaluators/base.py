"""Base evaluator class for rubric scoring.

This module defines the abstract base class for all rubric evaluators
and the score ledger they record penalties in. An evaluator is a pure
function of an artifact snapshot: it reads extracted page features,
never the live artifact.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..artifact import ArtifactSnapshot
from ..checks import LANDING_CHECKS, PAGE_CHECKS, SITE_CHECKS
from ..errors import EvaluationError
from ..features import PageFeatures, site_features
from ..issues import SITE_LOCATION, get_kind, make_issue
from ..models import Category, Issue, RubricEvaluation, Severity

logger = logging.getLogger(__name__)

MAX_SCORE = 10.0
MIN_SCORE = 0.0


class ScoreLedger:
    """Running category scores and the issues explaining every deduction.

    Every category starts at 10. Recording a failed check subtracts the
    kind's penalty from its category and appends an Issue, so a score
    below 10 always comes with at least one issue.
    """

    def __init__(self, evaluator_id: str, categories: tuple[Category, ...]):
        self.evaluator_id = evaluator_id
        self.scores: dict[Category, float] = {c: MAX_SCORE for c in categories}
        self.issues: list[Issue] = []

    def penalize(
        self,
        kind: str,
        location_hint: str = SITE_LOCATION,
        weight: float = 1.0,
        severity: Severity | None = None,
    ) -> Issue:
        """Deduct a kind's penalty (scaled by ``weight``) and record the issue.

        Raises:
            ValueError: If the kind's category is outside this evaluator's specialty.
        """
        definition = get_kind(kind)
        if definition.category not in self.scores:
            raise ValueError(
                f"{self.evaluator_id} does not score {definition.category.value} "
                f"but reported {kind}"
            )
        current = self.scores[definition.category]
        self.scores[definition.category] = max(MIN_SCORE, current - definition.penalty * weight)
        issue = make_issue(kind, self.evaluator_id, location_hint, severity)
        self.issues.append(issue)
        return issue

    def check_pages(
        self,
        kind: str,
        pages: list[PageFeatures],
        failing: Callable[[PageFeatures], bool] | None = None,
        severity: Severity | None = None,
    ) -> list[str]:
        """Run a per-page check and record one issue for all failing pages.

        The penalty scales with the share of pages affected: half the
        base penalty for a single page of many, the full penalty when
        every page fails.

        Args:
            kind: Issue kind to report.
            pages: Pages to check.
            failing: Predicate; defaults to the shared check for ``kind``.
            severity: Override of the kind's default severity.

        Returns:
            Paths of failing pages.
        """
        if not pages:
            return []
        failing = failing or PAGE_CHECKS[kind]
        affected = [page.path for page in pages if failing(page)]
        if affected:
            fraction = len(affected) / len(pages)
            self.penalize(
                kind,
                ", ".join(affected),
                weight=0.5 + 0.5 * fraction,
                severity=severity,
            )
        return affected

    def check_landing(self, kind: str, pages: list[PageFeatures]) -> bool:
        """Run a landing-page check at full penalty."""
        landing = pages[0]
        failed = LANDING_CHECKS[kind](landing)
        if failed:
            self.penalize(kind, landing.path)
        return failed

    def check_site(self, kind: str, pages: list[PageFeatures]) -> bool:
        """Run a site-wide check at full penalty."""
        failed = SITE_CHECKS[kind](pages)
        if failed:
            self.penalize(kind, SITE_LOCATION)
        return failed


class BaseEvaluator(ABC):
    """Abstract base class for rubric evaluators.

    Subclasses declare their identity and specialty and implement
    ``_check``; ``evaluate`` handles feature extraction, confidence and
    the abstain-on-failure contract.
    """

    @property
    @abstractmethod
    def evaluator_id(self) -> str:
        """Unique evaluator identifier (e.g. 'ux_structure')."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable evaluator name."""

    @property
    @abstractmethod
    def categories(self) -> tuple[Category, ...]:
        """Categories this evaluator scores."""

    @property
    def focus(self) -> str:
        """One-line description of what the rubric looks for."""
        return self.name

    @abstractmethod
    def _check(
        self,
        pages: list[PageFeatures],
        snapshot: ArtifactSnapshot,
        ledger: ScoreLedger,
    ) -> None:
        """Run the rubric's checks, recording failures in the ledger.

        Args:
            pages: Features of every non-empty page, landing page first.
            snapshot: The snapshot under evaluation.
            ledger: Ledger to record penalties in.
        """

    def evaluate(self, snapshot: ArtifactSnapshot) -> RubricEvaluation:
        """Score a snapshot.

        Returns:
            RubricEvaluation; abstaining (confidence 0, all scores None)
            when the snapshot cannot be scored.
        """
        try:
            features = site_features(snapshot)
            usable = [page for page in features if not page.empty]
            if not usable:
                raise EvaluationError(
                    self.evaluator_id, "Snapshot has no page with markup"
                )

            ledger = ScoreLedger(self.evaluator_id, self.categories)
            self._check(usable, snapshot, ledger)
        except Exception as e:
            logger.warning(f"Evaluator {self.evaluator_id} abstained: {e}")
            return self.abstain(str(e), type(e).__name__)

        confidence = len(usable) / len(features)
        return RubricEvaluation(
            evaluator_id=self.evaluator_id,
            category_scores={c: round(s, 4) for c, s in ledger.scores.items()},
            issues=tuple(ledger.issues),
            confidence=confidence,
        )

    def abstain(self, reason: str, error_type: str | None = None) -> RubricEvaluation:
        """Evaluation that contributes nothing to consensus."""
        return RubricEvaluation(
            evaluator_id=self.evaluator_id,
            category_scores={c: None for c in self.categories},
            issues=(),
            confidence=0.0,
            error=reason,
            error_type=error_type,
        )
