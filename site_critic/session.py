"""Improvement session records.

An ``ImprovementSession`` is created when ``improve()`` starts, is
appended to once per iteration, and is closed with a termination
reason. Its ``to_dict()`` output is the per-iteration audit trail that
reports and CI gates consume.
"""

import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .config import SessionConfig
from .models import FinalAssessment, Issue


class TerminationReason(Enum):
    """Why an improvement session stopped."""

    TARGET_REACHED = "TargetReached"
    MAX_ITERATIONS_REACHED = "MaxIterationsReached"
    STAGNATION = "Stagnation"
    FIXER_EXHAUSTED = "FixerExhausted"
    BUDGET_EXCEEDED = "BudgetExceeded"
    NO_ISSUES_REMAINING = "NoIssuesRemaining"


CONVERGED_REASONS = (TerminationReason.TARGET_REACHED, TerminationReason.NO_ISSUES_REMAINING)


@dataclass(frozen=True)
class FixerFailure:
    """An issue whose fixer could not apply (non-fatal)."""

    issue_id: str
    kind: str
    location_hint: str
    fixer_id: str | None
    reason: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "issue_id": self.issue_id,
            "kind": self.kind,
            "location_hint": self.location_hint,
            "fixer_id": self.fixer_id,
            "reason": self.reason,
        }


@dataclass
class IterationRecord:
    """One assess-fix-reassess cycle."""

    iteration: int
    assessment: FinalAssessment
    fix_applied: Issue | None
    fixer_id: str | None
    score_before: float
    score_after: float
    regression_flagged: bool = False
    skipped_issues: list[FixerFailure] = field(default_factory=list)

    @property
    def score_delta(self) -> float:
        return self.score_after - self.score_before

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "iteration": self.iteration,
            "issue_fixed": self.fix_applied.to_dict() if self.fix_applied else None,
            "fixer_id": self.fixer_id,
            "score_before": round(self.score_before, 2),
            "score_after": round(self.score_after, 2),
            "delta": round(self.score_delta, 2),
            "regression_flagged": self.regression_flagged,
            "verdict": self.assessment.verdict.value,
            "skipped_issues": [s.to_dict() for s in self.skipped_issues],
        }


def generate_session_id() -> str:
    """Unique session ID: ``improve_{timestamp}_{random}``."""
    return f"improve_{int(time.time())}_{secrets.token_hex(2)}"


@dataclass
class ImprovementSession:
    """Append-only log of one ``improve()`` run."""

    config: SessionConfig
    session_id: str = field(default_factory=generate_session_id)
    iterations: list[IterationRecord] = field(default_factory=list)
    termination_reason: TerminationReason | None = None
    initial_assessment: FinalAssessment | None = None
    final_assessment: FinalAssessment | None = None
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: str | None = None
    elapsed_ms: float = 0.0

    @property
    def is_closed(self) -> bool:
        return self.termination_reason is not None

    @property
    def deltas(self) -> list[float]:
        return [record.score_delta for record in self.iterations]

    @property
    def status(self) -> str:
        """``converged`` when the bar was met, otherwise ``best_effort``."""
        if (
            self.termination_reason in CONVERGED_REASONS
            and self.final_assessment is not None
            and self.final_assessment.meets(
                self.config.target_score, self.config.min_category_score
            )
        ):
            return "converged"
        return "best_effort"

    def append(self, record: IterationRecord) -> None:
        """Record a completed iteration.

        Raises:
            RuntimeError: If the session is already closed.
        """
        if self.is_closed:
            raise RuntimeError(f"Session {self.session_id} is closed")
        self.iterations.append(record)
        self.final_assessment = record.assessment

    def close(self, reason: TerminationReason, elapsed_ms: float) -> None:
        """Stop the session with a termination reason."""
        self.termination_reason = reason
        self.finished_at = datetime.now().isoformat()
        self.elapsed_ms = elapsed_ms

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "session_id": self.session_id,
            "status": self.status,
            "termination_reason": (
                self.termination_reason.value if self.termination_reason else None
            ),
            "config": self.config.model_dump(mode="json"),
            "iterations": [record.to_dict() for record in self.iterations],
            "initial_assessment": (
                self.initial_assessment.to_dict() if self.initial_assessment else None
            ),
            "final_assessment": (
                self.final_assessment.to_dict() if self.final_assessment else None
            ),
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "elapsed_ms": round(self.elapsed_ms, 1),
        }
