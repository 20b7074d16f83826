"""Data models for website quality assessment.

This module defines the value types shared by the evaluators, the
consensus engine, the verdict classifier and the improvement loop.
Enum values and ``to_dict()`` keys are part of the reporting interface
consumed by dashboards and CI gates.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Category(Enum):
    """Quality categories every rubric scores into."""

    VISUAL = "Visual"
    STRUCTURE = "Structure"
    CONTENT = "Content"
    PERSUASION = "Persuasion"
    DISCOVERABILITY = "Discoverability"
    DISTINCTIVENESS = "Distinctiveness"


ALL_CATEGORIES: tuple[Category, ...] = tuple(Category)


class Severity(Enum):
    """Severity levels for quality issues."""

    CRITICAL = "Critical"  # Blocks shipping
    HIGH = "High"  # Visibly hurts the site
    MEDIUM = "Medium"  # Should fix before launch
    LOW = "Low"  # Polish

    @property
    def rank(self) -> int:
        """Sort rank, 0 for the most severe."""
        return _SEVERITY_ORDER.index(self)

    def __lt__(self, other: "Severity") -> bool:
        return self.rank > other.rank

    def __le__(self, other: "Severity") -> bool:
        return self == other or self < other

    def __gt__(self, other: "Severity") -> bool:
        return not self <= other

    def __ge__(self, other: "Severity") -> bool:
        return not self < other


_SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]


class AgreementLevel(Enum):
    """Discretized inter-evaluator agreement."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Verdict(Enum):
    """Discrete quality tiers, from worst to best."""

    POOR = "Poor"
    GOOD = "Good"
    EXCELLENT = "Excellent"
    WORLD_CLASS = "WorldClass"

    @property
    def rank(self) -> int:
        """Tier rank, 0 for Poor."""
        return list(Verdict).index(self)


@dataclass(frozen=True)
class Issue:
    """A quality defect explaining why a category score is below maximum.

    ``kind`` is the issue-kind key fixers register against; ``id`` is
    stable for a given evaluator, kind and location so repeated
    assessments of the same snapshot yield identical issues.
    """

    id: str
    kind: str
    category: Category
    severity: Severity
    description: str
    location_hint: str
    source_evaluator_id: str
    remediation_hint: str = ""
    also_reported_by: tuple[str, ...] = ()

    @property
    def defect_key(self) -> tuple[str, str]:
        """Key identifying the defect independent of the reporting evaluator."""
        return (self.kind, self.location_hint)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "kind": self.kind,
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "location_hint": self.location_hint,
            "source_evaluator_id": self.source_evaluator_id,
            "remediation_hint": self.remediation_hint,
            "also_reported_by": list(self.also_reported_by),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Issue":
        """Create Issue from dictionary."""
        return cls(
            id=data["id"],
            kind=data["kind"],
            category=Category(data["category"]),
            severity=Severity(data["severity"]),
            description=data["description"],
            location_hint=data.get("location_hint", ""),
            source_evaluator_id=data["source_evaluator_id"],
            remediation_hint=data.get("remediation_hint", ""),
            also_reported_by=tuple(data.get("also_reported_by", [])),
        )


@dataclass(frozen=True)
class RubricEvaluation:
    """Output of one rubric evaluator for one snapshot.

    Categories outside the evaluator's specialty are absent from
    ``category_scores``; a ``None`` score means the evaluator abstained.
    """

    evaluator_id: str
    category_scores: dict[Category, float | None]
    issues: tuple[Issue, ...] = ()
    confidence: float = 1.0
    error: str | None = None
    error_type: str | None = None

    @property
    def abstained(self) -> bool:
        """True when the evaluator contributes nothing to consensus."""
        return self.confidence <= 0.0 or all(
            score is None for score in self.category_scores.values()
        )

    def score_for(self, category: Category) -> float | None:
        """Score for a category, or None when absent or abstained."""
        if self.confidence <= 0.0:
            return None
        return self.category_scores.get(category)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "evaluator_id": self.evaluator_id,
            "category_scores": {
                c.value: s for c, s in self.category_scores.items()
            },
            "issues": [i.to_dict() for i in self.issues],
            "confidence": round(self.confidence, 4),
            "error": self.error,
        }


@dataclass(frozen=True)
class EvaluationFailure:
    """An evaluator that abstained because it crashed or timed out."""

    evaluator_id: str
    reason: str
    exception_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "evaluator_id": self.evaluator_id,
            "reason": self.reason,
            "exception_type": self.exception_type,
        }


@dataclass(frozen=True)
class OutlierFlag:
    """An evaluator score far from its category's consensus."""

    evaluator_id: str
    category: Category
    score: float
    consensus: float
    deviation: float  # In standard deviations

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "evaluator_id": self.evaluator_id,
            "category": self.category.value,
            "score": round(self.score, 3),
            "consensus": round(self.consensus, 3),
            "deviation": round(self.deviation, 3),
        }


@dataclass
class ConsensusResult:
    """Reconciled cross-rubric scores with an agreement signal."""

    category_scores: dict[Category, float | None]
    agreement_level: AgreementLevel
    agreement_score: float = 1.0
    category_variance: dict[Category, float] = field(default_factory=dict)
    outliers: list[OutlierFlag] = field(default_factory=list)

    @property
    def outlier_evaluators(self) -> list[str]:
        """Evaluator ids flagged as outliers in any category, first-seen order."""
        seen: list[str] = []
        for flag in self.outliers:
            if flag.evaluator_id not in seen:
                seen.append(flag.evaluator_id)
        return seen

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "category_scores": {
                c.value: (round(s, 3) if s is not None else None)
                for c, s in self.category_scores.items()
            },
            "agreement_level": self.agreement_level.value,
            "agreement_score": round(self.agreement_score, 4),
            "category_variance": {
                c.value: round(v, 4) for c, v in self.category_variance.items()
            },
            "outlier_evaluators": self.outlier_evaluators,
            "outliers": [o.to_dict() for o in self.outliers],
        }


def _tier(value: float, high: float, medium: float) -> str:
    if value >= high:
        return "high"
    if value >= medium:
        return "medium"
    return "low"


@dataclass(frozen=True)
class PerceptionScore:
    """Holistic impression score, four 0-25 sub-scores summing to 0-100."""

    first_impression: float
    emotional_resonance: float
    cohesion: float
    identity_recognition: float

    @property
    def total(self) -> float:
        """Total perception score (0-100)."""
        return (
            self.first_impression
            + self.emotional_resonance
            + self.cohesion
            + self.identity_recognition
        )

    @property
    def breakdown(self) -> dict[str, str]:
        """Trust / premium / memorable tiers derived from the sub-scores."""
        return {
            "trust": _tier(self.total, 80, 60),
            "premium": _tier(self.emotional_resonance, 20, 15),
            "memorable": _tier(self.identity_recognition, 20, 15),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "first_impression": round(self.first_impression, 2),
            "emotional_resonance": round(self.emotional_resonance, 2),
            "cohesion": round(self.cohesion, 2),
            "identity_recognition": round(self.identity_recognition, 2),
            "total": round(self.total, 2),
            "breakdown": self.breakdown,
        }


@dataclass
class FinalAssessment:
    """One complete assessment of one artifact snapshot."""

    weighted_score: float
    category_scores: dict[Category, float | None]
    perception: PerceptionScore
    agreement_level: AgreementLevel
    verdict: Verdict
    issues: list[Issue] = field(default_factory=list)
    consensus: ConsensusResult | None = None
    evaluations: list[RubricEvaluation] = field(default_factory=list)
    failures: list[EvaluationFailure] = field(default_factory=list)
    snapshot_version: int = 0
    analysis_time_ms: float = 0.0

    def meets(self, target_score: float, min_category_score: float) -> bool:
        """Check the weighted score and every category against a bar."""
        if self.weighted_score < target_score:
            return False
        return all(
            score is not None and score >= min_category_score
            for score in self.category_scores.values()
        )

    def score_for(self, category: Category) -> float | None:
        """Consensus score for a category."""
        return self.category_scores.get(category)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "verdict": self.verdict.value,
            "weighted_score": round(self.weighted_score, 2),
            "category_scores": {
                c.value: (round(s, 2) if s is not None else None)
                for c, s in self.category_scores.items()
            },
            "perception": self.perception.to_dict(),
            "agreement_level": self.agreement_level.value,
            "issues": [i.to_dict() for i in self.issues],
            "consensus": self.consensus.to_dict() if self.consensus else None,
            "evaluations": [e.to_dict() for e in self.evaluations],
            "evaluation_failures": [f.to_dict() for f in self.failures],
            "snapshot_version": self.snapshot_version,
            "analysis_time_ms": round(self.analysis_time_ms, 1),
        }
