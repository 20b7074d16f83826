"""Site Critic - multi-rubric quality assessment and auto-repair for generated websites.

Five rubric evaluators and a perception scorer judge an immutable
snapshot of a website concurrently; a consensus engine reconciles their
scores, a verdict classifier assigns a quality tier, and the
improvement orchestrator applies one targeted fix per iteration until
the site meets its quality bar or stops improving.
"""

__version__ = "1.0.0"

from .artifact import (
    ArtifactSnapshot,
    BusinessProfile,
    Page,
    StaticRenderer,
    Testimonial,
    WebsiteArtifact,
)
from .assessment import QualityAssessor, assess
from .config import CriticConfig, SessionConfig, load_config
from .domain import DomainContext
from .errors import ArtifactLoadError, ConfigurationError, CriticError
from .models import (
    AgreementLevel,
    Category,
    FinalAssessment,
    Issue,
    PerceptionScore,
    Severity,
    Verdict,
)
from .orchestrator import ImprovementOrchestrator, improve
from .session import ImprovementSession, TerminationReason

__all__ = [
    "AgreementLevel",
    "ArtifactLoadError",
    "ArtifactSnapshot",
    "BusinessProfile",
    "Category",
    "ConfigurationError",
    "CriticConfig",
    "CriticError",
    "DomainContext",
    "FinalAssessment",
    "ImprovementOrchestrator",
    "ImprovementSession",
    "Issue",
    "Page",
    "PerceptionScore",
    "QualityAssessor",
    "SessionConfig",
    "Severity",
    "StaticRenderer",
    "TerminationReason",
    "Testimonial",
    "Verdict",
    "WebsiteArtifact",
    "assess",
    "improve",
    "load_config",
]
