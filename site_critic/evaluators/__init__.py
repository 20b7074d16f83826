"""Rubric evaluators and the panel that runs them."""

from .base import BaseEvaluator, ScoreLedger
from .discoverability import DiscoverabilityEvaluator
from .distinctiveness import DistinctivenessEvaluator
from .panel import EvaluatorPanel, PanelResult
from .persuasion_trust import PersuasionTrustEvaluator
from .ux_structure import UXStructureEvaluator
from .visual_craft import VisualCraftEvaluator


def default_evaluators() -> list[BaseEvaluator]:
    """The five standard rubrics, in reporting order."""
    return [
        UXStructureEvaluator(),
        VisualCraftEvaluator(),
        PersuasionTrustEvaluator(),
        DiscoverabilityEvaluator(),
        DistinctivenessEvaluator(),
    ]


def create_panel(timeout_seconds: float = 30.0, max_workers: int = 6) -> EvaluatorPanel:
    """Create a panel with the five standard rubrics registered."""
    return EvaluatorPanel(
        default_evaluators(), timeout_seconds=timeout_seconds, max_workers=max_workers
    )


__all__ = [
    "BaseEvaluator",
    "ScoreLedger",
    "EvaluatorPanel",
    "PanelResult",
    "UXStructureEvaluator",
    "VisualCraftEvaluator",
    "PersuasionTrustEvaluator",
    "DiscoverabilityEvaluator",
    "DistinctivenessEvaluator",
    "default_evaluators",
    "create_panel",
]
