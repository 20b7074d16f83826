"""Industry context and category weight presets."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError
from .models import ALL_CATEGORIES, Category

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 1e-6

_V = Category.VISUAL
_S = Category.STRUCTURE
_C = Category.CONTENT
_P = Category.PERSUASION
_D = Category.DISCOVERABILITY
_X = Category.DISTINCTIVENESS

INDUSTRY_PRESETS: dict[str, dict[Category, float]] = {
    "general": {_V: 0.20, _S: 0.20, _C: 0.20, _P: 0.15, _D: 0.10, _X: 0.15},
    "restaurant": {_V: 0.25, _S: 0.15, _C: 0.15, _P: 0.15, _D: 0.15, _X: 0.15},
    "professional_services": {_V: 0.15, _S: 0.15, _C: 0.25, _P: 0.25, _D: 0.10, _X: 0.10},
    "local_services": {_V: 0.15, _S: 0.15, _C: 0.15, _P: 0.25, _D: 0.20, _X: 0.10},
    "ecommerce": {_V: 0.20, _S: 0.20, _C: 0.10, _P: 0.25, _D: 0.15, _X: 0.10},
    "creative": {_V: 0.25, _S: 0.10, _C: 0.15, _P: 0.10, _D: 0.10, _X: 0.30},
    "healthcare": {_V: 0.10, _S: 0.20, _C: 0.25, _P: 0.25, _D: 0.10, _X: 0.10},
}


def equal_weights() -> dict[Category, float]:
    """Equal weight for every category."""
    return {c: 1.0 / len(ALL_CATEGORIES) for c in ALL_CATEGORIES}


def validate_weights(weights: dict[Any, float]) -> dict[Category, float]:
    """Check domain weights and normalize their keys to Category.

    Args:
        weights: Mapping of Category (or category value string) to weight.
            Missing categories are treated as weight 0.

    Returns:
        Weights for every category.

    Raises:
        ConfigurationError: On unknown categories, negative weights or a
            total that is not 1.
    """
    normalized: dict[Category, float] = {c: 0.0 for c in ALL_CATEGORIES}
    for key, value in weights.items():
        try:
            category = key if isinstance(key, Category) else Category(key)
        except ValueError:
            raise ConfigurationError(
                f"Unknown category in domain weights: {key!r}",
                suggestion=f"Use one of: {', '.join(c.value for c in ALL_CATEGORIES)}",
            ) from None
        if not math.isfinite(value):
            raise ConfigurationError(
                f"Domain weight for {category.value} is not a finite number ({value})"
            )
        if value < 0:
            raise ConfigurationError(
                f"Domain weight for {category.value} is negative ({value})"
            )
        normalized[category] = float(value)

    total = sum(normalized.values())
    if not abs(total - 1.0) <= WEIGHT_TOLERANCE:
        raise ConfigurationError(f"Domain weights must sum to 1, got {total:.6f}")
    return normalized


@dataclass
class DomainContext:
    """Industry context supplied with an assessment request.

    Attributes:
        industry: Free-form industry label, matched against presets.
        weights: Explicit category weights; overrides the industry preset.
    """

    industry: str | None = None
    weights: dict[Category, float] | None = field(default=None)

    def resolve_weights(self) -> dict[Category, float]:
        """Weights to use: explicit, then industry preset, then equal.

        Raises:
            ConfigurationError: If explicit weights are invalid.
        """
        if self.weights is not None:
            return validate_weights(self.weights)
        if self.industry:
            key = self.industry.strip().lower().replace(" ", "_").replace("-", "_")
            preset = INDUSTRY_PRESETS.get(key)
            if preset is not None:
                return dict(preset)
            logger.debug(f"No weight preset for industry {self.industry!r}, using equal weights")
        return equal_weights()
