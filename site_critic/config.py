"""Configuration models for assessment and improvement sessions.

Every tuned constant (blend ratio, agreement thresholds, verdict tiers,
loop limits) lives here rather than in the algorithms, and can be
overridden from a ``site-critic.config.json`` file. Keys may be written
in camelCase or snake_case.
"""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .errors import ConfigurationError
from .models import ALL_CATEGORIES, Category

logger = logging.getLogger(__name__)

# Default configuration file name
CONFIG_FILENAME = "site-critic.config.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


class _ConfigModel(BaseModel):
    """Base for config sections: camelCase aliases, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class ConsensusConfig(_ConfigModel):
    """Agreement and outlier thresholds for the consensus engine."""

    # Mean variance below this is High agreement
    high_agreement_variance: float = Field(default=1.0, ge=0.0)
    # Mean variance below this (and not High) is Medium agreement
    medium_agreement_variance: float = Field(default=2.5, ge=0.0)
    # Deviation (in standard deviations) that flags an outlier
    outlier_std_devs: float = Field(default=1.5, gt=0.0)
    # Smallest gap (in points) from exactly agreeing peers that flags an outlier
    outlier_min_gap: float = Field(default=2.0, gt=0.0)

    @model_validator(mode="after")
    def check_thresholds(self) -> "ConsensusConfig":
        if self.medium_agreement_variance < self.high_agreement_variance:
            raise ValueError(
                "mediumAgreementVariance must be >= highAgreementVariance"
            )
        return self


class VerdictConfig(_ConfigModel):
    """Blend ratio and tier thresholds for the verdict classifier.

    Tiers must be nested (WorldClass >= Excellent >= Good on every
    shared condition) so a stronger verdict always implies eligibility
    for every weaker one.
    """

    # Share of the weighted score taken from category scores
    blend: float = Field(default=0.7, ge=0.5, le=1.0)

    world_class_score: float = Field(default=90.0, ge=0.0, le=100.0)
    world_class_category: float = Field(default=9.0, ge=0.0, le=10.0)
    world_class_perception: float = Field(default=90.0, ge=0.0, le=100.0)

    excellent_score: float = Field(default=75.0, ge=0.0, le=100.0)
    excellent_category: float = Field(default=7.0, ge=0.0, le=10.0)
    excellent_perception: float = Field(default=70.0, ge=0.0, le=100.0)
    # Per-category overrides of excellent_category
    category_minimums: dict[Category, float] = Field(default_factory=dict)

    good_score: float = Field(default=50.0, ge=0.0, le=100.0)

    @field_validator("category_minimums")
    @classmethod
    def check_minimums(cls, v: dict[Category, float]) -> dict[Category, float]:
        for category, minimum in v.items():
            if not 0.0 <= minimum <= 10.0:
                raise ValueError(
                    f"Minimum for {category.value} must be within 0-10, got {minimum}"
                )
        return v

    @model_validator(mode="after")
    def check_nesting(self) -> "VerdictConfig":
        if not self.world_class_score >= self.excellent_score >= self.good_score:
            raise ValueError(
                "Score thresholds must be nested: worldClass >= excellent >= good"
            )
        if self.world_class_perception < self.excellent_perception:
            raise ValueError("worldClassPerception must be >= excellentPerception")
        highest_minimum = max(
            self.minimum_for(category) for category in ALL_CATEGORIES
        )
        if self.world_class_category < highest_minimum:
            raise ValueError(
                "worldClassCategory must be >= every Excellent category minimum"
            )
        return self

    def minimum_for(self, category: Category) -> float:
        """Excellent-tier minimum for a category."""
        return self.category_minimums.get(category, self.excellent_category)

    @property
    def minimums(self) -> dict[Category, float]:
        """Excellent-tier minimum for every category."""
        return {c: self.minimum_for(c) for c in ALL_CATEGORIES}


class PrioritizerConfig(_ConfigModel):
    """Issue deduplication settings."""

    # Normalized description similarity at which two issues merge
    similarity_threshold: float = Field(default=0.85, gt=0.0, le=1.0)


class PanelConfig(_ConfigModel):
    """Parallel evaluator execution settings."""

    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_workers: int = Field(default=6, ge=1, le=32)


class SessionConfig(_ConfigModel):
    """Improvement loop limits and quality bar."""

    target_score: float = Field(default=95.0, ge=0.0, le=100.0)
    min_category_score: float = Field(default=7.5, ge=0.0, le=10.0)
    max_iterations: int = Field(default=10, ge=0, le=1000)
    stagnation_window: int = Field(default=3, ge=1)
    stagnation_epsilon: float = Field(default=0.1, ge=0.0)
    # Per-iteration score drop tolerated before flagging a regression
    noise_tolerance: float = Field(default=2.0, ge=0.0)
    # Wall-clock budget for the whole session; None means unbounded
    time_budget_seconds: float | None = Field(default=None, gt=0.0)


class CriticConfig(_ConfigModel):
    """Top-level configuration aggregating every section."""

    industry: str | None = None
    weights: dict[Category, float] | None = None
    consensus: ConsensusConfig = Field(default_factory=ConsensusConfig)
    verdict: VerdictConfig = Field(default_factory=VerdictConfig)
    prioritizer: PrioritizerConfig = Field(default_factory=PrioritizerConfig)
    panel: PanelConfig = Field(default_factory=PanelConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary."""
        return self.model_dump(mode="json", by_alias=True)


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "config"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def parse_config(
    model: type[ModelT],
    data: "ModelT | dict[str, Any] | None",
    source: str | None = None,
) -> ModelT:
    """Validate raw configuration into a model.

    Args:
        model: Config model class to build.
        data: An existing instance (returned as-is), a dict, or None for defaults.
        source: Config file the data came from, for error messages.

    Returns:
        Validated model instance.

    Raises:
        ConfigurationError: If validation fails.
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid {model.__name__}: {_format_validation_error(e)}",
            config_file=source,
        ) from e


def load_config(project_path: Path | None = None) -> CriticConfig:
    """Load configuration from ``site-critic.config.json``.

    Args:
        project_path: Directory to look in (defaults to the cwd).

    Returns:
        Validated configuration; defaults when no file exists.

    Raises:
        ConfigurationError: If the file is unreadable or invalid.
    """
    config_path = (project_path or Path.cwd()) / CONFIG_FILENAME
    if not config_path.exists():
        logger.debug(f"No {CONFIG_FILENAME} found, using defaults")
        return CriticConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read {CONFIG_FILENAME}: {e}", config_file=str(config_path)
        ) from e

    config = parse_config(CriticConfig, data, source=str(config_path))
    logger.debug(f"Loaded configuration from {config_path}")
    return config
