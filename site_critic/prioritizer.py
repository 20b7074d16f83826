"""Issue prioritizer.

Merges duplicate reports from different evaluators and orders the
result into the repair queue the improvement loop works through.
"""

import logging
import math
from dataclasses import replace

from .config import PrioritizerConfig
from .issues import SITE_LOCATION, parse_location
from .models import ALL_CATEGORIES, Category, Issue
from .similarity import description_similarity

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_MINIMUM = 7.0


def _merge_locations(first: str, second: str) -> str:
    if first == second:
        return first
    if SITE_LOCATION in (first, second):
        return SITE_LOCATION
    pages = parse_location(first)
    pages.extend(p for p in parse_location(second) if p not in pages)
    return ", ".join(pages)


def _merge(kept: Issue, duplicate: Issue) -> Issue:
    reporters = list(kept.also_reported_by)
    for evaluator_id in (duplicate.source_evaluator_id, *duplicate.also_reported_by):
        if evaluator_id != kept.source_evaluator_id and evaluator_id not in reporters:
            reporters.append(evaluator_id)
    return replace(
        kept,
        severity=max(kept.severity, duplicate.severity),
        location_hint=_merge_locations(kept.location_hint, duplicate.location_hint),
        also_reported_by=tuple(reporters),
    )


class IssuePrioritizer:
    """Deduplicates and orders issues.

    Two issues merge when their categories match and their normalized
    descriptions are at least ``similarity_threshold`` similar. The
    surviving entry keeps the first-seen position and identity, takes
    the higher severity and records the merged evaluator.
    """

    def __init__(
        self,
        config: PrioritizerConfig | None = None,
        minimums: dict[Category, float] | None = None,
    ):
        """Initialize the prioritizer.

        Args:
            config: Dedup settings.
            minimums: Category minimums used to compute deficits.
        """
        self.config = config or PrioritizerConfig()
        self.minimums = minimums or {c: DEFAULT_CATEGORY_MINIMUM for c in ALL_CATEGORIES}

    def deduplicate(self, issues: list[Issue]) -> list[Issue]:
        """Merge duplicate issues, preserving first-seen order."""
        merged: list[Issue] = []
        for issue in issues:
            for index, kept in enumerate(merged):
                if kept.category != issue.category:
                    continue
                similarity = description_similarity(kept.description, issue.description)
                if similarity >= self.config.similarity_threshold:
                    merged[index] = _merge(kept, issue)
                    break
            else:
                merged.append(issue)

        if len(merged) < len(issues):
            logger.debug(f"Deduplicated {len(issues)} issues into {len(merged)}")
        return merged

    def deficit(
        self, category: Category, category_scores: dict[Category, float | None] | None
    ) -> float:
        """How far a category sits below its minimum (missing counts as maximal)."""
        if category_scores is None:
            return 0.0
        score = category_scores.get(category)
        if score is None:
            return math.inf
        return self.minimums.get(category, DEFAULT_CATEGORY_MINIMUM) - score

    def prioritize(
        self,
        issues: list[Issue],
        category_scores: dict[Category, float | None] | None = None,
    ) -> list[Issue]:
        """Deduplicate, then sort into the repair queue.

        Order: severity (Critical first), then category deficit (larger
        first), then insertion order.

        Args:
            issues: Issues from every evaluator, in evaluator order.
            category_scores: Consensus scores used for deficits; without
                them, ties fall straight to insertion order.

        Returns:
            Ordered, deduplicated issue queue.
        """
        unique = self.deduplicate(issues)
        # sorted() is stable, so equal keys keep insertion order
        return sorted(
            unique,
            key=lambda issue: (
                issue.severity.rank,
                -self.deficit(issue.category, category_scores),
            ),
        )


def prioritize(
    issues: list[Issue],
    category_scores: dict[Category, float | None] | None = None,
    config: PrioritizerConfig | None = None,
    minimums: dict[Category, float] | None = None,
) -> list[Issue]:
    """Prioritize with a default-configured prioritizer."""
    return IssuePrioritizer(config, minimums).prioritize(issues, category_scores)
