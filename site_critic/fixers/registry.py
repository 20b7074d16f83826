"""Fixer registry: issue kind -> the one fixer that repairs it."""

import logging

from ..artifact import WebsiteArtifact
from ..models import Issue
from .base import BaseFixer, FixResult

logger = logging.getLogger(__name__)


class FixerRegistry:
    """Maps each issue kind to at most one fixer.

    Kinds without a fixer are valid; ``apply`` reports them as not
    applied instead of raising.
    """

    def __init__(self, fixers: list[BaseFixer] | None = None):
        self._fixers: dict[str, BaseFixer] = {}
        for fixer in fixers or []:
            self.register(fixer)

    def register(self, fixer: BaseFixer) -> None:
        """Register a fixer for its issue kind.

        Raises:
            ValueError: If the kind already has a fixer.
        """
        kind = fixer.issue_kind
        existing = self._fixers.get(kind)
        if existing is not None:
            raise ValueError(
                f"Issue kind {kind} already handled by fixer '{existing.fixer_id}'"
            )
        self._fixers[kind] = fixer
        logger.debug(f"Registered fixer {fixer.fixer_id} for {kind}")

    def unregister(self, kind: str) -> bool:
        """Remove the fixer for a kind.

        Returns:
            True if a fixer was registered for the kind.
        """
        return self._fixers.pop(kind, None) is not None

    def get(self, kind: str) -> BaseFixer | None:
        return self._fixers.get(kind)

    def has_fixer(self, kind: str) -> bool:
        return kind in self._fixers

    @property
    def kinds(self) -> list[str]:
        return sorted(self._fixers)

    @property
    def fixers(self) -> list[BaseFixer]:
        return list(self._fixers.values())

    def apply(self, issue: Issue, artifact: WebsiteArtifact) -> FixResult:
        """Apply the registered fixer for an issue's kind.

        Returns:
            FixResult; not applied when no fixer handles the kind.
        """
        fixer = self._fixers.get(issue.kind)
        if fixer is None:
            return FixResult(
                applied=False,
                fixer_id=None,
                description=f"No fixer registered for {issue.kind}",
            )
        return fixer.fix(artifact, issue)

    def __len__(self) -> int:
        return len(self._fixers)

    def __contains__(self, kind: str) -> bool:
        return kind in self._fixers
