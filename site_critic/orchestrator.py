"""Improvement orchestrator: the assess, fix, reassess control loop.

One fix is applied per iteration so every score delta is attributable
to exactly one repair. The loop always halts: on reaching the quality
bar, running out of issues or fixers, hitting the iteration cap,
stagnating, or exceeding the wall-clock budget. Every exit returns the
best assessment actually completed.
"""

import time
from collections.abc import Callable
from typing import Any

from .artifact import ArtifactSnapshot, Renderer, StaticRenderer, WebsiteArtifact
from .assessment import QualityAssessor
from .config import CriticConfig, SessionConfig, parse_config
from .critic_logging import LogCategory, get_category_logger
from .domain import DomainContext
from .fixers import FixerRegistry, FixResult, create_default_registry
from .models import FinalAssessment, Issue
from .session import (
    FixerFailure,
    ImprovementSession,
    IterationRecord,
    TerminationReason,
)

logger = get_category_logger(LogCategory.ORCHESTRATOR)
fix_logger = get_category_logger(LogCategory.FIXERS)


class ImprovementOrchestrator:
    """Owns the artifact for the length of a session and drives repairs."""

    def __init__(
        self,
        config: CriticConfig | None = None,
        domain: DomainContext | None = None,
        renderer: Renderer | None = None,
        registry: FixerRegistry | None = None,
        assessor: QualityAssessor | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the orchestrator.

        Args:
            config: Full configuration; its ``session`` section is the
                default session config.
            domain: Industry context used for category weighting.
            renderer: Turns the artifact into the snapshot evaluators see.
            registry: Fixers to draw on; every built-in fixer by default.
            assessor: Assessment pipeline; built from config/domain by default.
            clock: Monotonic time source for the wall-clock budget.

        Raises:
            ConfigurationError: If the domain weights are invalid.
        """
        self.config = config or CriticConfig()
        self.assessor = assessor or QualityAssessor(config=self.config, domain=domain)
        self.renderer = renderer or StaticRenderer()
        self.registry = registry if registry is not None else create_default_registry()
        self.clock = clock

    def _session_config(
        self, session_config: SessionConfig | dict[str, Any] | None
    ) -> SessionConfig:
        if session_config is None:
            return self.config.session
        return parse_config(SessionConfig, session_config)

    def _remaining(self, deadline: float | None) -> float | None:
        if deadline is None:
            return None
        return max(0.0, deadline - self.clock())

    def _over_budget(self, deadline: float | None) -> bool:
        return deadline is not None and self.clock() >= deadline

    def _assess(self, artifact: WebsiteArtifact, deadline: float | None):
        snapshot = self.renderer.render(artifact)
        remaining = self._remaining(deadline)
        timeout = None
        if remaining is not None:
            timeout = min(remaining, self.assessor.panel.timeout_seconds)
        return snapshot, self.assessor.assess(snapshot, timeout_seconds=timeout)

    @staticmethod
    def _stagnated(session: ImprovementSession, config: SessionConfig) -> bool:
        recent = session.deltas[-config.stagnation_window :]
        return len(recent) == config.stagnation_window and all(
            delta < config.stagnation_epsilon for delta in recent
        )

    def _decide(
        self,
        session: ImprovementSession,
        assessment: FinalAssessment,
        config: SessionConfig,
        deadline: float | None,
    ) -> TerminationReason | None:
        if assessment.meets(config.target_score, config.min_category_score):
            return TerminationReason.TARGET_REACHED
        if not assessment.issues:
            return TerminationReason.NO_ISSUES_REMAINING
        if self._stagnated(session, config):
            return TerminationReason.STAGNATION
        if len(session.iterations) >= config.max_iterations:
            return TerminationReason.MAX_ITERATIONS_REACHED
        if self._over_budget(deadline):
            return TerminationReason.BUDGET_EXCEEDED
        return None

    def _apply_one_fix(
        self,
        artifact: WebsiteArtifact,
        issues: list[Issue],
        unfixable: set[tuple[str, str]],
    ) -> tuple[Issue | None, FixResult | None, list[FixerFailure]]:
        """Walk the queue until one fixer changes the artifact.

        Returns:
            The fixed issue and its result, or (None, None) when every
            candidate failed, plus the failures met on the way.
        """
        skipped: list[FixerFailure] = []
        for issue in issues:
            key = issue.defect_key
            if key in unfixable:
                continue

            result = self.registry.apply(issue, artifact)
            if result.applied:
                fix_logger.info(
                    f"{result.fixer_id} fixed {issue.kind} on {', '.join(result.pages)}",
                    extra={"issue_kind": issue.kind},
                )
                return issue, result, skipped

            unfixable.add(key)
            skipped.append(
                FixerFailure(
                    issue_id=issue.id,
                    kind=issue.kind,
                    location_hint=issue.location_hint,
                    fixer_id=result.fixer_id,
                    reason=result.description,
                )
            )
            fix_logger.debug(
                f"Skipping {issue.kind} at {issue.location_hint}: {result.description}",
                extra={"issue_kind": issue.kind},
            )
        return None, None, skipped

    def improve(
        self,
        artifact: WebsiteArtifact,
        session_config: SessionConfig | dict[str, Any] | None = None,
    ) -> ImprovementSession:
        """Run the improvement loop on an artifact, mutating it in place.

        Args:
            artifact: Artifact to improve; owned by this call until it returns.
            session_config: Limits and quality bar (instance, dict or None
                for the configured defaults).

        Returns:
            Closed ImprovementSession with the per-iteration log.

        Raises:
            ConfigurationError: If the session config is invalid.
        """
        config = self._session_config(session_config)
        session = ImprovementSession(config=config)
        log_extra = {"session_id": session.session_id}

        started = self.clock()
        deadline = (
            started + config.time_budget_seconds
            if config.time_budget_seconds is not None
            else None
        )
        logger.info(
            f"Session {session.session_id} started: target {config.target_score}, "
            f"min category {config.min_category_score}, "
            f"max {config.max_iterations} iteration(s)",
            extra=log_extra,
        )

        snapshot, assessment = self._assess(artifact, deadline)
        session.initial_assessment = assessment
        session.final_assessment = assessment
        unfixable: set[tuple[str, str]] = set()

        reason = self._decide(session, assessment, config, deadline)
        while reason is None:
            iteration = len(session.iterations) + 1
            iteration_extra = {**log_extra, "iteration": iteration}

            issue, result, skipped = self._apply_one_fix(
                artifact, assessment.issues, unfixable
            )
            if issue is None:
                reason = TerminationReason.FIXER_EXHAUSTED
                break

            if self._over_budget(deadline):
                self._rollback(artifact, snapshot, iteration_extra)
                reason = TerminationReason.BUDGET_EXCEEDED
                break

            new_snapshot, reassessment = self._assess(artifact, deadline)
            if self._over_budget(deadline):
                # The reassessment may have been cut short; keep the last complete one
                self._rollback(artifact, snapshot, iteration_extra)
                reason = TerminationReason.BUDGET_EXCEEDED
                break

            record = IterationRecord(
                iteration=iteration,
                assessment=reassessment,
                fix_applied=issue,
                fixer_id=result.fixer_id,
                score_before=assessment.weighted_score,
                score_after=reassessment.weighted_score,
                skipped_issues=skipped,
            )
            if record.score_delta < -config.noise_tolerance:
                record.regression_flagged = True
                logger.warning(
                    f"Regression after {result.fixer_id} ({issue.kind}): "
                    f"{record.score_before:.1f} -> {record.score_after:.1f}",
                    extra={**iteration_extra, "issue_kind": issue.kind},
                )
            session.append(record)
            logger.info(
                f"Iteration {iteration}: fixed {issue.kind}, "
                f"{record.score_before:.1f} -> {record.score_after:.1f} "
                f"({record.score_delta:+.1f})",
                extra={**iteration_extra, "weighted_score": round(record.score_after, 2)},
            )

            snapshot, assessment = new_snapshot, reassessment
            reason = self._decide(session, assessment, config, deadline)

        elapsed_ms = (self.clock() - started) * 1000
        session.close(reason, elapsed_ms)
        final = session.final_assessment
        logger.info(
            f"Session {session.session_id} finished: {reason.value} ({session.status}), "
            f"{final.verdict.value} {final.weighted_score:.1f}/100 after "
            f"{len(session.iterations)} iteration(s)",
            extra={**log_extra, "duration_ms": round(elapsed_ms, 1)},
        )
        return session

    @staticmethod
    def _rollback(
        artifact: WebsiteArtifact, snapshot: ArtifactSnapshot, extra: dict[str, Any]
    ) -> None:
        artifact.restore(snapshot)
        logger.warning(
            f"Time budget exceeded; artifact restored to version {snapshot.version}",
            extra=extra,
        )


def improve(
    artifact: WebsiteArtifact,
    session_config: SessionConfig | dict[str, Any] | None = None,
    domain_context: DomainContext | None = None,
    config: CriticConfig | None = None,
) -> ImprovementSession:
    """Improve an artifact with the built-in rubrics and fixers.

    Raises:
        ConfigurationError: If the weights or session config are invalid.
    """
    orchestrator = ImprovementOrchestrator(config=config, domain=domain_context)
    return orchestrator.improve(artifact, session_config)
