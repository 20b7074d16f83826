"""Evaluator panel: runs every rubric concurrently over one snapshot.

Modelled as a registry plus a parallel executor. Evaluators read an
immutable snapshot and share no state, so they run in a thread pool;
the panel waits for all of them (bounded by a timeout) before handing
the results on. A crashed or timed-out evaluator becomes an abstaining
evaluation plus an ``EvaluationFailure`` record; nothing is retried.
"""

import logging
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from ..artifact import ArtifactSnapshot
from ..models import EvaluationFailure, PerceptionScore, RubricEvaluation
from .base import BaseEvaluator

logger = logging.getLogger(__name__)

PERCEPTION_TASK_ID = "perception"


@dataclass
class PanelResult:
    """Everything one panel run produced."""

    evaluations: list[RubricEvaluation] = field(default_factory=list)
    failures: list[EvaluationFailure] = field(default_factory=list)
    perception: PerceptionScore | None = None
    execution_time_ms: float = 0.0

    @property
    def contributing(self) -> list[RubricEvaluation]:
        """Evaluations that did not abstain."""
        return [e for e in self.evaluations if not e.abstained]


class EvaluatorPanel:
    """Registry and concurrent runner for rubric evaluators."""

    def __init__(
        self,
        evaluators: list[BaseEvaluator] | None = None,
        timeout_seconds: float = 30.0,
        max_workers: int = 6,
    ):
        """Initialize the panel.

        Args:
            evaluators: Evaluators to register, in reporting order.
            timeout_seconds: Default wait for a full run.
            max_workers: Thread pool size.
        """
        self.timeout_seconds = timeout_seconds
        self.max_workers = max_workers
        self._evaluators: dict[str, BaseEvaluator] = {}
        for evaluator in evaluators or []:
            self.register(evaluator)

    def register(self, evaluator: BaseEvaluator) -> None:
        """Register an evaluator.

        Raises:
            ValueError: If an evaluator with the same ID is already registered.
        """
        if evaluator.evaluator_id in self._evaluators:
            raise ValueError(f"Evaluator {evaluator.evaluator_id} is already registered")
        self._evaluators[evaluator.evaluator_id] = evaluator

    def unregister(self, evaluator_id: str) -> None:
        """Unregister an evaluator by ID.

        Raises:
            KeyError: If no such evaluator is registered.
        """
        if evaluator_id not in self._evaluators:
            raise KeyError(f"Evaluator {evaluator_id} is not registered")
        del self._evaluators[evaluator_id]

    def get(self, evaluator_id: str) -> BaseEvaluator | None:
        """Get an evaluator by ID."""
        return self._evaluators.get(evaluator_id)

    @property
    def evaluators(self) -> list[BaseEvaluator]:
        """Registered evaluators in registration order."""
        return list(self._evaluators.values())

    @property
    def evaluator_count(self) -> int:
        """Number of registered evaluators."""
        return len(self._evaluators)

    def run(
        self,
        snapshot: ArtifactSnapshot,
        perceiver: Callable[[ArtifactSnapshot], PerceptionScore] | None = None,
        timeout_seconds: float | None = None,
    ) -> PanelResult:
        """Evaluate a snapshot with every evaluator (and the perceiver) in parallel.

        Args:
            snapshot: Immutable snapshot to evaluate.
            perceiver: Optional perception scorer run alongside the evaluators.
            timeout_seconds: Overall wait; defaults to the panel timeout.

        Returns:
            PanelResult with evaluations in registration order.
        """
        start = time.perf_counter()
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        result = PanelResult()

        evaluators = self.evaluators
        task_count = len(evaluators) + (1 if perceiver else 0)
        if task_count == 0:
            return result

        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, task_count),
            thread_name_prefix="site-critic-panel",
        )
        pending: list[Future] = []
        try:
            futures = {
                evaluator.evaluator_id: executor.submit(evaluator.evaluate, snapshot)
                for evaluator in evaluators
            }
            perception_future = (
                executor.submit(perceiver, snapshot) if perceiver else None
            )
            pending.extend(futures.values())
            if perception_future is not None:
                pending.append(perception_future)

            _, not_done = wait(pending, timeout=max(0.0, timeout))

            for evaluator in evaluators:
                future = futures[evaluator.evaluator_id]
                if future in not_done:
                    reason = f"Timed out after {timeout:.1f}s"
                    logger.warning(f"Evaluator {evaluator.evaluator_id} timed out")
                    result.evaluations.append(evaluator.abstain(reason, "TimeoutError"))
                    result.failures.append(
                        EvaluationFailure(evaluator.evaluator_id, reason, "TimeoutError")
                    )
                    continue

                try:
                    evaluation = future.result()
                except Exception as e:
                    logger.warning(f"Evaluator {evaluator.evaluator_id} failed: {e}")
                    evaluation = evaluator.abstain(str(e), type(e).__name__)

                result.evaluations.append(evaluation)
                if evaluation.abstained:
                    result.failures.append(
                        EvaluationFailure(
                            evaluation.evaluator_id,
                            evaluation.error or "Evaluator abstained",
                            evaluation.error_type,
                        )
                    )

            if perception_future is not None:
                result.perception = self._collect_perception(
                    perception_future, perception_future in not_done, timeout, result
                )
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
            still_running = sum(1 for future in pending if future.running())
            if still_running:
                logger.warning(
                    f"{still_running} panel task(s) still running in background threads"
                )

        result.execution_time_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            f"Panel ran {task_count} task(s) in {result.execution_time_ms:.1f}ms, "
            f"{len(result.failures)} failure(s)"
        )
        return result

    @staticmethod
    def _collect_perception(future, timed_out, timeout, result) -> PerceptionScore | None:
        if timed_out:
            reason = f"Timed out after {timeout:.1f}s"
            result.failures.append(
                EvaluationFailure(PERCEPTION_TASK_ID, reason, "TimeoutError")
            )
            logger.warning("Perception scorer timed out")
            return None
        try:
            return future.result()
        except Exception as e:
            logger.warning(f"Perception scorer failed: {e}")
            result.failures.append(
                EvaluationFailure(PERCEPTION_TASK_ID, str(e), type(e).__name__)
            )
            return None
