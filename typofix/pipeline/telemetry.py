"""Step telemetry helper methods for the correction pipeline.

Responsibilities:
- Report step progress to the optional progress callback.
- Emit step start/complete/skipped/failure events.
- Wrap step bodies so a failing step becomes a failed `StepResult`.
"""

from __future__ import annotations

from collections.abc import Callable

from ..models.datatypes import STEP_FAILED, STEP_SKIPPED, RuleOutcome, StepResult
from ..telemetry.logger import RunLogger


class PipelineTelemetryMixin:
    """Provide step-telemetry helper methods."""

    _run_logger: RunLogger | None
    _step_progress_callback: Callable[[str, int, int], None] | None

    def _on_step_start(self, step_name: str, index: int, total: int) -> None:
        """Emit start events to the progress callback and structured logger."""

        if self._step_progress_callback is not None:
            self._step_progress_callback(step_name, index, total)
        if self._run_logger is not None:
            self._run_logger.log_step_start(step_name)

    def _on_step_complete(self, result: StepResult) -> None:
        """Emit the step-complete event and one event per item failure."""

        if self._run_logger is None:
            return
        for failure in result.failures:
            self._run_logger.log_item_failure(result.step, failure.rule, failure.error_type)
        self._run_logger.log_step_complete(result.step, result.changes, result.matches)

    def _on_step_failure(self, step_name: str, exc: Exception) -> None:
        """Emit step-failure event with sanitized exception metadata."""

        if self._run_logger is not None:
            self._run_logger.log_step_failure(step_name, type(exc).__name__)

    def _skip_step(self, step_name: str) -> StepResult:
        """Record a step disabled by the run options."""

        if self._run_logger is not None:
            self._run_logger.log_step_skipped(step_name)
        return StepResult(step=step_name, status=STEP_SKIPPED)

    def _run_step(
        self,
        step_name: str,
        index: int,
        total: int,
        action: Callable[[], list[RuleOutcome]],
    ) -> StepResult:
        """Run one named step; exceptions mark the step failed instead of propagating."""

        self._on_step_start(step_name, index, total)
        try:
            outcomes = action()
        except Exception as exc:
            self._on_step_failure(step_name, exc)
            return StepResult(step=step_name, status=STEP_FAILED, error=str(exc))
        result = StepResult.from_outcomes(step_name, outcomes)
        self._on_step_complete(result)
        return result
