"""Result records shared across typofix modules.

Responsibilities:
- Represent immutable per-rule, per-step and per-run outcomes.
- Keep failure reporting explicit instead of nested exception handling.

Key types:
- `ItemFailure`, `RuleOutcome`, `StepResult`, and `RunReport`.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

STEP_SUCCEEDED = "succeeded"
STEP_FAILED = "failed"
STEP_SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class ItemFailure:
    """One matched occurrence that could not be rewritten or styled.

    Attributes:
        rule: Rule name that produced the match.
        excerpt: Matched text, truncated for diagnostics.
        error_type: Exception class name.
        message: Exception message.
    """

    rule: str
    excerpt: str
    error_type: str
    message: str


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """Result of applying one rule over its full scope.

    Attributes:
        rule: Rule name.
        matches: Number of occurrences found.
        changes: Number of occurrences whose text or styling changed.
        failures: Match-local failures, in document order of processing.
    """

    rule: str
    matches: int = 0
    changes: int = 0
    failures: tuple[ItemFailure, ...] = ()


@dataclass(frozen=True, slots=True)
class StepResult:
    """Result of one pipeline step.

    Attributes:
        step: Step name.
        status: `succeeded`, `failed` or `skipped`.
        matches: Total occurrences found by the step's rules.
        changes: Total applied changes.
        failures: Match-local failures collected from all rules.
        error: Step-level error message when `status` is `failed`.
    """

    step: str
    status: str
    matches: int = 0
    changes: int = 0
    failures: tuple[ItemFailure, ...] = ()
    error: str | None = None

    @classmethod
    def from_outcomes(cls, step: str, outcomes: Iterable[RuleOutcome]) -> StepResult:
        """Aggregate rule outcomes into a successful step result."""

        collected = list(outcomes)
        return cls(
            step=step,
            status=STEP_SUCCEEDED,
            matches=sum(outcome.matches for outcome in collected),
            changes=sum(outcome.changes for outcome in collected),
            failures=tuple(
                failure for outcome in collected for failure in outcome.failures
            ),
        )

    @property
    def succeeded(self) -> bool:
        """Return whether the step completed without a step-level error."""

        return self.status == STEP_SUCCEEDED


@dataclass(frozen=True, slots=True)
class RunReport:
    """Per-run record of step outcomes, in execution order.

    Attributes:
        document: Label of the corrected document.
        steps: Results for every planned step, including skipped ones.
    """

    document: str
    steps: tuple[StepResult, ...]

    @property
    def total_changes(self) -> int:
        """Return the sum of applied changes over all steps."""

        return sum(step.changes for step in self.steps)

    @property
    def failed_steps(self) -> tuple[StepResult, ...]:
        """Return the steps that ended with a step-level error."""

        return tuple(step for step in self.steps if step.status == STEP_FAILED)

    def changes_by_step(self) -> dict[str, int]:
        """Return change counts for executed steps keyed by step name."""

        return {
            step.step: step.changes for step in self.steps if step.status != STEP_SKIPPED
        }
