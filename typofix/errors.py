"""Domain exceptions for correction runs and CLI diagnostics.

Responsibilities:
- Separate fatal run preconditions from step-local failures.
- Carry stage/step context so the CLI can render actionable messages.
"""

from __future__ import annotations


class PipelineStageError(RuntimeError):
    """Raised when a specific run stage fails and the run cannot continue."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class PreconditionError(PipelineStageError):
    """Raised before any step runs when the run inputs are unusable."""


class PipelineDefinitionError(ValueError):
    """Raised when a step plan violates its declared prerequisites."""


class StepError(RuntimeError):
    """Raised inside one correction step; the run continues with the next step."""

    def __init__(self, step: str, detail: str) -> None:
        """Initialize a step-scoped failure."""

        super().__init__(f"{step}: {detail}")
        self.step = step
        self.detail = detail


class PatternRuleError(StepError):
    """Raised when a pattern rule cannot be compiled or configured."""

    def __init__(self, rule: str, pattern: str, detail: str) -> None:
        """Initialize a rule compilation failure."""

        super().__init__(rule, f"invalid pattern `{pattern}`: {detail}")
        self.pattern = pattern


class ProtectionLeakError(RuntimeError):
    """Raised when protected spans outlive the step that created them."""

    def __init__(self, tokens: list[str]) -> None:
        """Initialize a leak error listing the unreleased tokens."""

        super().__init__(f"unreleased protection token(s): {', '.join(tokens)}")
        self.tokens = tokens
