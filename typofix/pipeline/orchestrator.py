"""Pipeline orchestration for typofix.

Responsibilities:
- Check run preconditions before any step touches the document.
- Run the enabled steps in plan order, isolating step-local failures.
- Collect per-step results into a `RunReport`.

Key types:
- `CorrectionPipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable

from ..config import CorrectionOptions
from ..document.model import Document
from ..errors import PreconditionError
from ..models.datatypes import RunReport, StepResult
from ..telemetry.logger import RunLogger
from .steps import CorrectionStep, StepPlan, build_default_plan
from .telemetry import PipelineTelemetryMixin


class CorrectionPipeline(PipelineTelemetryMixin):
    """Coordinate all correction steps for a single document run."""

    def __init__(
        self,
        plan: StepPlan | None = None,
        run_logger: RunLogger | None = None,
        step_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> None:
        """Initialize the step plan and optional logging and progress hooks."""

        self.plan = plan if plan is not None else build_default_plan()
        self._run_logger = run_logger
        self._step_progress_callback = step_progress_callback

    def run(self, document: Document | None, options: CorrectionOptions) -> RunReport:
        """Correct `document` in place and return the per-step report.

        Raises:
            PreconditionError: If the document, options or style selections are unusable.
        """

        checked = self._check_preconditions(document, options)

        results: list[StepResult] = []
        total = len(self.plan)
        for index, step in enumerate(self.plan, start=1):
            if not step.is_enabled(options):
                results.append(self._skip_step(step.name))
                continue
            results.append(
                self._run_step(
                    step.name,
                    index,
                    total,
                    lambda step=step: step.body(checked, options),
                )
            )
        return RunReport(document=checked.name, steps=tuple(results))

    def _check_preconditions(
        self, document: Document | None, options: CorrectionOptions
    ) -> Document:
        """Return the document to correct, raising `PreconditionError` for fatal input problems."""

        if document is None:
            raise PreconditionError(
                stage="document",
                detail="No document to correct.",
                hint="Open or load a document before running corrections.",
            )
        try:
            options.validate()
        except ValueError as exc:
            raise PreconditionError(
                stage="options",
                detail=str(exc),
                hint="Check the configuration file and command-line overrides.",
            ) from exc

        enabled = self.plan.enabled(options)
        for step in enabled:
            self._require_style_fields(step, options)
        if any(step.name == "style_after_trigger" for step in enabled):
            self._require_paragraph_styles(document, options)
        return document

    @staticmethod
    def _require_style_fields(step: CorrectionStep, options: CorrectionOptions) -> None:
        """Require a non-blank selection for every style the step uses."""

        for field_name in step.style_fields:
            value = getattr(options, field_name)
            if not isinstance(value, str) or not value.strip():
                raise PreconditionError(
                    stage="styles",
                    detail=f"Step `{step.name}` needs `{field_name}` to be selected.",
                    hint=f"Set `{field_name}` in the config file or disable the step.",
                )

    @staticmethod
    def _require_paragraph_styles(document: Document, options: CorrectionOptions) -> None:
        """Require trigger and target paragraph styles to exist in the document."""

        for field_name in ("trigger_paragraph_style", "target_paragraph_style"):
            name = getattr(options, field_name)
            if name not in document.paragraph_styles:
                available = ", ".join(document.paragraph_styles) or "none"
                raise PreconditionError(
                    stage="paragraph-styles",
                    detail=f"Paragraph style `{name}` is not defined in the document.",
                    hint=f"Choose `{field_name}` among: {available}.",
                )
