"""Unit tests for pipeline preconditions, step isolation and step telemetry."""

from __future__ import annotations

import io

import pytest

from typofix.config import CorrectionOptions
from typofix.document.model import Document, Page
from typofix.errors import PreconditionError
from typofix.models.datatypes import STEP_FAILED, STEP_SKIPPED, STEP_SUCCEEDED, RuleOutcome
from typofix.pipeline import CorrectionPipeline, CorrectionStep, StepPlan
from typofix.telemetry.logger import RunLogger


def test_run_without_document_raises_precondition_error() -> None:
    """A missing document should abort before any step runs."""

    with pytest.raises(PreconditionError) as exc_info:
        CorrectionPipeline().run(None, CorrectionOptions())

    assert exc_info.value.stage == "document"


def test_run_rejects_invalid_options() -> None:
    """Options failing validation should be reported at the options stage."""

    options = CorrectionOptions(remove_tabs="sometimes")  # type: ignore[arg-type]

    with pytest.raises(PreconditionError) as exc_info:
        CorrectionPipeline().run(Document.from_text("x"), options)

    assert exc_info.value.stage == "options"


def test_run_requires_style_selection_for_enabled_steps() -> None:
    """A blank style for an enabled step should fail before the document changes."""

    document = Document.from_text("mot  .")
    options = CorrectionOptions(footnote_style="  ")

    with pytest.raises(PreconditionError) as exc_info:
        CorrectionPipeline().run(document, options)

    assert exc_info.value.stage == "styles"
    assert "footnote_style" in exc_info.value.detail
    assert document.stories[0].text.text == "mot  ."


def test_run_ignores_missing_style_of_disabled_step() -> None:
    """Style selections only matter for steps that are enabled."""

    options = CorrectionOptions(footnote_style=None, style_footnote_references=False)

    report = CorrectionPipeline().run(Document.from_text("mot ."), options)

    assert not report.failed_steps


def test_run_requires_known_trigger_paragraph_styles() -> None:
    """Trigger styling should require both paragraph styles to exist in the document."""

    document = Document(paragraph_styles=["Titre"])
    options = CorrectionOptions(
        apply_style_after_trigger=True,
        trigger_paragraph_style="Titre",
        target_paragraph_style="Chapeau",
    )

    with pytest.raises(PreconditionError) as exc_info:
        CorrectionPipeline().run(document, options)

    assert exc_info.value.stage == "paragraph-styles"
    assert "Chapeau" in exc_info.value.detail


def test_failing_step_is_reported_and_later_steps_still_run() -> None:
    """A step-level error should mark that step failed and keep the run going."""

    document = Document.from_text("Fin ...")
    document.pages = [Page(number=1)]
    options = CorrectionOptions(apply_page_template=True, page_template="B-Fin")

    report = CorrectionPipeline().run(document, options)

    failed = {step.step: step for step in report.failed_steps}
    assert list(failed) == ["page_template"]
    assert "not defined" in (failed["page_template"].error or "")
    statuses = {step.step: step.status for step in report.steps}
    assert statuses["ellipsis"] == STEP_SUCCEEDED
    assert statuses["italic_style"] == STEP_SKIPPED
    assert document.stories[0].text.text == "Fin\N{HORIZONTAL ELLIPSIS}"


def test_progress_callback_receives_enabled_steps_only() -> None:
    """The progress callback should see each enabled step with its plan position."""

    seen: list[tuple[str, int, int]] = []
    pipeline = CorrectionPipeline(
        step_progress_callback=lambda name, index, total: seen.append((name, index, total))
    )

    pipeline.run(Document.from_text("x"), CorrectionOptions())

    names = [name for name, _, _ in seen]
    assert names[0] == "punctuation_spacing"
    assert "italic_style" not in names
    assert all(total == 22 for _, _, total in seen)
    assert seen[-1] == ("numbers", 22, 22)


def test_custom_plan_collects_item_failures_and_logs_events() -> None:
    """Custom plans should report item failures and emit deterministic log lines."""

    def _body(document: Document, options: CorrectionOptions) -> list[RuleOutcome]:
        """Return a fixed outcome."""

        return [RuleOutcome(rule="fixed", matches=3, changes=2)]

    def _broken(document: Document, options: CorrectionOptions) -> list[RuleOutcome]:
        """Fail at step level."""

        raise RuntimeError("broken step")

    plan = StepPlan(
        [
            CorrectionStep("first", "First", lambda options: True, _body),
            CorrectionStep("second", "Second", lambda options: True, _broken),
            CorrectionStep("third", "Third", lambda options: False, _body),
        ]
    )
    sink = io.StringIO()

    report = CorrectionPipeline(plan=plan, run_logger=RunLogger(sink=sink)).run(
        Document.from_text("x"), CorrectionOptions()
    )

    assert [step.status for step in report.steps] == [STEP_SUCCEEDED, STEP_FAILED, STEP_SKIPPED]
    assert report.total_changes == 2
    assert report.changes_by_step() == {"first": 2, "second": 0}
    log = sink.getvalue()
    assert "[step] level=INFO step=first event=start" in log
    assert "[step] level=INFO step=first event=complete changes=2 matches=3" in log
    assert "[step] level=ERROR step=second event=failure error_type=RuntimeError" in log
    assert "[step] level=INFO step=third event=skipped" in log
