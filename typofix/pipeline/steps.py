"""Correction step definitions and the validated step plan.

Responsibilities:
- Declare every correction step with its option toggle, body and prerequisites.
- Keep the documented execution order in one place.
- Reject plans whose order breaks a declared prerequisite.

Key types:
- `CorrectionStep`: one named step of the pipeline.
- `StepPlan`: ordered, validated sequence of steps.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from ..config import CorrectionOptions
from ..document.model import Document
from ..errors import PipelineDefinitionError
from ..models.datatypes import RuleOutcome
from ..text.dashes import (
    fix_dash_incises,
    format_value_ranges,
    replace_em_dashes,
    replace_isolated_hyphens,
)
from ..text.footnotes import move_footnote_references, style_footnote_references
from ..text.glyphs import convert_ellipsis, normalize_apostrophes
from ..text.layout import apply_page_template, apply_style_after_trigger
from ..text.numbers import format_numbers
from ..text.ordinals import OrdinalStyles, format_ordinals
from ..text.references import format_reference_spaces
from ..text.spacing import (
    collapse_double_returns,
    collapse_double_spaces,
    fix_typographic_spaces,
    remove_spaces_before_punctuation,
    remove_tabs,
    trim_paragraph_end,
    trim_paragraph_start,
)
from ..text.styling import apply_italic_style, apply_superscript_style

StepBody = Callable[[Document, CorrectionOptions], list[RuleOutcome]]


@dataclass(frozen=True, slots=True)
class CorrectionStep:
    """One named correction step.

    Attributes:
        name: Stable step identifier used in logs and reports.
        description: Short operator-facing description.
        is_enabled: Predicate over the run options.
        body: Callable applying the step to a document.
        requires: Step names that must run earlier in the plan.
        style_fields: Option fields naming styles the step needs when enabled.
    """

    name: str
    description: str
    is_enabled: Callable[[CorrectionOptions], bool]
    body: StepBody
    requires: tuple[str, ...] = ()
    style_fields: tuple[str, ...] = ()


class StepPlan:
    """Ordered step sequence validated against declared prerequisites."""

    def __init__(self, steps: Sequence[CorrectionStep]) -> None:
        """Validate and store the step order.

        Raises:
            PipelineDefinitionError: If names repeat or a prerequisite is missing
                or ordered after the step that requires it.
        """

        positions: dict[str, int] = {}
        for index, step in enumerate(steps):
            if step.name in positions:
                raise PipelineDefinitionError(f"Step `{step.name}` appears more than once.")
            for required in step.requires:
                if required not in positions:
                    raise PipelineDefinitionError(
                        f"Step `{step.name}` requires `{required}` to run before it."
                    )
            positions[step.name] = index
        self._steps = tuple(steps)

    def __iter__(self) -> Iterator[CorrectionStep]:
        return iter(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def names(self) -> tuple[str, ...]:
        """Return step names in execution order."""

        return tuple(step.name for step in self._steps)

    def enabled(self, options: CorrectionOptions) -> list[CorrectionStep]:
        """Return the steps enabled by `options`, in order."""

        return [step for step in self._steps if step.is_enabled(options)]


def _run_ordinals(document: Document, options: CorrectionOptions) -> list[RuleOutcome]:
    """Run century, ordinal and reference styling with the configured styles."""

    styles = OrdinalStyles.resolve(
        document,
        century=options.century_style or "",
        ordinal=options.ordinal_style or "",
        superscript=options.superscript_style or "",
    )
    return format_ordinals(
        document,
        lexicon=options.lexicon,
        styles=styles,
        centuries=options.format_centuries,
        ordinals=options.format_ordinals,
        references=options.format_references,
    )


def _run_numbers(document: Document, options: CorrectionOptions) -> list[RuleOutcome]:
    """Run the number formatter with the configured separator and decimal options."""

    return format_numbers(
        document,
        insert_separators=options.insert_thousands_separators,
        use_decimal_comma=options.use_decimal_comma,
        exclude_years=options.exclude_year_like_numbers,
        separator=options.thousands_separator.character,
    )


DEFAULT_STEPS: tuple[CorrectionStep, ...] = (
    CorrectionStep(
        name="punctuation_spacing",
        description="Remove spaces before periods, commas and note markers",
        is_enabled=lambda options: options.remove_spaces_before_punctuation,
        body=lambda document, options: remove_spaces_before_punctuation(document),
    ),
    CorrectionStep(
        name="double_spaces",
        description="Collapse repeated spaces",
        is_enabled=lambda options: options.collapse_double_spaces,
        body=lambda document, options: collapse_double_spaces(document),
    ),
    CorrectionStep(
        name="typographic_spaces",
        description="Non-breaking spaces inside guillemets and before ;:!?",
        is_enabled=lambda options: options.fix_typographic_spaces,
        body=lambda document, options: fix_typographic_spaces(
            document, options.space_variant.character
        ),
    ),
    CorrectionStep(
        name="dash_incises",
        description="Non-breaking spaces inside dash incises",
        is_enabled=lambda options: options.fix_dash_incises,
        body=lambda document, options: fix_dash_incises(
            document, options.space_variant.character
        ),
    ),
    CorrectionStep(
        name="double_returns",
        description="Remove empty paragraphs",
        is_enabled=lambda options: options.collapse_double_returns,
        body=lambda document, options: collapse_double_returns(document),
    ),
    CorrectionStep(
        name="paragraph_start",
        description="Trim spaces at paragraph start",
        is_enabled=lambda options: options.trim_paragraph_start,
        body=lambda document, options: trim_paragraph_start(document),
    ),
    CorrectionStep(
        name="paragraph_end",
        description="Trim spaces at paragraph end",
        is_enabled=lambda options: options.trim_paragraph_end,
        body=lambda document, options: trim_paragraph_end(document),
    ),
    CorrectionStep(
        name="tabs",
        description="Remove tabs",
        is_enabled=lambda options: options.remove_tabs,
        body=lambda document, options: remove_tabs(document),
    ),
    CorrectionStep(
        name="footnote_position",
        description="Move note markers before punctuation",
        is_enabled=lambda options: options.move_footnote_references,
        body=lambda document, options: move_footnote_references(document),
    ),
    CorrectionStep(
        name="footnote_style",
        description="Style note markers",
        is_enabled=lambda options: options.style_footnote_references,
        body=lambda document, options: style_footnote_references(
            document, options.footnote_style or ""
        ),
        requires=("footnote_position",),
        style_fields=("footnote_style",),
    ),
    CorrectionStep(
        name="em_dashes",
        description="Replace em dashes with en dashes",
        is_enabled=lambda options: options.replace_em_dashes,
        body=lambda document, options: replace_em_dashes(document),
    ),
    CorrectionStep(
        name="isolated_hyphens",
        description="Replace isolated hyphens with en dashes",
        is_enabled=lambda options: options.replace_isolated_hyphens,
        body=lambda document, options: replace_isolated_hyphens(document),
        requires=("em_dashes",),
    ),
    CorrectionStep(
        name="value_ranges",
        description="Join value ranges with en dashes",
        is_enabled=lambda options: options.format_value_ranges,
        body=lambda document, options: format_value_ranges(document),
        requires=("em_dashes",),
    ),
    CorrectionStep(
        name="italic_style",
        description="Apply the italic character style",
        is_enabled=lambda options: options.apply_italic_style,
        body=lambda document, options: apply_italic_style(
            document, options.italic_style or ""
        ),
        style_fields=("italic_style",),
    ),
    CorrectionStep(
        name="superscript_style",
        description="Apply the superscript character style",
        is_enabled=lambda options: options.apply_superscript_style,
        body=lambda document, options: apply_superscript_style(
            document, options.superscript_style or ""
        ),
        style_fields=("superscript_style",),
    ),
    CorrectionStep(
        name="ellipsis",
        description="Replace three periods with an ellipsis",
        is_enabled=lambda options: options.convert_ellipsis,
        body=lambda document, options: convert_ellipsis(document),
    ),
    CorrectionStep(
        name="apostrophes",
        description="Use typographic apostrophes",
        is_enabled=lambda options: options.normalize_apostrophes,
        body=lambda document, options: normalize_apostrophes(document),
    ),
    CorrectionStep(
        name="style_after_trigger",
        description="Style the paragraph following trigger paragraphs",
        is_enabled=lambda options: options.apply_style_after_trigger,
        body=lambda document, options: apply_style_after_trigger(
            document,
            options.trigger_paragraph_style or "",
            options.target_paragraph_style or "",
        ),
        style_fields=("trigger_paragraph_style", "target_paragraph_style"),
    ),
    CorrectionStep(
        name="page_template",
        description="Apply the page template to the last page",
        is_enabled=lambda options: options.apply_page_template,
        body=lambda document, options: apply_page_template(
            document, options.page_template or ""
        ),
        style_fields=("page_template",),
    ),
    CorrectionStep(
        name="centuries_ordinals",
        description="Style centuries, ordinals and numbered references",
        is_enabled=lambda options: (
            options.format_centuries or options.format_ordinals or options.format_references
        ),
        body=_run_ordinals,
        style_fields=("century_style", "ordinal_style", "superscript_style"),
    ),
    CorrectionStep(
        name="reference_spaces",
        description="Bind abbreviations and units to their numbers",
        is_enabled=lambda options: options.format_reference_spaces,
        body=lambda document, options: format_reference_spaces(document, options.lexicon),
    ),
    CorrectionStep(
        name="numbers",
        description="Group thousands and format decimals",
        is_enabled=lambda options: options.format_numbers,
        body=_run_numbers,
        requires=("centuries_ordinals",),
    ),
)


def build_default_plan() -> StepPlan:
    """Return the validated default step plan."""

    return StepPlan(DEFAULT_STEPS)
