"""Paragraph-style and page-template steps.

Responsibilities:
- Style the first non-empty paragraph that follows a block of trigger paragraphs.
- Apply a page template to the last page of the document.
"""

from __future__ import annotations

from ..document.model import Document
from ..errors import StepError
from ..models.datatypes import RuleOutcome


def apply_style_after_trigger(
    document: Document,
    trigger_style: str,
    target_style: str,
) -> list[RuleOutcome]:
    """Apply `target_style` to the first non-empty paragraph after each trigger block.

    Consecutive paragraphs carrying `trigger_style` form one block. Empty
    paragraphs between the block and the next content are skipped.
    """

    matches = 0
    changes = 0
    for story in document.stories:
        waiting = False
        for paragraph in story.text.paragraphs():
            if paragraph.applied_paragraph_style == trigger_style:
                waiting = True
                continue
            if not waiting or paragraph.is_empty:
                continue
            matches += 1
            if paragraph.apply_paragraph_style(target_style):
                changes += 1
            waiting = False
    return [RuleOutcome(rule="style_after_trigger", matches=matches, changes=changes)]


def apply_page_template(document: Document, template: str) -> list[RuleOutcome]:
    """Apply `template` to the last page.

    Raises:
        StepError: If the document has no pages or does not define `template`.
    """

    if template not in document.templates:
        raise StepError("page_template", f"template `{template}` is not defined")
    if not document.pages:
        raise StepError("page_template", "document has no pages")

    page = document.pages[-1]
    changed = page.template != template
    page.template = template
    return [RuleOutcome(rule="page_template", matches=1, changes=1 if changed else 0)]
