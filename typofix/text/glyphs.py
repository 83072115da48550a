"""Glyph substitutions: ellipsis and typographic apostrophe."""

from __future__ import annotations

from ..document.model import Document
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, PatternRule, apply_rule
from .typography import ELLIPSIS, RIGHT_SINGLE_QUOTE


def convert_ellipsis(document: Document) -> list[RuleOutcome]:
    """Replace three consecutive periods with the ellipsis character."""

    rule = PatternRule(
        name="ellipsis",
        pattern="\\.{3}",
        replacement=ELLIPSIS,
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]


def normalize_apostrophes(document: Document) -> list[RuleOutcome]:
    """Replace straight apostrophes with the typographic apostrophe."""

    rule = PatternRule(
        name="apostrophes",
        pattern="'",
        replacement=RIGHT_SINGLE_QUOTE,
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]
