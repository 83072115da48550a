"""Footnote reference marker rules.

Responsibilities:
- Move footnote markers in front of adjacent closing punctuation.
- Apply the footnote-reference character style to markers in main text.
"""

from __future__ import annotations

from ..document.model import FOOTNOTE_MARKER, Document
from ..document.styles import POSITION_SUPERSCRIPT
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, PatternRule, TextMatch, apply_rule
from .styling import apply_style_preserving_emphasis
from .typography import BLANK, CLOSING_GUILLEMET, ELLIPSIS


def move_footnote_references(document: Document) -> list[RuleOutcome]:
    """Place each marker before the punctuation and blanks that precede it.

    `mot.\\x04` becomes `mot\\x04.`; the marker keeps its own attributes.
    """

    def _move(match: TextMatch) -> bool:
        """Move the trailing marker to the front of the match."""

        return match.move_last_to_front()

    rule = PatternRule(
        name="footnote_reference_position",
        pattern=f"(?:[,;.?!{ELLIPSIS}{CLOSING_GUILLEMET}]|{BLANK})+{FOOTNOTE_MARKER}",
        action=_move,
        footnotes=FootnoteScope.EXCLUDE,
    )
    return [apply_rule(document, rule)]


def style_footnote_references(document: Document, style_name: str) -> list[RuleOutcome]:
    """Apply a superscript character style to every marker in main text."""

    style = document.styles.get_or_create(style_name, position=POSITION_SUPERSCRIPT)

    def _style(match: TextMatch) -> bool:
        """Style one marker."""

        return apply_style_preserving_emphasis(match.characters, style)

    rule = PatternRule(
        name="footnote_reference_style",
        pattern=FOOTNOTE_MARKER,
        action=_style,
        footnotes=FootnoteScope.EXCLUDE,
    )
    return [apply_rule(document, rule)]
