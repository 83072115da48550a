"""Whitespace and punctuation-spacing rules.

Responsibilities:
- Remove spaces before closing punctuation and footnote markers.
- Collapse repeated spaces and empty paragraphs.
- Insert the configured non-breaking space inside guillemets and before `;:!?`.
- Trim paragraph edges and remove tabs.

Each public function builds its `PatternRule` objects per call and returns the
executor outcomes; nothing is cached between calls.
"""

from __future__ import annotations

import regex

from ..document.model import FOOTNOTE_MARKER, Document
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, PatternRule, TextMatch, apply_rule
from .typography import (
    BLANK,
    CLOSING_GUILLEMET,
    EMPTY_LINE_FILLER,
    OPENING_GUILLEMET,
    SPACE,
)


def remove_spaces_before_punctuation(document: Document) -> list[RuleOutcome]:
    """Delete blanks before periods, commas and footnote markers."""

    rule = PatternRule(
        name="spaces_before_punctuation",
        pattern=f"{BLANK}+(?=[{FOOTNOTE_MARKER}.,])",
        replacement="",
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]


def collapse_double_spaces(document: Document) -> list[RuleOutcome]:
    """Replace runs of two or more spaces with one space.

    The run keeps its first non-breaking variant; a run of plain spaces becomes one
    regular space.
    """

    def _collapse(match: TextMatch) -> bool:
        """Collapse one run, keeping a non-breaking variant when present."""

        run = match.group() or ""
        kept = next((character for character in run if character != " "), " ")
        return match.set_contents(kept)

    rule = PatternRule(
        name="double_spaces",
        pattern=f"{SPACE}{{2,}}",
        action=_collapse,
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]


def fix_typographic_spaces(document: Document, space: str) -> list[RuleOutcome]:
    """Put `space` inside guillemets and before high punctuation.

    Existing spaces at those positions are replaced; missing ones are inserted.
    A mark directly following another high mark (`?!`) gets no space.
    """

    rules = [
        PatternRule(
            name="space_after_opening_guillemet",
            pattern=f"{OPENING_GUILLEMET}{SPACE}*(?=[^\\s{CLOSING_GUILLEMET}])",
            replacement=f"{OPENING_GUILLEMET}{space}",
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="space_before_closing_guillemet",
            pattern=f"(?<=[^\\s{OPENING_GUILLEMET}]){SPACE}*{CLOSING_GUILLEMET}",
            replacement=f"{space}{CLOSING_GUILLEMET}",
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="space_before_high_punctuation",
            pattern=f"(?<=[^\\s;:!?{OPENING_GUILLEMET}]){SPACE}*(?P<mark>[;!?])",
            replacement=f"{space}\\g<mark>",
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="space_before_colon",
            pattern=f"(?<=[^\\s;:!?{OPENING_GUILLEMET}]){SPACE}*:(?!//)(?!(?<=\\d:)\\d)",
            replacement=f"{space}:",
            footnotes=FootnoteScope.INCLUDE,
        ),
    ]
    return [apply_rule(document, rule) for rule in rules]


def collapse_double_returns(document: Document) -> list[RuleOutcome]:
    """Remove empty paragraphs, including ones holding only invisible spaces."""

    rule = PatternRule(
        name="double_returns",
        pattern=f"\n(?:{EMPTY_LINE_FILLER}*\n)+",
        replacement="\n",
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]


def trim_paragraph_start(document: Document) -> list[RuleOutcome]:
    """Remove blanks at the start of every paragraph."""

    rule = PatternRule(
        name="paragraph_leading_blanks",
        pattern=f"^{BLANK}+",
        replacement="",
        footnotes=FootnoteScope.INCLUDE,
        flags=regex.MULTILINE,
    )
    return [apply_rule(document, rule)]


def trim_paragraph_end(document: Document) -> list[RuleOutcome]:
    """Remove blanks at the end of every paragraph."""

    rule = PatternRule(
        name="paragraph_trailing_blanks",
        pattern=f"{BLANK}+$",
        replacement="",
        footnotes=FootnoteScope.INCLUDE,
        flags=regex.MULTILINE,
    )
    return [apply_rule(document, rule)]


def remove_tabs(document: Document) -> list[RuleOutcome]:
    """Remove tabs; a tab between two words becomes a space."""

    rules = [
        PatternRule(
            name="tabs_after_footnote_marker",
            pattern=f"{FOOTNOTE_MARKER}\t+",
            replacement=FOOTNOTE_MARKER,
            footnotes=FootnoteScope.EXCLUDE,
        ),
        PatternRule(
            name="tabs_between_words",
            pattern="(?<=[^\\s])\t+(?=[^\\s])",
            replacement=" ",
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="tabs",
            pattern="\t+",
            replacement="",
            footnotes=FootnoteScope.INCLUDE,
        ),
    ]
    return [apply_rule(document, rule) for rule in rules]
