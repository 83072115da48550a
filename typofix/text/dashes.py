"""Dash rules: incise spacing, dash replacement and value ranges.

Responsibilities:
- Pair dash delimiters per paragraph and bind them to the enclosed words.
- Replace em dashes and spaced hyphens with en dashes.
- Join numeric and alphabetic ranges with en dashes.

Key functions:
- `fix_dash_incises`: paragraph-scoped pairing engine.
- `replace_em_dashes`, `replace_isolated_hyphens`, `format_value_ranges`.
"""

from __future__ import annotations

from dataclasses import dataclass

import regex

from ..document.model import Document
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, PatternRule, apply_rule, iter_flows
from .typography import EM_DASH, EN_DASH, SPACE

# En dash, em dash, or a hyphen standing alone between blanks.
_DELIMITER = regex.compile(f"[{EN_DASH}{EM_DASH}]|(?<![^\\s])-(?![^\\s])")
_SPACES_AFTER = regex.compile(f"{SPACE}+")
_SPACES_BEFORE = regex.compile(f"{SPACE}+$")


@dataclass(frozen=True, slots=True)
class _Delimiter:
    """One dash delimiter with the blank runs around it, as paragraph offsets."""

    start: int
    end: int
    after: tuple[int, int] | None
    before: tuple[int, int] | None


def fix_dash_incises(document: Document, space: str) -> list[RuleOutcome]:
    """Put `space` on the inner side of dash incises, paragraph by paragraph.

    - `– mot –` gets `space` after the opening and before the closing dash.
    - An unpaired dash with no later dash in its paragraph gets `space` after it;
      this covers dialogue dashes at paragraph start.
    - An unpaired dash with no earlier dash in its paragraph gets `space` before it.
    - A lone dash matches both cases and gets `space` on each side.
    """

    matches = 0
    changes = 0
    for flow in iter_flows(document, FootnoteScope.INCLUDE):
        for paragraph in reversed(flow.paragraphs()):
            text = paragraph.text
            delimiters = _find_delimiters(text)
            matches += len(delimiters)
            for start, end in sorted(_incise_edits(delimiters), reverse=True):
                if flow.replace_range(paragraph.start + start, paragraph.start + end, space):
                    changes += 1
    return [RuleOutcome(rule="dash_incises", matches=matches, changes=changes)]


def _find_delimiters(text: str) -> list[_Delimiter]:
    """Locate delimiters in one paragraph together with their adjacent blanks."""

    delimiters: list[_Delimiter] = []
    for match in _DELIMITER.finditer(text):
        after = _SPACES_AFTER.match(text, match.end())
        before = _SPACES_BEFORE.search(text, 0, match.start())
        delimiters.append(
            _Delimiter(
                start=match.start(),
                end=match.end(),
                after=after.span() if after else None,
                before=before.span() if before else None,
            )
        )
    return delimiters


def _incise_edits(delimiters: list[_Delimiter]) -> list[tuple[int, int]]:
    """Return the blank runs to replace, as paragraph offset ranges."""

    edits: list[tuple[int, int]] = []
    paired: set[int] = set()

    index = 0
    while index < len(delimiters) - 1:
        opening = delimiters[index]
        closing = delimiters[index + 1]
        if (
            opening.after is not None
            and closing.before is not None
            and opening.after[1] < closing.before[0]
        ):
            edits.append(opening.after)
            edits.append(closing.before)
            paired.update({index, index + 1})
            index += 2
            continue
        index += 1

    last = len(delimiters) - 1
    for index, delimiter in enumerate(delimiters):
        if index in paired:
            continue
        if index == last and delimiter.after is not None:
            edits.append(delimiter.after)
        if index == 0 and delimiter.before is not None:
            edits.append(delimiter.before)
    return edits


def replace_em_dashes(document: Document) -> list[RuleOutcome]:
    """Replace every em dash with an en dash."""

    rule = PatternRule(
        name="em_dashes",
        pattern=EM_DASH,
        replacement=EN_DASH,
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]


def replace_isolated_hyphens(document: Document) -> list[RuleOutcome]:
    """Replace hyphens standing between blanks, or opening a paragraph, with en dashes."""

    rule = PatternRule(
        name="isolated_hyphens",
        pattern="(?<![^\\s])-(?=\\s)",
        replacement=EN_DASH,
        footnotes=FootnoteScope.INCLUDE,
    )
    return [apply_rule(document, rule)]


def format_value_ranges(document: Document) -> list[RuleOutcome]:
    """Join year, page, hour, figure and letter ranges with en dashes."""

    patterns = (
        ("year_ranges", "(?<![\\d.,])(\\d{4})-(\\d{4})(?!\\d)", f"\\1{EN_DASH}\\2"),
        (
            "page_ranges",
            f"\\b((?i:pp?\\.|pages?))({SPACE})(\\d+)-(\\d+)\\b",
            f"\\1\\2\\3{EN_DASH}\\4",
        ),
        ("minute_ranges", "\\b(\\d+h\\d+)-(\\d+h\\d+)\\b", f"\\1{EN_DASH}\\2"),
        ("hour_ranges", "\\b(\\d+h)-(\\d+h)\\b", f"\\1{EN_DASH}\\2"),
        (
            "figure_ranges",
            f"\\b((?i:tableaux?|fig\\.|figures?))({SPACE})(\\d+)-(\\d+)\\b",
            f"\\1\\2\\3{EN_DASH}\\4",
        ),
        ("letter_ranges", "\\b([A-Z])-([A-Z])\\b", f"\\1{EN_DASH}\\2"),
    )
    return [
        apply_rule(
            document,
            PatternRule(
                name=name,
                pattern=pattern,
                replacement=replacement,
                footnotes=FootnoteScope.INCLUDE,
            ),
        )
        for name, pattern, replacement in patterns
    ]
