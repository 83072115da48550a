"""Number formatter: digit grouping, decimal separators and year exclusion.

Responsibilities:
- Protect year-like numbers and year ranges so no later pass changes them.
- Protect decimal fractions while the integer parts are grouped.
- Remove foreign grouping and regroup digit runs by three from the right.
- Restore protected spans and verify that nothing stays protected.

Key functions:
- `format_numbers`: full formatter pass over a document.
- `group_digits`: pure triple grouping used by the grouping pass.

Every pass goes through `apply_rule` with one shared `ProtectionTable`; the
table is emptied before the function returns.
"""

from __future__ import annotations

import regex

from ..document.model import Document
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, PatternRule, TextMatch, apply_rule
from ..rules.protection import MASK_CHARACTER, ProtectedSpan, ProtectionTable

YEAR_PATTERN = "(?:1\\d{3}|20[0-4]\\d|2050)"
MAX_GROUPING_PASSES = 10

_YEAR_KIND = "year"
_DECIMAL_KIND = "decimal"
_NUMBER_END = "(?!\\d|[.,]\\d)"
_RANGE_DASH = "[-\N{EN DASH}\N{EM DASH}]"
_RANGE_SPACE = "[ \N{NO-BREAK SPACE}\N{NARROW NO-BREAK SPACE}]?"
# Characters accepted between digit groups in foreign or broken grouping.
_GROUP_SEPARATOR = (
    "[ \N{NO-BREAK SPACE}\N{NARROW NO-BREAK SPACE}\N{THIN SPACE}"
    "\N{FIGURE SPACE}'\N{RIGHT SINGLE QUOTATION MARK}.]"
)
_DECIMAL = (
    "(?<![\\d.,])(?P<integer>\\d+)"
    "(?P<fraction>,\\d+|\\.(?!\\d{3}(?!\\d))\\d+)"
    f"{_NUMBER_END}"
)
_GROUP_SPLIT = regex.compile(_GROUP_SEPARATOR)


def group_digits(digits: str, separator: str) -> str:
    """Return `digits` split into groups of three from the right."""

    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[index:index + 3] for index in range(head, len(digits), 3))
    return separator.join(groups)


def format_numbers(
    document: Document,
    *,
    insert_separators: bool,
    use_decimal_comma: bool,
    exclude_years: bool,
    separator: str,
) -> list[RuleOutcome]:
    """Group thousands and normalize decimal markers across main text and footnotes.

    With `insert_separators` off, only the decimal-comma substitution runs.

    Raises:
        ProtectionLeakError: If a protected span survives the pass.
    """

    table = ProtectionTable()
    outcomes: list[RuleOutcome] = []

    if exclude_years:
        outcomes.extend(_protect_years(document, table))

    if not insert_separators:
        if use_decimal_comma:
            outcomes.append(
                apply_rule(
                    document,
                    PatternRule(
                        name="decimal_comma",
                        pattern=(
                            "(?<![\\d.,])(\\d+)\\.(?!\\d{3}(?!\\d))(\\d+)"
                            f"{_NUMBER_END}"
                        ),
                        replacement="\\1,\\2",
                        footnotes=FootnoteScope.INCLUDE,
                    ),
                    protections=table,
                )
            )
        table.restore(_YEAR_KIND)
        table.assert_released()
        return outcomes

    outcomes.append(_protect_decimals(document, table))
    outcomes.append(_canonicalize_groups(document, table, separator))
    outcomes.append(_group_runs(document, table, separator))
    outcomes.extend(_regroup_until_stable(document, table, separator))

    def _decimal_marker(span: ProtectedSpan) -> str:
        """Rewrite the protected marker according to the decimal option."""

        if use_decimal_comma:
            return "," + span.original[1:]
        return span.original

    restored = table.restore(_DECIMAL_KIND, _decimal_marker)
    outcomes.append(RuleOutcome(rule="decimal_marker", matches=restored, changes=restored))
    table.restore(_YEAR_KIND)

    outcomes.append(
        apply_rule(
            document,
            PatternRule(
                name="doubled_separators",
                pattern=f"(?<=\\d){regex.escape(separator)}{{2,}}(?=\\d)",
                replacement=separator,
                footnotes=FootnoteScope.INCLUDE,
            ),
        )
    )
    table.assert_released()
    return outcomes


def _protect_years(document: Document, table: ProtectionTable) -> list[RuleOutcome]:
    """Protect year ranges first, then standalone year-like numbers."""

    def _protect(match: TextMatch) -> bool:
        """Register the whole match as a year span."""

        table.protect(match.flow, match.characters, _YEAR_KIND)
        return False

    rules = (
        PatternRule(
            name="year_ranges",
            pattern=(
                f"(?<![\\d.,]){YEAR_PATTERN}{_RANGE_SPACE}{_RANGE_DASH}"
                f"{_RANGE_SPACE}{YEAR_PATTERN}{_NUMBER_END}"
            ),
            action=_protect,
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="years",
            pattern=f"(?<![\\d.,]){YEAR_PATTERN}{_NUMBER_END}",
            action=_protect,
            footnotes=FootnoteScope.INCLUDE,
        ),
    )
    return [apply_rule(document, rule, protections=table) for rule in rules]


def _protect_decimals(document: Document, table: ProtectionTable) -> RuleOutcome:
    """Protect decimal markers together with their fractional digits."""

    def _protect(match: TextMatch) -> bool:
        """Register the marker and fraction as a decimal span."""

        table.protect(match.flow, match.group_characters("fraction"), _DECIMAL_KIND)
        return False

    return apply_rule(
        document,
        PatternRule(
            name="decimals",
            pattern=_DECIMAL,
            action=_protect,
            footnotes=FootnoteScope.INCLUDE,
        ),
        protections=table,
    )


def _canonicalize_groups(
    document: Document, table: ProtectionTable, separator: str
) -> RuleOutcome:
    """Strip grouping characters from runs not already grouped with `separator`."""

    def _strip(match: TextMatch) -> bool:
        """Join the digit groups of one run unless it is canonical."""

        text = match.group() or ""
        if _is_canonical(text, separator):
            return False
        return match.set_contents(_GROUP_SPLIT.sub("", text))

    return apply_rule(
        document,
        PatternRule(
            name="foreign_grouping",
            pattern=(
                f"(?<![\\d{MASK_CHARACTER}])\\d+(?:{_GROUP_SEPARATOR}\\d{{3,}})+(?!\\d)"
            ),
            action=_strip,
            footnotes=FootnoteScope.INCLUDE,
        ),
        protections=table,
    )


def _is_canonical(text: str, separator: str) -> bool:
    """Return whether a grouped run already uses `separator` and proper group sizes."""

    parts = text.split(separator)
    if not 1 <= len(parts[0]) <= 3:
        return False
    return all(len(part) == 3 and part.isdigit() for part in parts[1:]) and parts[0].isdigit()


def _group_runs(document: Document, table: ProtectionTable, separator: str) -> RuleOutcome:
    """Group every raw digit run of four or more digits."""

    def _group(match: TextMatch) -> bool:
        """Insert separators into one digit run."""

        return match.set_contents(group_digits(match.group() or "", separator))

    return apply_rule(
        document,
        PatternRule(
            name="digit_grouping",
            pattern=f"(?<![\\w{MASK_CHARACTER}.,])\\d{{4,}}(?!\\d)",
            action=_group,
            footnotes=FootnoteScope.INCLUDE,
        ),
        protections=table,
    )


def _regroup_until_stable(
    document: Document, table: ProtectionTable, separator: str
) -> list[RuleOutcome]:
    """Split oversized leading groups until no run changes."""

    escaped = regex.escape(separator)

    def _regroup(match: TextMatch) -> bool:
        """Group the oversized leading digits of one run."""

        return match.set_contents(group_digits(match.group() or "", separator))

    outcomes: list[RuleOutcome] = []
    for _ in range(MAX_GROUPING_PASSES):
        outcome = apply_rule(
            document,
            PatternRule(
                name="digit_regrouping",
                pattern=f"(?<![\\w{MASK_CHARACTER}.,])\\d{{4,}}(?={escaped}\\d{{3}})",
                action=_regroup,
                footnotes=FootnoteScope.INCLUDE,
            ),
            protections=table,
        )
        outcomes.append(outcome)
        if outcome.changes == 0:
            break
    return outcomes
