"""Non-breaking spaces around reference abbreviations, units and eras.

Responsibilities:
- Bind reference abbreviations (`p.`, `t.`, `n°`) to the number that follows.
- Tighten abbreviated page ranges (`pp. 10 - 12`).
- Bind numbers to the measurement unit that follows them.
- Bind era abbreviations in `av. J.-C.` and `apr. J.-C.` to the year.
"""

from __future__ import annotations

from ..document.model import FOOTNOTE_MARKER, Document
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, PatternRule, apply_rule
from .lexicon import Lexicon, alternation
from .typography import EM_DASH, EN_DASH, NARROW_NO_BREAK_SPACE, NO_BREAK_SPACE

_BINDABLE = f"[ \t{NO_BREAK_SPACE}{NARROW_NO_BREAK_SPACE}]"
_UNIT_END = f"(?=\\s|[.,;:!?){FOOTNOTE_MARKER}]|$)"


def format_reference_spaces(document: Document, lexicon: Lexicon) -> list[RuleOutcome]:
    """Insert non-breaking spaces after abbreviations and before units."""

    abbreviations = f"(?<!\\w)(?P<abbr>(?i:{alternation(lexicon.reference_abbreviations)}))"
    rules = [
        PatternRule(
            name="reference_ranges",
            pattern=(
                f"{abbreviations}{_BINDABLE}+(?P<first>\\d+) *"
                f"(?P<dash>[-{EN_DASH}{EM_DASH}]) *(?P<last>\\d+)"
            ),
            replacement=f"\\g<abbr>{NO_BREAK_SPACE}\\g<first>\\g<dash>\\g<last>",
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="reference_numbers",
            pattern=f"{abbreviations}{_BINDABLE}+(?=\\d|[IVXLCDM]+(?!\\w))",
            replacement=f"\\g<abbr>{NO_BREAK_SPACE}",
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="unit_spaces",
            pattern=f"(?<=\\d) (?={alternation(lexicon.units)}{_UNIT_END})",
            replacement=NO_BREAK_SPACE,
            footnotes=FootnoteScope.INCLUDE,
        ),
        PatternRule(
            name="era_spaces",
            pattern=(
                f"(?<=\\d){_BINDABLE}+(?P<era>{alternation(lexicon.era_abbreviations)})"
                f"{_BINDABLE}*J\\.-C\\."
            ),
            replacement=f"{NO_BREAK_SPACE}\\g<era>{NO_BREAK_SPACE}J.-C.",
            footnotes=FootnoteScope.INCLUDE,
        ),
    ]
    return [apply_rule(document, rule) for rule in rules]
