"""Roman-numeral ordinal, century and reference styling.

Responsibilities:
- Classify Roman numerals followed by `e`, `er` or `re` as centuries, ordinal
  ranks or regnal/work references.
- Split-style each occurrence: numeral with a numeral style, suffix superscript.
- Keep every character's italic/bold emphasis across style assignment.

Key types:
- `OrdinalStyles`: the three character styles used by the engine.
- `format_ordinals`: runs the enabled rule families in priority order.

Rules run in a fixed priority order. A character styled by an earlier rule is
claimed for the whole run and later rules skip matches touching it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

import regex

from ..document.model import FOOTNOTE_MARKER, Character, Document
from ..document.styles import CAPITALIZATION_SMALL_CAPS, POSITION_SUPERSCRIPT, CharacterStyle
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, MatchAction, PatternRule, TextMatch, apply_rule
from .lexicon import Lexicon, alternation
from .styling import apply_style_preserving_emphasis
from .typography import (
    CLOSING_GUILLEMET,
    ELLIPSIS,
    EM_DASH,
    EN_DASH,
    NO_BREAK_SPACE,
    OPENING_GUILLEMET,
)

# Start of text, or after a blank or opening punctuation.
CLAUSE_START = f"(?<![^\\s(\\[{OPENING_GUILLEMET}:{EN_DASH}{EM_DASH}])"
# Followed by punctuation, a blank, a note marker or the end of text.
CLAUSE_END = f"(?=[.,;:\\s!?)\\]}}>{CLOSING_GUILLEMET}{ELLIPSIS}{FOOTNOTE_MARKER}]|$)"
CENTURY_WORD = "(?i:si[\N{LATIN SMALL LETTER E WITH GRAVE}e]cles?)"

_ROMAN_NUMERAL = regex.compile(
    "M{0,4}(?:CM|CD|D?C{0,3})(?:XC|XL|L?X{0,3})(?:IX|IV|V?I{0,3})"
)


@dataclass(frozen=True, slots=True)
class OrdinalStyles:
    """Character styles applied by the engine.

    Attributes:
        century: Style for century numerals, rendered in small capitals.
        ordinal: Style for uppercase ordinal and reference numerals.
        superscript: Style for the `e`, `er` and `re` suffixes.
    """

    century: CharacterStyle
    ordinal: CharacterStyle
    superscript: CharacterStyle

    @classmethod
    def resolve(
        cls,
        document: Document,
        *,
        century: str,
        ordinal: str,
        superscript: str,
    ) -> OrdinalStyles:
        """Look up the named styles, creating missing ones."""

        return cls(
            century=document.styles.get_or_create(
                century, capitalization=CAPITALIZATION_SMALL_CAPS
            ),
            ordinal=document.styles.get_or_create(ordinal),
            superscript=document.styles.get_or_create(
                superscript, position=POSITION_SUPERSCRIPT
            ),
        )


def is_roman_numeral(text: str) -> bool:
    """Return whether `text` is a well-formed Roman numeral, case-insensitively."""

    return bool(text) and _ROMAN_NUMERAL.fullmatch(text.upper()) is not None


def format_ordinals(
    document: Document,
    *,
    lexicon: Lexicon,
    styles: OrdinalStyles,
    centuries: bool = True,
    ordinals: bool = True,
    references: bool = True,
) -> list[RuleOutcome]:
    """Run the enabled rule families over main text and footnotes."""

    engine = _OrdinalEngine(document, lexicon, styles)
    outcomes: list[RuleOutcome] = []
    if centuries:
        outcomes.extend(engine.centuries())
    if ordinals:
        outcomes.extend(engine.ordinals())
    if references:
        outcomes.extend(engine.references())
    return outcomes


class _OrdinalEngine:
    """Rule builder and claim registry for one formatting run."""

    def __init__(self, document: Document, lexicon: Lexicon, styles: OrdinalStyles) -> None:
        """Initialize patterns from `lexicon` and an empty claim set."""

        self.document = document
        self.lexicon = lexicon
        self.styles = styles
        self._claimed: set[int] = set()
        self._ordinal_keyword = f"(?i:{alternation(lexicon.ordinal_keywords)})(?!\\w)"
        self._before_keyword = f"\\b(?i:{alternation(lexicon.before_ordinal_keywords)})"
        self._first_names = f"\\b{alternation(lexicon.names_with_first)}"

    def centuries(self) -> list[RuleOutcome]:
        """Style `Ier siècle`, `XIVe siècle` and bare centuries at clause end."""

        not_rank = f"(?!\\s+{self._ordinal_keyword})"
        not_named = f"(?<!{self._first_names}\\s+)"
        return [
            self._apply(
                "first_century_rewrite",
                f"{CLAUSE_START}{not_named}(?P<num>[Ii])(?P<suf>e){CLAUSE_END}{not_rank}",
                lambda match: self._style_split(
                    match, self.styles.century, suffix_text="er"
                ),
            ),
            self._apply(
                "first_century",
                f"{CLAUSE_START}{not_named}(?P<num>[Ii])(?P<suf>er){CLAUSE_END}{not_rank}",
                lambda match: self._style_split(match, self.styles.century),
            ),
            self._apply(
                "century_keyword",
                f"{CLAUSE_START}(?P<num>[IVXivx]{{1,5}})(?P<suf>e)(?=\\s+{CENTURY_WORD})",
                lambda match: self._style_split(
                    match, self.styles.century, numeral_case=str.lower
                ),
            ),
            self._apply(
                "century",
                (
                    f"{CLAUSE_START}(?<!{self._before_keyword}\\s+)"
                    f"(?P<num>[IVXivx]{{1,5}})(?P<suf>e){CLAUSE_END}{not_rank}"
                ),
                lambda match: self._style_split(
                    match, self.styles.century, numeral_case=str.lower
                ),
            ),
        ]

    def ordinals(self) -> list[RuleOutcome]:
        """Style ordinal ranks such as `IIe République` or `acte IIIe`."""

        def _rank(match: TextMatch) -> bool:
            """Style one ordinal rank with an uppercase numeral."""

            return self._style_split(match, self.styles.ordinal, numeral_case=str.upper)

        outcomes = [
            self._apply(
                "feminine_first_accented",
                "\\b(?P<num>[Ii])\N{LATIN SMALL LETTER E WITH GRAVE}re\\b",
                replacement="\\g<num>re",
            ),
            self._apply("feminine_first", "\\b(?P<num>[Ii])ere\\b", replacement="\\g<num>re"),
            self._apply("first_mixed_case", "\\b(?P<num>[Ii])eR\\b", replacement="\\g<num>er"),
            self._apply(
                "first_rank",
                (
                    f"(?<!{self._first_names}\\s+)(?<!\\w)"
                    "(?P<num>[Ii])(?P<suf>er|re)(?!\\w)"
                ),
                lambda match: self._style_split(match, self.styles.ordinal),
            ),
            self._apply(
                "rank_after_keyword",
                f"(?<={self._before_keyword}\\s+)(?P<num>[IVXivx]{{1,5}})(?P<suf>e){CLAUSE_END}",
                _rank,
            ),
            self._apply(
                "rank_before_keyword",
                (
                    f"{CLAUSE_START}(?P<num>[IVXivx]{{1,5}})(?P<suf>e)"
                    f"(?=\\s+{self._ordinal_keyword})"
                ),
                _rank,
            ),
        ]

        def _bind(match: TextMatch) -> bool:
            """Replace the space after an ordinal with a non-breaking space."""

            if self._is_ambiguous(match):
                return False
            start, end = match.span("space")
            return match.flow.replace_range(start, end, NO_BREAK_SPACE)

        outcomes.extend(
            self._apply(name, pattern, _bind)
            for name, pattern in (
                (
                    "first_rank_space",
                    "(?<!\\w)(?P<num>[Ii])(?P<suf>er|re)(?P<space> )(?=\\p{Lu})",
                ),
                (
                    "rank_space",
                    "(?<!\\w)(?P<num>[IVXivx]{1,5})(?P<suf>e)(?P<space> )(?=\\p{Lu})",
                ),
            )
        )
        return outcomes

    def references(self) -> list[RuleOutcome]:
        """Style `tome III`, `Louis XIV`, `François Ier` and Arabic `1er`."""

        keywords = alternation((*self.lexicon.work_keywords, *self.lexicon.person_titles))

        def _reference(match: TextMatch) -> bool:
            """Uppercase and style one reference numeral and bind it to its keyword."""

            numeral = match.group("num") or ""
            if not is_roman_numeral(numeral):
                return False
            characters = match.group_characters("num")
            if self._is_claimed(characters):
                return False
            start, end = match.span("num")
            changed = match.flow.replace_range(start, end, numeral.upper())
            space_start, space_end = match.span("space")
            changed = match.flow.replace_range(space_start, space_end, NO_BREAK_SPACE) or changed
            characters = match.flow.slice(start, end)
            changed = apply_style_preserving_emphasis(characters, self.styles.ordinal) or changed
            self._claim(characters)
            return changed

        def _arabic(match: TextMatch) -> bool:
            """Raise the suffix of an Arabic first."""

            characters = match.group_characters("suf")
            if self._is_claimed(characters):
                return False
            changed = apply_style_preserving_emphasis(characters, self.styles.superscript)
            self._claim(characters)
            return changed

        return [
            self._apply(
                "reference_numeral",
                (
                    f"(?<!\\w)(?i:{keywords})(?P<space>[ {NO_BREAK_SPACE}])"
                    "(?P<num>[IVXLCDM]+|[ivx]+)(?![\\w-])"
                ),
                _reference,
            ),
            self._apply(
                "regnal_first",
                (
                    f"{self._first_names}[ {NO_BREAK_SPACE}]"
                    "(?P<num>[Ii])(?P<suf>er)(?!\\w)"
                ),
                lambda match: self._style_split(match, self.styles.ordinal),
            ),
            self._apply(
                "arabic_first",
                "(?<![\\w.,])1(?P<suf>er|re)(?!\\w)",
                _arabic,
            ),
        ]

    def _apply(
        self,
        name: str,
        pattern: str,
        action: MatchAction | None = None,
        *,
        replacement: str | None = None,
    ) -> RuleOutcome:
        """Apply one rule over main text and footnotes."""

        rule = PatternRule(
            name=name,
            pattern=pattern,
            replacement=replacement,
            action=action,
            footnotes=FootnoteScope.INCLUDE,
        )
        return apply_rule(self.document, rule)

    def _style_split(
        self,
        match: TextMatch,
        numeral_style: CharacterStyle,
        *,
        numeral_case: Callable[[str], str] | None = None,
        suffix_text: str | None = None,
    ) -> bool:
        """Style the `num` group with `numeral_style` and the `suf` group as superscript.

        `numeral_case` rewrites the numeral letters; `suffix_text` replaces the suffix.
        """

        if self._is_ambiguous(match):
            return False
        targets = [*match.group_characters("num"), *match.group_characters("suf")]
        if self._is_claimed(targets):
            return False

        flow = match.flow
        numeral = match.group("num") or ""
        start, end = match.span("num")
        suffix_start, suffix_end = match.span("suf")
        changed = False

        if numeral_case is not None:
            changed = flow.replace_range(start, end, numeral_case(numeral)) or changed
        if suffix_text is not None:
            changed = flow.replace_range(suffix_start, suffix_end, suffix_text) or changed
            suffix_end = suffix_start + len(suffix_text)

        numeral_characters = flow.slice(start, end)
        suffix_characters = flow.slice(suffix_start, suffix_end)
        changed = apply_style_preserving_emphasis(numeral_characters, numeral_style) or changed
        changed = (
            apply_style_preserving_emphasis(suffix_characters, self.styles.superscript)
            or changed
        )
        self._claim(numeral_characters)
        self._claim(suffix_characters)
        return changed

    def _is_ambiguous(self, match: TextMatch) -> bool:
        """Return whether a lowercase or mixed-case token is a listed ordinary word."""

        numeral = match.group("num") or ""
        if numeral.isupper():
            return False
        token = numeral + (match.group("suf") or "")
        return self.lexicon.is_ambiguous(token)

    def _is_claimed(self, characters: Iterable[Character]) -> bool:
        """Return whether any character was styled by an earlier rule."""

        return any(id(character) in self._claimed for character in characters)

    def _claim(self, characters: Iterable[Character]) -> None:
        """Mark characters as styled for the rest of the run."""

        self._claimed.update(id(character) for character in characters)
