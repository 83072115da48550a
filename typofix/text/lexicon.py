"""French word lists driving the ordinal, century and reference rules.

Responsibilities:
- Provide the built-in keyword and exception lists as immutable data.
- Build alternation fragments for rule patterns from those lists.

Key types:
- `Lexicon`: word lists consumed by `text.ordinals` and `text.references`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace

import regex

from ..parsing import normalize_word_list

DEFAULT_ORDINAL_KEYWORDS = (
    "arrondissement",
    "arrondissements",
    "république",
    "empire",
    "internationale",
    "congrès",
    "concile",
    "croisade",
    "dynastie",
    "législature",
    "régiment",
    "bataillon",
    "brigade",
    "division",
    "armée",
    "corps",
    "légion",
    "escadron",
    "flotte",
    "reich",
    "plan",
    "olympiade",
    "biennale",
    "symphonie",
    "millénaire",
    "circonscription",
    "session",
    "assemblée",
    "conférence",
    "partie",
    "acte",
    "chapitre",
    "livre",
    "étage",
)

DEFAULT_BEFORE_ORDINAL_KEYWORDS = (
    "acte",
    "chant",
    "chapitre",
    "classe",
    "livre",
    "partie",
    "promotion",
    "scène",
    "section",
    "titre",
    "tome",
)

DEFAULT_AMBIGUOUS_WORDS = ("ire", "vie", "vive")

DEFAULT_WORK_KEYWORDS = (
    "tome",
    "livre",
    "volume",
    "chapitre",
    "acte",
    "scène",
    "chant",
    "partie",
    "titre",
    "article",
    "section",
    "annexe",
    "fascicule",
)

DEFAULT_PERSON_TITLES = (
    "Albert",
    "Alexandre",
    "Baudouin",
    "Benoît",
    "Boniface",
    "Charles",
    "Clément",
    "Édouard",
    "Edouard",
    "Élisabeth",
    "Elizabeth",
    "Ferdinand",
    "François",
    "Frédéric",
    "George",
    "Georges",
    "Grégoire",
    "Guillaume",
    "Henri",
    "Innocent",
    "Jacques",
    "Jean",
    "Jean-Paul",
    "Léon",
    "Léopold",
    "Louis",
    "Napoléon",
    "Nicolas",
    "Othon",
    "Paul",
    "Philippe",
    "Pie",
    "Pierre",
    "Ramsès",
    "Richard",
    "Sixte",
    "Urbain",
    "Victor-Emmanuel",
)

DEFAULT_NAMES_WITH_FIRST = (
    "Albert",
    "Alexandre",
    "Baudouin",
    "Charles",
    "Élisabeth",
    "Elizabeth",
    "François",
    "Frédéric",
    "Guillaume",
    "Henri",
    "Jean",
    "Léopold",
    "Louis",
    "Napoléon",
    "Nicolas",
    "Othon",
    "Philippe",
    "Pierre",
    "Richard",
    "Robert",
)

DEFAULT_REFERENCE_ABBREVIATIONS = (
    "p.",
    "pp.",
    "t.",
    "vol.",
    "n°",
    "nos",
    "art.",
    "chap.",
    "fig.",
    "éd.",
    "coll.",
    "liv.",
    "sect.",
    "§",
)

DEFAULT_UNITS = (
    "km",
    "m",
    "cm",
    "mm",
    "km²",
    "m²",
    "m³",
    "kg",
    "g",
    "mg",
    "t",
    "l",
    "cl",
    "ml",
    "ha",
    "h",
    "min",
    "°C",
    "%",
    "€",
    "$",
    "kW",
    "W",
    "Hz",
    "Mo",
    "Go",
)

DEFAULT_ERA_ABBREVIATIONS = ("av.", "apr.")


@dataclass(frozen=True, slots=True)
class Lexicon:
    """Configurable word lists; matching is case-insensitive unless noted.

    Attributes:
        ordinal_keywords: Nouns following an ordinal-rank numeral (`IIe République`).
        before_ordinal_keywords: Nouns preceding an ordinal-rank numeral (`acte IIe`).
        ambiguous_words: Words spelled like a lowercase numeral plus `e` (`vie`).
        work_keywords: Work divisions followed by a bare numeral (`tome III`).
        person_titles: Names followed by a regnal numeral (`Louis XIV`).
        names_with_first: Names taking `Ier` rather than a century reading.
        reference_abbreviations: Abbreviations bound to the following number.
        units: Measurement units bound to the preceding number (case-sensitive).
        era_abbreviations: Era markers combined with `J.-C.` (`av.`, `apr.`).
    """

    ordinal_keywords: tuple[str, ...] = DEFAULT_ORDINAL_KEYWORDS
    before_ordinal_keywords: tuple[str, ...] = DEFAULT_BEFORE_ORDINAL_KEYWORDS
    ambiguous_words: tuple[str, ...] = DEFAULT_AMBIGUOUS_WORDS
    work_keywords: tuple[str, ...] = DEFAULT_WORK_KEYWORDS
    person_titles: tuple[str, ...] = DEFAULT_PERSON_TITLES
    names_with_first: tuple[str, ...] = DEFAULT_NAMES_WITH_FIRST
    reference_abbreviations: tuple[str, ...] = DEFAULT_REFERENCE_ABBREVIATIONS
    units: tuple[str, ...] = DEFAULT_UNITS
    era_abbreviations: tuple[str, ...] = DEFAULT_ERA_ABBREVIATIONS

    @classmethod
    def field_names(cls) -> frozenset[str]:
        """Return the names of the configurable lists."""

        return frozenset(item.name for item in fields(cls))

    def with_overrides(self, overrides: Mapping[str, Iterable[object]]) -> Lexicon:
        """Return a copy with the given lists replaced.

        Raises:
            ValueError: If a key is unknown or a list contains blank entries.
        """

        unknown = sorted(set(overrides).difference(self.field_names()))
        if unknown:
            raise ValueError(f"lexicon includes unsupported key(s): {', '.join(unknown)}.")

        changes: dict[str, tuple[str, ...]] = {}
        for key, values in overrides.items():
            if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
                raise ValueError(f"lexicon field `{key}` must be a list of words.")
            changes[key] = normalize_word_list(values, f"lexicon.{key}")
        return replace(self, **changes)

    def is_ambiguous(self, token: str) -> bool:
        """Return whether `token` is a listed word, compared case-insensitively."""

        folded = token.casefold()
        return any(folded == word.casefold() for word in self.ambiguous_words)


def alternation(words: Iterable[str]) -> str:
    """Return a non-capturing alternation of escaped words, longest first."""

    ordered = sorted(set(words), key=lambda word: (-len(word), word))
    if not ordered:
        return "(?!)"
    return "(?:" + "|".join(regex.escape(word) for word in ordered) + ")"
