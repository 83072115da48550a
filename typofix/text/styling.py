"""Character-style application helpers and attribute-driven styling steps.

Responsibilities:
- Assign character styles while keeping each character's italic/bold emphasis.
- Convert local italic and superscript formatting into named character styles.

Key functions:
- `apply_style_preserving_emphasis`: the only way engine code assigns styles.
- `apply_italic_style`, `apply_superscript_style`: pipeline step bodies.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..document.model import PARAGRAPH_SEPARATOR, Character, Document
from ..document.styles import POSITION_SUPERSCRIPT, CharacterStyle
from ..models.datatypes import RuleOutcome
from ..rules.executor import FootnoteScope, iter_flows


def apply_style_preserving_emphasis(
    characters: Iterable[Character], style: CharacterStyle
) -> bool:
    """Assign `style` to each character and reapply the emphasis it had before.

    Returns:
        `True` when at least one character's styling changed.
    """

    changed = False
    for character in characters:
        italic = character.italic
        bold = character.bold
        before = (character.character_style, character.superscript)
        character.apply_character_style(style)
        character.italic = italic
        character.bold = bold
        if before != (style, False):
            changed = True
    return changed


def apply_italic_style(document: Document, style_name: str) -> list[RuleOutcome]:
    """Style locally italic, non-bold, unstyled text with an italic character style."""

    style = document.styles.get_or_create(style_name, italic=True)
    return [
        _style_runs(
            document,
            rule="italic_style",
            style=style,
            eligible=lambda character: character.italic and not character.bold,
        )
    ]


def apply_superscript_style(document: Document, style_name: str) -> list[RuleOutcome]:
    """Style locally raised, unstyled text with a superscript character style."""

    style = document.styles.get_or_create(style_name, position=POSITION_SUPERSCRIPT)
    return [
        _style_runs(
            document,
            rule="superscript_style",
            style=style,
            eligible=lambda character: character.superscript,
        )
    ]


def _style_runs(
    document: Document,
    *,
    rule: str,
    style: CharacterStyle,
    eligible: Callable[[Character], bool],
) -> RuleOutcome:
    """Apply `style` to every contiguous run of eligible characters."""

    runs = 0
    changes = 0
    for flow in iter_flows(document, FootnoteScope.INCLUDE):
        current: list[Character] = []
        for character in (*flow.characters, None):
            if (
                character is not None
                and character.content != PARAGRAPH_SEPARATOR
                and character.character_style is None
                and eligible(character)
            ):
                current.append(character)
                continue
            if current:
                runs += 1
                if apply_style_preserving_emphasis(current, style):
                    changes += 1
                current = []
    return RuleOutcome(rule=rule, matches=runs, changes=changes)
