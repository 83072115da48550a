"""Unit tests for the character-addressable document model and style repository."""

from __future__ import annotations

import pytest

from typofix.document.model import Character, TextFlow
from typofix.document.styles import POSITION_SUPERSCRIPT, CharacterStyle, StyleRepository


def test_replace_range_keeps_identity_of_unchanged_characters() -> None:
    """Editing one character should keep every other character object in place."""

    flow = TextFlow.from_text("abc def")
    before = flow.characters

    changed = flow.replace_range(3, 4, "\N{NO-BREAK SPACE}")

    after = flow.characters
    assert changed is True
    assert flow.text == "abc\N{NO-BREAK SPACE}def"
    assert all(after[index] is before[index] for index in range(len(before)))


def test_replace_range_inserted_characters_copy_preceding_attributes() -> None:
    """Inserted characters should inherit attributes from the character before them."""

    italic = Character("b", italic=True)
    flow = TextFlow([Character("a"), italic, Character("c")])

    flow.replace_range(1, 2, "bb")

    characters = flow.characters
    assert flow.text == "abbc"
    assert characters[1] is italic
    assert characters[2].italic is True
    assert characters[3].italic is False


def test_replace_range_reports_no_change_for_identical_text() -> None:
    """Rewriting a range with its own content should not count as a change."""

    flow = TextFlow.from_text("même")

    assert flow.replace_range(0, 4, "même") is False


def test_replace_range_rejects_out_of_bounds_ranges() -> None:
    """Ranges outside the flow should raise `IndexError`."""

    flow = TextFlow.from_text("abc")

    with pytest.raises(IndexError):
        flow.replace_range(2, 10, "x")


def test_move_character_keeps_moved_object() -> None:
    """Moving a character should reorder the flow without recreating the character."""

    flow = TextFlow.from_text("ab.\x04")
    marker = flow.characters[3]

    flow.move_character(3, 2)

    assert flow.text == "ab\x04."
    assert flow.characters[2] is marker


def test_paragraph_views_split_on_separator_and_detect_empty_paragraphs() -> None:
    """Paragraph views should exclude terminators and flag whitespace-only paragraphs."""

    flow = TextFlow.from_text("un\n \ndeux")

    paragraphs = flow.paragraphs()

    assert [paragraph.text for paragraph in paragraphs] == ["un", " ", "deux"]
    assert [paragraph.is_empty for paragraph in paragraphs] == [False, True, False]
    assert [paragraph.terminated for paragraph in paragraphs] == [True, True, False]


def test_paragraph_apply_paragraph_style_covers_terminator() -> None:
    """Paragraph styles should be carried by every character including the terminator."""

    flow = TextFlow.from_text("Titre\nCorps")
    title = flow.paragraphs()[0]

    assert title.apply_paragraph_style("Titre 1") is True
    assert title.apply_paragraph_style("Titre 1") is False
    assert [character.paragraph_style for character in flow.characters[:6]] == ["Titre 1"] * 6
    assert flow.paragraphs()[1].applied_paragraph_style is None


def test_apply_character_style_resets_local_emphasis() -> None:
    """Assigning a style should take emphasis from the style itself."""

    character = Character("e", italic=True, superscript=True)
    style = CharacterStyle(name="Exposant", position=POSITION_SUPERSCRIPT)

    character.apply_character_style(style)

    assert character.italic is False
    assert character.superscript is False
    assert character.is_superscript is True


def test_style_repository_get_or_create_registers_once() -> None:
    """Creating an existing style should return it unchanged."""

    repository = StyleRepository()

    created = repository.get_or_create("Exposant", position=POSITION_SUPERSCRIPT)
    again = repository.get_or_create("Exposant")

    assert again is created
    assert again.is_superscript is True
    assert repository.names() == ["Exposant"]


def test_style_repository_rejects_duplicate_names() -> None:
    """Duplicate style names should be rejected on construction."""

    with pytest.raises(ValueError, match="Duplicate character style"):
        StyleRepository([CharacterStyle(name="A"), CharacterStyle(name="A")])


@pytest.mark.parametrize(
    ("field_name", "value"),
    [
        ("position", "subscript"),
        ("capitalization", "title"),
        ("name", "  "),
    ],
)
def test_character_style_validates_enumerated_properties(field_name: str, value: str) -> None:
    """Unsupported style properties should raise `ValueError`."""

    arguments = {"name": "Style", field_name: value}

    with pytest.raises(ValueError):
        CharacterStyle(**arguments)
