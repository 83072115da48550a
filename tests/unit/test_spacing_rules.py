"""Unit tests for whitespace and punctuation-spacing rules."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from typofix.document.model import Document
from typofix.text.spacing import (
    collapse_double_returns,
    collapse_double_spaces,
    fix_typographic_spaces,
    remove_spaces_before_punctuation,
    remove_tabs,
    trim_paragraph_end,
    trim_paragraph_start,
)

NNBSP = "\N{NARROW NO-BREAK SPACE}"


def _main_text(document: Document) -> str:
    """Return the main text of the first story."""

    return document.stories[0].text.text


def test_remove_spaces_before_punctuation_covers_markers_and_footnotes(
    make_document: Callable[..., Document],
) -> None:
    """Blanks before `.`, `,` and note markers should go, in notes too."""

    document = make_document("Un mot , puis \x04 fin .", footnotes=["Voir ici ."])

    remove_spaces_before_punctuation(document)

    assert _main_text(document) == "Un mot, puis\x04 fin."
    assert document.stories[0].footnotes[0].text == "Voir ici."


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("un  deux   trois", "un deux trois"),
        (f"deux{NNBSP} trois", f"deux{NNBSP}trois"),
        (f"12 {NNBSP} 345", f"12{NNBSP}345"),
    ],
)
def test_collapse_double_spaces_keeps_non_breaking_variant(
    make_document: Callable[..., Document], source: str, expected: str
) -> None:
    """Runs should collapse to one space, keeping a non-breaking variant when present."""

    document = make_document(source)

    collapse_double_spaces(document)

    assert _main_text(document) == expected



@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("« Bonjour »", f"«{NNBSP}Bonjour{NNBSP}»"),
        ("«Bonjour»", f"«{NNBSP}Bonjour{NNBSP}»"),
        ("Quoi ?", f"Quoi{NNBSP}?"),
        ("Quoi ?!", f"Quoi{NNBSP}?!"),
        ("Note: voir", f"Note{NNBSP}: voir"),
        ("Fin ;", f"Fin{NNBSP};"),
        ("https://exemple.fr", "https://exemple.fr"),
        ("à 12:30", "à 12:30"),
    ],
)
def test_fix_typographic_spaces(
    make_document: Callable[..., Document], source: str, expected: str
) -> None:
    """Guillemets and high punctuation should get the configured space."""

    document = make_document(source)

    fix_typographic_spaces(document, NNBSP)

    assert _main_text(document) == expected


def test_fix_typographic_spaces_is_idempotent(
    make_document: Callable[..., Document],
) -> None:
    """A second pass should find nothing left to change."""

    document = make_document("« Vraiment ? » dit-il : oui !")
    fix_typographic_spaces(document, NNBSP)
    first = _main_text(document)

    outcomes = fix_typographic_spaces(document, NNBSP)

    assert _main_text(document) == first
    assert sum(outcome.changes for outcome in outcomes) == 0


@pytest.mark.parametrize(
    "source",
    ["un\n\n\ndeux", "un\n \t\ndeux", "un\n\N{NO-BREAK SPACE}\ndeux"],
)
def test_collapse_double_returns_removes_empty_paragraphs(
    make_document: Callable[..., Document], source: str
) -> None:
    """Empty paragraphs, including ones holding invisible spaces, should be removed."""

    document = make_document(source)

    collapse_double_returns(document)

    assert _main_text(document) == "un\ndeux"


def test_trim_paragraph_edges(make_document: Callable[..., Document]) -> None:
    """Leading and trailing blanks should be trimmed in every paragraph."""

    document = make_document("  un  \n\tdeux\t")

    trim_paragraph_start(document)
    trim_paragraph_end(document)

    assert _main_text(document) == "un\ndeux"


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("un\tdeux", "un deux"),
        ("note\x04\tsuite", "note\x04suite"),
        ("fin\t\nsuite", "fin\nsuite"),
    ],
)
def test_remove_tabs(
    make_document: Callable[..., Document], source: str, expected: str
) -> None:
    """Tabs between words become spaces; all other tabs are dropped."""

    document = make_document(source)

    remove_tabs(document)

    assert _main_text(document) == expected
