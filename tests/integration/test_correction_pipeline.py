"""End-to-end correction runs over realistic documents."""

from __future__ import annotations

from typofix.config import CorrectionOptions, SpaceVariant
from typofix.document.model import Character, Document, Story, TextFlow
from typofix.models.datatypes import STEP_SUCCEEDED
from typofix.pipeline import CorrectionPipeline
from typofix.rules.protection import MASK_CHARACTER

NNBSP = "\N{NARROW NO-BREAK SPACE}"
NBSP = "\N{NO-BREAK SPACE}"
EN = "\N{EN DASH}"


def test_default_run_corrects_a_french_paragraph() -> None:
    """The default pipeline should apply spacing, dash, glyph and number rules together."""

    document = Document.from_text(
        "  Il vécut au XIVe siècle , de 1995-2002 ; 12345678 habitants...\n\n"
        "- Vraiment ? dit-il.",
        footnotes=["Voir p. 12 et l'annexe."],
    )

    report = CorrectionPipeline().run(document, CorrectionOptions())

    story = document.stories[0]
    assert story.text.text == (
        f"Il vécut au xive siècle, de 1995{EN}2002{NNBSP}; "
        f"12{NNBSP}345{NNBSP}678 habitants\N{HORIZONTAL ELLIPSIS}\n"
        f"{EN}{NNBSP}Vraiment{NNBSP}? dit-il."
    )
    assert story.footnotes[0].text == f"Voir p.{NBSP}12 et l\N{RIGHT SINGLE QUOTATION MARK}annexe."
    assert all(step.status != "failed" for step in report.steps)
    assert report.total_changes > 0


def test_run_keeps_years_and_formats_decimals() -> None:
    """Year ranges should survive grouping while decimals take a comma."""

    document = Document.from_text("en 1995-2002, 3.14 et 25000")

    CorrectionPipeline().run(document, CorrectionOptions())

    assert document.stories[0].text.text == f"en 1995{EN}2002, 3,14 et 25{NNBSP}000"
    assert MASK_CHARACTER not in document.stories[0].text.text


def test_run_with_standard_space_variant() -> None:
    """The space variant should drive every inserted non-breaking space."""

    document = Document.from_text("« Oui » : 12345")
    options = CorrectionOptions(
        space_variant=SpaceVariant.STANDARD,
        thousands_separator=SpaceVariant.STANDARD,
    )

    CorrectionPipeline().run(document, options)

    assert document.stories[0].text.text == f"«{NBSP}Oui{NBSP}»{NBSP}: 12{NBSP}345"


def test_run_moves_and_styles_footnote_markers() -> None:
    """Markers should move before punctuation and take the superscript note style."""

    document = Document.from_text("Fin de phrase.\x04 Suite", footnotes=["Une note."])

    CorrectionPipeline().run(document, CorrectionOptions())

    flow = document.stories[0].text
    assert flow.text == "Fin de phrase\x04. Suite"
    marker = flow.characters[13]
    assert marker.character_style is not None
    assert marker.character_style.name == "Appel de note"
    assert marker.is_superscript is True


def test_run_styles_trigger_paragraphs_and_local_italics() -> None:
    """Optional styling steps should run when enabled with their styles."""

    characters = [Character(content, paragraph_style="Titre") for content in "Titre\n"]
    characters += [Character(content, italic=True) for content in "Corps"]
    document = Document(
        stories=[Story(text=TextFlow(characters))],
        paragraph_styles=["Titre", "Chapeau"],
    )
    options = CorrectionOptions(
        apply_italic_style=True,
        apply_style_after_trigger=True,
        trigger_paragraph_style="Titre",
        target_paragraph_style="Chapeau",
    )

    report = CorrectionPipeline().run(document, options)

    statuses = {step.step: step.status for step in report.steps}
    assert statuses["italic_style"] == STEP_SUCCEEDED
    assert statuses["style_after_trigger"] == STEP_SUCCEEDED
    body = document.stories[0].text.paragraphs()[1]
    assert body.applied_paragraph_style == "Chapeau"
    assert all(character.character_style is not None for character in body.characters)
    assert all(character.italic for character in body.characters)


def test_second_run_changes_nothing() -> None:
    """Running the default pipeline twice should be stable."""

    document = Document.from_text(
        "Au XIXe siècle, la IIe République compta 1 234 567 habitants (3.5 %)."
    )
    pipeline = CorrectionPipeline()
    pipeline.run(document, CorrectionOptions())
    first = document.stories[0].text.text

    report = pipeline.run(document, CorrectionOptions())

    assert document.stories[0].text.text == first
    assert report.total_changes == 0
