"""Document import/export tests for the JSON and plain-text formats."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from typofix.document.styles import CharacterStyle
from typofix.io.documents import (
    document_from_payload,
    document_to_payload,
    load_document,
    render_text,
    save_document,
)


def _payload() -> dict[str, object]:
    """Return a small document payload with styles, pages and a footnote."""

    return {
        "name": "chapitre-1",
        "character_styles": [{"name": "Exposant", "position": "superscript"}],
        "paragraph_styles": ["Titre", "Corps"],
        "templates": ["B-Fin"],
        "pages": [{"number": 1}, {"number": 2, "template": "A-Courant"}],
        "stories": [
            {
                "name": "principal",
                "paragraphs": [
                    {"style": "Titre", "runs": [{"text": "Titre"}]},
                    {
                        "style": "Corps",
                        "runs": [
                            {"text": "Le "},
                            {"text": "XIV", "italic": True},
                            {"text": "e", "style": "Exposant"},
                            {"text": " siècle\x04."},
                        ],
                    },
                ],
                "footnotes": [{"paragraphs": [{"runs": [{"text": "Une note."}]}]}],
            }
        ],
    }


def test_document_from_payload_builds_flows_styles_and_pages() -> None:
    """JSON payloads should map to stories, styled characters and layout data."""

    document = document_from_payload(_payload(), source_label="payload")

    story = document.stories[0]
    assert document.name == "chapitre-1"
    assert story.text.text == "Titre\nLe XIVe siècle\x04."
    assert story.footnotes[0].text == "Une note."
    characters = story.text.characters
    assert [character.italic for character in characters[9:12]] == [True] * 3
    assert characters[12].character_style == CharacterStyle(
        name="Exposant", position="superscript"
    )
    assert [paragraph.applied_paragraph_style for paragraph in story.text.paragraphs()] == [
        "Titre",
        "Corps",
    ]
    assert [page.template for page in document.pages] == [None, "A-Courant"]
    assert document.templates == ["B-Fin"]


def test_document_payload_survives_export_and_import() -> None:
    """Exported payloads should load back to the same text and run attributes."""

    original = document_from_payload(_payload(), source_label="payload")

    exported = document_to_payload(original)
    reloaded = document_from_payload(exported, source_label="exported")

    assert reloaded.stories[0].text.text == original.stories[0].text.text
    runs = exported["stories"][0]["paragraphs"][1]["runs"]  # type: ignore[index]
    assert [run["text"] for run in runs] == ["Le ", "XIV", "e", " siècle\x04."]
    assert runs[2]["style"] == "Exposant"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"stories": "texte"}, "must be a list"),
        ({"stories": [{"paragraphs": [{"runs": [{"text": 3}]}]}]}, "string `text`"),
        (
            {"stories": [{"paragraphs": [{"runs": [{"text": "a", "style": "Absent"}]}]}]},
            "unknown character style `Absent`",
        ),
        ({"character_styles": [{"name": "X", "position": "sous"}]}, "Unsupported style position"),
        ({"pages": [{"number": "1"}]}, "integer `number`"),
        ({"stories": [{"footnotes": ["texte"]}]}, "must be an object"),
    ],
)
def test_document_from_payload_rejects_malformed_payloads(
    payload: dict[str, object], message: str
) -> None:
    """Malformed payloads should raise `ValueError` with the offending field."""

    with pytest.raises(ValueError, match=message):
        document_from_payload(payload, source_label="payload")


def test_load_document_reads_plain_text_as_single_story(tmp_path: Path) -> None:
    """Non-JSON inputs should load as one unstyled story named after the file."""

    path = tmp_path / "notes.txt"
    path.write_text("Ligne un\nLigne deux", encoding="utf-8")

    document = load_document(path)

    assert document.name == "notes"
    assert document.stories[0].text.text == "Ligne un\nLigne deux"


def test_load_document_rejects_invalid_json(tmp_path: Path) -> None:
    """Broken JSON should raise `ValueError` naming the file."""

    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="is not valid JSON"):
        load_document(path)


def test_save_document_writes_json_and_text(tmp_path: Path) -> None:
    """Both output formats should be written, with note markers rendered as numbers."""

    document = document_from_payload(_payload(), source_label="payload")

    json_path = save_document(document, tmp_path / "out" / "doc.json", "json")
    text_path = save_document(document, tmp_path / "out" / "doc.txt", "text")

    assert json.loads(json_path.read_text(encoding="utf-8"))["name"] == "chapitre-1"
    assert text_path.read_text(encoding="utf-8") == (
        "Titre\nLe XIVe siècle[1].\n[1] Une note.\n"
    )
    assert render_text(document).startswith("Titre\n")
    with pytest.raises(ValueError, match="Unsupported output format"):
        save_document(document, tmp_path / "doc.xml", "xml")
