"""Document import and export.

Responsibilities:
- Read and write the JSON document format (stories, styled runs, footnotes, styles, pages).
- Import plain text as a single-story document and render documents as plain text.

Key functions:
- `load_document`: dispatch on file suffix.
- `document_from_payload` / `document_to_payload`: JSON mapping conversion.
- `save_document`: write JSON or text output.

JSON layout::

    {
      "name": "...",
      "character_styles": [{"name": ..., "position": ..., "italic": ..., ...}],
      "paragraph_styles": ["..."],
      "templates": ["..."],
      "pages": [{"number": 1, "template": "..."}],
      "stories": [
        {
          "name": "...",
          "paragraphs": [{"style": "...", "runs": [{"text": "...", "italic": false}]}],
          "footnotes": [{"paragraphs": [...]}]
        }
      ]
    }

Footnote anchors are written as the U+0004 marker inside run text.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from ..document.model import (
    FOOTNOTE_MARKER,
    PARAGRAPH_SEPARATOR,
    Character,
    Document,
    Page,
    Story,
    TextFlow,
)
from ..document.styles import CharacterStyle, StyleRepository

OUTPUT_FORMATS = ("json", "text")

_RUN_FLAGS = ("italic", "bold", "superscript")


def load_document(path: Path) -> Document:
    """Load a `.json` document, or any other file as UTF-8 plain text.

    Raises:
        ValueError: If a JSON document is malformed.
    """

    raw_text = path.read_text(encoding="utf-8")
    if path.suffix.lower() != ".json":
        document = Document.from_text(raw_text)
        document.name = path.stem
        return document

    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Document `{path}` is not valid JSON: {exc}.") from exc
    if not isinstance(payload, Mapping):
        raise ValueError(f"Document `{path}` must contain a top-level object.")
    document = document_from_payload(payload, source_label=f"Document `{path}`")
    if not payload.get("name"):
        document.name = path.stem
    return document


def document_from_payload(payload: Mapping[str, Any], source_label: str) -> Document:
    """Build a document from its JSON mapping.

    Raises:
        ValueError: If a field has the wrong shape or references an unknown style.
    """

    styles = StyleRepository(
        _parse_character_style(item, source_label)
        for item in _list_field(payload, "character_styles", source_label)
    )
    stories: list[Story] = []
    for index, story_payload in enumerate(_list_field(payload, "stories", source_label)):
        label = f"{source_label} story {index + 1}"
        if not isinstance(story_payload, Mapping):
            raise ValueError(f"{label} must be an object.")
        stories.append(
            Story(
                text=_parse_flow(story_payload, styles, label),
                footnotes=[
                    _parse_flow(note, styles, f"{label} footnote {note_index + 1}")
                    for note_index, note in enumerate(
                        _list_field(story_payload, "footnotes", label)
                    )
                ],
                name=str(story_payload.get("name") or ""),
            )
        )

    pages: list[Page] = []
    for item in _list_field(payload, "pages", source_label):
        if not isinstance(item, Mapping) or not isinstance(item.get("number"), int):
            raise ValueError(f"{source_label} pages need an integer `number`.")
        pages.append(Page(number=item["number"], template=item.get("template")))

    return Document(
        stories=stories,
        styles=styles,
        paragraph_styles=[
            str(name) for name in _list_field(payload, "paragraph_styles", source_label)
        ],
        pages=pages,
        templates=[str(name) for name in _list_field(payload, "templates", source_label)],
        name=str(payload.get("name") or "untitled"),
    )


def document_to_payload(document: Document) -> dict[str, object]:
    """Serialize a document to its JSON mapping."""

    return {
        "name": document.name,
        "character_styles": [
            {
                "name": style.name,
                "position": style.position,
                "italic": style.italic,
                "bold": style.bold,
                "capitalization": style.capitalization,
            }
            for style in document.styles
        ],
        "paragraph_styles": list(document.paragraph_styles),
        "templates": list(document.templates),
        "pages": [{"number": page.number, "template": page.template} for page in document.pages],
        "stories": [
            {
                "name": story.name,
                "paragraphs": _flow_payload(story.text),
                "footnotes": [{"paragraphs": _flow_payload(note)} for note in story.footnotes],
            }
            for story in document.stories
        ],
    }


def render_text(document: Document) -> str:
    """Render main text with numbered note markers, followed by the notes."""

    blocks: list[str] = []
    for story in document.stories:
        parts = story.text.text.split(FOOTNOTE_MARKER)
        rendered = parts[0] + "".join(
            f"[{number}]{part}" for number, part in enumerate(parts[1:], start=1)
        )
        notes = [
            f"[{number}] {note.text}" for number, note in enumerate(story.footnotes, start=1)
        ]
        blocks.append("\n".join([rendered, *notes]) if notes else rendered)
    return "\n\n".join(blocks) + "\n"


def save_document(document: Document, path: Path, output_format: str) -> Path:
    """Write `document` as `json` or `text` and return the written path.

    Raises:
        ValueError: If `output_format` is not supported.
    """

    if output_format not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format `{output_format}`; use one of: "
            f"{', '.join(OUTPUT_FORMATS)}."
        )
    path.parent.mkdir(parents=True, exist_ok=True)
    if output_format == "json":
        path.write_text(
            json.dumps(document_to_payload(document), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    else:
        path.write_text(render_text(document), encoding="utf-8")
    return path


def _list_field(payload: Mapping[str, Any], key: str, source_label: str) -> list[Any]:
    """Return an optional list field, defaulting to empty."""

    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{source_label} field `{key}` must be a list.")
    return value


def _parse_character_style(item: object, source_label: str) -> CharacterStyle:
    """Build one character style from its mapping."""

    if not isinstance(item, Mapping) or not isinstance(item.get("name"), str):
        raise ValueError(f"{source_label} character styles need a string `name`.")
    try:
        return CharacterStyle(
            name=item["name"],
            position=str(item.get("position", "normal")),
            italic=bool(item.get("italic", False)),
            bold=bool(item.get("bold", False)),
            capitalization=str(item.get("capitalization", "normal")),
        )
    except ValueError as exc:
        raise ValueError(f"{source_label}: {exc}") from exc


def _parse_flow(payload: object, styles: StyleRepository, label: str) -> TextFlow:
    """Build a flow from a mapping holding `paragraphs`."""

    if not isinstance(payload, Mapping):
        raise ValueError(f"{label} must be an object.")
    characters: list[Character] = []
    paragraphs = _list_field(payload, "paragraphs", label)
    for index, paragraph in enumerate(paragraphs):
        if not isinstance(paragraph, Mapping):
            raise ValueError(f"{label} paragraph {index + 1} must be an object.")
        paragraph_style = paragraph.get("style")
        for run in _list_field(paragraph, "runs", label):
            characters.extend(_parse_run(run, paragraph_style, styles, label))
        if index < len(paragraphs) - 1:
            characters.append(Character(PARAGRAPH_SEPARATOR, paragraph_style=paragraph_style))
    return TextFlow(characters)


def _parse_run(
    run: object,
    paragraph_style: str | None,
    styles: StyleRepository,
    label: str,
) -> list[Character]:
    """Build the characters of one styled run."""

    if not isinstance(run, Mapping) or not isinstance(run.get("text"), str):
        raise ValueError(f"{label} runs need a string `text`.")
    style_name = run.get("style")
    style = None
    if style_name is not None:
        style = styles.get(str(style_name))
        if style is None:
            raise ValueError(f"{label} references unknown character style `{style_name}`.")
    return [
        Character(
            content,
            italic=bool(run.get("italic", False)),
            bold=bool(run.get("bold", False)),
            superscript=bool(run.get("superscript", False)),
            character_style=style,
            paragraph_style=paragraph_style,
        )
        for content in run["text"]
    ]


def _flow_payload(flow: TextFlow) -> list[dict[str, object]]:
    """Serialize a flow as paragraphs of styled runs."""

    paragraphs: list[dict[str, object]] = []
    views = flow.paragraphs()
    for view in views:
        runs: list[dict[str, object]] = []
        for character in flow.slice(view.start, view.end):
            attributes = _run_attributes(character)
            if runs and runs[-1]["_key"] == attributes:
                runs[-1]["text"] = str(runs[-1]["text"]) + character.content
                continue
            runs.append({"_key": attributes, "text": character.content, **attributes})
        for run in runs:
            del run["_key"]
        paragraphs.append({"style": view.applied_paragraph_style, "runs": runs})
    if views and views[-1].terminated:
        paragraphs.append({"style": views[-1].applied_paragraph_style, "runs": []})
    return paragraphs


def _run_attributes(character: Character) -> dict[str, object]:
    """Return the run attributes of one character."""

    attributes: dict[str, object] = {flag: getattr(character, flag) for flag in _RUN_FLAGS}
    attributes["style"] = (
        character.character_style.name if character.character_style is not None else None
    )
    return attributes
