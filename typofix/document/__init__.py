"""Document model and style repository consumed by the correction engine."""

from .model import (
    FOOTNOTE_MARKER,
    PARAGRAPH_SEPARATOR,
    Character,
    Document,
    Page,
    Paragraph,
    Story,
    TextFlow,
)
from .styles import CharacterStyle, StyleRepository

__all__ = [
    "FOOTNOTE_MARKER",
    "PARAGRAPH_SEPARATOR",
    "Character",
    "CharacterStyle",
    "Document",
    "Page",
    "Paragraph",
    "Story",
    "StyleRepository",
    "TextFlow",
]
