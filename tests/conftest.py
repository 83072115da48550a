"""Shared pytest fixtures for the full typofix test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from typofix.document.model import Document
from typofix.text.ordinals import OrdinalStyles

NNBSP = "\N{NARROW NO-BREAK SPACE}"
NBSP = "\N{NO-BREAK SPACE}"


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Provide a factory building single-story documents from plain text."""

    def _make(text: str, footnotes: Iterable[str] = ()) -> Document:
        """Build one document with optional footnote texts."""

        return Document.from_text(text, footnotes=footnotes)

    return _make


@pytest.fixture
def resolve_ordinal_styles() -> Callable[[Document], OrdinalStyles]:
    """Provide a resolver creating the default century, ordinal and superscript styles."""

    def _resolve(document: Document) -> OrdinalStyles:
        """Resolve the default style names against `document`."""

        return OrdinalStyles.resolve(
            document,
            century="Siècles",
            ordinal="Romains capitales",
            superscript="Exposant",
        )

    return _resolve
