"""Document input/output for typofix.

This package reads and writes the JSON document format and plain text.
"""

from .documents import (
    OUTPUT_FORMATS,
    document_from_payload,
    document_to_payload,
    load_document,
    render_text,
    save_document,
)

__all__ = [
    "OUTPUT_FORMATS",
    "document_from_payload",
    "document_to_payload",
    "load_document",
    "render_text",
    "save_document",
]
