"""Typographic correction rules.

This package provides the rule bodies run by the correction pipeline: spacing,
dashes, footnote markers, glyphs, styling, numbers, ordinals and references.
"""

from .dashes import (
    fix_dash_incises,
    format_value_ranges,
    replace_em_dashes,
    replace_isolated_hyphens,
)
from .footnotes import move_footnote_references, style_footnote_references
from .glyphs import convert_ellipsis, normalize_apostrophes
from .layout import apply_page_template, apply_style_after_trigger
from .lexicon import Lexicon
from .numbers import format_numbers, group_digits
from .ordinals import OrdinalStyles, format_ordinals
from .references import format_reference_spaces
from .spacing import (
    collapse_double_returns,
    collapse_double_spaces,
    fix_typographic_spaces,
    remove_spaces_before_punctuation,
    remove_tabs,
    trim_paragraph_end,
    trim_paragraph_start,
)
from .styling import apply_italic_style, apply_superscript_style

__all__ = [
    "Lexicon",
    "OrdinalStyles",
    "apply_italic_style",
    "apply_page_template",
    "apply_style_after_trigger",
    "apply_superscript_style",
    "collapse_double_returns",
    "collapse_double_spaces",
    "convert_ellipsis",
    "fix_dash_incises",
    "fix_typographic_spaces",
    "format_numbers",
    "format_ordinals",
    "format_reference_spaces",
    "format_value_ranges",
    "group_digits",
    "move_footnote_references",
    "normalize_apostrophes",
    "remove_spaces_before_punctuation",
    "remove_tabs",
    "replace_em_dashes",
    "replace_isolated_hyphens",
    "style_footnote_references",
    "trim_paragraph_end",
    "trim_paragraph_start",
]
