"""Typographic characters and pattern fragments shared by correction rules."""

from __future__ import annotations

NO_BREAK_SPACE = "\N{NO-BREAK SPACE}"
NARROW_NO_BREAK_SPACE = "\N{NARROW NO-BREAK SPACE}"
EN_DASH = "\N{EN DASH}"
EM_DASH = "\N{EM DASH}"
ELLIPSIS = "\N{HORIZONTAL ELLIPSIS}"
RIGHT_SINGLE_QUOTE = "\N{RIGHT SINGLE QUOTATION MARK}"
OPENING_GUILLEMET = "\N{LEFT-POINTING DOUBLE ANGLE QUOTATION MARK}"
CLOSING_GUILLEMET = "\N{RIGHT-POINTING DOUBLE ANGLE QUOTATION MARK}"

_SPACE_MEMBERS = (
    " "
    "\N{NO-BREAK SPACE}"
    "\N{EN QUAD}-\N{HAIR SPACE}"
    "\N{NARROW NO-BREAK SPACE}"
    "\N{MEDIUM MATHEMATICAL SPACE}"
    "\N{IDEOGRAPHIC SPACE}"
)

# Horizontal spaces, including the non-breaking variants; tabs excluded.
SPACE = f"[{_SPACE_MEMBERS}]"
# Horizontal spaces plus tab.
BLANK = f"[\t{_SPACE_MEMBERS}]"
# Characters allowed on a line that still counts as an empty paragraph.
EMPTY_LINE_FILLER = (
    "[ \t\N{NO-BREAK SPACE}\N{ZERO WIDTH SPACE}"
    "\N{NARROW NO-BREAK SPACE}\N{WORD JOINER}]"
)
