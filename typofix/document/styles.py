"""Character styles and the document style repository.

Responsibilities:
- Represent named character styles with typographic properties.
- Look styles up by name and create them lazily, at most once per name.

Key types:
- `CharacterStyle`: immutable named style record.
- `StyleRepository`: per-document registry of character styles.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

POSITION_NORMAL = "normal"
POSITION_SUPERSCRIPT = "superscript"
CAPITALIZATION_NORMAL = "normal"
CAPITALIZATION_SMALL_CAPS = "small_caps"
CAPITALIZATION_ALL_CAPS = "all_caps"

_POSITIONS = frozenset({POSITION_NORMAL, POSITION_SUPERSCRIPT})
_CAPITALIZATIONS = frozenset(
    {CAPITALIZATION_NORMAL, CAPITALIZATION_SMALL_CAPS, CAPITALIZATION_ALL_CAPS}
)


@dataclass(frozen=True, slots=True)
class CharacterStyle:
    """Named character style.

    Attributes:
        name: Unique style name within one document.
        position: Vertical position, `normal` or `superscript`.
        italic: Whether the style sets italic emphasis.
        bold: Whether the style sets bold emphasis.
        capitalization: `normal`, `small_caps` or `all_caps`.
    """

    name: str
    position: str = POSITION_NORMAL
    italic: bool = False
    bold: bool = False
    capitalization: str = CAPITALIZATION_NORMAL

    def __post_init__(self) -> None:
        """Validate enumerated style properties."""

        if not self.name.strip():
            raise ValueError("Character style name must be non-empty.")
        if self.position not in _POSITIONS:
            raise ValueError(f"Unsupported style position `{self.position}`.")
        if self.capitalization not in _CAPITALIZATIONS:
            raise ValueError(f"Unsupported style capitalization `{self.capitalization}`.")

    @property
    def is_superscript(self) -> bool:
        """Return whether characters with this style render raised."""

        return self.position == POSITION_SUPERSCRIPT


class StyleRepository:
    """Registry of character styles keyed by name."""

    def __init__(self, styles: Iterable[CharacterStyle] = ()) -> None:
        """Initialize the repository with pre-existing document styles."""

        self._styles: dict[str, CharacterStyle] = {}
        for style in styles:
            if style.name in self._styles:
                raise ValueError(f"Duplicate character style `{style.name}`.")
            self._styles[style.name] = style

    def get(self, name: str) -> CharacterStyle | None:
        """Return the style registered under `name`, if any."""

        return self._styles.get(name)

    def get_or_create(
        self,
        name: str,
        *,
        position: str = POSITION_NORMAL,
        italic: bool = False,
        bold: bool = False,
        capitalization: str = CAPITALIZATION_NORMAL,
    ) -> CharacterStyle:
        """Return an existing style, or register a new one with the given properties.

        Properties only apply on creation; an existing style is returned unchanged.
        """

        existing = self._styles.get(name)
        if existing is not None:
            return existing
        created = CharacterStyle(
            name=name,
            position=position,
            italic=italic,
            bold=bold,
            capitalization=capitalization,
        )
        self._styles[name] = created
        return created

    def names(self) -> list[str]:
        """Return registered style names in registration order."""

        return list(self._styles)

    def __contains__(self, name: object) -> bool:
        return name in self._styles

    def __iter__(self) -> Iterator[CharacterStyle]:
        return iter(self._styles.values())

    def __len__(self) -> int:
        return len(self._styles)
