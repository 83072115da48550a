"""In-memory document model edited by the correction engine.

Responsibilities:
- Represent stories, footnotes and paragraphs as flows of addressable characters.
- Keep character identity (and therefore styling) stable across text edits.
- Expose paragraph views with derived `is_empty` and paragraph-style access.

Key types:
- `Character`: one display unit with local emphasis and an assignable style.
- `TextFlow`: ordered characters; `"\\n"` terminates a paragraph.
- `Paragraph`: read/write view over one paragraph of a flow.
- `Story`, `Page`, `Document`: containers consumed by the pipeline.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from difflib import SequenceMatcher

from .styles import CharacterStyle, StyleRepository

PARAGRAPH_SEPARATOR = "\n"
FOOTNOTE_MARKER = "\x04"


@dataclass(eq=False, slots=True)
class Character:
    """One addressable display unit.

    Characters compare by identity so that styling survives neighbouring edits.

    Attributes:
        content: Single code point displayed by this character.
        italic: Local italic emphasis.
        bold: Local bold emphasis.
        superscript: Local raised position, independent of any character style.
        character_style: Applied character style, if any.
        paragraph_style: Paragraph style name carried by this character.
    """

    content: str
    italic: bool = False
    bold: bool = False
    superscript: bool = False
    character_style: CharacterStyle | None = None
    paragraph_style: str | None = None

    @property
    def is_superscript(self) -> bool:
        """Return whether the character renders raised, locally or via its style."""

        if self.superscript:
            return True
        return self.character_style is not None and self.character_style.is_superscript

    def apply_character_style(self, style: CharacterStyle) -> None:
        """Assign a character style; local emphasis resets to the style's own values."""

        self.character_style = style
        self.italic = style.italic
        self.bold = style.bold
        self.superscript = False

    def derive(self, content: str) -> Character:
        """Return a new character carrying this character's attributes."""

        return Character(
            content=content,
            italic=self.italic,
            bold=self.bold,
            superscript=self.superscript,
            character_style=self.character_style,
            paragraph_style=self.paragraph_style,
        )


class TextFlow:
    """Ordered characters forming one story's main text or one footnote."""

    def __init__(self, characters: Iterable[Character] = ()) -> None:
        """Initialize a flow from existing characters."""

        self._characters: list[Character] = list(characters)

    @classmethod
    def from_text(cls, text: str, *, paragraph_style: str | None = None) -> TextFlow:
        """Build an unstyled flow from plain text."""

        return cls(Character(content, paragraph_style=paragraph_style) for content in text)

    @property
    def text(self) -> str:
        """Return the flow content as a string."""

        return "".join(character.content for character in self._characters)

    @property
    def characters(self) -> tuple[Character, ...]:
        """Return a snapshot of the flow characters."""

        return tuple(self._characters)

    def __len__(self) -> int:
        return len(self._characters)

    def __repr__(self) -> str:
        return f"TextFlow({self.text!r})"

    def slice(self, start: int, end: int) -> list[Character]:
        """Return the characters in `[start, end)`."""

        return self._characters[start:end]

    def position_map(self) -> dict[int, int]:
        """Map character identities to their current offsets."""

        return {id(character): index for index, character in enumerate(self._characters)}

    def replace_range(self, start: int, end: int, text: str) -> bool:
        """Replace `[start, end)` with `text`, reusing unchanged characters.

        Characters whose content survives the edit keep their identity. Substituted
        characters keep their attributes; inserted characters copy the attributes of
        the preceding character in the rebuilt range, or of the nearest neighbour.

        Returns:
            `True` when the flow content changed.
        """

        if not 0 <= start <= end <= len(self._characters):
            raise IndexError(f"Range [{start}, {end}) is outside the flow.")

        old = self._characters[start:end]
        old_text = "".join(character.content for character in old)
        if old_text == text:
            return False

        template = self._template_for(start, end)
        rebuilt: list[Character] = []
        matcher = SequenceMatcher(None, old_text, text, autojunk=False)
        for tag, old_start, old_end, new_start, new_end in matcher.get_opcodes():
            if tag == "equal":
                rebuilt.extend(old[old_start:old_end])
                continue
            if tag == "delete":
                continue
            reused = old[old_start:old_end]
            for offset, content in enumerate(text[new_start:new_end]):
                if offset < len(reused):
                    character = reused[offset]
                    character.content = content
                else:
                    source = rebuilt[-1] if rebuilt else template
                    character = source.derive(content) if source else Character(content)
                rebuilt.append(character)

        self._characters[start:end] = rebuilt
        return True

    def move_character(self, source: int, target: int) -> None:
        """Move the character at `source` so that it lands before offset `target`."""

        character = self._characters.pop(source)
        if target > source:
            target -= 1
        self._characters.insert(target, character)

    def paragraphs(self) -> list[Paragraph]:
        """Return paragraph views in flow order."""

        views: list[Paragraph] = []
        text = self.text
        start = 0
        while True:
            separator = text.find(PARAGRAPH_SEPARATOR, start)
            if separator == -1:
                if start < len(text) or not views:
                    views.append(Paragraph(self, start, len(text), False))
                return views
            views.append(Paragraph(self, start, separator, True))
            start = separator + 1

    def paragraph_at(self, offset: int) -> Paragraph:
        """Return the paragraph containing `offset`."""

        for paragraph in self.paragraphs():
            if paragraph.start <= offset <= paragraph.end:
                return paragraph
        raise IndexError(f"Offset {offset} is outside the flow.")

    def _template_for(self, start: int, end: int) -> Character | None:
        """Return the neighbour whose attributes inserted characters inherit."""

        if start > 0:
            return self._characters[start - 1]
        if end > start:
            return self._characters[start]
        if end < len(self._characters):
            return self._characters[end]
        return None


@dataclass(frozen=True, slots=True)
class Paragraph:
    """View over one paragraph of a flow.

    Attributes:
        flow: Owning text flow.
        start: Offset of the first character.
        end: Offset one past the last character, excluding the terminator.
        terminated: Whether a paragraph separator follows `end`.
    """

    flow: TextFlow
    start: int
    end: int
    terminated: bool

    @property
    def text(self) -> str:
        """Return paragraph text without its terminator."""

        return "".join(character.content for character in self.flow.slice(self.start, self.end))

    @property
    def characters(self) -> list[Character]:
        """Return paragraph characters including the terminator when present."""

        return self.flow.slice(self.start, self.end + (1 if self.terminated else 0))

    @property
    def is_empty(self) -> bool:
        """Return whether the paragraph has no visible characters."""

        return not self.text.strip()

    @property
    def applied_paragraph_style(self) -> str | None:
        """Return the paragraph style name carried by the first character."""

        characters = self.characters
        if not characters:
            return None
        return characters[0].paragraph_style

    def apply_paragraph_style(self, name: str) -> bool:
        """Set the paragraph style on every character; return whether anything changed."""

        changed = False
        for character in self.characters:
            if character.paragraph_style != name:
                character.paragraph_style = name
                changed = True
        return changed


@dataclass(slots=True)
class Story:
    """One text flow plus the footnotes anchored in it.

    Attributes:
        text: Main text flow; holds one footnote marker per footnote.
        footnotes: Footnote flows in anchor order.
        name: Optional story label used in diagnostics.
    """

    text: TextFlow
    footnotes: list[TextFlow] = field(default_factory=list)
    name: str = ""


@dataclass(slots=True)
class Page:
    """Layout page with its applied template name."""

    number: int
    template: str | None = None


@dataclass(slots=True)
class Document:
    """Document edited in place by one correction run.

    Attributes:
        stories: Ordered stories.
        styles: Character style repository.
        paragraph_styles: Paragraph style names defined by the document.
        pages: Layout pages in order.
        templates: Available page template names.
        name: Document label used in diagnostics.
    """

    stories: list[Story] = field(default_factory=list)
    styles: StyleRepository = field(default_factory=StyleRepository)
    paragraph_styles: list[str] = field(default_factory=list)
    pages: list[Page] = field(default_factory=list)
    templates: list[str] = field(default_factory=list)
    name: str = "untitled"

    @classmethod
    def from_text(cls, text: str, *, footnotes: Iterable[str] = ()) -> Document:
        """Build a single-story document from plain text and footnote texts."""

        story = Story(
            text=TextFlow.from_text(text),
            footnotes=[TextFlow.from_text(note) for note in footnotes],
        )
        return cls(stories=[story])

    def main_flows(self) -> Iterator[TextFlow]:
        """Yield the main text flow of every story."""

        for story in self.stories:
            yield story.text

    def footnote_flows(self) -> Iterator[TextFlow]:
        """Yield every footnote flow of every story."""

        for story in self.stories:
            yield from story.footnotes
