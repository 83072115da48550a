"""Side-table protection of matched spans.

Responsibilities:
- Shield spans from later, broader rules within one formatting step.
- Restore (optionally rewrite) spans and release their tokens.
- Assert that no protected span survives the step that created it.

Key types:
- `ProtectedSpan`: protected characters plus their original content.
- `ProtectionTable`: registry of spans keyed by opaque tokens.

Protected characters never change in the document itself. The executor reads
`ProtectionTable.mask` instead of the raw text, so protected positions show up
as `MASK_CHARACTER` and cannot take part in a match.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from itertools import count

from ..document.model import Character, TextFlow
from ..errors import ProtectionLeakError

MASK_CHARACTER = "\N{OBJECT REPLACEMENT CHARACTER}"


@dataclass(frozen=True, slots=True)
class ProtectedSpan:
    """One protected run of characters.

    Attributes:
        token: Opaque identifier issued by the table.
        kind: Caller-defined category, for example `year` or `decimal`.
        flow: Flow owning the characters.
        characters: Protected characters in flow order.
        original: Content at protection time.
    """

    token: str
    kind: str
    flow: TextFlow
    characters: tuple[Character, ...]
    original: str

    @property
    def current(self) -> str:
        """Return the current content of the protected characters."""

        return "".join(character.content for character in self.characters)


class ProtectionTable:
    """Registry of protected spans for the duration of one step."""

    def __init__(self) -> None:
        """Initialize an empty table."""

        self._spans: dict[str, ProtectedSpan] = {}
        self._owners: dict[int, str] = {}
        self._sequence = count(1)

    def __len__(self) -> int:
        return len(self._spans)

    def tokens(self) -> list[str]:
        """Return outstanding tokens in issue order."""

        return list(self._spans)

    def protect(self, flow: TextFlow, characters: Iterable[Character], kind: str) -> str:
        """Protect `characters` and return the issued token.

        Raises:
            ValueError: If the span is empty or overlaps an existing protection.
        """

        span_characters = tuple(characters)
        if not span_characters:
            raise ValueError("Cannot protect an empty span.")
        if any(id(character) in self._owners for character in span_characters):
            raise ValueError("Span overlaps an existing protection.")

        token = f"{kind}-{next(self._sequence)}"
        self._spans[token] = ProtectedSpan(
            token=token,
            kind=kind,
            flow=flow,
            characters=span_characters,
            original="".join(character.content for character in span_characters),
        )
        for character in span_characters:
            self._owners[id(character)] = token
        return token

    def is_protected(self, character: Character) -> bool:
        """Return whether `character` belongs to an outstanding span."""

        return id(character) in self._owners

    def mask(self, flow: TextFlow, start: int, end: int) -> str:
        """Return flow text for `[start, end)` with protected positions masked."""

        return "".join(
            MASK_CHARACTER if id(character) in self._owners else character.content
            for character in flow.slice(start, end)
        )

    def restore(
        self,
        kind: str,
        rewrite: Callable[[ProtectedSpan], str] | None = None,
    ) -> int:
        """Release every span of `kind`, rewriting content through `rewrite` if given.

        Returns:
            Number of spans whose content changed on restoration.

        Raises:
            RuntimeError: If a protected span was altered or detached while protected.
        """

        changed = 0
        positions: dict[int, dict[int, int]] = {}
        for token, span in list(self._spans.items()):
            if span.kind != kind:
                continue
            if span.current != span.original:
                raise RuntimeError(f"Protected span `{token}` was modified while protected.")

            if rewrite is not None:
                replacement = rewrite(span)
                if replacement != span.original:
                    flow_positions = positions.get(id(span.flow))
                    if flow_positions is None:
                        flow_positions = span.flow.position_map()
                        positions[id(span.flow)] = flow_positions
                    start = self._span_start(span, flow_positions)
                    self._release(token)
                    span.flow.replace_range(start, start + len(span.characters), replacement)
                    if len(replacement) != len(span.characters):
                        positions.pop(id(span.flow), None)
                    changed += 1
                    continue
            self._release(token)
        return changed

    def release_all(self) -> None:
        """Drop every outstanding span without rewriting content."""

        self._spans.clear()
        self._owners.clear()

    def assert_released(self) -> None:
        """Raise when any span is still outstanding.

        Raises:
            ProtectionLeakError: If the table is not empty.
        """

        if self._spans:
            raise ProtectionLeakError(self.tokens())

    def _release(self, token: str) -> None:
        """Remove one span and its character ownership entries."""

        span = self._spans.pop(token)
        for character in span.characters:
            self._owners.pop(id(character), None)

    @staticmethod
    def _span_start(span: ProtectedSpan, positions: dict[int, int]) -> int:
        """Return the flow offset of a span, checking that it is still contiguous."""

        try:
            offsets = [positions[id(character)] for character in span.characters]
        except KeyError as exc:
            raise RuntimeError(f"Protected span `{span.token}` lost characters.") from exc
        start = offsets[0]
        if offsets != list(range(start, start + len(offsets))):
            raise RuntimeError(f"Protected span `{span.token}` is no longer contiguous.")
        return start
