"""Pattern rule executor.

Responsibilities:
- Apply one pattern rule over its declared scope in a single global pass.
- Substitute back-references from the document text, never from masked text.
- Honour footnote inclusion exactly and skip protected characters.
- Record match-local failures without aborting the pass.

Key types:
- `PatternRule`: explicit per-call rule description; nothing is shared between calls.
- `TextMatch`: one occurrence, with access to its flow, characters and paragraph.
- `apply_rule`: stateless entry point returning a `RuleOutcome`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import regex

from ..document.model import Character, Document, Paragraph, Story, TextFlow
from ..errors import PatternRuleError
from ..models.datatypes import ItemFailure, RuleOutcome
from .protection import MASK_CHARACTER, ProtectionTable

_TEMPLATE_REFERENCE = regex.compile(r"\\(?:(\d+)|g<(\w+)>|(\\))")
_EXCERPT_LIMIT = 40


class RuleScope(str, Enum):
    """Unit searched by one rule pass."""

    STORY = "story"
    PARAGRAPH = "paragraph"


class FootnoteScope(str, Enum):
    """Which flows a rule reads and writes."""

    EXCLUDE = "exclude"
    INCLUDE = "include"
    ONLY = "only"


MatchAction = Callable[["TextMatch"], bool]


@dataclass(frozen=True, slots=True)
class PatternRule:
    """Search pattern plus either a replacement template or a per-match action.

    Attributes:
        name: Rule name used in outcomes and logs.
        pattern: `regex` pattern searched in each unit.
        replacement: Template supporting `\\1`, `\\g<name>` and `\\\\`.
        action: Callable invoked per match; returns whether it changed anything.
        scope: `story` searches whole flows, `paragraph` searches paragraphs separately.
        footnotes: Footnote inclusion for this rule.
        flags: `regex` compile flags.
    """

    name: str
    pattern: str
    replacement: str | None = None
    action: MatchAction | None = None
    scope: RuleScope = RuleScope.STORY
    footnotes: FootnoteScope = FootnoteScope.EXCLUDE
    flags: int = 0

    def __post_init__(self) -> None:
        """Require exactly one of `replacement` or `action`."""

        if (self.replacement is None) == (self.action is None):
            raise ValueError(
                f"Rule `{self.name}` needs exactly one of `replacement` or `action`."
            )


class TextMatch:
    """One occurrence found by a rule.

    Group offsets describe the text at search time; after `set_contents` only
    `start`, `end`, `contents` and `characters` reflect the edited flow.
    """

    __slots__ = ("flow", "start", "end", "_match", "_offset", "_source")

    def __init__(
        self,
        flow: TextFlow,
        match: regex.Match[str],
        offset: int,
        source: str,
    ) -> None:
        """Initialize a match view over `flow`."""

        self.flow = flow
        self._match = match
        self._offset = offset
        self._source = source
        self.start = offset + match.start()
        self.end = offset + match.end()

    @property
    def contents(self) -> str:
        """Return the current text of the matched range."""

        return "".join(character.content for character in self.characters)

    @property
    def characters(self) -> list[Character]:
        """Return the characters of the matched range."""

        return self.flow.slice(self.start, self.end)

    @property
    def paragraph(self) -> Paragraph:
        """Return the paragraph containing the match start."""

        return self.flow.paragraph_at(self.start)

    def group(self, group: int | str = 0) -> str | None:
        """Return a capture group's document text, or `None` if it did not participate."""

        start, end = self._match.span(group)
        if start == -1:
            return None
        return self._source[start:end]

    def span(self, group: int | str = 0) -> tuple[int, int]:
        """Return a capture group's flow offsets, `(-1, -1)` if it did not participate."""

        start, end = self._match.span(group)
        if start == -1:
            return -1, -1
        return self._offset + start, self._offset + end

    def group_characters(self, group: int | str) -> list[Character]:
        """Return the characters of a capture group."""

        start, end = self.span(group)
        if start == -1:
            return []
        return self.flow.slice(start, end)

    def set_contents(self, text: str) -> bool:
        """Replace the matched range and return whether the content changed."""

        changed = self.flow.replace_range(self.start, self.end, text)
        self.end = self.start + len(text)
        return changed

    def move_last_to_front(self) -> bool:
        """Move the final matched character in front of the others, keeping its attributes."""

        if self.end - self.start < 2:
            return False
        self.flow.move_character(self.end - 1, self.start)
        return True


def compile_rule(rule: PatternRule) -> regex.Pattern[str]:
    """Compile a rule pattern and validate its replacement references.

    Raises:
        PatternRuleError: If the pattern or a template reference is invalid.
    """

    try:
        compiled = regex.compile(rule.pattern, rule.flags)
    except regex.error as exc:
        raise PatternRuleError(rule.name, rule.pattern, str(exc)) from exc

    if rule.replacement is not None:
        for reference in _TEMPLATE_REFERENCE.finditer(rule.replacement):
            key = reference.group(1) or reference.group(2)
            if key is None:
                continue
            if key.isdigit():
                if int(key) > compiled.groups:
                    raise PatternRuleError(
                        rule.name, rule.pattern, f"unknown group reference `\\{key}`"
                    )
            elif key not in compiled.groupindex:
                raise PatternRuleError(
                    rule.name, rule.pattern, f"unknown group reference `\\g<{key}>`"
                )
    return compiled


def expand_template(template: str, match: TextMatch) -> str:
    """Expand back-references in `template` from the match's document text."""

    def _substitute(reference: regex.Match[str]) -> str:
        """Resolve one template reference."""

        if reference.group(3):
            return "\\"
        key = reference.group(1) or reference.group(2)
        group_key: int | str = int(key) if key.isdigit() else key
        return match.group(group_key) or ""

    return _TEMPLATE_REFERENCE.sub(_substitute, template)


def iter_flows(
    document: Document,
    footnotes: FootnoteScope,
    within: Story | None = None,
) -> list[TextFlow]:
    """Return the flows a rule with the given footnote inclusion may touch."""

    stories = [within] if within is not None else document.stories
    flows: list[TextFlow] = []
    for story in stories:
        if footnotes is not FootnoteScope.ONLY:
            flows.append(story.text)
        if footnotes is not FootnoteScope.EXCLUDE:
            flows.extend(story.footnotes)
    return flows


def apply_rule(
    document: Document,
    rule: PatternRule,
    *,
    within: Story | None = None,
    protections: ProtectionTable | None = None,
) -> RuleOutcome:
    """Apply `rule` over the whole document, or over one story when `within` is set.

    Matches are collected per unit before any edit and processed last-to-first,
    so earlier offsets stay valid while later text changes length.

    Raises:
        PatternRuleError: If the rule cannot be compiled.
    """

    compiled = compile_rule(rule)
    matches = 0
    changes = 0
    failures: list[ItemFailure] = []

    for flow in iter_flows(document, rule.footnotes, within):
        source = flow.text
        if rule.scope is RuleScope.PARAGRAPH:
            units = [(paragraph.start, paragraph.end) for paragraph in flow.paragraphs()]
        else:
            units = [(0, len(source))]

        for start, end in reversed(units):
            unit_source = source[start:end]
            search_text = (
                protections.mask(flow, start, end) if protections is not None else unit_source
            )
            found = [
                match
                for match in compiled.finditer(search_text)
                if MASK_CHARACTER not in match.group(0)
            ]
            matches += len(found)
            for match in reversed(found):
                text_match = TextMatch(flow, match, start, unit_source)
                try:
                    if rule.action is not None:
                        changed = rule.action(text_match)
                    else:
                        changed = text_match.set_contents(
                            expand_template(rule.replacement or "", text_match)
                        )
                except Exception as exc:
                    failures.append(
                        ItemFailure(
                            rule=rule.name,
                            excerpt=unit_source[match.start():match.end()][:_EXCERPT_LIMIT],
                            error_type=type(exc).__name__,
                            message=str(exc),
                        )
                    )
                    continue
                if changed:
                    changes += 1

    return RuleOutcome(rule=rule.name, matches=matches, changes=changes, failures=tuple(failures))
