"""Correction options and their loaders.

Responsibilities:
- Define the operator-chosen options for one correction run as a frozen dataclass.
- Load options from YAML with strict key validation and typed field parsing.
- Apply explicit CLI overrides on top of file values.

Key types:
- `SpaceVariant`: non-breaking space characters offered to the operator.
- `CorrectionOptions`: immutable options record consumed by the pipeline.
- `ConfigLoader`: static construction helpers for `CorrectionOptions`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_permissive_boolean
from .text.lexicon import Lexicon


class SpaceVariant(str, Enum):
    """Non-breaking space variants."""

    FINE = "fine"
    STANDARD = "standard"

    @property
    def character(self) -> str:
        """Return the Unicode character inserted for this variant."""

        return "\N{NARROW NO-BREAK SPACE}" if self is SpaceVariant.FINE else "\N{NO-BREAK SPACE}"

    @classmethod
    def parse(cls, value: object, field_name: str) -> SpaceVariant:
        """Parse a variant name, accepting the raw characters as aliases.

        Raises:
            ValueError: If the value names no known variant.
        """

        if isinstance(value, SpaceVariant):
            return value
        aliases = {
            "fine": cls.FINE,
            "thin": cls.FINE,
            "\N{NARROW NO-BREAK SPACE}": cls.FINE,
            "standard": cls.STANDARD,
            "nbsp": cls.STANDARD,
            "\N{NO-BREAK SPACE}": cls.STANDARD,
        }
        raw = value if isinstance(value, str) else ""
        variant = aliases.get(raw) or aliases.get(raw.strip().lower())
        if variant is None:
            raise ValueError(f"`{field_name}` must be one of `fine`, `standard`.")
        return variant


@dataclass(frozen=True, slots=True)
class CorrectionOptions:
    """Options for one correction run; immutable for the duration of the run.

    Step toggles follow pipeline order. Style names select character styles in the
    document's repository; missing styles are created with default properties.

    Attributes:
        remove_spaces_before_punctuation: Drop spaces before `.`, `,` and note markers.
        collapse_double_spaces: Collapse runs of spaces to one space.
        fix_typographic_spaces: Non-breaking spaces inside guillemets and before `;:!?`.
        fix_dash_incises: Non-breaking spaces inside dash incises and after dialogue dashes.
        collapse_double_returns: Remove empty paragraphs.
        trim_paragraph_start: Remove leading horizontal whitespace of paragraphs.
        trim_paragraph_end: Remove trailing horizontal whitespace of paragraphs.
        remove_tabs: Remove tabs, keeping none after footnote markers.
        move_footnote_references: Put footnote markers before adjacent punctuation.
        style_footnote_references: Apply `footnote_style` to footnote markers.
        replace_em_dashes: Replace em dashes with en dashes.
        replace_isolated_hyphens: Replace spaced hyphens with en dashes.
        format_value_ranges: Join ranges (years, pages, hours, figures) with en dashes.
        apply_italic_style: Apply `italic_style` to locally italic, non-bold text.
        apply_superscript_style: Apply `superscript_style` to locally raised text.
        convert_ellipsis: Replace three periods with an ellipsis.
        normalize_apostrophes: Replace straight apostrophes with typographic ones.
        apply_style_after_trigger: Style the paragraph following trigger-styled blocks.
        apply_page_template: Apply `page_template` to the last page.
        format_centuries: Style century numerals (`XIVe siècle`).
        format_ordinals: Style ordinal-rank numerals (`IIe République`).
        format_references: Style work/ruler numerals (`tome III`, `Louis XIV`, `1er`).
        format_reference_spaces: Bind abbreviations and units to their numbers.
        format_numbers: Run the number formatter.
        insert_thousands_separators: Group digits by three.
        use_decimal_comma: Write decimals with a comma.
        exclude_year_like_numbers: Leave numbers in 1000..2050 ungrouped.
        space_variant: Non-breaking space used by spacing rules.
        thousands_separator: Non-breaking space used between digit groups.
        footnote_style: Character style for footnote markers.
        italic_style: Character style for italic text.
        superscript_style: Character style for superscript suffixes and text.
        century_style: Character style for century numerals.
        ordinal_style: Character style for uppercase ordinal numerals.
        trigger_paragraph_style: Paragraph style whose blocks trigger restyling.
        target_paragraph_style: Paragraph style applied after a trigger block.
        page_template: Template applied to the last page.
        lexicon: Keyword and exception lists.
    """

    remove_spaces_before_punctuation: bool = True
    collapse_double_spaces: bool = True
    fix_typographic_spaces: bool = True
    fix_dash_incises: bool = True
    collapse_double_returns: bool = True
    trim_paragraph_start: bool = True
    trim_paragraph_end: bool = True
    remove_tabs: bool = True
    move_footnote_references: bool = True
    style_footnote_references: bool = True
    replace_em_dashes: bool = True
    replace_isolated_hyphens: bool = True
    format_value_ranges: bool = True
    apply_italic_style: bool = False
    apply_superscript_style: bool = False
    convert_ellipsis: bool = True
    normalize_apostrophes: bool = True
    apply_style_after_trigger: bool = False
    apply_page_template: bool = False
    format_centuries: bool = True
    format_ordinals: bool = True
    format_references: bool = True
    format_reference_spaces: bool = True
    format_numbers: bool = True
    insert_thousands_separators: bool = True
    use_decimal_comma: bool = True
    exclude_year_like_numbers: bool = True
    space_variant: SpaceVariant = SpaceVariant.FINE
    thousands_separator: SpaceVariant = SpaceVariant.FINE
    footnote_style: str | None = "Appel de note"
    italic_style: str | None = "Italique"
    superscript_style: str | None = "Exposant"
    century_style: str | None = "Siècles"
    ordinal_style: str | None = "Romains capitales"
    trigger_paragraph_style: str | None = None
    target_paragraph_style: str | None = None
    page_template: str | None = None
    lexicon: Lexicon = field(default_factory=Lexicon)

    def validate(self) -> None:
        """Validate option types and enumerations.

        Style selections are checked by the pipeline, since their requirement
        depends on which steps are enabled.

        Raises:
            ValueError: If an option has an unsupported value.
        """

        for name in _BOOLEAN_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"`{name}` must be a boolean value.")
        if not isinstance(self.space_variant, SpaceVariant):
            raise ValueError("`space_variant` must be a `SpaceVariant`.")
        if not isinstance(self.thousands_separator, SpaceVariant):
            raise ValueError("`thousands_separator` must be a `SpaceVariant`.")
        if not isinstance(self.lexicon, Lexicon):
            raise ValueError("`lexicon` must be a `Lexicon`.")
        for name in _STYLE_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"`{name}` must be a style name or empty.")

    def with_overrides(self, **overrides: object) -> CorrectionOptions:
        """Return a copy with explicit overrides applied, skipping `None` values."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        updated = replace(self, **changes)
        updated.validate()
        return updated


_STYLE_FIELDS = (
    "footnote_style",
    "italic_style",
    "superscript_style",
    "century_style",
    "ordinal_style",
    "trigger_paragraph_style",
    "target_paragraph_style",
    "page_template",
)
_VARIANT_FIELDS = ("space_variant", "thousands_separator")
_BOOLEAN_FIELDS = tuple(
    item.name
    for item in fields(CorrectionOptions)
    if item.name not in _STYLE_FIELDS
    and item.name not in _VARIANT_FIELDS
    and item.name != "lexicon"
)


class ConfigLoader:
    """Factory methods for creating `CorrectionOptions` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(item.name for item in fields(CorrectionOptions))

    @staticmethod
    def from_yaml(path: Path) -> CorrectionOptions:
        """Create validated options from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> CorrectionOptions:
        """Build validated options from a mapping payload."""

        ConfigLoader._validate_yaml_keys(payload, source_label)
        defaults = CorrectionOptions()
        values: dict[str, Any] = {}

        for key in _BOOLEAN_FIELDS:
            values[key] = ConfigLoader._optional_boolean(
                payload, key, source_label, default=getattr(defaults, key)
            )
        for key in _VARIANT_FIELDS:
            values[key] = ConfigLoader._optional_space_variant(
                payload, key, source_label, default=getattr(defaults, key)
            )
        for key in _STYLE_FIELDS:
            if key in payload:
                values[key] = normalize_optional_string(payload[key])
        values["lexicon"] = ConfigLoader._optional_lexicon(payload, "lexicon", source_label)

        options = CorrectionOptions(**values)
        options.validate()
        return options

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        payload = yaml.safe_load(raw_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject keys that do not name an option."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed

    @staticmethod
    def _optional_space_variant(
        payload: Mapping[str, Any], key: str, source_label: str, default: SpaceVariant
    ) -> SpaceVariant:
        """Read a space variant name from a payload."""

        if key not in payload or payload[key] is None:
            return default
        try:
            return SpaceVariant.parse(payload[key], key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _optional_lexicon(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> Lexicon:
        """Read optional word-list overrides on top of the built-in lexicon."""

        raw = payload.get(key)
        if raw is None:
            return Lexicon()
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")
        try:
            return Lexicon().with_overrides(raw)
        except ValueError as exc:
            raise ValueError(f"{source_label} {exc}") from exc
