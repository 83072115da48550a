"""Shared parsing helpers for configuration and document value normalization."""

from __future__ import annotations

from collections.abc import Iterable


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on", "oui"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off", "non"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def normalize_word_list(values: Iterable[object], field_name: str) -> tuple[str, ...]:
    """Normalize a word list, dropping duplicates while keeping first-seen order.

    Raises:
        ValueError: If any entry is blank.
    """

    seen: set[str] = set()
    words: list[str] = []
    for raw in values:
        word = normalize_optional_string(raw)
        if word is None:
            raise ValueError(f"`{field_name}` contains a blank entry.")
        if word in seen:
            continue
        seen.add(word)
        words.append(word)
    return tuple(words)
