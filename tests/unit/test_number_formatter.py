"""Unit tests for digit grouping, decimal markers and year exclusion."""

from __future__ import annotations

import pytest

from typofix.document.model import Document
from typofix.rules.protection import MASK_CHARACTER
from typofix.text.numbers import format_numbers, group_digits

NNBSP = "\N{NARROW NO-BREAK SPACE}"
EN = "\N{EN DASH}"


def _format(
    text: str,
    *,
    insert_separators: bool = True,
    use_decimal_comma: bool = True,
    exclude_years: bool = True,
    footnotes: tuple[str, ...] = (),
) -> Document:
    """Run the number formatter over a fresh document."""

    document = Document.from_text(text, footnotes=footnotes)
    format_numbers(
        document,
        insert_separators=insert_separators,
        use_decimal_comma=use_decimal_comma,
        exclude_years=exclude_years,
        separator=NNBSP,
    )
    return document


@pytest.mark.parametrize(
    ("digits", "expected"),
    [
        ("123", "123"),
        ("1234", "1 234"),
        ("123456", "123 456"),
        ("1234567", "1 234 567"),
    ],
)
def test_group_digits_counts_from_the_right(digits: str, expected: str) -> None:
    """Groups should hold three digits with a shorter leading group."""

    assert group_digits(digits, " ") == expected


@pytest.mark.parametrize(
    ("source", "exclude_years", "expected"),
    [
        ("12345678", False, f"12{NNBSP}345{NNBSP}678"),
        ("en 1995-2002", True, "en 1995-2002"),
        (f"de 1914{EN}1918", True, f"de 1914{EN}1918"),
        ("En 1995, 12000 habitants", True, f"En 1995, 12{NNBSP}000 habitants"),
        ("En 1995", False, f"En 1{NNBSP}995"),
        ("1.234.567 euros", True, f"1{NNBSP}234{NNBSP}567 euros"),
        ("2.500 km", True, f"2{NNBSP}500 km"),
        ("1 234 567", True, f"1{NNBSP}234{NNBSP}567"),
        ("1'000'000", True, f"1{NNBSP}000{NNBSP}000"),
        ("5 000000", False, f"5{NNBSP}000{NNBSP}000"),
        ("123 ans", True, "123 ans"),
    ],
)
def test_format_numbers_groups_digit_runs(
    source: str, exclude_years: bool, expected: str
) -> None:
    """Raw and foreign-grouped runs should end up grouped with the separator."""

    document = _format(source, exclude_years=exclude_years)

    assert document.stories[0].text.text == expected


@pytest.mark.parametrize(
    ("source", "use_decimal_comma", "expected"),
    [
        ("3.14", True, "3,14"),
        ("3.14", False, "3.14"),
        ("3,14", False, "3,14"),
        ("1234,5678", True, f"1{NNBSP}234,5678"),
        ("12345.5", True, f"12{NNBSP}345,5"),
    ],
)
def test_format_numbers_decimal_markers(
    source: str, use_decimal_comma: bool, expected: str
) -> None:
    """Fractions should never be grouped and their marker follows the option."""

    document = _format(source, use_decimal_comma=use_decimal_comma)

    assert document.stories[0].text.text == expected


def test_format_numbers_without_separators_only_converts_decimals() -> None:
    """With grouping off, only the decimal-comma substitution should run."""

    document = _format("3.14 et 12345 et 1.234", insert_separators=False)

    assert document.stories[0].text.text == "3,14 et 12345 et 1.234"


def test_format_numbers_covers_footnotes() -> None:
    """Footnote text should be formatted like the main text."""

    document = _format("Voir\x04", footnotes=("Tirage de 25000 exemplaires.",))

    assert document.stories[0].footnotes[0].text == f"Tirage de 25{NNBSP}000 exemplaires."


@pytest.mark.parametrize(
    "source",
    [
        "12345678",
        "en 1995-2002, 3.14 et 1234,5678",
        "1.234.567 puis 2.500",
        "Le 1er janvier 2024, 1 000 000 de visiteurs",
        "5 000000",
    ],
)
@pytest.mark.parametrize("exclude_years", [True, False])
def test_format_numbers_is_idempotent(source: str, exclude_years: bool) -> None:
    """A second run with the same options should change nothing."""

    document = _format(source, exclude_years=exclude_years)
    first = document.stories[0].text.text

    outcomes = format_numbers(
        document,
        insert_separators=True,
        use_decimal_comma=True,
        exclude_years=exclude_years,
        separator=NNBSP,
    )

    assert document.stories[0].text.text == first
    assert sum(outcome.changes for outcome in outcomes) == 0


def test_format_numbers_leaves_no_protection_residue() -> None:
    """No mask character should ever reach the document text."""

    document = _format("en 1995-2002, 3.14 et 1234,5678", footnotes=("1999 et 2.5",))

    story = document.stories[0]
    assert MASK_CHARACTER not in story.text.text
    assert MASK_CHARACTER not in story.footnotes[0].text
