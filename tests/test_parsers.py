import pytest

from stationery_tracker.core.parsers import DateParser, ItemNameNormalizer

from conftest import CATALOG


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-07-25", "2024-07-25"),
        ("2024/07/25", "2024-07-25"),
        ("25/08/2024", "2024-08-25"),
        ("August 25, 2024", "2024-08-25"),
        ("N/A", None),
        ("", None),
        (None, None),
        ("someday", None),
    ],
)
def test_date_parser(raw, expected):
    assert DateParser().parse(raw) == expected


def test_normalize_keeps_unparseable_text_but_blanks_placeholders():
    parser = DateParser()
    assert parser.normalize("someday") == "someday"
    assert parser.normalize(" n/a ") == ""
    assert parser.normalize(None) == ""


def test_item_names_resolve_to_catalog():
    normalizer = ItemNameNormalizer(CATALOG)
    assert normalizer.normalize("  a4   PAPER ") == "A4 Paper"
    assert normalizer.normalize("Laser Pointer") == "Laser Pointer"
    assert normalizer.normalize("   ") is None
    assert normalizer.resolve("keyboard") == "Keyboard"
    assert normalizer.resolve("Laser Pointer") is None
