"""Field filtering and broad keyword search over item documents."""

from __future__ import annotations

import pytest

from apparel_api.app.core.filters import (
    FieldKind,
    ITEM_FIELDS,
    filter_by_field,
    normalize_field_name,
    parse_int,
    resolve_field,
    search_broad,
)


@pytest.fixture
def wardrobe() -> list[dict]:
    return [
        {
            "id": 1,
            "category": "Tops",
            "sub_category": "Sweaters",
            "brand": "Uniqlo",
            "description": "Merino WOOL crewneck",
            "rating": 5,
            "condition": 9,
            "styles": ["preppy", "minimal"],
            "material": {"materials": ["Wool", "cashmere"], "weights": {"wool": 0.9, "cashmere": 0.1}},
            "color": {"colors": ["navy"], "weights": {"navy": 1.0}},
            "size": {"kind": "letter", "value": "M"},
            "purchase_location": "Tokyo",
        },
        {
            "id": 2,
            "category": "Bottoms",
            "sub_category": "Jeans",
            "brand": "Levi's",
            "description": "Raw denim",
            "rating": 3,
            "condition": 10,
            "styles": ["workwear"],
            "material": {"materials": ["cotton"], "weights": {"cotton": 1.0}},
            "size": {"kind": "paired", "first": 32, "second": 34},
            "purchase_location": "Portland",
        },
        {
            "id": 3,
            "category": "Outerwear",
            "brand": "Barbour",
            "description": "Waxed jacket",
            "rating": 5,
            "styles": ["country"],
            "size": {"kind": "numeric", "value": 40},
        },
        {
            # Sparse record: most fields missing.
            "id": 4,
            "category": "Accessories",
        },
    ]


def ids(items: list[dict]) -> list[int]:
    return [item["id"] for item in items]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("rating", "rating"),
        ("Brand", "brand"),
        ("Purchase Location", "purchase_location"),
        ("purchaseLocation", "purchase_location"),
        ("  sub-category ", "sub_category"),
        ("SUB CATEGORY", "sub_category"),
    ],
)
def test_normalize_field_name(raw: str, expected: str) -> None:
    assert normalize_field_name(raw) == expected


def test_resolve_ignores_word_boundaries() -> None:
    assert resolve_field("subcategory") is ITEM_FIELDS["sub_category"]
    assert resolve_field("Sub Category").kind is FieldKind.TEXT
    assert resolve_field("colour") is None


def test_every_declared_field_has_a_kind() -> None:
    assert {d.kind for d in ITEM_FIELDS.values()} == set(FieldKind)
    assert ITEM_FIELDS["rating"].kind is FieldKind.NUMBER
    assert ITEM_FIELDS["styles"].kind is FieldKind.NESTED


@pytest.mark.parametrize("raw, expected", [("5", 5), (" 5 ", 5), ("5.7", 5), ("-2", -2), ("five", None), ("", None)])
def test_parse_int_reads_leading_digits(raw: str, expected) -> None:
    assert parse_int(raw) == expected


def test_number_field_matches_exact_integer(wardrobe) -> None:
    assert ids(filter_by_field(wardrobe, "rating", "5")) == [1, 3]
    assert ids(filter_by_field(wardrobe, "Rating", "3")) == [2]
    assert filter_by_field(wardrobe, "rating", "4") == []


def test_number_field_with_unparseable_keyword_matches_nothing(wardrobe) -> None:
    assert filter_by_field(wardrobe, "rating", "great") == []


def test_number_field_matches_zero() -> None:
    items = [{"id": 1, "rating": 0}, {"id": 2, "rating": 1}]
    assert ids(filter_by_field(items, "rating", "0")) == [1]


def test_text_field_is_case_insensitive_substring(wardrobe) -> None:
    assert ids(filter_by_field(wardrobe, "description", "wool")) == [1]
    assert ids(filter_by_field(wardrobe, "Sub Category", "SWEAT")) == [1]
    assert ids(filter_by_field(wardrobe, "purchaseLocation", "port")) == [2]


def test_text_field_skips_items_missing_the_field(wardrobe) -> None:
    assert ids(filter_by_field(wardrobe, "brand", "b")) == [3]


def test_text_field_ignores_values_of_other_shapes() -> None:
    items = [{"id": 1, "brand": 42}, {"id": 2, "brand": "Acne 42"}]
    assert ids(filter_by_field(items, "brand", "42")) == [2]


def test_nested_field_matches_labels_in_lists(wardrobe) -> None:
    assert ids(filter_by_field(wardrobe, "material", "wool")) == [1]
    assert ids(filter_by_field(wardrobe, "material", "COTTON")) == [2]
    assert ids(filter_by_field(wardrobe, "color", "nav")) == [1]


def test_nested_field_matches_style_tags(wardrobe) -> None:
    assert ids(filter_by_field(wardrobe, "styles", "work")) == [2]


def test_nested_size_matches_numbers_and_letters(wardrobe) -> None:
    assert ids(filter_by_field(wardrobe, "size", "32")) == [2]
    assert ids(filter_by_field(wardrobe, "size", "40")) == [3]
    assert ids(filter_by_field(wardrobe, "size", "m")) == [1]


def test_nested_size_ignores_the_kind_tag(wardrobe) -> None:
    assert filter_by_field(wardrobe, "size", "paired") == []


def test_unknown_field_fails_closed(wardrobe) -> None:
    assert filter_by_field(wardrobe, "fabric", "wool") == []


def test_filter_does_not_infer_type_from_first_item() -> None:
    # The first record holds a string where a number is declared.
    items = [{"id": 1, "rating": "5"}, {"id": 2, "rating": 5}]
    assert ids(filter_by_field(items, "rating", "5")) == [2]


def test_broad_search_finds_style_tag(wardrobe) -> None:
    assert ids(search_broad(wardrobe, "preppy")) == [1]


def test_broad_search_absent_keyword_is_empty(wardrobe) -> None:
    assert search_broad(wardrobe, "sequins") == []


def test_broad_search_is_case_insensitive(wardrobe) -> None:
    assert ids(search_broad(wardrobe, "WAXED")) == [3]
    assert ids(search_broad(wardrobe, "cashmere")) == [1]
    assert ids(search_broad(wardrobe, "tokyo")) == [1]


def test_broad_search_spans_several_items(wardrobe) -> None:
    assert ids(search_broad(wardrobe, "o")) == [1, 2, 3, 4]


def test_broad_search_ignores_numbers_and_blank_keyword(wardrobe) -> None:
    assert search_broad(wardrobe, "5") == []
    assert search_broad(wardrobe, "  ") == []
