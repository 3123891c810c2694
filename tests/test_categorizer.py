import json
import logging

import pytest

from categorizer import (
    DEFAULT_CATEGORY_KEYWORDS,
    TransactionCategorizer,
    build_taxonomy,
    find_keyword_collisions,
)
from errors import TaxonomyError
from schema import Category

ALL_DEFAULT_KEYWORDS = [
    (keyword, Category(name))
    for name, keywords in DEFAULT_CATEGORY_KEYWORDS.items()
    for keyword in keywords
]


@pytest.mark.parametrize("keyword, category", ALL_DEFAULT_KEYWORDS)
def test_each_default_keyword_classifies_as_its_own_category(categorizer, keyword, category):
    assert categorizer.classify(keyword) is category


def test_default_taxonomy_has_no_cross_category_overlaps():
    assert find_keyword_collisions(build_taxonomy(DEFAULT_CATEGORY_KEYWORDS)) == []


def test_default_taxonomy_never_maps_to_other():
    assert "other" not in DEFAULT_CATEGORY_KEYWORDS


def test_find_keyword_collisions_reports_shadowed_keyword():
    taxonomy = build_taxonomy({"food": ["cafe"], "transport": ["cafe shuttle", "cab"]})

    collisions = find_keyword_collisions(taxonomy)

    assert len(collisions) == 1
    collision = collisions[0]
    assert collision.keyword == "cafe shuttle"
    assert collision.category is Category.TRANSPORT
    assert collision.shadowed_by == "cafe"
    assert collision.shadowing_category is Category.FOOD


def test_collisions_in_custom_taxonomy_are_logged(caplog):
    caplog.set_level(logging.WARNING)

    TransactionCategorizer({"food": ["cafe"], "transport": ["cafe shuttle"]})

    assert "'cafe shuttle' (transport) is shadowed by 'cafe' (food)" in caplog.text


def test_category_priority_follows_taxonomy_order(categorizer):
    # food is declared before transport, transport before health.
    assert categorizer.classify("Uber Cafe") is Category.FOOD
    assert categorizer.classify("Cafe Uber") is Category.FOOD
    assert categorizer.classify("Ola Pharmacy") is Category.TRANSPORT
    assert categorizer.classify("Apollo Pharmacy Bill") is Category.HEALTH


def test_priority_ignores_mapping_order():
    categorizer = TransactionCategorizer({"transport": ["express"], "food": ["express"]})

    assert categorizer.classify("Express") is Category.FOOD


def test_classify_is_case_insensitive(categorizer):
    assert categorizer.classify("SWIGGY INSTAMART") is Category.FOOD
    assert categorizer.classify("BookMyShow") is Category.ENTERTAINMENT


@pytest.mark.parametrize("merchant", ["Ramesh Kumar", "", None, "Unknown Merchant"])
def test_classify_falls_back_to_other(categorizer, merchant):
    assert categorizer.classify(merchant) is Category.OTHER


def test_taxonomy_is_read_only(categorizer):
    with pytest.raises(TypeError):
        categorizer.category_keywords[Category.FOOD] = ("anything",)


@pytest.mark.parametrize(
    "mapping, message",
    [
        ({"groceries": ["dmart"]}, "Unknown category"),
        ({"other": ["misc"]}, "fallback category"),
        ({"food": "swiggy"}, "must be a list"),
        ({"food": ["Swiggy"]}, "lowercase"),
        ({"food": ["swiggy", ""]}, "Empty or non-string"),
        ({"food": ["swiggy", 42]}, "Empty or non-string"),
    ],
)
def test_build_taxonomy_rejects_invalid_config(mapping, message):
    with pytest.raises(TaxonomyError, match=message):
        build_taxonomy(mapping)


def test_from_file(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps({"food": ["idli"], "transfers": ["mom"]}), encoding="utf-8")

    categorizer = TransactionCategorizer.from_file(path)

    assert categorizer.classify("Idli Corner") is Category.FOOD
    assert categorizer.classify("Mom") is Category.TRANSFERS
    assert categorizer.classify("Swiggy") is Category.OTHER


def test_from_file_invalid_json(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(TaxonomyError, match="Error reading taxonomy file"):
        TransactionCategorizer.from_file(path)


def test_from_file_requires_object(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps(["swiggy"]), encoding="utf-8")

    with pytest.raises(TaxonomyError, match="JSON object"):
        TransactionCategorizer.from_file(path)


def test_from_file_missing(tmp_path):
    with pytest.raises(TaxonomyError):
        TransactionCategorizer.from_file(tmp_path / "missing.json")


def test_category_declaration_order():
    assert [c.value for c in Category] == [
        "food",
        "transport",
        "shopping",
        "entertainment",
        "health",
        "recharge",
        "transfers",
        "other",
    ]
