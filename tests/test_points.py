import pytest

from sortex.services.points import CATEGORY_POINTS, DEFAULT_POINTS, normalize_category, points_for, points_table


@pytest.mark.parametrize(
    ("category", "expected"),
    [("plastic", 25), ("glass", 35), ("paper", 20), ("metal", 30), ("ewaste", 50), ("textile", 40)],
)
def test_known_categories(category, expected):
    assert points_for(category) == expected


@pytest.mark.parametrize("category", [None, "", "unknown", "organic", "e-waste", "plastics", "   "])
def test_unknown_categories_fall_back_to_default(category):
    assert points_for(category) == DEFAULT_POINTS == 10


def test_labels_are_trimmed_and_case_folded():
    assert points_for(" Glass ") == 35
    assert normalize_category("EWASTE") == "ewaste"
    assert normalize_category("batteries") is None


def test_points_table_matches_lookup():
    table = points_table()
    assert table["default_points"] == DEFAULT_POINTS
    assert table["categories"] == CATEGORY_POINTS
    for category, value in table["categories"].items():
        assert points_for(category) == value
