import pytest

from ostrich_canvas.data import SALES_DATA
from ostrich_canvas.filter_engine import FilterEngine, make_filter


@pytest.fixture()
def engine():
    return FilterEngine()


def test_equals_is_case_insensitive(engine):
    rows = engine.apply(SALES_DATA, [make_filter("region", "SOUTH")])
    assert [r.id for r in rows] == ["sale-2", "sale-6", "sale-10", "sale-14"]


def test_exclude(engine):
    rows = engine.apply(SALES_DATA, [make_filter("region", ["north", "east"], filter_type="exclude")])
    assert {r.region.lower() for r in rows} == {"south", "west"}


def test_prefix_match(engine):
    rows = engine.apply(SALES_DATA, [make_filter("product", "giz", match="prefix")])
    assert {r.id for r in rows} == {"sale-3", "sale-7", "sale-11", "sale-13"}


def test_disabled_filters_are_skipped(engine):
    spec = {**make_filter("region", "west"), "enabled": False}
    assert engine.apply(SALES_DATA, [spec]) == list(SALES_DATA)


def test_filters_stack_in_order(engine):
    rows = engine.apply(SALES_DATA, [make_filter("region", "north"), make_filter("month", "march")])
    assert [r.id for r in rows] == ["sale-9"]


def test_unknown_field_matches_nothing(engine):
    assert engine.apply(SALES_DATA, [make_filter("colour", "red")]) == []


def test_apply_returns_new_list(engine):
    rows = engine.apply(SALES_DATA, [])
    assert rows == list(SALES_DATA)
    assert rows is not SALES_DATA


def test_make_filter_validates():
    with pytest.raises(ValueError):
        make_filter("region", "north", filter_type="maybe")
    with pytest.raises(ValueError):
        make_filter("region", "north", match="regex")
