import pytest

from feedreader.contract import FEED_ENTRY
from feedreader.errors import ColumnNotFound
from feedreader.predicate import Predicate, order_clause, where_clause


def test_eq_is_parameterized():
    sql, params = where_clause(FEED_ENTRY, Predicate.eq("title", "x' OR '1'='1"))
    assert sql == " WHERE title = ?"
    assert params == ["x' OR '1'='1"]


def test_combined_predicates_and_null():
    pred = Predicate.like("title", "My%") & Predicate.eq("subtitle", None)
    sql, params = where_clause(FEED_ENTRY, pred)
    assert sql == " WHERE title LIKE ? AND subtitle IS NULL"
    assert params == ["My%"]


def test_no_predicate():
    assert where_clause(FEED_ENTRY, None) == ("", [])


def test_unknown_column_named_in_error():
    with pytest.raises(ColumnNotFound) as ei:
        where_clause(FEED_ENTRY, Predicate.eq("body", 1))
    assert "body" in str(ei.value)
    assert ei.value.column == "body"


def test_order_clause():
    assert order_clause(FEED_ENTRY, "subtitle DESC") == " ORDER BY subtitle DESC"
    assert order_clause(FEED_ENTRY, ["title", "_id desc"]) == " ORDER BY title ASC, _id DESC"
    assert order_clause(FEED_ENTRY, None) == ""


@pytest.mark.parametrize("bad", ["title SIDEWAYS", "title; DROP TABLE entry", "a b c"])
def test_order_clause_rejects_garbage(bad):
    with pytest.raises(ValueError):
        order_clause(FEED_ENTRY, bad)
