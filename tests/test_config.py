"""Tests for configuration helpers."""

from catering_orders.config import parse_implicit_pairings


def test_parse_implicit_pairings() -> None:
    assert parse_implicit_pairings(" a:b , c:d,,bad, e: ") == frozenset(
        {("a", "b"), ("c", "d")}
    )


def test_parse_implicit_pairings_empty() -> None:
    assert parse_implicit_pairings(None) == frozenset()
    assert parse_implicit_pairings("") == frozenset()
