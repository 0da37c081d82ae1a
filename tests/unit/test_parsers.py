"""Tests for pool contract result parsers."""
import pytest


def test_from_base_units():
    from keeper.collectors.chain.parsers import from_base_units

    assert from_base_units(1_500_000, 6) == 1.5
    assert from_base_units("2000000", 6) == 2.0
    assert from_base_units(0, 6) == 0.0
    assert from_base_units(5, 0) == 5.0


def test_from_base_units_large_values():
    from keeper.collectors.chain.parsers import from_base_units

    assert from_base_units(10**24, 18) == 1_000_000.0


def test_parse_prices():
    from keeper.collectors.chain.parsers import parse_prices

    assert parse_prices([2_000_000, 500_000], 6) == (2.0, 0.5)


def test_parse_prices_requires_two():
    from keeper.collectors.chain.parsers import parse_prices

    with pytest.raises(ValueError, match="expected 2"):
        parse_prices([1], 6)


def test_parse_token_balance_tuple():
    from keeper.collectors.chain.parsers import parse_token_balance_in_usd

    total, proportions = parse_token_balance_in_usd((1_000_000_000, [6000, 4000]), 6)

    assert total == 1000.0
    assert proportions == [6000, 4000]


def test_parse_token_balance_named():
    from keeper.collectors.chain.parsers import parse_token_balance_in_usd

    raw = {"totalValueInUSD": 0, "valueProportions": [0, 0]}
    total, proportions = parse_token_balance_in_usd(raw, 6)

    assert total == 0.0
    assert proportions == [0, 0]
