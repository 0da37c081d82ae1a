"""Parsers for raw pool contract return values."""
import logging
from decimal import Decimal
from typing import Any, Sequence

logger = logging.getLogger(__name__)


def from_base_units(raw: int | str, decimals: int) -> float:
    """Convert a fixed-point integer from the chain into whole units.

    Args:
        raw: Integer amount (or its decimal string) in base units
        decimals: Number of decimals in the fixed-point representation

    Returns:
        Amount in whole units
    """
    return float(Decimal(int(raw)) / (Decimal(10) ** decimals))


def parse_prices(raw: Sequence[Any], decimals: int) -> tuple[float, float]:
    """Parse the ``fetchPrices()`` result into (token0_price, token1_price)."""
    if len(raw) < 2:
        raise ValueError(f"fetchPrices returned {len(raw)} values, expected 2")
    return from_base_units(raw[0], decimals), from_base_units(raw[1], decimals)


def parse_token_balance_in_usd(raw: Any, decimals: int) -> tuple[float, list[int]]:
    """Parse the ``getTokenBalanceInUSD()`` result.

    The contract returns ``(totalValueInUSD, valueProportions)`` with the
    proportions in basis points. Dict-shaped results keyed by output name
    are accepted too.

    Returns:
        Tuple of (total_value_in_usd, proportions_bps)
    """
    if isinstance(raw, dict):
        total_raw = raw["totalValueInUSD"]
        proportions_raw = raw["valueProportions"]
    else:
        total_raw, proportions_raw = raw[0], raw[1]

    return from_base_units(total_raw, decimals), [int(p) for p in proportions_raw]
