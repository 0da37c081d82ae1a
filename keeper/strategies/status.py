"""Pool status normalization."""
import logging
from typing import Sequence

from keeper.models import PoolStatus, TokenStatus

logger = logging.getLogger(__name__)

TOKEN_NAMES = ("Token0", "Token1")
BPS_PER_PERCENT = 100


def default_pool_status() -> PoolStatus:
    """Zeroed status used when the pool has no value or cannot be read."""
    return [TokenStatus(token_name=name, token_percentage=0) for name in TOKEN_NAMES]


def pool_status_from_valuation(total_value_in_usd: float, proportions_bps: Sequence[int]) -> PoolStatus:
    """Convert an on-chain valuation into a two-token percentage status.

    Args:
        total_value_in_usd: Total pool value in whole USD
        proportions_bps: Per-token share of value in basis points

    Returns:
        PoolStatus with percentages 0-100, or the zeroed default when the
        pool holds no value
    """
    if total_value_in_usd <= 0:
        logger.info("Total value is zero or negative, returning default status")
        return default_pool_status()

    return [
        TokenStatus(token_name=name, token_percentage=int(bps) / BPS_PER_PERCENT)
        for name, bps in zip(TOKEN_NAMES, proportions_bps[:2])
    ]


async def read_pool_status(contract) -> PoolStatus:
    """Read and normalize a pool's current value distribution.

    Never raises: any failure is logged and the zeroed default returned,
    for which the rebalance rule never fires.

    Args:
        contract: Object with an async ``get_token_balance_in_usd()``
            returning (total_value_in_usd, proportions_bps)

    Returns:
        PoolStatus
    """
    try:
        total_value, proportions = await contract.get_token_balance_in_usd()
        status = pool_status_from_valuation(total_value, proportions)
        if len(status) != 2:
            raise ValueError(f"Expected 2 token proportions, got {len(proportions)}")
        logger.debug(
            "STEP: Pool status read",
            extra={
                "extra_data": {
                    "action": "pool_status",
                    "total_value_in_usd": total_value,
                    "proportions_bps": list(proportions),
                }
            },
        )
        return status
    except Exception as e:
        logger.error(f"Error fetching pool status in USD: {e}")
        return default_pool_status()
