"""Pool configuration and status models."""
from dataclasses import dataclass
from typing import Any


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


@dataclass
class TokenPolicy:
    """Rebalancing policy for one token of a pool."""
    proportion: float                # Target share of pool value, 0-100
    take_profit_percentage: float    # 0 disables take-profit
    stop_loss_at_token_price: float | None  # Fires at or below this price; None disables
    address: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TokenPolicy":
        """Build from the backend's camelCase token entry."""
        return cls(
            proportion=float(raw.get("proportion") or 0),
            take_profit_percentage=float(raw.get("takeProfitPercentage") or 0),
            stop_loss_at_token_price=_optional_float(raw.get("stopLossAtTokenPrice")),
            address=raw.get("address") or raw.get("tokenAddress"),
        )


@dataclass
class PoolConfig:
    """One managed liquidity pool as stored by the backend.

    ``pool_address`` is None until the pool contract is deployed; such
    pools are skipped by the monitor.
    """
    pool_address: str | None
    user_wallet_address: str | None
    total_value: float
    rebalancing_threshold: float
    tokens: tuple[TokenPolicy, TokenPolicy]
    pool_id: str | None = None

    def __post_init__(self):
        if len(self.tokens) != 2:
            raise ValueError(f"Pool must have exactly 2 tokens, got {len(self.tokens)}")

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "PoolConfig":
        """Build from a ``get-all-pools`` entry.

        Args:
            raw: JSON object from the backend

        Returns:
            PoolConfig

        Raises:
            ValueError: If ``tokens`` is not a list of exactly two entries
        """
        tokens_raw = raw.get("tokens") or []
        if not isinstance(tokens_raw, list):
            raise ValueError(f"Pool tokens must be a list, got {type(tokens_raw).__name__}")
        if len(tokens_raw) != 2:
            raise ValueError(f"Pool must have exactly 2 tokens, got {len(tokens_raw)}")

        return cls(
            pool_address=raw.get("poolAddress"),
            user_wallet_address=raw.get("userWalletAddress"),
            total_value=float(raw.get("totalValue") or 0),
            rebalancing_threshold=float(raw.get("rebalancingThreshold") or 0),
            tokens=(TokenPolicy.from_dict(tokens_raw[0]), TokenPolicy.from_dict(tokens_raw[1])),
            pool_id=raw.get("_id") or raw.get("id"),
        )


@dataclass
class TokenStatus:
    """Share of total pool value held by one token."""
    token_name: str          # "Token0" or "Token1"
    token_percentage: float  # 0-100

    def to_dict(self) -> dict[str, Any]:
        """Convert to the backend's camelCase shape."""
        return {"tokenName": self.token_name, "tokenPercentage": self.token_percentage}


# Always two entries, ordered like PoolConfig.tokens
PoolStatus = list[TokenStatus]
