"""Data models for the pool keeper."""

from keeper.models.pools import TokenPolicy, PoolConfig, TokenStatus, PoolStatus
from keeper.models.actions import ActionType, MarketSnapshot, RuleResult, ActionDecision
from keeper.models.transactions import RebalanceResult, TransactionReport

__all__ = [
    "TokenPolicy",
    "PoolConfig",
    "TokenStatus",
    "PoolStatus",
    "ActionType",
    "MarketSnapshot",
    "RuleResult",
    "ActionDecision",
    "RebalanceResult",
    "TransactionReport",
]
