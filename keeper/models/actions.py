"""Action classification models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Outcome of classifying a pool. Values are the backend labels."""
    STOP_LOSS = "stop-loss"
    TAKE_PROFIT = "take-profit"
    REBALANCE = "rebalance"
    NO_ACTION = "no-action"
    ERROR = "error"


@dataclass
class MarketSnapshot:
    """On-chain inputs for one classification, in whole units."""
    token0_price: float
    token1_price: float
    token0_initial_value: float
    token1_initial_value: float


@dataclass
class RuleResult:
    """Result from a single action rule."""
    triggered: bool
    data: dict[str, Any]
    reasoning: str


@dataclass
class ActionDecision:
    """Final classification for a pool."""
    action: ActionType
    reasoning: str
    data: dict[str, Any] = field(default_factory=dict)
