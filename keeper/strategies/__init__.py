"""Action classification for managed pools."""
from keeper.strategies.classifier import ActionClassifier
from keeper.strategies.status import default_pool_status, pool_status_from_valuation, read_pool_status

__all__ = [
    "ActionClassifier",
    "default_pool_status",
    "pool_status_from_valuation",
    "read_pool_status",
]
