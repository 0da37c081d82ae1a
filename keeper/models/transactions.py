"""Rebalance transaction models."""
from dataclasses import dataclass
from typing import Any

from keeper.models.actions import ActionType
from keeper.models.pools import PoolStatus

REPORT_DESCRIPTION = "Automatic rebalancing completed"


@dataclass
class RebalanceResult:
    """Result of sending a rebalance transaction."""
    tx_id: str | None
    status: str           # "submitted" or "rejected"
    message: str | None = None

    @property
    def submitted(self) -> bool:
        return self.status == "submitted"


@dataclass
class TransactionReport:
    """Before/after record posted to the backend after a rebalance."""
    action: ActionType
    tx_hash: str | None
    pool_address: str
    user_wallet_address: str | None
    before: PoolStatus
    after: PoolStatus
    description: str = REPORT_DESCRIPTION
    amount: float = 0

    def to_payload(self) -> dict[str, Any]:
        """Convert to the ``transactions/create`` request body."""
        return {
            "type": self.action.value,
            "txHash": self.tx_hash,
            "description": self.description,
            "tokenBefore": [s.to_dict() for s in self.before],
            "tokenAfter": [s.to_dict() for s in self.after],
            "amount": self.amount,
            "userId": self.user_wallet_address,
            "poolId": self.pool_address,
        }
