"""Execution engine for pool rebalance transactions."""
import logging

from keeper.collectors.chain.connection import ChainConnection
from keeper.models import RebalanceResult

logger = logging.getLogger(__name__)


class RebalanceExecutor:
    """Sends rebalance transactions to pool contracts."""

    def __init__(self, connection: ChainConnection):
        """Initialize executor.

        Args:
            connection: Chain connection manager
        """
        self.connection = connection

    async def execute(self, contract) -> RebalanceResult:
        """Send ``rebalance()`` for one pool.

        Args:
            contract: PoolContract for the pool

        Returns:
            RebalanceResult with the transaction id, or status "rejected"
            if not connected or the send failed
        """
        if not self.connection.is_connected():
            logger.warning(f"Cannot rebalance {contract.address}: not connected")
            return RebalanceResult(
                tx_id=None,
                status="rejected",
                message="Cannot rebalance: not connected",
            )

        try:
            tx_id = await contract.rebalance()
        except Exception as e:
            logger.error(f"Rebalance transaction failed for {contract.address}: {e}")
            return RebalanceResult(tx_id=None, status="rejected", message=str(e))

        logger.info(f"Rebalanced pool {contract.address}: {tx_id}")
        return RebalanceResult(tx_id=tx_id, status="submitted")
