"""Action classifier for managed pools.

Decides, from a pool's policy and its current on-chain valuation, which
action is due. Rules are applied in precedence order:

1. stop-loss
2. take-profit
3. rebalance
4. no-action

Any failure while gathering inputs or evaluating rules yields ERROR.
"""
import logging

from keeper.models import (
    ActionDecision,
    ActionType,
    MarketSnapshot,
    PoolConfig,
    PoolStatus,
)
from keeper.strategies.pipeline import ActionPipeline
from keeper.strategies.rules import RebalanceRule, StopLossRule, TakeProfitRule

logger = logging.getLogger(__name__)


class ActionClassifier:
    """Classifies pools into stop-loss / take-profit / rebalance / no-action."""

    def __init__(self, pipeline: ActionPipeline | None = None):
        self.pipeline = pipeline or ActionPipeline(
            rules=[
                (StopLossRule(), ActionType.STOP_LOSS),
                (TakeProfitRule(), ActionType.TAKE_PROFIT),
                (RebalanceRule(), ActionType.REBALANCE),
            ]
        )

    @staticmethod
    def derive(pool: PoolConfig, before_status: PoolStatus, snapshot: MarketSnapshot) -> dict:
        """Compute token balances, values and token0's current share."""
        token0_balance = before_status[0].token_percentage * pool.total_value / 100
        token1_balance = before_status[1].token_percentage * pool.total_value / 100

        return {
            "token0_price": snapshot.token0_price,
            "token1_price": snapshot.token1_price,
            "token0_initial_value": snapshot.token0_initial_value,
            "token1_initial_value": snapshot.token1_initial_value,
            "token0_balance": token0_balance,
            "token1_balance": token1_balance,
            "token0_value": token0_balance * snapshot.token0_price,
            "token1_value": token1_balance * snapshot.token1_price,
            "current_proportion0": before_status[0].token_percentage,
        }

    def classify(
        self,
        pool: PoolConfig,
        before_status: PoolStatus,
        snapshot: MarketSnapshot,
    ) -> ActionDecision:
        """Classify a pool from already-fetched inputs.

        Args:
            pool: Pool configuration
            before_status: Current two-token status
            snapshot: Current prices and initial token values

        Returns:
            ActionDecision (never ERROR; exceptions propagate)
        """
        data = self.derive(pool, before_status, snapshot)
        logger.debug(
            "STEP: Classifying pool",
            extra={"extra_data": {"action": "classify", "pool": pool.pool_address, **data}},
        )

        action, reasoning = self.pipeline.run(pool, data)
        return ActionDecision(action=action, reasoning=reasoning, data=data)

    async def determine_action(self, pool: PoolConfig, contract, before_status: PoolStatus) -> ActionDecision:
        """Read prices and initial values from the contract, then classify.

        Args:
            pool: Pool configuration
            contract: PoolContract (or test double) for the pool
            before_status: Status read before rebalancing

        Returns:
            ActionDecision; action is ERROR if anything fails
        """
        try:
            token0_price, token1_price = await contract.fetch_prices()
            token0_initial = await contract.initial_token_values(0)
            token1_initial = await contract.initial_token_values(1)

            snapshot = MarketSnapshot(
                token0_price=token0_price,
                token1_price=token1_price,
                token0_initial_value=token0_initial,
                token1_initial_value=token1_initial,
            )
            decision = self.classify(pool, before_status, snapshot)

        except Exception as e:
            logger.exception(f"Error determining action for pool {pool.pool_address}: {e}")
            return ActionDecision(action=ActionType.ERROR, reasoning=f"{type(e).__name__}: {e}")

        logger.info(f"Pool {pool.pool_address} action: {decision.action.value}")
        logger.debug(f"Pool {pool.pool_address} reasoning:\n{decision.reasoning}")
        return decision
