"""Rule pipeline runner."""
import logging

from keeper.models import ActionType, PoolConfig
from keeper.strategies.base import ActionRule

logger = logging.getLogger(__name__)


class ActionPipeline:
    """Runs pool data through an ordered list of rules.

    Rules are evaluated in precedence order. Evaluation stops at the
    first rule that triggers, and that rule's action is the result.
    If no rule triggers the result is NO_ACTION.
    """

    def __init__(self, rules: list[tuple[ActionRule, ActionType]]):
        """Initialize the pipeline.

        Args:
            rules: (rule, action) pairs in precedence order
        """
        self.rules = rules

    def run(self, pool: PoolConfig, data: dict) -> tuple[ActionType, str]:
        """Run data through the rules.

        Args:
            pool: Pool being classified
            data: Derived quantities shared by all rules

        Returns:
            Tuple of (action, accumulated_reasoning)
        """
        reasoning_parts: list[str] = []

        for rule, action in self.rules:
            logger.debug(f"Evaluating rule '{rule.name}' for {pool.pool_address}")

            result = rule.evaluate(pool, data)
            reasoning_parts.append(f"[{rule.name}] {result.reasoning}")
            data.update(result.data)

            if result.triggered:
                logger.debug(f"Rule '{rule.name}' triggered for {pool.pool_address}")
                return action, "\n".join(reasoning_parts)

        return ActionType.NO_ACTION, "\n".join(reasoning_parts)
