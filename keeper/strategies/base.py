"""Base protocol for action rules."""
from typing import Protocol, runtime_checkable

from keeper.models import PoolConfig, RuleResult


@runtime_checkable
class ActionRule(Protocol):
    """Protocol for a single rule in the classification pipeline.

    A rule inspects the pool policy and the derived market data and
    reports whether its action should fire.
    """

    name: str

    def evaluate(self, pool: PoolConfig, data: dict) -> RuleResult:
        """Evaluate this rule.

        Args:
            pool: Pool configuration with token policies
            data: Derived quantities (prices, values, current proportion)

        Returns:
            RuleResult with triggered=True if the rule's action applies
        """
        ...
