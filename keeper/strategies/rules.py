"""Stop-loss, take-profit and rebalance rules."""
import logging

from keeper.models import PoolConfig, RuleResult

logger = logging.getLogger(__name__)


def profit_percentage(value: float, initial_value: float) -> float | None:
    """Percentage gain of ``value`` over ``initial_value``.

    Returns None when no baseline was recorded (initial value of zero),
    which callers treat as "no profit signal".
    """
    if initial_value == 0:
        return None
    return (value - initial_value) * 100 / initial_value


class StopLossRule:
    """Fires when a held token's price is at or below its stop-loss.

    A stop-loss of None is disabled. Token0's stop-loss is ignored when
    the pool holds no token0 (proportion 0), token1's when the pool is
    entirely token0 (proportion 100).
    """

    name = "stop_loss"

    def evaluate(self, pool: PoolConfig, data: dict) -> RuleResult:
        current = data["current_proportion0"]
        price0 = data["token0_price"]
        price1 = data["token1_price"]
        stop0 = pool.tokens[0].stop_loss_at_token_price
        stop1 = pool.tokens[1].stop_loss_at_token_price

        hit0 = stop0 is not None and price0 <= stop0 and current != 0
        hit1 = stop1 is not None and price1 <= stop1 and current != 100

        if hit0 or hit1:
            return RuleResult(
                triggered=True,
                data={},
                reasoning=(
                    f"Stop loss hit: token0 {price0} <= {stop0}: {hit0}, "
                    f"token1 {price1} <= {stop1}: {hit1}"
                ),
            )

        return RuleResult(
            triggered=False,
            data={},
            reasoning=(
                f"Prices above stop loss (token0 {price0} > {stop0} or unheld or unset, "
                f"token1 {price1} > {stop1} or unheld or unset)"
            ),
        )


class TakeProfitRule:
    """Fires when a token's value has gained its take-profit percentage.

    Both branches require token0's take-profit to be enabled and the pool
    to hold some token0, so the token1 branch is also gated on token0's
    setting.
    """

    name = "take_profit"

    def evaluate(self, pool: PoolConfig, data: dict) -> RuleResult:
        current = data["current_proportion0"]
        take0 = pool.tokens[0].take_profit_percentage
        take1 = pool.tokens[1].take_profit_percentage

        profit0 = profit_percentage(data["token0_value"], data["token0_initial_value"])
        profit1 = profit_percentage(data["token1_value"], data["token1_initial_value"])
        profits = {"token0_profit": profit0, "token1_profit": profit1}

        hit0 = profit0 is not None and profit0 >= take0 and current != 0 and take0 != 0
        hit1 = profit1 is not None and profit1 >= take1 and current != 0 and take0 != 0

        if hit0 or hit1:
            return RuleResult(
                triggered=True,
                data=profits,
                reasoning=f"Take profit hit: token0 profit {profit0} (target {take0}), token1 profit {profit1} (target {take1})",
            )

        return RuleResult(
            triggered=False,
            data=profits,
            reasoning=f"No take profit: token0 profit {profit0} (target {take0}), token1 profit {profit1} (target {take1})",
        )


class RebalanceRule:
    """Fires when token0's share drifts more than the threshold from target.

    Pools entirely in one token (0% or 100%) are never rebalanced.
    """

    name = "rebalance"

    def evaluate(self, pool: PoolConfig, data: dict) -> RuleResult:
        current = data["current_proportion0"]
        target = pool.tokens[0].proportion
        threshold = pool.rebalancing_threshold
        diff = abs(current - target)

        if current in (0, 100):
            return RuleResult(
                triggered=False,
                data={"diff_from_target": diff},
                reasoning=f"Pool fully concentrated (token0 at {current}%), skipping rebalance",
            )

        if diff > threshold:
            return RuleResult(
                triggered=True,
                data={"diff_from_target": diff},
                reasoning=f"Token0 at {current}% vs target {target}%: drift {diff} > threshold {threshold}",
            )

        return RuleResult(
            triggered=False,
            data={"diff_from_target": diff},
            reasoning=f"Token0 at {current}% vs target {target}%: drift {diff} within threshold {threshold}",
        )
