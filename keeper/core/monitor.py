"""Poll loop that checks each pool and rebalances when due."""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from keeper.collectors.backend.client import BackendClient
from keeper.core.execution_engine import RebalanceExecutor
from keeper.models import ActionDecision, PoolConfig, TransactionReport
from keeper.strategies import ActionClassifier, read_pool_status

logger = logging.getLogger(__name__)


@dataclass
class CycleSummary:
    """Counts from one pass over all pools."""

    total: int = 0
    skipped: int = 0      # no pool address yet
    processed: int = 0    # checked without error (due or not)
    rebalanced: int = 0
    failed: int = 0


class PoolMonitor:
    """Evaluates every pool in turn, then waits a fixed interval.

    Pools are processed sequentially in the order the backend returns
    them. A failure in one pool is logged and the cycle moves on.
    """

    def __init__(
        self,
        backend: BackendClient,
        classifier: ActionClassifier,
        executor: RebalanceExecutor,
        contract_factory: Callable[[str], object],
        interval_seconds: float = 60.0,
        sleep_step_seconds: float = 1.0,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.backend = backend
        self.classifier = classifier
        self.executor = executor
        self.contract_factory = contract_factory
        self.interval_seconds = interval_seconds
        self.sleep_step_seconds = sleep_step_seconds
        self._clock = clock
        self._sleep = sleep
        self._running = False
        self.cycles = 0

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._running = False
        logger.info("Monitor stopped")

    async def is_due(self, contract) -> bool:
        """Check whether the pool's rebalance period has elapsed."""
        time_period = await contract.time_period()
        last_checked = await contract.last_checked()
        now = int(self._clock())

        logger.debug(
            "STEP: Due check",
            extra={
                "extra_data": {
                    "action": "due_check",
                    "pool": contract.address,
                    "now": now,
                    "time_period": time_period,
                    "last_checked": last_checked,
                }
            },
        )
        return now >= last_checked + time_period

    async def check_and_rebalance(self, pool: PoolConfig) -> ActionDecision | None:
        """Check one pool and rebalance it if its period has elapsed.

        Args:
            pool: Pool with a deployed contract address

        Returns:
            The classified decision, or None if the pool was not due or
            the rebalance transaction was rejected
        """
        contract = self.contract_factory(pool.pool_address)

        if not await self.is_due(contract):
            logger.debug(f"Pool {pool.pool_address} not due yet")
            return None

        logger.info(f"Rebalancing pool {pool.pool_address}")

        token0 = await contract.tokens(0)
        token1 = await contract.tokens(1)
        logger.debug(f"Pool {pool.pool_address} tokens: {token0}, {token1}")

        before_status = await read_pool_status(contract)
        logger.info(f"Before status: {[s.to_dict() for s in before_status]}")

        decision = await self.classifier.determine_action(pool, contract, before_status)

        result = await self.executor.execute(contract)
        if not result.submitted:
            logger.error(f"Rebalance not sent for pool {pool.pool_address}: {result.message}")
            return None

        after_status = await read_pool_status(contract)
        logger.info(f"After status: {[s.to_dict() for s in after_status]}")

        await self.backend.post_transaction(
            TransactionReport(
                action=decision.action,
                tx_hash=result.tx_id,
                pool_address=pool.pool_address,
                user_wallet_address=pool.user_wallet_address,
                before=before_status,
                after=after_status,
            )
        )
        return decision

    async def run_cycle(self) -> CycleSummary:
        """Process every pool once."""
        summary = CycleSummary()
        pools = await self.backend.get_all_pools()
        summary.total = len(pools)

        for pool in pools:
            if pool.pool_address is None:
                summary.skipped += 1
                continue

            try:
                decision = await self.check_and_rebalance(pool)
            except Exception as e:
                summary.failed += 1
                logger.exception(f"Error processing pool {pool.pool_address}: {e}")
                continue

            summary.processed += 1
            if decision is not None:
                summary.rebalanced += 1

        self.cycles += 1
        logger.info(
            f"Cycle {self.cycles} complete: {summary.processed}/{summary.total} processed, "
            f"{summary.rebalanced} rebalanced, {summary.skipped} skipped, {summary.failed} failed"
        )
        return summary

    async def run(self) -> None:
        """Run cycles until stop() is called."""
        self._running = True
        logger.info("Monitor started")

        try:
            while self._running:
                try:
                    await self.run_cycle()
                except Exception as e:
                    logger.exception(f"Error in monitor cycle: {e}")

                if not self._running:
                    break

                logger.debug(f"Next cycle in {self.interval_seconds}s")

                # Sleep in short steps for clean shutdown
                waited = 0.0
                while waited < self.interval_seconds and self._running:
                    step = min(self.sleep_step_seconds, self.interval_seconds - waited)
                    await self._sleep(step)
                    waited += step

        except asyncio.CancelledError:
            logger.info("Monitor cancelled")
        finally:
            self._running = False
