"""Orchestrator for wiring and managing all components."""
import asyncio
import functools
import logging
from typing import Any

from keeper.collectors.backend.client import BackendClient
from keeper.collectors.chain.connection import ChainConnection
from keeper.collectors.chain.pool_contract import PoolContract
from keeper.core.config import Config
from keeper.core.execution_engine import RebalanceExecutor
from keeper.core.monitor import PoolMonitor
from keeper.strategies import ActionClassifier

logger = logging.getLogger(__name__)


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Log unhandled asyncio errors without stopping the loop."""
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error(f"Unhandled exception: {message}", exc_info=exc)
    else:
        logger.error(f"Unhandled event loop error: {message}")


class Orchestrator:
    """Wires all components together and manages lifecycle.

    Responsibilities:
    1. Initialize chain connection and backend client
    2. Build the classifier, executor and monitor
    3. Manage startup and shutdown
    """

    def __init__(self, config: Config):
        """Initialize the orchestrator.

        Args:
            config: System configuration
        """
        self.config = config
        self._running = False
        self._loop: asyncio.AbstractEventLoop | None = None

        self.connection = ChainConnection(
            full_node=config.chain.full_node,
            private_key=config.chain.private_key,
            api_key=config.chain.api_key,
        )
        self.backend = BackendClient(
            base_url=config.backend.base_url,
            timeout_seconds=config.backend.timeout_seconds,
        )
        self.classifier = ActionClassifier()
        self.executor = RebalanceExecutor(self.connection)

        self.monitor = PoolMonitor(
            backend=self.backend,
            classifier=self.classifier,
            executor=self.executor,
            contract_factory=self.make_contract,
            interval_seconds=config.monitor.interval_seconds,
            sleep_step_seconds=config.monitor.sleep_step_seconds,
        )

        logger.info("Orchestrator initialized")

    @property
    def is_running(self) -> bool:
        """Check if orchestrator is currently running."""
        return self._running

    def make_contract(self, address: str) -> PoolContract:
        """Bind a pool contract using the configured chain settings."""
        return PoolContract(
            self.connection,
            address,
            value_decimals=self.config.chain.value_decimals,
            fee_limit=self.config.chain.fee_limit,
            call_value=self.config.chain.call_value,
        )

    async def _run_async(self, once: bool = False) -> None:
        """Run the orchestrator asynchronously.

        Args:
            once: Run a single monitoring cycle instead of the poll loop
        """
        asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

        connected = await self.connection.connect()
        if not connected:
            logger.error(f"Failed to connect to TRON node at {self.config.chain.full_node}")
            return

        try:
            if once:
                summary = await self.monitor.run_cycle()
                logger.info(f"Single cycle finished: {summary}")
            else:
                logger.info("Starting pool monitor...")
                await self.monitor.run()
        except asyncio.CancelledError:
            logger.info("Orchestrator cancelled")
        finally:
            await self.connection.disconnect()

    def start(self, once: bool = False) -> None:
        """Start the orchestrator and all components.

        This method blocks until stop() is called, or until the single
        cycle finishes when ``once`` is set.
        """
        logger.info("Starting orchestrator...")
        self._running = True

        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)

        try:
            self._loop.run_until_complete(self._run_async(once=once))
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self._running = False
            self._loop.close()
            asyncio.set_event_loop(None)
            logger.info("Orchestrator stopped")

    def stop(self) -> None:
        """Stop the monitor after the current step."""
        logger.info("Stopping orchestrator...")
        self._running = False
        self.monitor.stop()
