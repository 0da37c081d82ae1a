"""Typed async wrapper around a deployed pool contract."""
import logging

from keeper.collectors.chain.connection import ChainConnection
from keeper.collectors.chain.parsers import (
    from_base_units,
    parse_prices,
    parse_token_balance_in_usd,
)

logger = logging.getLogger(__name__)


class PoolContract:
    """One pool contract bound to a chain connection.

    The contract (and its ABI) is loaded from chain on first use. Values
    returned in SUN-style base units (prices, initial values, total value)
    are converted to whole units using ``value_decimals``.
    """

    def __init__(
        self,
        connection: ChainConnection,
        address: str,
        value_decimals: int = 6,
        fee_limit: int = 1_000_000_000,
        call_value: int = 0,
    ):
        self.connection = connection
        self.address = address
        self.value_decimals = value_decimals
        self.fee_limit = fee_limit
        self.call_value = call_value
        self._contract = None

    async def functions(self):
        """Contract functions, binding the contract on first call."""
        if self._contract is None:
            self._contract = await self.connection.contract(self.address)
        return self._contract.functions

    async def time_period(self) -> int:
        """Minimum seconds between rebalances."""
        functions = await self.functions()
        return int(await functions.timePeriod())

    async def last_checked(self) -> int:
        """Epoch seconds of the last rebalance."""
        functions = await self.functions()
        return int(await functions.lastChecked())

    async def tokens(self, index: int) -> str:
        functions = await self.functions()
        return await functions.tokens(index)

    async def fetch_prices(self) -> tuple[float, float]:
        functions = await self.functions()
        return parse_prices(await functions.fetchPrices(), self.value_decimals)

    async def initial_token_values(self, index: int) -> float:
        functions = await self.functions()
        return from_base_units(await functions.initialTokenValues(index), self.value_decimals)

    async def get_token_balance_in_usd(self) -> tuple[float, list[int]]:
        """Total value in USD and per-token proportions in basis points."""
        functions = await self.functions()
        raw = await functions.getTokenBalanceInUSD()
        return parse_token_balance_in_usd(raw, self.value_decimals)

    async def rebalance(self) -> str:
        """Broadcast the rebalance transaction and return its id."""
        logger.info(f"Sending rebalance for pool {self.address}")
        functions = await self.functions()
        return await self.connection.send_transaction(
            functions.rebalance,
            fee_limit=self.fee_limit,
            call_value=self.call_value,
        )
