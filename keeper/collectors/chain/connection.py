"""TRON node connection manager using tronpy."""
import logging

from tronpy import AsyncTron
from tronpy.keys import PrivateKey, is_base58check_address
from tronpy.providers.async_http import AsyncHTTPProvider

logger = logging.getLogger(__name__)


class ChainConnection:
    """Manages the connection to a TRON full node and the signing key.

    One instance is built at startup and passed to every component that
    reads or writes contract state.

    Attributes:
        full_node: HTTP API endpoint of the full node
    """

    def __init__(
        self,
        full_node: str,
        private_key: str,
        api_key: str | None = None,
        request_timeout: float = 30.0,
    ):
        """Initialize connection manager.

        Args:
            full_node: Full node HTTP API, e.g. https://nile.trongrid.io
            private_key: Hex private key used to sign transactions
            api_key: Optional TronGrid API key
            request_timeout: Per-request timeout in seconds
        """
        self.full_node = full_node
        self._key = PrivateKey(bytes.fromhex(private_key.removeprefix("0x")))
        self._client = AsyncTron(
            provider=AsyncHTTPProvider(full_node, timeout=request_timeout, api_key=api_key)
        )
        self._connected = False

        logger.debug(
            "INIT: ChainConnection initialized",
            extra={
                "extra_data": {
                    "action": "connection_init",
                    "full_node": full_node,
                    "address": self.address,
                }
            },
        )

    @property
    def client(self) -> AsyncTron:
        """Get the underlying tronpy client."""
        return self._client

    @property
    def address(self) -> str:
        """Base58 address of the signing account."""
        return self._key.public_key.to_base58check_address()

    def is_connected(self) -> bool:
        """Check if the last connect() reached the node."""
        return self._connected

    async def connect(self) -> bool:
        """Check that the node is reachable by reading the latest block.

        Returns:
            True if the node answered
        """
        logger.info(f"Connecting to TRON node at {self.full_node}...")

        try:
            block_number = await self._client.get_latest_block_number()
        except Exception as e:
            logger.error(f"Failed to connect to TRON node: {e}")
            self._connected = False
            return False

        self._connected = True
        logger.info(f"Connected to TRON node at block {block_number} (signer={self.address})")
        return True

    async def disconnect(self) -> None:
        """Close the node HTTP client."""
        logger.info("Disconnecting from TRON node...")
        await self._client.close()
        self._connected = False
        logger.info("Disconnected from TRON node")

    async def contract(self, address: str):
        """Bind the contract at a base58 ``address``, loading its ABI from chain.

        Raises:
            ValueError: If ``address`` is not a base58check TRON address
        """
        if not is_base58check_address(address):
            raise ValueError(f"Not a TRON base58 address: {address!r}")
        return await self._client.get_contract(address)

    async def send_transaction(self, method, fee_limit: int, call_value: int = 0) -> str:
        """Build, sign and broadcast a state-changing contract call.

        Args:
            method: Contract method (e.g. ``contract.functions.rebalance``)
            fee_limit: Maximum fee in SUN the call may burn
            call_value: TRX in SUN sent with the call (payable methods only)

        Returns:
            Transaction id
        """
        if call_value:
            method = method.with_transfer(call_value)

        builder = await method()
        txn = await builder.with_owner(self.address).fee_limit(fee_limit).build()
        result = await txn.sign(self._key).broadcast()

        logger.debug(
            "STEP: Transaction broadcast",
            extra={"extra_data": {"action": "send_transaction", "fee_limit": fee_limit, "result": dict(result)}},
        )
        return result["txid"]
