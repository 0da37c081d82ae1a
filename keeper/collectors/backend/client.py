"""Backend API client for pool records and transaction reports."""
import logging
from typing import Any

import aiohttp

from keeper.models import PoolConfig, TransactionReport

logger = logging.getLogger(__name__)

POOLS_PATH = "/api/pools/get-all-pools"
TRANSACTIONS_PATH = "/api/pools/transactions/create"


class BackendClient:
    """Reads pool configurations from and posts rebalance results to the backend.

    Every call catches its own failures: a failed read yields an empty
    pool list and a failed report is logged and returns False.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 30.0):
        """Initialize backend client.

        Args:
            base_url: Backend root URL, e.g. http://localhost:3000
            timeout_seconds: Total timeout for each request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.timeout_seconds)

    async def _fetch_pool_records(self) -> list[dict[str, Any]]:
        url = f"{self.base_url}{POOLS_PATH}"

        async with aiohttp.ClientSession(timeout=self._timeout()) as session:
            async with session.get(url) as response:
                if response.status < 200 or response.status >= 300:
                    raise Exception(f"HTTP error! status: {response.status}")

                body = await response.json(content_type=None)

        if not isinstance(body, list):
            raise Exception(f"Expected a list of pools, got {type(body).__name__}")
        return body

    async def get_all_pools(self) -> list[PoolConfig]:
        """Fetch all pool configurations.

        Returns:
            Parsed pools, or an empty list if the request fails. Entries
            that cannot be parsed are dropped.
        """
        try:
            records = await self._fetch_pool_records()
        except Exception as e:
            logger.error(f"Error fetching pools from API: {e}")
            return []

        pools = []
        for record in records:
            try:
                pools.append(PoolConfig.from_dict(record))
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.warning(f"Skipping malformed pool record {record.get('poolAddress') if isinstance(record, dict) else record!r}: {e}")

        logger.info(f"Fetched {len(pools)} pools from backend")
        return pools

    async def post_transaction(self, report: TransactionReport) -> bool:
        """Post a rebalance report.

        Args:
            report: Before/after status and action for one pool

        Returns:
            True if the backend answered 201 Created
        """
        url = f"{self.base_url}{TRANSACTIONS_PATH}"
        payload = report.to_payload()
        logger.debug(
            "STEP: Posting transaction report",
            extra={"extra_data": {"action": "post_transaction", "payload": payload}},
        )

        try:
            async with aiohttp.ClientSession(timeout=self._timeout()) as session:
                async with session.post(url, json=payload) as response:
                    if response.status != 201:
                        raise Exception(f"HTTP error! status: {response.status}")
                    body = await response.json(content_type=None)
        except Exception as e:
            logger.error(f"Error posting transaction status for pool {report.pool_address}: {e}")
            return False

        logger.info(f"Transaction status posted for pool {report.pool_address}: {body}")
        return True
