"""Tests for the TRON connection manager."""
from unittest.mock import AsyncMock, Mock, patch

import pytest

# Well-known test key, never funded on a real chain
TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
POOL_ADDRESS = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
FULL_NODE = "https://nile.trongrid.io"


@pytest.fixture
def conn():
    from keeper.collectors.chain.connection import ChainConnection

    return ChainConnection(full_node=FULL_NODE, private_key=TEST_KEY)


def test_connection_init(conn):
    from tronpy.keys import is_base58check_address

    assert conn.full_node == FULL_NODE
    assert conn.address.startswith("T")
    assert is_base58check_address(conn.address)
    assert not conn.is_connected()


def test_connection_accepts_key_without_prefix():
    from keeper.collectors.chain.connection import ChainConnection

    with_prefix = ChainConnection(full_node=FULL_NODE, private_key=TEST_KEY)
    without_prefix = ChainConnection(full_node=FULL_NODE, private_key=TEST_KEY[2:])

    assert with_prefix.address == without_prefix.address


def test_connection_rejects_bad_key():
    from keeper.collectors.chain.connection import ChainConnection

    with pytest.raises(ValueError):
        ChainConnection(full_node=FULL_NODE, private_key="not-a-key")


@pytest.mark.asyncio
async def test_connect_success(conn):
    with patch.object(conn._client, "get_latest_block_number", AsyncMock(return_value=51_000_000)):
        assert await conn.connect() is True

    assert conn.is_connected()


@pytest.mark.asyncio
async def test_connect_failure(conn):
    with patch.object(conn._client, "get_latest_block_number", AsyncMock(side_effect=OSError("refused"))):
        assert await conn.connect() is False

    assert not conn.is_connected()


@pytest.mark.asyncio
async def test_disconnect_closes_client(conn):
    conn._connected = True

    with patch.object(conn._client, "close", AsyncMock()) as close:
        await conn.disconnect()

    close.assert_awaited_once()
    assert not conn.is_connected()


@pytest.mark.asyncio
async def test_contract_binds_base58_address(conn):
    bound = Mock()

    with patch.object(conn._client, "get_contract", AsyncMock(return_value=bound)) as get_contract:
        contract = await conn.contract(POOL_ADDRESS)

    assert contract is bound
    get_contract.assert_awaited_once_with(POOL_ADDRESS)


@pytest.mark.asyncio
async def test_contract_rejects_hex_address(conn):
    with patch.object(conn._client, "get_contract", AsyncMock()) as get_contract:
        with pytest.raises(ValueError, match="base58"):
            await conn.contract("0x00000000000000000000000000000000000000aa")

    get_contract.assert_not_awaited()


def make_method(txid="c0ffee"):
    """Contract method whose builder chain ends in a broadcast result."""
    txn = Mock()
    txn.sign.return_value = txn
    txn.broadcast = AsyncMock(return_value={"result": True, "txid": txid})

    builder = Mock()
    builder.with_owner.return_value = builder
    builder.fee_limit.return_value = builder
    builder.build = AsyncMock(return_value=txn)

    method = AsyncMock(return_value=builder)
    return method, builder, txn


@pytest.mark.asyncio
async def test_send_transaction_signs_and_broadcasts(conn):
    method, builder, txn = make_method("c0ffee")

    txid = await conn.send_transaction(method, fee_limit=1_000_000_000)

    assert txid == "c0ffee"
    method.assert_awaited_once_with()
    builder.with_owner.assert_called_once_with(conn.address)
    builder.fee_limit.assert_called_once_with(1_000_000_000)
    txn.sign.assert_called_once_with(conn._key)
    txn.broadcast.assert_awaited_once()
    method.with_transfer.assert_not_called()


@pytest.mark.asyncio
async def test_send_transaction_with_call_value(conn):
    payable, builder, txn = make_method("beef")
    method = Mock()
    method.with_transfer.return_value = payable

    txid = await conn.send_transaction(method, fee_limit=10, call_value=5)

    assert txid == "beef"
    method.with_transfer.assert_called_once_with(5)
    payable.assert_awaited_once_with()
