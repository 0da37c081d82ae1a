"""Tests for transaction models."""


def make_status(p0: float, p1: float):
    from keeper.models import TokenStatus

    return [
        TokenStatus(token_name="Token0", token_percentage=p0),
        TokenStatus(token_name="Token1", token_percentage=p1),
    ]


def test_report_payload_shape():
    from keeper.models import ActionType, TransactionReport

    report = TransactionReport(
        action=ActionType.REBALANCE,
        tx_hash="0xdeadbeef",
        pool_address="0xpool",
        user_wallet_address="0xuser",
        before=make_status(60, 40),
        after=make_status(50, 50),
    )

    payload = report.to_payload()

    assert payload == {
        "type": "rebalance",
        "txHash": "0xdeadbeef",
        "description": "Automatic rebalancing completed",
        "tokenBefore": [
            {"tokenName": "Token0", "tokenPercentage": 60},
            {"tokenName": "Token1", "tokenPercentage": 40},
        ],
        "tokenAfter": [
            {"tokenName": "Token0", "tokenPercentage": 50},
            {"tokenName": "Token1", "tokenPercentage": 50},
        ],
        "amount": 0,
        "userId": "0xuser",
        "poolId": "0xpool",
    }


def test_report_error_action_label():
    from keeper.models import ActionType, TransactionReport

    report = TransactionReport(
        action=ActionType.ERROR,
        tx_hash="0x1",
        pool_address="0xpool",
        user_wallet_address=None,
        before=make_status(0, 0),
        after=make_status(0, 0),
    )

    assert report.to_payload()["type"] == "error"


def test_rebalance_result_submitted():
    from keeper.models import RebalanceResult

    assert RebalanceResult(tx_id="0x1", status="submitted").submitted
    assert not RebalanceResult(tx_id=None, status="rejected", message="x").submitted
