import asyncio

import pytest

from deepbook_sdk.bcs import encode_bool, encode_option, encode_u64, encode_u128, encode_vector
from deepbook_sdk.client import DeepBookClient, DeepBookClientError, SimulationError
from deepbook_sdk.config import ConfigError
from deepbook_sdk.constants import GAS_BUDGET
from deepbook_sdk.ledger import Confirmation, DevInspectResponse, SignedTransaction
from deepbook_sdk.models import Balances
from deepbook_sdk.rpc import RpcTransportError
from deepbook_sdk.submitter import TransactionSubmitter
from deepbook_sdk.transaction import ObjectRef, PendingTransaction, build_transaction_data

from deepbook_sdk.tests.fakes import SENDER, FakeLedger, digest, make_config, object_id


def _client(**kwargs):
    ledger = FakeLedger()
    ledger.add_deepbook_objects()
    return DeepBookClient(make_config(), ledger, ledger, **kwargs), ledger


def _balances(*values):
    return b"".join(encode_u64(v) for v in values)


def test_simulate_returns_last_result_and_sends_kind_bytes():
    client, ledger = _client()
    ledger.respond_with(encode_u64(9))
    tx = PendingTransaction()
    asyncio.run(client.deep_book.mid_price(tx, "DEEP_SUI"))

    expected = PendingTransaction()
    asyncio.run(client.deep_book.mid_price(expected, "DEEP_SUI"))

    result = asyncio.run(client.simulate(tx))
    assert result.values == (encode_u64(9),)
    kind, sender = ledger.inspected[0]
    assert kind == expected.finish().kind_bytes()
    assert sender == SENDER
    assert tx.sealed


def test_simulate_failure():
    client, ledger = _client()
    ledger.inspect_response = DevInspectResponse("failure", "MoveAbort(3)", ())
    tx = PendingTransaction()
    asyncio.run(client.deep_book.mid_price(tx, "DEEP_SUI"))

    with pytest.raises(SimulationError, match="MoveAbort"):
        asyncio.run(client.simulate(tx))


def test_simulate_without_results():
    client, ledger = _client()
    ledger.inspect_response = DevInspectResponse("success", None, ())
    tx = PendingTransaction()
    asyncio.run(client.deep_book.mid_price(tx, "DEEP_SUI"))

    with pytest.raises(SimulationError, match="No results"):
        asyncio.run(client.simulate(tx))


def test_simulate_empty_transaction():
    client, _ = _client()
    with pytest.raises(SimulationError):
        asyncio.run(client.simulate(PendingTransaction()))


def test_simulate_transport_failure():
    client, ledger = _client()

    async def unreachable(tx_kind, sender):
        raise RpcTransportError("sui_devInspectTransactionBlock failed: timed out")

    ledger.dev_inspect = unreachable
    tx = PendingTransaction()
    asyncio.run(client.deep_book.mid_price(tx, "DEEP_SUI"))
    with pytest.raises(SimulationError, match="timed out"):
        asyncio.run(client.simulate(tx))


def test_mid_price_is_decoded():
    client, ledger = _client()
    ledger.respond_with(encode_u64(10_000_000_000))
    assert asyncio.run(client.mid_price("DEEP_SUI")) == pytest.approx(0.01)


def test_check_manager_balance():
    client, ledger = _client()
    ledger.respond_with(encode_u64(2_500_000_000))
    coin_type, balance = asyncio.run(client.check_manager_balance("MANAGER_1", "SUI"))
    assert coin_type == client.config.get_coin("SUI").coin_type
    assert balance == 2.5


def test_read_errors_are_wrapped():
    client, ledger = _client()
    ledger.respond_with(encode_u64(1), encode_u64(2))
    with pytest.raises(DeepBookClientError, match="expected 1 return values, got 2"):
        asyncio.run(client.mid_price("DEEP_SUI"))

    ledger.inspect_response = DevInspectResponse("failure", "MoveAbort(1)", ())
    with pytest.raises(DeepBookClientError):
        asyncio.run(client.whitelisted("DEEP_SUI"))

    with pytest.raises(DeepBookClientError, match="Pool not found"):
        asyncio.run(client.mid_price("NOPE"))


def test_unreachable_ledger_is_wrapped():
    client, ledger = _client()
    ledger.fail_queries = True
    with pytest.raises(DeepBookClientError):
        asyncio.run(client.get_manager_owner("MANAGER_1"))


def test_account_is_decoded():
    client, ledger = _client()
    raw = (
        encode_u64(5)
        + encode_vector([1, 2**100], encode_u128)
        + encode_u128(100)
        + encode_u128(200)
        + encode_u64(3)
        + encode_u64(0)
        + encode_bool(True)
        + encode_option(None, encode_u64)
        + _balances(1, 2, 3)
        + _balances(4, 5, 6)
        + _balances(7, 8, 9)
    )
    ledger.respond_with(raw)
    account = asyncio.run(client.account("DEEP_SUI", "MANAGER_1"))

    assert account.epoch == 5
    assert account.open_orders == [1, 2**100]
    assert account.created_proposal is True
    assert account.voted_proposal is None
    assert account.owed_balances == Balances(7, 8, 9)


def test_quantity_out():
    client, ledger = _client()
    ledger.respond_with(encode_u64(0), encode_u64(20_000_000), encode_u64(1_500_000))
    out = asyncio.run(client.get_quote_quantity_out("SUI_USDC", 10))

    assert out.base_quantity == 10
    assert out.quote_quantity == 0.0
    assert out.quote_out == 20.0
    assert out.deep_required == 1.5


def test_pool_deep_price_for_base_and_quote():
    client, ledger = _client()
    ledger.respond_with(encode_bool(True) + encode_u64(2_000_000_000))
    price = asyncio.run(client.get_pool_deep_price("DEEP_SUI"))
    assert price.asset_is_base
    assert price.deep_per_base == pytest.approx(2.0)
    assert price.deep_per_quote is None

    ledger.respond_with(encode_bool(False) + encode_u64(500_000_000))
    price = asyncio.run(client.get_pool_deep_price("DEEP_SUI"))
    assert price.deep_per_quote == pytest.approx(500.0)


def test_level2_range_is_rescaled():
    client, ledger = _client()
    ledger.respond_with(
        encode_vector([10_000_000_000], encode_u64),
        encode_vector([3_000_000], encode_u64),
    )
    level2 = asyncio.run(client.get_level2_range("DEEP_SUI", 0.01, 0.02, True))
    assert level2.prices == [pytest.approx(0.01)]
    assert level2.quantities == [3.0]


def test_pool_trade_params():
    client, ledger = _client()
    ledger.respond_with(encode_u64(1_000_000), encode_u64(500_000), encode_u64(100_000_000))
    params = asyncio.run(client.pool_trade_params("DEEP_SUI"))
    assert params.taker_fee == pytest.approx(0.001)
    assert params.maker_fee == pytest.approx(0.0005)
    assert params.stake_required == 100.0


def _simple_tx():
    tx = PendingTransaction()
    tx.split_coin(tx.gas, tx.pure_u64(1))
    return tx


def test_build_transaction_data_fetches_gas_price():
    client, ledger = _client()
    client.gas_prices = ledger
    gas = [ObjectRef(object_id(1), 2, digest(4))]

    data = asyncio.run(client.build_transaction_data(_simple_tx(), gas))
    expected = build_transaction_data(_simple_tx().finish(), SENDER, gas, 750, GAS_BUDGET)
    assert data == expected


def test_build_transaction_data_needs_price_source():
    client, _ = _client()
    gas = [ObjectRef(object_id(1), 2, digest(4))]
    with pytest.raises(DeepBookClientError):
        asyncio.run(client.build_transaction_data(_simple_tx(), gas))

    data = asyncio.run(client.build_transaction_data(_simple_tx(), gas, gas_price=1000))
    assert data[-17:-9] == encode_u64(1000)


def test_submit_delegates_to_submitter():
    ledger = FakeLedger()
    ledger.outcomes = [Confirmation("Dg1", "success")]
    client = DeepBookClient(make_config(), ledger, ledger, submitter=TransactionSubmitter(ledger))

    confirmation = asyncio.run(client.submit(SignedTransaction("AAAA", ("sig",))))
    assert confirmation.digest == "Dg1"


def test_submit_without_submitter():
    client, _ = _client()
    with pytest.raises(DeepBookClientError):
        asyncio.run(client.submit(SignedTransaction("AAAA", ("sig",))))


def test_connect_builds_rpc_backed_client():
    async def go():
        async with DeepBookClient.connect("testnet", SENDER) as client:
            assert client.ledger is client.simulator is client.gas_prices
            assert client.submitter is not None
            assert client.submitter.max_attempts == 5

    asyncio.run(go())


def test_connect_rejects_unknown_environment():
    with pytest.raises(ConfigError):
        DeepBookClient.connect("localnet", SENDER)
