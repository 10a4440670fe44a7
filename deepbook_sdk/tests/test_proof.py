import asyncio

import pytest

from deepbook_sdk.config import ConfigError
from deepbook_sdk.proof import OwnerProof, ProofSelector, TraderProof, select_strategy
from deepbook_sdk.resolver import ObjectResolver
from deepbook_sdk.transaction import Input, MoveCall, PendingTransaction, Result

from deepbook_sdk.tests.fakes import (
    MANAGER_ID,
    TRADE_CAP_ID,
    TRADER_MANAGER_ID,
    FakeLedger,
    make_config,
)


def _selector():
    ledger = FakeLedger()
    ledger.add_deepbook_objects()
    config = make_config()
    return config, ProofSelector(config, ObjectResolver(ledger))


def test_select_strategy():
    assert select_strategy("0x1", None) == OwnerProof("0x1")
    assert select_strategy("0x1", "0x2") == TraderProof("0x1", "0x2")


def test_strategy_is_fixed_per_manager_key():
    _, selector = _selector()
    assert selector.strategy("MANAGER_1") == OwnerProof(MANAGER_ID)
    assert selector.strategy("TRADER_1") == TraderProof(TRADER_MANAGER_ID, TRADE_CAP_ID)
    with pytest.raises(ConfigError):
        selector.strategy("UNKNOWN")


def test_owner_proof_uses_manager_only():
    config, selector = _selector()
    tx = PendingTransaction()
    proof = asyncio.run(selector.generate_proof(tx, "MANAGER_1"))

    assert proof == Result(0)
    call = tx.commands[0]
    assert isinstance(call, MoveCall)
    assert call.target == config.target("balance_manager", "generate_proof_as_owner")
    assert call.arguments == (Input(0),)


def test_trader_proof_passes_trade_cap():
    config, selector = _selector()
    tx = PendingTransaction()
    asyncio.run(selector.generate_proof(tx, "TRADER_1"))

    call = tx.commands[0]
    assert call.target == config.target("balance_manager", "generate_proof_as_trader")
    assert call.arguments == (Input(0), Input(1))
    assert tx.inputs[1].object_id == TRADE_CAP_ID


def test_generate_proof_reuses_registered_manager():
    _, selector = _selector()
    tx = PendingTransaction()
    manager = tx.pure_u64(0)
    asyncio.run(selector.generate_proof(tx, "MANAGER_1", manager))
    assert len(tx.inputs) == 1
    assert tx.commands[0].arguments == (manager,)
