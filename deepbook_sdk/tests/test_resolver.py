import asyncio

import pytest

from deepbook_sdk.resolver import (
    ObjectNotFoundError,
    ObjectResolver,
    ResolutionError,
    ResolutionTransportError,
)
from deepbook_sdk.transaction import ObjectRef, OwnedObjectArg, SharedObjectArg

from deepbook_sdk.tests.fakes import FakeLedger, POOL_ID, TRADE_CAP_ID, digest


def test_shared_object_resolves_to_shared_reference():
    ledger = FakeLedger()
    ledger.add_shared(POOL_ID, initial_shared_version=11)
    resolved = asyncio.run(ObjectResolver(ledger).resolve(POOL_ID))
    assert resolved == SharedObjectArg(POOL_ID, 11, True)


def test_shared_object_read_only():
    ledger = FakeLedger()
    ledger.add_shared(POOL_ID, initial_shared_version=11)
    resolved = asyncio.run(ObjectResolver(ledger).resolve(POOL_ID, mutable=False))
    assert resolved.mutable is False


def test_owned_object_resolves_to_exact_version():
    ledger = FakeLedger()
    ledger.add_owned(TRADE_CAP_ID, version=4, seed=5)
    resolved = asyncio.run(ObjectResolver(ledger).resolve(TRADE_CAP_ID))
    assert resolved == OwnedObjectArg(ObjectRef(TRADE_CAP_ID, 4, digest(5)))


def test_short_ids_are_normalized_before_lookup():
    ledger = FakeLedger()
    ledger.add_owned("0xabc", version=2)
    resolved = asyncio.run(ObjectResolver(ledger).resolve("0xABC"))
    assert resolved.object_id == "0x" + "0" * 61 + "abc"


def test_resolution_is_never_cached():
    ledger = FakeLedger()
    ledger.add_owned(TRADE_CAP_ID, version=4)
    resolver = ObjectResolver(ledger)
    asyncio.run(resolver.resolve(TRADE_CAP_ID))
    ledger.add_owned(TRADE_CAP_ID, version=5)
    assert asyncio.run(resolver.resolve(TRADE_CAP_ID)).ref.version == 5


def test_missing_object_raises_not_found():
    with pytest.raises(ObjectNotFoundError):
        asyncio.run(ObjectResolver(FakeLedger()).resolve(POOL_ID))


def test_transport_failure_is_typed():
    ledger = FakeLedger()
    ledger.fail_queries = True
    with pytest.raises(ResolutionTransportError):
        asyncio.run(ObjectResolver(ledger).resolve(POOL_ID))


def test_invalid_id_is_rejected():
    with pytest.raises(ResolutionError):
        asyncio.run(ObjectResolver(FakeLedger()).resolve("pool"))
