import base58
import pytest

from deepbook_sdk.bcs import encode_address, encode_u64
from deepbook_sdk.transaction import (
    GasCoin,
    Input,
    MergeCoins,
    MoveCall,
    NestedResult,
    ObjectRef,
    OwnedObjectArg,
    PendingTransaction,
    PureArg,
    Result,
    SharedObjectArg,
    SplitCoins,
    TransactionBuildError,
    TransferObjects,
    build_transaction_data,
    clock_arg,
)

from deepbook_sdk.tests.fakes import SENDER, digest


PACKAGE = "0x" + "d" * 64


def test_inputs_are_positional_and_never_deduplicated():
    tx = PendingTransaction()
    first = tx.pure_u64(5)
    second = tx.pure_u64(5)
    assert (first, second) == (Input(0), Input(1))
    assert tx.inputs == (PureArg(encode_u64(5)), PureArg(encode_u64(5)))


def test_command_returns_result_for_its_position():
    tx = PendingTransaction()
    amount = tx.pure_u64(10)
    split = tx.split_coin(tx.gas, amount)
    assert split == Result(0)
    assert tx.commands == (SplitCoins(GasCoin(), (Input(0),)),)


def test_nested_results_stable_after_appending_commands():
    tx = PendingTransaction()
    pool = tx.pure_u64(1)
    loan = tx.move_call_multi(f"{PACKAGE}::pool::borrow_flashloan_base", 2, [pool])
    coin, receipt = loan[0], loan[1]
    assert (coin, receipt) == (NestedResult(0, 0), NestedResult(0, 1))

    tx.move_call(f"{PACKAGE}::pool::noop")
    tx.transfer_objects([coin], SENDER)

    assert loan[0] == NestedResult(0, 0)
    assert loan[1] == NestedResult(0, 1)
    assert coin != receipt
    transfer = tx.commands[-1]
    assert isinstance(transfer, TransferObjects)
    assert transfer.objects == (NestedResult(0, 0),)


def test_multi_result_rejects_out_of_range_output():
    tx = PendingTransaction()
    loan = tx.move_call_multi(f"{PACKAGE}::pool::borrow", 2)
    with pytest.raises(IndexError):
        loan[2]
    assert list(loan) == [NestedResult(0, 0), NestedResult(0, 1)]


def test_result_of_multi_output_command_is_rejected():
    tx = PendingTransaction()
    tx.move_call_multi(f"{PACKAGE}::pool::borrow", 2)
    with pytest.raises(TransactionBuildError):
        tx.transfer_objects([Result(0)], SENDER)


def test_nested_result_beyond_declared_outputs_is_rejected():
    tx = PendingTransaction()
    tx.move_call_multi(f"{PACKAGE}::pool::borrow", 2)
    with pytest.raises(TransactionBuildError):
        tx.merge_coins(NestedResult(0, 0), [NestedResult(0, 2)])


def test_references_to_missing_inputs_or_commands_are_rejected():
    tx = PendingTransaction()
    with pytest.raises(TransactionBuildError):
        tx.split_coin(Input(0), Input(0))
    amount = tx.pure_u64(1)
    with pytest.raises(TransactionBuildError):
        tx.split_coin(Result(0), amount)


def test_arguments_from_another_transaction_are_rejected():
    other = PendingTransaction()
    foreign = other.pure_u64(1)
    tx = PendingTransaction()
    tx.pure_u64(2)
    with pytest.raises(TransactionBuildError):
        tx.split_coin(tx.gas, foreign)


def test_finish_seals_the_transaction():
    tx = PendingTransaction()
    tx.split_coin(tx.gas, tx.pure_u64(1))
    sealed = tx.finish()
    assert tx.sealed
    assert len(sealed.commands) == 1
    with pytest.raises(TransactionBuildError):
        tx.pure_u64(2)
    with pytest.raises(TransactionBuildError):
        tx.move_call(f"{PACKAGE}::pool::noop")
    with pytest.raises(TransactionBuildError):
        tx.finish()


def test_merge_requires_sources():
    tx = PendingTransaction()
    coin = tx.pure_u64(1)
    with pytest.raises(TransactionBuildError):
        tx.merge_coins(coin, [])


def test_move_call_parses_target_and_type_arguments():
    tx = PendingTransaction()
    tx.move_call("0x2::coin::zero", type_arguments=["0x2::sui::SUI"])
    call = tx.commands[0]
    assert isinstance(call, MoveCall)
    assert call.target == "0x" + "0" * 63 + "2::coin::zero"
    assert str(call.type_arguments[0]) == "0x" + "0" * 63 + "2::sui::SUI"
    with pytest.raises(TransactionBuildError):
        tx.move_call("coin::zero")


def test_pure_helpers_reject_out_of_range_values():
    tx = PendingTransaction()
    with pytest.raises(TransactionBuildError):
        tx.pure_u8(300)
    with pytest.raises(TransactionBuildError):
        tx.pure_u64(-1)
    assert tx.inputs == ()


def test_shared_and_owned_object_encoding():
    shared = SharedObjectArg("0x6", 1, False)
    assert shared == clock_arg()
    assert shared.to_bcs() == b"\x01\x01" + encode_address("0x6") + encode_u64(1) + b"\x00"

    ref = ObjectRef("0x" + "c" * 64, 9, digest(4))
    owned = OwnedObjectArg(ref)
    assert owned.to_bcs() == (
        b"\x01\x00" + encode_address(ref.object_id) + encode_u64(9) + b"\x20" + bytes([4]) * 32
    )


def test_object_ref_rejects_bad_digest():
    short = base58.b58encode(b"\x01" * 10).decode("ascii")
    with pytest.raises(TransactionBuildError):
        ObjectRef("0x1", 1, short).to_bcs()


def test_programmable_transaction_bcs():
    tx = PendingTransaction()
    coin = tx.split_coin(tx.gas, tx.pure_u64(7))
    tx.transfer_objects([coin], SENDER)
    sealed = tx.finish()

    expected = (
        b"\x02"
        + b"\x00\x08" + encode_u64(7)
        + b"\x00\x20" + encode_address(SENDER)
        + b"\x02"
        + b"\x02" + b"\x00" + b"\x01" + b"\x01\x00\x00"
        + b"\x01" + b"\x01" + b"\x02\x00\x00" + b"\x01\x01\x00"
    )
    assert sealed.to_bcs() == expected
    assert sealed.kind_bytes() == b"\x00" + expected


def test_build_transaction_data_layout():
    tx = PendingTransaction()
    tx.split_coin(tx.gas, tx.pure_u64(1))
    sealed = tx.finish()
    gas = ObjectRef("0x" + "e" * 64, 3, digest(6))

    data = build_transaction_data(sealed, SENDER, [gas], gas_price=750, gas_budget=1000)

    assert data.startswith(b"\x00" + sealed.kind_bytes() + encode_address(SENDER))
    assert data.endswith(
        b"\x01" + gas.to_bcs() + encode_address(SENDER) + encode_u64(750) + encode_u64(1000) + b"\x00"
    )
    with pytest.raises(TransactionBuildError):
        build_transaction_data(sealed, SENDER, [], gas_price=750, gas_budget=1000)


def test_merge_coins_command_shape():
    tx = PendingTransaction()
    a = tx.pure_u64(1)
    b = tx.pure_u64(2)
    tx.merge_coins(a, [b])
    assert tx.commands == (MergeCoins(Input(0), (Input(1),)),)
