"""Programmable transaction builder for DeepBook calls.

A transaction is an ordered list of inputs and an ordered list of commands.
Commands consume inputs and the outputs of earlier commands through
positional arguments; those arguments are only ever minted by the builder.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import base58

from .bcs import (
    BcsError,
    encode_address,
    encode_bool,
    encode_bytes,
    encode_option,
    encode_str,
    encode_u64,
    encode_u128,
    encode_u8,
    encode_u16,
    encode_uleb128,
    encode_vector,
)
from .type_tags import TypeTag, parse_type_tag
from .validation import MAX_U16, ValidationError, normalize_sui_address


CLOCK_OBJECT_ID = "0x6"
CLOCK_INITIAL_SHARED_VERSION = 1
DIGEST_LENGTH = 32

_builder_ids = itertools.count(1)


class TransactionBuildError(ValueError):
    """Raised when the builder is used in a way it can detect as invalid."""


@dataclass(frozen=True)
class ObjectRef:
    object_id: str
    version: int
    digest: str

    def to_bcs(self) -> bytes:
        try:
            raw_digest = base58.b58decode(self.digest)
        except ValueError as exc:
            raise TransactionBuildError(f"invalid object digest {self.digest!r}") from exc
        if len(raw_digest) != DIGEST_LENGTH:
            raise TransactionBuildError(
                f"object digest must decode to {DIGEST_LENGTH} bytes, got {len(raw_digest)}"
            )
        return encode_address(self.object_id) + encode_u64(self.version) + encode_bytes(raw_digest)


# Call arguments (transaction inputs)


@dataclass(frozen=True)
class PureArg:
    value: bytes

    def to_bcs(self) -> bytes:
        return encode_uleb128(0) + encode_bytes(self.value)


@dataclass(frozen=True)
class OwnedObjectArg:
    """An exclusively owned (or immutable) object pinned to an exact version."""

    ref: ObjectRef

    @property
    def object_id(self) -> str:
        return self.ref.object_id

    def to_bcs(self) -> bytes:
        return encode_uleb128(1) + encode_uleb128(0) + self.ref.to_bcs()


@dataclass(frozen=True)
class SharedObjectArg:
    """A shared object addressed by its initial shared version."""

    object_id: str
    initial_shared_version: int
    mutable: bool

    def to_bcs(self) -> bytes:
        return (
            encode_uleb128(1)
            + encode_uleb128(1)
            + encode_address(self.object_id)
            + encode_u64(self.initial_shared_version)
            + encode_bool(self.mutable)
        )


CallArg = Union[PureArg, OwnedObjectArg, SharedObjectArg]
ResolvedReference = Union[OwnedObjectArg, SharedObjectArg]


def clock_arg(mutable: bool = False) -> SharedObjectArg:
    return SharedObjectArg(CLOCK_OBJECT_ID, CLOCK_INITIAL_SHARED_VERSION, mutable)


# Arguments (positional references inside one transaction)


@dataclass(frozen=True)
class GasCoin:
    def to_bcs(self) -> bytes:
        return encode_uleb128(0)


@dataclass(frozen=True)
class Input:
    index: int
    origin: Optional[int] = field(default=None, compare=False, repr=False)

    def to_bcs(self) -> bytes:
        return encode_uleb128(1) + encode_u16(self.index)


@dataclass(frozen=True)
class Result:
    index: int
    origin: Optional[int] = field(default=None, compare=False, repr=False)

    def to_bcs(self) -> bytes:
        return encode_uleb128(2) + encode_u16(self.index)


@dataclass(frozen=True)
class NestedResult:
    index: int
    result_index: int
    origin: Optional[int] = field(default=None, compare=False, repr=False)

    def to_bcs(self) -> bytes:
        return encode_uleb128(3) + encode_u16(self.index) + encode_u16(self.result_index)


Argument = Union[GasCoin, Input, Result, NestedResult]


class MultiResult:
    """The outputs of a command that returns more than one value."""

    def __init__(self, index: int, count: int, origin: int):
        self.index = index
        self.count = count
        self._origin = origin

    def __getitem__(self, result_index: int) -> NestedResult:
        if not 0 <= result_index < self.count:
            raise IndexError(
                f"command {self.index} has {self.count} outputs, no output {result_index}"
            )
        return NestedResult(self.index, result_index, origin=self._origin)

    def __iter__(self) -> Iterator[NestedResult]:
        return (self[i] for i in range(self.count))

    def __len__(self) -> int:
        return self.count

    def __repr__(self) -> str:
        return f"MultiResult(index={self.index}, count={self.count})"


# Commands


def _encode_args(args: Sequence[Argument]) -> bytes:
    return encode_vector(args, lambda arg: arg.to_bcs())


@dataclass(frozen=True)
class MoveCall:
    package: str
    module: str
    function: str
    type_arguments: Tuple[TypeTag, ...] = ()
    arguments: Tuple[Argument, ...] = ()

    @property
    def target(self) -> str:
        return f"{self.package}::{self.module}::{self.function}"

    def referenced(self) -> Tuple[Argument, ...]:
        return self.arguments

    def to_bcs(self) -> bytes:
        return (
            encode_uleb128(0)
            + encode_address(self.package)
            + encode_str(self.module)
            + encode_str(self.function)
            + encode_vector(self.type_arguments, lambda tag: tag.to_bcs())
            + _encode_args(self.arguments)
        )


@dataclass(frozen=True)
class TransferObjects:
    objects: Tuple[Argument, ...]
    address: Argument

    def referenced(self) -> Tuple[Argument, ...]:
        return self.objects + (self.address,)

    def to_bcs(self) -> bytes:
        return encode_uleb128(1) + _encode_args(self.objects) + self.address.to_bcs()


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: Tuple[Argument, ...]

    def referenced(self) -> Tuple[Argument, ...]:
        return (self.coin,) + self.amounts

    def to_bcs(self) -> bytes:
        return encode_uleb128(2) + self.coin.to_bcs() + _encode_args(self.amounts)


@dataclass(frozen=True)
class MergeCoins:
    destination: Argument
    sources: Tuple[Argument, ...]

    def referenced(self) -> Tuple[Argument, ...]:
        return (self.destination,) + self.sources

    def to_bcs(self) -> bytes:
        return encode_uleb128(3) + self.destination.to_bcs() + _encode_args(self.sources)


@dataclass(frozen=True)
class MakeMoveVec:
    type_tag: Optional[TypeTag]
    elements: Tuple[Argument, ...]

    def referenced(self) -> Tuple[Argument, ...]:
        return self.elements

    def to_bcs(self) -> bytes:
        return (
            encode_uleb128(5)
            + encode_option(self.type_tag, lambda tag: tag.to_bcs())
            + _encode_args(self.elements)
        )


Command = Union[MoveCall, TransferObjects, SplitCoins, MergeCoins, MakeMoveVec]


@dataclass(frozen=True)
class ProgrammableTransaction:
    """Sealed, immutable transaction payload."""

    inputs: Tuple[CallArg, ...]
    commands: Tuple[Command, ...]

    def to_bcs(self) -> bytes:
        return encode_vector(self.inputs, lambda arg: arg.to_bcs()) + encode_vector(
            self.commands, lambda cmd: cmd.to_bcs()
        )

    def kind_bytes(self) -> bytes:
        """TransactionKind::ProgrammableTransaction, as dev-inspect expects it."""
        return encode_uleb128(0) + self.to_bcs()


class PendingTransaction:
    """Accumulates inputs and commands until sealed with ``finish``.

    One instance per in-flight transaction; it is not safe to share across
    concurrent tasks.
    """

    def __init__(self) -> None:
        self._id = next(_builder_ids)
        self._inputs: List[CallArg] = []
        self._commands: List[Command] = []
        self._output_counts: Dict[int, int] = {}
        self._sealed = False

    @property
    def inputs(self) -> Tuple[CallArg, ...]:
        return tuple(self._inputs)

    @property
    def commands(self) -> Tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def gas(self) -> GasCoin:
        return GasCoin()

    def _check_open(self) -> None:
        if self._sealed:
            raise TransactionBuildError("transaction is already finalized")

    def _check_argument(self, arg: Argument) -> None:
        if isinstance(arg, GasCoin):
            return
        if not isinstance(arg, (Input, Result, NestedResult)):
            raise TransactionBuildError(f"not a transaction argument: {arg!r}")
        if arg.origin is not None and arg.origin != self._id:
            raise TransactionBuildError(f"{arg!r} belongs to a different transaction")
        if isinstance(arg, Input):
            if arg.index >= len(self._inputs):
                raise TransactionBuildError(f"{arg!r} references a missing input")
            return
        if arg.index >= len(self._commands):
            raise TransactionBuildError(f"{arg!r} references a command not yet appended")
        count = self._output_counts.get(arg.index)
        if isinstance(arg, Result) and count is not None and count != 1:
            raise TransactionBuildError(
                f"command {arg.index} returns {count} values; use NestedResult"
            )
        if isinstance(arg, NestedResult) and count is not None and arg.result_index >= count:
            raise TransactionBuildError(
                f"command {arg.index} has {count} outputs, no output {arg.result_index}"
            )

    # Inputs

    def input(self, call_arg: CallArg) -> Input:
        """Register an input and return its positional reference.

        Registration never deduplicates: the same value registered twice
        occupies two input slots.
        """
        self._check_open()
        if not isinstance(call_arg, (PureArg, OwnedObjectArg, SharedObjectArg)):
            raise TransactionBuildError(f"not a call argument: {call_arg!r}")
        if len(self._inputs) > MAX_U16:
            raise TransactionBuildError("too many transaction inputs")
        self._inputs.append(call_arg)
        return Input(len(self._inputs) - 1, origin=self._id)

    def object(self, reference: ResolvedReference) -> Input:
        return self.input(reference)

    def pure(self, raw: bytes) -> Input:
        return self.input(PureArg(bytes(raw)))

    def _pure(self, encoder, value, name: str) -> Input:
        try:
            return self.pure(encoder(value))
        except BcsError as exc:
            raise TransactionBuildError(f"invalid {name} value: {exc}") from exc

    def pure_u8(self, value: int) -> Input:
        return self._pure(encode_u8, value, "u8")

    def pure_u64(self, value: int) -> Input:
        return self._pure(encode_u64, value, "u64")

    def pure_u128(self, value: int) -> Input:
        return self._pure(encode_u128, value, "u128")

    def pure_bool(self, value: bool) -> Input:
        return self._pure(encode_bool, value, "bool")

    def pure_address(self, value: str) -> Input:
        return self._pure(encode_address, value, "address")

    # Commands

    def _append(self, command: Command, output_count: Optional[int]) -> int:
        self._check_open()
        for arg in command.referenced():
            self._check_argument(arg)
        if len(self._commands) > MAX_U16:
            raise TransactionBuildError("too many transaction commands")
        self._commands.append(command)
        index = len(self._commands) - 1
        if output_count is not None:
            self._output_counts[index] = output_count
        return index

    def command(self, command: Command) -> Result:
        """Append a command whose single output (if any) is ``Result(i)``."""
        return Result(self._append(command, None), origin=self._id)

    def command_multi(self, command: Command, count: int) -> MultiResult:
        """Append a command returning ``count`` values, each a ``NestedResult``."""
        if count < 1:
            raise TransactionBuildError("multi-output commands return at least one value")
        return MultiResult(self._append(command, count), count, self._id)

    def _move_call(
        self,
        target: str,
        arguments: Sequence[Argument],
        type_arguments: Sequence[str],
    ) -> MoveCall:
        parts = target.split("::")
        if len(parts) != 3 or not all(parts):
            raise TransactionBuildError(f"move call target must be package::module::function: {target}")
        package, module, function = parts
        try:
            package = normalize_sui_address(package)
        except ValidationError as exc:
            raise TransactionBuildError(f"invalid package id in {target}") from exc
        return MoveCall(
            package=package,
            module=module,
            function=function,
            type_arguments=tuple(parse_type_tag(t) for t in type_arguments),
            arguments=tuple(arguments),
        )

    def move_call(
        self,
        target: str,
        arguments: Sequence[Argument] = (),
        type_arguments: Sequence[str] = (),
    ) -> Result:
        return self.command(self._move_call(target, arguments, type_arguments))

    def move_call_multi(
        self,
        target: str,
        count: int,
        arguments: Sequence[Argument] = (),
        type_arguments: Sequence[str] = (),
    ) -> MultiResult:
        return self.command_multi(self._move_call(target, arguments, type_arguments), count)

    def split_coin(self, coin: Argument, amount: Argument) -> Result:
        return self.command(SplitCoins(coin, (amount,)))

    def split_coins(self, coin: Argument, amounts: Sequence[Argument]) -> MultiResult:
        return self.command_multi(SplitCoins(coin, tuple(amounts)), len(amounts))

    def merge_coins(self, destination: Argument, sources: Sequence[Argument]) -> Result:
        if not sources:
            raise TransactionBuildError("merge requires at least one source coin")
        return self.command(MergeCoins(destination, tuple(sources)))

    def transfer_objects(self, objects: Sequence[Argument], recipient: str) -> Result:
        if not objects:
            raise TransactionBuildError("transfer requires at least one object")
        address = self.pure_address(recipient)
        return self.command(TransferObjects(tuple(objects), address))

    def make_move_vec(self, elements: Sequence[Argument], type_tag: Optional[str] = None) -> Result:
        tag = parse_type_tag(type_tag) if type_tag is not None else None
        return self.command(MakeMoveVec(tag, tuple(elements)))

    def finish(self) -> ProgrammableTransaction:
        """Seal the transaction; no further inputs or commands are accepted."""
        self._check_open()
        self._sealed = True
        return ProgrammableTransaction(tuple(self._inputs), tuple(self._commands))


def build_transaction_data(
    transaction: ProgrammableTransaction,
    sender: str,
    gas_payment: Sequence[ObjectRef],
    gas_price: int,
    gas_budget: int,
    gas_owner: Optional[str] = None,
) -> bytes:
    """Encode ``TransactionData::V1`` for an external signer."""
    if not gas_payment:
        raise TransactionBuildError("at least one gas coin is required")
    try:
        gas_data = (
            encode_vector(gas_payment, lambda ref: ref.to_bcs())
            + encode_address(gas_owner or sender)
            + encode_u64(gas_price)
            + encode_u64(gas_budget)
        )
        return (
            encode_uleb128(0)
            + transaction.kind_bytes()
            + encode_address(sender)
            + gas_data
            + encode_uleb128(0)
        )
    except BcsError as exc:
        raise TransactionBuildError(f"failed to encode transaction data: {exc}") from exc
