"""Decode simulated return values into Python values.

Values are positional: the n-th decoder reads the n-th return value, and
field names or type tags are never consulted. Any failure fails the whole
decode; partial results are never returned.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple, TypeVar

from .bcs import BcsError, BcsReader
from .ledger import SimulatedResult


T = TypeVar("T")
Decoder = Callable[[BcsReader], Any]


class DecodeError(ValueError):
    """Raised when simulated return values do not have the expected shape."""


class ArityMismatchError(DecodeError):
    """Raised when the number of return values differs from the expected count."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"expected {expected} return values, got {actual}")
        self.expected = expected
        self.actual = actual


class TypeMismatchError(DecodeError):
    """Raised when a return value cannot be decoded as the expected type."""

    def __init__(self, position: int, reason: str):
        super().__init__(f"return value {position}: {reason}")
        self.position = position


def u8(reader: BcsReader) -> int:
    return reader.read_u8()


def u64(reader: BcsReader) -> int:
    return reader.read_u64()


def u128(reader: BcsReader) -> int:
    return reader.read_u128()


def boolean(reader: BcsReader) -> bool:
    return reader.read_bool()


def address(reader: BcsReader) -> str:
    return reader.read_address()


def vector(item: Callable[[BcsReader], T]) -> Callable[[BcsReader], List[T]]:
    return lambda reader: reader.read_vector(item)


def option(item: Callable[[BcsReader], T]) -> Callable[[BcsReader], Optional[T]]:
    return lambda reader: reader.read_option(item)


def struct(factory: Callable[..., T], *fields: Decoder) -> Callable[[BcsReader], T]:
    """A record whose fields are read in declaration order."""

    def read(reader: BcsReader) -> T:
        return factory(*[read_field(reader) for read_field in fields])

    return read


def decode_value(raw: bytes, decoder: Decoder, position: int = 0) -> Any:
    reader = BcsReader(raw)
    try:
        value = decoder(reader)
        reader.finish()
    except BcsError as exc:
        raise TypeMismatchError(position, str(exc)) from exc
    return value


def decode(result: SimulatedResult, *decoders: Decoder) -> Tuple[Any, ...]:
    """Decode exactly ``len(decoders)`` return values, in order."""
    if len(result.values) != len(decoders):
        raise ArityMismatchError(len(decoders), len(result.values))
    return tuple(
        decode_value(raw, decoder, position)
        for position, (raw, decoder) in enumerate(zip(result.values, decoders))
    )
