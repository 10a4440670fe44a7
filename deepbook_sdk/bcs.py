"""Binary Canonical Serialization (BCS) for Sui values.

Layout summary:
  integers  -> little-endian, fixed width (u8 .. u256)
  bool      -> one byte, 0x00 or 0x01
  address   -> 32 raw bytes
  sequences -> ULEB128 length, then the elements
  Option<T> -> sequence of length 0 or 1
  enums     -> ULEB128 variant index, then the payload
  structs   -> fields in declaration order, no tags
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar

from .validation import ValidationError, normalize_sui_address


T = TypeVar("T")

ADDRESS_LENGTH = 32

_INT_WIDTHS = {
    "u8": 1,
    "u16": 2,
    "u32": 4,
    "u64": 8,
    "u128": 16,
    "u256": 32,
}


class BcsError(ValueError):
    """Raised when a value cannot be BCS encoded or decoded."""


def encode_uleb128(value: int) -> bytes:
    """Encode an integer as ULEB128 (the protobuf varint layout)."""
    if value < 0:
        raise BcsError("uleb128 cannot be negative")
    out = bytearray()
    while True:
        to_write = value & 0x7F
        value >>= 7
        if value:
            out.append(to_write | 0x80)
        else:
            out.append(to_write)
            break
    return bytes(out)


def encode_uint(value: int, kind: str) -> bytes:
    width = _INT_WIDTHS.get(kind)
    if width is None:
        raise BcsError(f"unknown integer type: {kind}")
    if not isinstance(value, int) or isinstance(value, bool):
        raise BcsError(f"{kind} value must be an int, got {type(value).__name__}")
    if value < 0 or value >= 1 << (8 * width):
        raise BcsError(f"{kind} value out of range: {value}")
    return value.to_bytes(width, "little")


def encode_u8(value: int) -> bytes:
    return encode_uint(value, "u8")


def encode_u16(value: int) -> bytes:
    return encode_uint(value, "u16")


def encode_u64(value: int) -> bytes:
    return encode_uint(value, "u64")


def encode_u128(value: int) -> bytes:
    return encode_uint(value, "u128")


def encode_bool(value: bool) -> bytes:
    if not isinstance(value, bool):
        raise BcsError("bool value must be a bool")
    return b"\x01" if value else b"\x00"


def encode_address(address: str) -> bytes:
    try:
        normalized = normalize_sui_address(address)
    except ValidationError as exc:
        raise BcsError(str(exc)) from exc
    return bytes.fromhex(normalized[2:])


def encode_bytes(value: bytes) -> bytes:
    raw = bytes(value)
    return encode_uleb128(len(raw)) + raw


def encode_str(value: str) -> bytes:
    return encode_bytes(value.encode("utf-8"))


def encode_vector(items: Sequence[T], encode_item: Callable[[T], bytes]) -> bytes:
    payload = bytearray(encode_uleb128(len(items)))
    for item in items:
        payload += encode_item(item)
    return bytes(payload)


def encode_option(value: Optional[T], encode_item: Callable[[T], bytes]) -> bytes:
    if value is None:
        return b"\x00"
    return b"\x01" + encode_item(value)


class BcsReader:
    """Sequential BCS decoder over a byte buffer."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def _take(self, count: int) -> bytes:
        if count > self.remaining:
            raise BcsError(
                f"unexpected end of input: need {count} bytes at offset {self._pos}, "
                f"have {self.remaining}"
            )
        chunk = self._data[self._pos : self._pos + count]
        self._pos += count
        return chunk

    def read_uleb128(self) -> int:
        value = 0
        shift = 0
        while True:
            byte = self._take(1)[0]
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return value
            shift += 7
            if shift > 63:
                raise BcsError("uleb128 value too large")

    def read_uint(self, kind: str) -> int:
        width = _INT_WIDTHS.get(kind)
        if width is None:
            raise BcsError(f"unknown integer type: {kind}")
        return int.from_bytes(self._take(width), "little")

    def read_u8(self) -> int:
        return self.read_uint("u8")

    def read_u64(self) -> int:
        return self.read_uint("u64")

    def read_u128(self) -> int:
        return self.read_uint("u128")

    def read_bool(self) -> bool:
        byte = self._take(1)[0]
        if byte not in (0, 1):
            raise BcsError(f"invalid bool byte: {byte:#04x}")
        return byte == 1

    def read_address(self) -> str:
        return "0x" + self._take(ADDRESS_LENGTH).hex()

    def read_bytes(self) -> bytes:
        return self._take(self.read_uleb128())

    def read_str(self) -> str:
        try:
            return self.read_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BcsError(f"invalid utf-8 string: {exc}") from exc

    def read_vector(self, read_item: Callable[["BcsReader"], T]) -> List[T]:
        return [read_item(self) for _ in range(self.read_uleb128())]

    def read_option(self, read_item: Callable[["BcsReader"], T]) -> Optional[T]:
        tag = self.read_uleb128()
        if tag == 0:
            return None
        if tag == 1:
            return read_item(self)
        raise BcsError(f"invalid option tag: {tag}")

    def finish(self) -> None:
        """Fail if any input is left unread."""
        if self.remaining:
            raise BcsError(f"{self.remaining} trailing bytes after decode")
