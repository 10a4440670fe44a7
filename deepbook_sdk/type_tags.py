"""Move type tag parsing and encoding.

Accepts the string forms used in coin registries, e.g.
``0x2::sui::SUI``, ``0x2::coin::Coin<0x2::sui::SUI>`` or ``vector<u8>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from .bcs import encode_address, encode_str, encode_uleb128, encode_vector
from .validation import ValidationError, normalize_sui_address


_PRIMITIVES = {
    "bool": 0,
    "u8": 1,
    "u64": 2,
    "u128": 3,
    "address": 4,
    "signer": 5,
    "u16": 8,
    "u32": 9,
    "u256": 10,
}
_VECTOR_TAG = 6
_STRUCT_TAG = 7

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_TOKEN = re.compile(r"\s*(::|<|>|,|[A-Za-z0-9_]+)")


class TypeTagError(ValueError):
    """Raised when a Move type string cannot be parsed."""


@dataclass(frozen=True)
class PrimitiveTag:
    name: str

    def to_bcs(self) -> bytes:
        return encode_uleb128(_PRIMITIVES[self.name])

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class VectorTag:
    element: "TypeTag"

    def to_bcs(self) -> bytes:
        return encode_uleb128(_VECTOR_TAG) + self.element.to_bcs()

    def __str__(self) -> str:
        return f"vector<{self.element}>"


@dataclass(frozen=True)
class StructTag:
    address: str
    module: str
    name: str
    type_params: Tuple["TypeTag", ...] = ()

    def to_bcs(self) -> bytes:
        return (
            encode_uleb128(_STRUCT_TAG)
            + encode_address(self.address)
            + encode_str(self.module)
            + encode_str(self.name)
            + encode_vector(self.type_params, lambda tag: tag.to_bcs())
        )

    def __str__(self) -> str:
        base = f"{self.address}::{self.module}::{self.name}"
        if not self.type_params:
            return base
        return base + "<" + ", ".join(str(p) for p in self.type_params) + ">"


TypeTag = Union[PrimitiveTag, VectorTag, StructTag]


def _tokenize(type_str: str) -> List[str]:
    tokens = []
    pos = 0
    stripped = type_str.rstrip()
    while pos < len(stripped):
        match = _TOKEN.match(stripped, pos)
        if not match:
            raise TypeTagError(f"unexpected character in type {type_str!r} at {pos}")
        tokens.append(match.group(1))
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, type_str: str):
        self._source = type_str
        self._tokens = _tokenize(type_str)
        self._pos = 0

    def _peek(self) -> str:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else ""

    def _next(self) -> str:
        token = self._peek()
        if not token:
            raise TypeTagError(f"unexpected end of type {self._source!r}")
        self._pos += 1
        return token

    def _expect(self, expected: str) -> None:
        token = self._next()
        if token != expected:
            raise TypeTagError(f"expected {expected!r} in {self._source!r}, got {token!r}")

    def parse(self) -> TypeTag:
        tag = self._parse_tag()
        if self._pos != len(self._tokens):
            raise TypeTagError(f"trailing tokens in type {self._source!r}")
        return tag

    def _parse_tag(self) -> TypeTag:
        head = self._next()
        if head in _PRIMITIVES:
            return PrimitiveTag(head)
        if head == "vector":
            self._expect("<")
            element = self._parse_tag()
            self._expect(">")
            return VectorTag(element)
        return self._parse_struct(head)

    def _parse_struct(self, address: str) -> StructTag:
        try:
            normalized = normalize_sui_address(address)
        except ValidationError as exc:
            raise TypeTagError(f"invalid address {address!r} in {self._source!r}") from exc
        self._expect("::")
        module = self._identifier()
        self._expect("::")
        name = self._identifier()
        params: List[TypeTag] = []
        if self._peek() == "<":
            self._next()
            params.append(self._parse_tag())
            while self._peek() == ",":
                self._next()
                params.append(self._parse_tag())
            self._expect(">")
        return StructTag(normalized, module, name, tuple(params))

    def _identifier(self) -> str:
        token = self._next()
        if not _IDENTIFIER.fullmatch(token):
            raise TypeTagError(f"invalid identifier {token!r} in {self._source!r}")
        return token


def parse_type_tag(type_str: str) -> TypeTag:
    """Parse a Move type string into a type tag."""
    if not isinstance(type_str, str) or not type_str.strip():
        raise TypeTagError("type string must be non-empty")
    return _Parser(type_str).parse()
