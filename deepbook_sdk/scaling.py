"""Decimal quantity to fixed-point integer conversion.

All encoders round half away from zero. The conversion is lossy and one-way:
the ``from_*`` helpers exist for display only.
"""

from __future__ import annotations

import math

from .constants import DEEP_SCALAR, FLOAT_SCALAR
from .validation import (
    MAX_U64,
    ValidationError,
    validate_non_negative_amount,
    validate_scalar,
)


PRICE_FIXED_POINT = FLOAT_SCALAR


class ScalingError(ValueError):
    """Raised when a quantity cannot be represented in base units."""


def round_half_away(value: float) -> int:
    if value != value or value in (math.inf, -math.inf):
        raise ScalingError(f"cannot round non-finite value {value}")
    magnitude = math.floor(abs(value) + 0.5)
    return int(-magnitude if value < 0 else magnitude)


def _checked(value: float, name: str) -> int:
    encoded = round_half_away(value)
    if encoded < 0 or encoded > MAX_U64:
        raise ScalingError(f"{name} out of u64 range: {encoded}")
    return encoded


def to_base_units(quantity: float, scalar: int) -> int:
    """``round(quantity * scalar)`` as a u64."""
    try:
        validate_non_negative_amount(quantity, "quantity")
        validate_scalar(scalar)
    except ValidationError as exc:
        raise ScalingError(str(exc)) from exc
    return _checked(quantity * scalar, "quantity")


def from_base_units(value: int, scalar: int) -> float:
    try:
        validate_scalar(scalar)
    except ValidationError as exc:
        raise ScalingError(str(exc)) from exc
    return value / scalar


def encode_price(price: float, base_scalar: int, quote_scalar: int) -> int:
    """Quote units per base unit, rescaled into the contract's 1e9 fixed point."""
    try:
        validate_non_negative_amount(price, "price")
        validate_scalar(base_scalar, "base_scalar")
        validate_scalar(quote_scalar, "quote_scalar")
    except ValidationError as exc:
        raise ScalingError(str(exc)) from exc
    return _checked(price * PRICE_FIXED_POINT * quote_scalar / base_scalar, "price")


def decode_price(encoded: int, base_scalar: int, quote_scalar: int) -> float:
    return encoded * base_scalar / (PRICE_FIXED_POINT * quote_scalar)


def encode_float(value: float) -> int:
    """Plain 1e9 fixed point, used for fee rates."""
    return to_base_units(value, FLOAT_SCALAR)


def decode_float(value: int) -> float:
    return value / FLOAT_SCALAR


def encode_deep(value: float) -> int:
    return to_base_units(value, DEEP_SCALAR)


def decode_deep(value: int) -> float:
    return value / DEEP_SCALAR
