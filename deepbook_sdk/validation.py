"""Validation helpers for the DeepBook SDK."""

from __future__ import annotations

import re


MAX_U8 = 2**8 - 1
MAX_U16 = 2**16 - 1
MAX_U64 = 2**64 - 1
MAX_U128 = 2**128 - 1

_HEX_ADDRESS = re.compile(r"0x[0-9a-fA-F]{1,64}")


class ValidationError(ValueError):
    """Raised when inputs fail validation."""


def normalize_sui_address(address: str) -> str:
    """Return the canonical 0x-prefixed, 64 hex digit, lowercase form."""
    validate_sui_address(address)
    return "0x" + address[2:].lower().rjust(64, "0")


def validate_sui_address(address: str) -> None:
    if not isinstance(address, str) or not address:
        raise ValidationError("address must be a non-empty string")
    if not _HEX_ADDRESS.fullmatch(address):
        raise ValidationError(f"invalid Sui address format: {address}")


def validate_uint(value: int, name: str, maximum: int = MAX_U64) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer")
    if value > maximum:
        raise ValidationError(f"{name} must be <= {maximum}")


def validate_non_negative_amount(value: float, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number")
    if value != value or value < 0:
        raise ValidationError(f"{name} must be a non-negative number")


def validate_scalar(scalar: int, name: str = "scalar") -> None:
    if not isinstance(scalar, int) or isinstance(scalar, bool) or scalar <= 0:
        raise ValidationError(f"{name} must be a positive integer")


def validate_url(url: str) -> None:
    if not isinstance(url, str) or not url:
        raise ValidationError("url must be a non-empty string")
    if not (url.startswith("http://") or url.startswith("https://")):
        raise ValidationError(f"url must start with http:// or https://: {url}")
