"""
Fee Policy

Pure fee arithmetic for the two paid operations:
- file creation: base fee plus a per-byte charge over the payload
- access grant: a flat fee

All amounts are unsigned 256-bit integers. Anything that would leave that
range is rejected, never wrapped.
"""

from typing import Iterable

from .errors import ArithmeticOverflow, InvalidFee, InvalidValue
from .models import AdminConfig, FilePayload

U256_MAX = (1 << 256) - 1


def check_u256(value: int, what: str) -> int:
    """Validate that `value` is a non-negative integer that fits in 256 bits."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(f"{what} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise InvalidValue(f"{what} cannot be negative")
    if value > U256_MAX:
        raise ArithmeticOverflow(what, value)
    return value


def checked_add(a: int, b: int, what: str) -> int:
    result = a + b
    if result > U256_MAX:
        raise ArithmeticOverflow(what, result)
    return result


def checked_mul(a: int, b: int, what: str) -> int:
    result = a * b
    if result > U256_MAX:
        raise ArithmeticOverflow(what, result)
    return result


def required_creation_fee(
    base_fee: int,
    bytes_fee_multiplier: int,
    payload_lengths: Iterable[int],
) -> int:
    """
    Compute the exact payment required to create a file.

    Args:
        base_fee: Flat part of the creation fee
        bytes_fee_multiplier: Charge per payload byte
        payload_lengths: Byte lengths of the billed payload fields

    Returns:
        base_fee + bytes_fee_multiplier * sum(payload_lengths)

    Raises:
        ArithmeticOverflow: if any step leaves the u256 range
    """
    total_bytes = 0
    for length in payload_lengths:
        total_bytes = checked_add(total_bytes, check_u256(length, "payload length"), "payload size")
    per_byte = checked_mul(bytes_fee_multiplier, total_bytes, "byte fee")
    return checked_add(base_fee, per_byte, "creation fee")


def creation_fee_for(config: AdminConfig, payload: FilePayload) -> int:
    """Creation fee for `payload` under the current parameters."""
    return required_creation_fee(config.base_fee, config.bytes_fee_multiplier, payload.lengths())


def required_grant_fee(config: AdminConfig) -> int:
    return config.grant_fee


def check_tendered(required: int, tendered: int) -> None:
    """Exact match only: overpaying is as invalid as underpaying."""
    if isinstance(tendered, bool) or not isinstance(tendered, int) or tendered != required:
        raise InvalidFee(required, tendered)
