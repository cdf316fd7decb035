"""Utility functions for EVM x402 mechanisms."""

import secrets
import time
from datetime import timedelta
from decimal import Decimal, InvalidOperation, localcontext

from eth_utils import is_address, to_checksum_address

from .constants import (
    CAIP2_EVM_PREFIX,
    NETWORK_CONFIGS,
    NONCE_LENGTH,
    VALID_AFTER_SKEW_SECONDS,
    NetworkConfig,
)


def get_network_config(network: str) -> NetworkConfig:
    """Get the configuration of a named network or a CAIP-2 ``eip155:<id>`` one."""
    config = NETWORK_CONFIGS.get(network)
    if config is not None:
        return config

    if network.startswith(CAIP2_EVM_PREFIX):
        try:
            chain_id = int(network[len(CAIP2_EVM_PREFIX):])
        except ValueError:
            raise ValueError(f"Invalid CAIP-2 network: {network}") from None
        for known in NETWORK_CONFIGS.values():
            if known["chain_id"] == chain_id:
                return known
        return {"chain_id": chain_id, "is_poa": False}

    raise ValueError(f"Unknown EVM network: {network}")


def get_evm_chain_id(network: str) -> int:
    """Get the chain ID for a network identifier."""
    return get_network_config(network)["chain_id"]


def is_evm_address(address: object) -> bool:
    """Check whether ``address`` is a syntactically valid EVM address.

    Mixed-case addresses must carry a valid EIP-55 checksum.
    """
    return isinstance(address, str) and address.startswith("0x") and is_address(address)


def addresses_equal(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def checksum(address: str) -> str:
    return to_checksum_address(address)


def hex_to_bytes(value: str) -> bytes:
    """Decode a hex string, with or without 0x prefix."""
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)


def bytes_to_hex(value: bytes) -> str:
    return "0x" + value.hex()


def parse_integer(value: str | int) -> int:
    """Parse a wire integer into an arbitrary-precision ``int``.

    Accepts ``int`` and decimal or 0x-prefixed hex strings. Floats and
    booleans are rejected; amounts never pass through floating point.

    Raises:
        ValueError: If the value is not an integer.
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not an integer")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected integer string, got {type(value).__name__}")

    text = value.strip()
    if text[:2] in ("0x", "0X"):
        return int(text, 16)

    digits = text[1:] if text.startswith("-") else text
    if not digits or not digits.isascii() or not digits.isdigit():
        raise ValueError(f"Not an integer: {value!r}")
    return int(text)


def parse_nonce(nonce: str) -> bytes:
    """Decode a 0x-prefixed bytes32 nonce.

    Raises:
        ValueError: If the nonce is not exactly 32 bytes of hex.
    """
    if not isinstance(nonce, str) or not nonce.startswith("0x"):
        raise ValueError("Nonce must be a 0x-prefixed hex string")
    raw = hex_to_bytes(nonce)
    if len(raw) != NONCE_LENGTH:
        raise ValueError(f"Nonce must be {NONCE_LENGTH} bytes, got {len(raw)}")
    return raw


def create_nonce() -> str:
    """Create a random bytes32 nonce as 0x-prefixed hex."""
    return bytes_to_hex(secrets.token_bytes(NONCE_LENGTH))


def create_validity_window(
    duration: timedelta,
    now: int | None = None,
) -> tuple[int, int]:
    """Create a ``(valid_after, valid_before)`` window starting slightly in the past."""
    if now is None:
        now = int(time.time())
    return now - VALID_AFTER_SKEW_SECONDS, now + int(duration.total_seconds())


def parse_amount(amount: str | int | Decimal, decimals: int) -> int:
    """Convert a display amount into atomic units.

    Args:
        amount: Amount in token units, e.g. ``"1.5"``.
        decimals: Decimals declared by the asset.

    Returns:
        Amount in the smallest unit.

    Raises:
        ValueError: If the amount is malformed, negative, or finer than one atomic unit.
    """
    if isinstance(amount, float):
        raise ValueError("Float amounts are not accepted, pass a string or Decimal")
    try:
        value = Decimal(str(amount).strip().lstrip("$"))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None

    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")

    # uint256 needs up to 78 significant digits
    with localcontext() as ctx:
        ctx.prec = 100
        atomic = value.scaleb(decimals)
        if atomic != atomic.to_integral_value():
            raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
        return int(atomic)


def format_amount(atomic: int, decimals: int) -> str:
    """Format atomic units as a display amount without losing precision."""
    sign = "-" if atomic < 0 else ""
    digits = str(abs(atomic))
    if decimals == 0:
        return sign + digits

    digits = digits.rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    return f"{sign}{whole}.{fraction}" if fraction else sign + whole
