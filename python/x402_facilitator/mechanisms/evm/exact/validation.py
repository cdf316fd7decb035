"""Field-level validation of ERC-3009 authorizations for the exact scheme."""

from ....schemas import ExactEvmAuthorization, PaymentRequirements
from ....schemas.reasons import (
    ERR_AUTHORIZATION_VALID_AFTER,
    ERR_AUTHORIZATION_VALID_BEFORE,
    ERR_AUTHORIZATION_VALUE,
    ERR_AUTHORIZATION_VALUE_TOO_LOW,
    ERR_INVALID_PAYLOAD,
)
from ..types import TransferAuthorization
from ..utils import addresses_equal, is_evm_address, parse_integer, parse_nonce


def validate_authorization(
    authorization: ExactEvmAuthorization,
    requirements: PaymentRequirements,
    now: int,
) -> tuple[TransferAuthorization | None, str | None]:
    """Validate an authorization against the payment requirements.

    Checks run in a fixed order and stop at the first failure:
    addresses and nonce, recipient, value, minimum amount, validity window.

    Args:
        authorization: Authorization from the payment payload.
        requirements: Requirements the payment must meet.
        now: Current unix time in seconds.

    Returns:
        ``(parsed, None)`` on success, ``(None, reason)`` on failure.
    """
    if not is_evm_address(authorization.from_address) or not is_evm_address(authorization.to):
        return None, ERR_INVALID_PAYLOAD

    try:
        nonce = parse_nonce(authorization.nonce)
    except ValueError:
        return None, ERR_INVALID_PAYLOAD

    if not addresses_equal(authorization.to, requirements.pay_to):
        return None, ERR_INVALID_PAYLOAD

    try:
        value = parse_integer(authorization.value)
    except ValueError:
        return None, ERR_AUTHORIZATION_VALUE
    if value <= 0:
        return None, ERR_AUTHORIZATION_VALUE

    try:
        max_amount = parse_integer(requirements.max_amount_required)
    except ValueError:
        return None, ERR_INVALID_PAYLOAD
    if value < max_amount:
        return None, ERR_AUTHORIZATION_VALUE_TOO_LOW

    try:
        valid_after = parse_integer(authorization.valid_after)
    except ValueError:
        return None, ERR_AUTHORIZATION_VALID_AFTER
    if now < valid_after:
        return None, ERR_AUTHORIZATION_VALID_AFTER

    try:
        valid_before = parse_integer(authorization.valid_before)
    except ValueError:
        return None, ERR_AUTHORIZATION_VALID_BEFORE
    if now > valid_before:
        return None, ERR_AUTHORIZATION_VALID_BEFORE

    if valid_after >= valid_before:
        return None, ERR_AUTHORIZATION_VALID_BEFORE

    return (
        TransferAuthorization(
            from_address=authorization.from_address,
            to=authorization.to,
            value=value,
            valid_after=valid_after,
            valid_before=valid_before,
            nonce=nonce,
        ),
        None,
    )
