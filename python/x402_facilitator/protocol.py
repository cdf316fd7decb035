"""Protocol-level validation of facilitator requests."""

from collections.abc import Collection

from .schemas import X402_VERSION, VerifyRequest
from .schemas.reasons import (
    ERR_INVALID_NETWORK,
    ERR_INVALID_SCHEME,
    ERR_INVALID_X402_VERSION,
)


def validate_protocol(
    request: VerifyRequest,
    schemes: Collection[str],
    version: int = X402_VERSION,
) -> str | None:
    """Check version, scheme and network agreement of a request.

    Args:
        request: Verify or settle request envelope.
        schemes: Scheme identifiers the facilitator accepts.
        version: Supported protocol version.

    Returns:
        The failure reason, or None if the request passes.
    """
    payload = request.payment_payload
    requirements = request.payment_requirements

    if request.x402_version != version or payload.x402_version != version:
        return ERR_INVALID_X402_VERSION

    if payload.scheme not in schemes or requirements.scheme != payload.scheme:
        return ERR_INVALID_SCHEME

    if payload.network != requirements.network:
        return ERR_INVALID_NETWORK

    return None
