"""Off-chain verification of ERC-3009 authorization signatures.

The payer signs the EIP-712 digest of ``TransferWithAuthorization`` with an
EOA key. Verification reconstructs the digest from the authorization fields
and the token's domain, recovers the signer from ``(v, r, s)`` and compares
it with ``from``.
"""

import logging
from dataclasses import dataclass

from eth_account import Account

from ...errors import SignatureError
from ...schemas.reasons import ERR_INVALID_SIGNATURE, ERR_SIGNATURE_ADDRESS
from .constants import SIGNATURE_LENGTH
from .eip712 import encode_transfer_authorization
from .types import ParsedSignature, TransferAuthorization, TypedDataDomain
from .utils import addresses_equal, hex_to_bytes

logger = logging.getLogger(__name__)


@dataclass
class SignatureVerification:
    """Outcome of a signature check: the payer on success, a reason otherwise."""

    payer: str | None = None
    invalid_reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.invalid_reason is None


def parse_signature(signature: str) -> ParsedSignature:
    """Split a 65-byte ``r || s || v`` signature.

    A recovery id of 0 or 1 is mapped to the legacy 27 or 28.

    Raises:
        SignatureError: If the signature is not 65 bytes of hex or ``v`` is invalid.
    """
    if not isinstance(signature, str):
        raise SignatureError("Signature must be a hex string")
    try:
        raw = hex_to_bytes(signature)
    except ValueError as e:
        raise SignatureError(f"Signature is not valid hex: {e}") from e

    if len(raw) != SIGNATURE_LENGTH:
        raise SignatureError(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")

    v = raw[64]
    if v in (0, 1):
        v += 27
    if v not in (27, 28):
        raise SignatureError(f"Invalid recovery id: {raw[64]}")

    return ParsedSignature(v=v, r=raw[:32], s=raw[32:64])


def recover_authorization_signer(
    authorization: TransferAuthorization,
    signature: ParsedSignature,
    domain: TypedDataDomain,
) -> str:
    """Recover the address that signed ``authorization`` under ``domain``.

    Raises:
        SignatureError: If recovery fails.
    """
    try:
        signable = encode_transfer_authorization(authorization, domain)
        return Account.recover_message(
            signable,
            vrs=(
                signature.v,
                int.from_bytes(signature.r, "big"),
                int.from_bytes(signature.s, "big"),
            ),
        )
    except Exception as e:
        raise SignatureError(f"Signature recovery failed: {e}") from e


def verify_authorization_signature(
    authorization: TransferAuthorization,
    signature: str,
    domain: TypedDataDomain,
) -> SignatureVerification:
    """Verify that ``signature`` over ``authorization`` was produced by ``from``.

    Args:
        authorization: Parsed authorization.
        signature: 0x-prefixed 65-byte signature.
        domain: Token EIP-712 domain.

    Returns:
        SignatureVerification with the payer, or the failure reason.
    """
    try:
        parsed = parse_signature(signature)
        recovered = recover_authorization_signer(authorization, parsed, domain)
    except SignatureError as e:
        logger.info("Signature verification failed for %s: %s", authorization.from_address, e)
        return SignatureVerification(invalid_reason=ERR_INVALID_SIGNATURE)

    if not addresses_equal(recovered, authorization.from_address):
        logger.info(
            "Signature recovered to %s, expected %s",
            recovered,
            authorization.from_address,
        )
        return SignatureVerification(invalid_reason=ERR_SIGNATURE_ADDRESS)

    return SignatureVerification(payer=authorization.from_address)
