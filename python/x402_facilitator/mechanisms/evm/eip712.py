"""EIP-712 typed data for ERC-3009 TransferWithAuthorization."""

from typing import Any

from eth_account.messages import SignableMessage, encode_typed_data
from eth_utils import keccak

from .constants import (
    EIP712_DOMAIN_TYPES,
    TRANSFER_WITH_AUTHORIZATION_PRIMARY_TYPE,
    TRANSFER_WITH_AUTHORIZATION_TYPES,
)
from .types import TransferAuthorization, TypedDataDomain
from .utils import checksum


def build_transfer_typed_data(
    authorization: TransferAuthorization,
    domain: TypedDataDomain,
) -> dict[str, Any]:
    """Build the full EIP-712 message for a transfer authorization.

    Addresses are checksummed so lower-case wire values encode identically.

    Args:
        authorization: Parsed authorization.
        domain: Token domain.

    Returns:
        Typed data dict accepted by ``eth_account.messages.encode_typed_data``.
    """
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPES,
            TRANSFER_WITH_AUTHORIZATION_PRIMARY_TYPE: TRANSFER_WITH_AUTHORIZATION_TYPES,
        },
        "primaryType": TRANSFER_WITH_AUTHORIZATION_PRIMARY_TYPE,
        "domain": {
            "name": domain.name,
            "version": domain.version,
            "chainId": domain.chain_id,
            "verifyingContract": checksum(domain.verifying_contract),
        },
        "message": {
            "from": checksum(authorization.from_address),
            "to": checksum(authorization.to),
            "value": authorization.value,
            "validAfter": authorization.valid_after,
            "validBefore": authorization.valid_before,
            "nonce": authorization.nonce,
        },
    }


def encode_transfer_authorization(
    authorization: TransferAuthorization,
    domain: TypedDataDomain,
) -> SignableMessage:
    """Encode a transfer authorization as a signable EIP-712 message."""
    return encode_typed_data(full_message=build_transfer_typed_data(authorization, domain))


def hash_transfer_authorization(
    authorization: TransferAuthorization,
    domain: TypedDataDomain,
) -> bytes:
    """Compute the 32-byte digest that the payer signs."""
    signable = encode_transfer_authorization(authorization, domain)
    return keccak(b"\x19" + signable.version + signable.header + signable.body)
