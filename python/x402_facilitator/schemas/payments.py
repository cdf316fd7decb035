"""Payment payload and requirement types for the x402 exact scheme."""

from typing import Any

from pydantic import Field, StrictInt

from .base import BaseX402Model, Network


class ExactEvmAuthorization(BaseX402Model):
    """ERC-3009 TransferWithAuthorization parameters signed by the payer.

    Numeric fields are kept as received; they are parsed into ``int`` by the
    authorization validator so malformed values map to domain reasons instead
    of request-level errors. JSON floats are rejected outright since they
    cannot carry uint256 amounts exactly.

    Attributes:
        from_address: Payer address (``from`` on the wire).
        to: Recipient address.
        value: Amount in atomic token units, as a decimal string.
        valid_after: Unix timestamp the authorization becomes valid at.
        valid_before: Unix timestamp the authorization expires at.
        nonce: 0x-prefixed 32-byte unique nonce.
    """

    from_address: str = Field(alias="from")
    to: str
    value: str | StrictInt
    valid_after: str | StrictInt
    valid_before: str | StrictInt
    nonce: str


class ExactEvmPayload(BaseX402Model):
    """Signed authorization carried inside a payment payload."""

    signature: str
    authorization: ExactEvmAuthorization


class PaymentPayload(BaseX402Model):
    """Payment payload sent by the client.

    Attributes:
        x402_version: Protocol version.
        scheme: Payment scheme identifier.
        network: Network identifier.
        payload: Scheme-specific payload.
    """

    x402_version: int
    scheme: str
    network: Network
    payload: ExactEvmPayload


class PaymentRequirements(BaseX402Model):
    """Requirements a payment must satisfy, as stated by the resource server.

    Attributes:
        scheme: Payment scheme identifier.
        network: Network identifier.
        max_amount_required: Minimum authorized amount in atomic units.
        pay_to: Recipient address.
        asset: Token contract address.
        max_timeout_seconds: Time the resource server allows for the payment.
        resource: Resource URL being paid for.
        description: Human readable description.
        mime_type: MIME type of the resource.
        extra: Scheme-specific data (EIP-712 ``name``/``version`` for clients).
    """

    scheme: str
    network: Network
    max_amount_required: str | StrictInt
    pay_to: str
    asset: str
    max_timeout_seconds: int | None = None
    resource: str | None = None
    description: str | None = None
    mime_type: str | None = None
    extra: dict[str, Any] | None = None
