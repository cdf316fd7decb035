"""Facilitator request and response types."""

from typing import Any

from pydantic import Field

from .base import BaseX402Model, Network
from .payments import PaymentPayload, PaymentRequirements
from .reasons import InvalidReason


class VerifyRequest(BaseX402Model):
    """Request to verify a payment.

    Attributes:
        x402_version: Protocol version of the envelope.
        payment_payload: The payment payload to verify.
        payment_requirements: The requirements to verify against.
    """

    x402_version: int
    payment_payload: PaymentPayload
    payment_requirements: PaymentRequirements


class SettleRequest(VerifyRequest):
    """Request to settle a payment. Same envelope as verification."""


class VerifyResponse(BaseX402Model):
    """Response from payment verification.

    Attributes:
        is_valid: Whether the payment is valid.
        invalid_reason: Reason for invalidity (if is_valid is False).
        payer: The payer's address.
    """

    is_valid: bool
    invalid_reason: InvalidReason | None = None
    payer: str


class SettleResponse(BaseX402Model):
    """Response from payment settlement.

    Attributes:
        success: Whether settlement was successful.
        error_reason: Reason for failure (if success is False).
        error_message: Coarse failure category for on-chain failures.
        payer: The payer's address.
        transaction: Transaction hash, empty when nothing was submitted.
        network: Network where settlement occurred.
    """

    success: bool
    error_reason: InvalidReason | None = None
    error_message: str | None = None
    payer: str
    transaction: str = ""
    network: Network


class SupportedKind(BaseX402Model):
    """A supported payment configuration."""

    x402_version: int
    scheme: str
    network: Network
    extra: dict[str, Any] | None = None


class SupportedResponse(BaseX402Model):
    """Payment kinds and signer addresses this facilitator supports."""

    kinds: list[SupportedKind]
    signers: dict[str, list[str]] = Field(default_factory=dict)


class ErrorResponse(BaseX402Model):
    """Request-level error returned by the HTTP surface."""

    error_type: str
    error_message: str
