"""Wire schemas for the x402 facilitator."""

from .base import X402_VERSION, BaseX402Model, Network
from .payments import (
    ExactEvmAuthorization,
    ExactEvmPayload,
    PaymentPayload,
    PaymentRequirements,
)
from .reasons import InvalidReason
from .responses import (
    ErrorResponse,
    SettleRequest,
    SettleResponse,
    SupportedKind,
    SupportedResponse,
    VerifyRequest,
    VerifyResponse,
)

__all__ = [
    "X402_VERSION",
    "BaseX402Model",
    "ErrorResponse",
    "ExactEvmAuthorization",
    "ExactEvmPayload",
    "InvalidReason",
    "Network",
    "PaymentPayload",
    "PaymentRequirements",
    "SettleRequest",
    "SettleResponse",
    "SupportedKind",
    "SupportedResponse",
    "VerifyRequest",
    "VerifyResponse",
]
