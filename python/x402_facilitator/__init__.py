"""x402 facilitator for ERC-3009 ``exact`` payments on EVM chains.

Verifies signed ``transferWithAuthorization`` payloads and settles them
on-chain from a relayer account.
"""

from .errors import (
    ChainClientError,
    ConfigurationError,
    FacilitatorError,
    SettlementError,
    SignatureError,
)
from .facilitator import SchemeNetworkFacilitator, x402Facilitator
from .nonces import InMemoryNonceStore, NonceStore, RedisNonceStore, create_nonce_store
from .schemas import (
    X402_VERSION,
    PaymentPayload,
    PaymentRequirements,
    SettleRequest,
    SettleResponse,
    SupportedResponse,
    VerifyRequest,
    VerifyResponse,
)

__version__ = "0.1.0"

__all__ = [
    "X402_VERSION",
    "ChainClientError",
    "ConfigurationError",
    "FacilitatorError",
    "InMemoryNonceStore",
    "NonceStore",
    "PaymentPayload",
    "PaymentRequirements",
    "RedisNonceStore",
    "SchemeNetworkFacilitator",
    "SettleRequest",
    "SettleResponse",
    "SettlementError",
    "SignatureError",
    "SupportedResponse",
    "VerifyRequest",
    "VerifyResponse",
    "create_nonce_store",
    "x402Facilitator",
]
