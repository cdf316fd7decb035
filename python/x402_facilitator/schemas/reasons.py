"""Closed taxonomy of verification and settlement failure reasons.

The same codes are used for ``VerifyResponse.invalid_reason`` and
``SettleResponse.error_reason``.
"""

from typing import Literal

ERR_INVALID_X402_VERSION = "invalid_x402_version"
ERR_INVALID_SCHEME = "invalid_scheme"
ERR_INVALID_NETWORK = "invalid_network"
ERR_INVALID_PAYLOAD = "invalid_payload"
ERR_AUTHORIZATION_VALUE = "invalid_exact_evm_payload_authorization_value"
ERR_AUTHORIZATION_VALUE_TOO_LOW = "invalid_exact_evm_payload_authorization_value_too_low"
ERR_AUTHORIZATION_VALID_AFTER = "invalid_exact_evm_payload_authorization_valid_after"
ERR_AUTHORIZATION_VALID_BEFORE = "invalid_exact_evm_payload_authorization_valid_before"
ERR_INVALID_SIGNATURE = "invalid_exact_evm_payload_signature"
ERR_SIGNATURE_ADDRESS = "invalid_exact_evm_payload_signature_address"
ERR_INSUFFICIENT_FUNDS = "insufficient_funds"

InvalidReason = Literal[
    "invalid_x402_version",
    "invalid_scheme",
    "invalid_network",
    "invalid_payload",
    "invalid_exact_evm_payload_authorization_value",
    "invalid_exact_evm_payload_authorization_value_too_low",
    "invalid_exact_evm_payload_authorization_valid_after",
    "invalid_exact_evm_payload_authorization_valid_before",
    "invalid_exact_evm_payload_signature",
    "invalid_exact_evm_payload_signature_address",
    "insufficient_funds",
]

# Coarse settlement failure categories, attached as ``error_message``
SETTLE_SUBMISSION_FAILED = "submission_failed"
SETTLE_TRANSACTION_REVERTED = "transaction_reverted"
SETTLE_CONFIRMATION_TIMEOUT = "confirmation_timeout"
SETTLE_CONFIRMATION_FAILED = "confirmation_failed"

# HTTP boundary error types
ERROR_TYPE_INVALID_REQUEST = "invalid_request"
ERROR_TYPE_INTERNAL = "internal_server_error"
