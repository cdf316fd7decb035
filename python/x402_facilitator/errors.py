"""Exception types raised inside the facilitator.

None of these cross the engine boundary: verification and settlement map
them to taxonomy reasons, the HTTP surface maps anything else to a generic
internal error.
"""


class FacilitatorError(Exception):
    """Base exception for facilitator errors."""


class ConfigurationError(FacilitatorError):
    """Raised when required settings are missing or malformed."""


class ChainClientError(FacilitatorError):
    """Raised by chain clients when an RPC read or write fails."""


class SignatureError(FacilitatorError):
    """Raised when a signature cannot be parsed or recovered."""


class SettlementError(FacilitatorError):
    """Raised when a submitted transaction reverts or its receipt is malformed."""

    def __init__(self, message: str, transaction: str = ""):
        super().__init__(message)
        self.transaction = transaction
