"""x402Facilitator: routes verify and settle requests to registered schemes."""

import logging
from typing import Any, Protocol

from .protocol import validate_protocol
from .schemas import (
    X402_VERSION,
    Network,
    PaymentPayload,
    PaymentRequirements,
    SettleRequest,
    SettleResponse,
    SupportedKind,
    SupportedResponse,
    VerifyRequest,
    VerifyResponse,
)
from .schemas.reasons import ERR_INVALID_NETWORK

logger = logging.getLogger(__name__)


class SchemeNetworkFacilitator(Protocol):
    """Scheme implementation the facilitator delegates to."""

    scheme: str

    def get_extra(self, network: Network) -> dict[str, Any] | None: ...

    def get_signers(self, network: Network) -> list[str]: ...

    async def verify(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> VerifyResponse: ...

    async def settle(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> SettleResponse: ...


class x402Facilitator:
    """Facilitator engine.

    Runs protocol checks on each request, then hands it to the scheme
    registered for ``(scheme, network)``. Domain failures come back as
    structured responses; anything else propagates to the caller.

    Usage:
        facilitator = x402Facilitator()
        register_exact_evm_facilitator(facilitator, signer, asset, networks="polygon")
        result = await facilitator.verify(request)
    """

    def __init__(self) -> None:
        self._schemes: dict[tuple[str, str], SchemeNetworkFacilitator] = {}

    def register(
        self,
        networks: Network | list[Network],
        scheme: SchemeNetworkFacilitator,
    ) -> "x402Facilitator":
        """Register a scheme implementation for one or more networks.

        Returns:
            Self for chaining.
        """
        if isinstance(networks, str):
            networks = [networks]
        for network in networks:
            key = (scheme.scheme, str(network))
            if key in self._schemes:
                logger.warning("Replacing %s scheme registered for %s", *key)
            self._schemes[key] = scheme
            logger.info("Registered %s scheme for %s", *key)
        return self

    @property
    def schemes(self) -> set[str]:
        return {scheme for scheme, _ in self._schemes}

    def get_supported(self) -> SupportedResponse:
        """List supported payment kinds and the signer addresses per network."""
        kinds = []
        signers: dict[str, list[str]] = {}
        for (scheme_name, network), scheme in self._schemes.items():
            kinds.append(
                SupportedKind(
                    x402_version=X402_VERSION,
                    scheme=scheme_name,
                    network=network,
                    extra=scheme.get_extra(network),
                )
            )
            for address in scheme.get_signers(network):
                if address not in signers.setdefault(network, []):
                    signers[network].append(address)
        return SupportedResponse(kinds=kinds, signers=signers)

    async def verify(self, request: VerifyRequest) -> VerifyResponse:
        """Verify a payment without changing any state."""
        payer = request.payment_payload.payload.authorization.from_address

        reason = validate_protocol(request, self.schemes)
        if reason is not None:
            logger.info("Rejected verify request from %s: %s", payer, reason)
            return VerifyResponse(is_valid=False, invalid_reason=reason, payer=payer)

        scheme = self._find_scheme(request)
        if scheme is None:
            logger.info("No scheme registered for %s", request.payment_requirements.network)
            return VerifyResponse(is_valid=False, invalid_reason=ERR_INVALID_NETWORK, payer=payer)

        return await scheme.verify(request.payment_payload, request.payment_requirements)

    async def settle(self, request: SettleRequest) -> SettleResponse:
        """Re-verify a payment and submit it on-chain."""
        payer = request.payment_payload.payload.authorization.from_address
        network = str(request.payment_requirements.network)

        scheme = None
        reason = validate_protocol(request, self.schemes)
        if reason is None:
            scheme = self._find_scheme(request)
            if scheme is None:
                reason = ERR_INVALID_NETWORK

        if reason is not None or scheme is None:
            logger.info("Rejected settle request from %s: %s", payer, reason)
            return SettleResponse(
                success=False,
                error_reason=reason,
                payer=payer,
                transaction="",
                network=network,
            )

        return await scheme.settle(request.payment_payload, request.payment_requirements)

    def _find_scheme(self, request: VerifyRequest) -> SchemeNetworkFacilitator | None:
        return self._schemes.get(
            (request.payment_payload.scheme, str(request.payment_requirements.network))
        )
