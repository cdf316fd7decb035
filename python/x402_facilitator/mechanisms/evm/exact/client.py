"""EVM client implementation for the Exact payment scheme."""

from datetime import timedelta
from typing import Any

from ....schemas import (
    X402_VERSION,
    ExactEvmAuthorization,
    ExactEvmPayload,
    PaymentPayload,
    PaymentRequirements,
)
from ..constants import DEFAULT_TOKEN_VERSION, DEFAULT_VALIDITY_PERIOD_SECONDS
from ..eip712 import build_transfer_typed_data
from ..signer import ClientEvmSigner
from ..types import TransferAuthorization, TypedDataDomain
from ..utils import (
    bytes_to_hex,
    create_nonce,
    create_validity_window,
    get_evm_chain_id,
    parse_integer,
    parse_nonce,
)
from .constants import SCHEME_EXACT


class ExactEvmScheme:
    """EVM client implementation for the Exact payment scheme.

    Signs an ERC-3009 authorization paying exactly ``maxAmountRequired``
    to ``payTo``.
    """

    scheme = SCHEME_EXACT

    def __init__(self, signer: ClientEvmSigner):
        """Create ExactEvmScheme.

        Args:
            signer: EVM signer for payment authorizations.
        """
        self._signer = signer

    def create_payment_payload(
        self,
        requirements: PaymentRequirements,
        now: int | None = None,
    ) -> dict[str, Any]:
        """Create a signed payment payload for ``requirements``.

        Args:
            requirements: Payment requirements with EIP-712 domain info in ``extra``.
            now: Optional unix time to anchor the validity window at.

        Returns:
            Payment payload dict (camelCase, ready for the wire).
        """
        nonce = create_nonce()
        valid_after, valid_before = create_validity_window(
            timedelta(
                seconds=requirements.max_timeout_seconds or DEFAULT_VALIDITY_PERIOD_SECONDS
            ),
            now=now,
        )

        authorization = ExactEvmAuthorization(
            from_address=self._signer.address,
            to=requirements.pay_to,
            value=str(parse_integer(requirements.max_amount_required)),
            valid_after=str(valid_after),
            valid_before=str(valid_before),
            nonce=nonce,
        )

        signature = self._sign_authorization(authorization, requirements)

        payload = PaymentPayload(
            x402_version=X402_VERSION,
            scheme=SCHEME_EXACT,
            network=requirements.network,
            payload=ExactEvmPayload(signature=signature, authorization=authorization),
        )
        return payload.to_dict()

    def _sign_authorization(
        self,
        authorization: ExactEvmAuthorization,
        requirements: PaymentRequirements,
    ) -> str:
        """Sign the authorization with EIP-712.

        Args:
            authorization: The authorization to sign.
            requirements: Payment requirements with EIP-712 domain info.

        Returns:
            Hex-encoded signature with 0x prefix.
        """
        extra = requirements.extra or {}
        if "name" not in extra:
            raise ValueError("EIP-712 domain parameters (name, version) required in extra")

        domain = TypedDataDomain(
            name=extra["name"],
            version=extra.get("version", DEFAULT_TOKEN_VERSION),
            chain_id=get_evm_chain_id(str(requirements.network)),
            verifying_contract=requirements.asset,
        )
        parsed = TransferAuthorization(
            from_address=authorization.from_address,
            to=authorization.to,
            value=parse_integer(authorization.value),
            valid_after=parse_integer(authorization.valid_after),
            valid_before=parse_integer(authorization.valid_before),
            nonce=parse_nonce(authorization.nonce),
        )

        sig_bytes = self._signer.sign_typed_data(build_transfer_typed_data(parsed, domain))
        return bytes_to_hex(sig_bytes)
