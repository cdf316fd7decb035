"""EVM exact payment scheme.

The `exact` scheme settles a single ERC-3009 ``transferWithAuthorization``
signed by the payer for at least the required amount. The facilitator
verifies the authorization off-chain and submits it from its relayer
account, paying gas.

Usage (client):
    from x402_facilitator.mechanisms.evm.exact import ExactEvmClientScheme
    payload = ExactEvmClientScheme(signer).create_payment_payload(requirements)

Usage (server):
    from x402_facilitator.mechanisms.evm.exact import ExactEvmServerScheme
    requirements = ExactEvmServerScheme(asset).create_payment_requirements(
        "polygon", pay_to, "$1.00"
    )

Usage (facilitator):
    from x402_facilitator.mechanisms.evm.exact import register_exact_evm_facilitator
    register_exact_evm_facilitator(facilitator, signer, asset, networks="polygon")
"""

from .client import ExactEvmScheme as ExactEvmClientScheme
from .constants import SCHEME_EXACT
from .facilitator import ExactEvmScheme as ExactEvmFacilitatorScheme
from .facilitator import ExactEvmSchemeConfig
from .register import register_exact_evm_facilitator
from .server import ExactEvmScheme as ExactEvmServerScheme
from .validation import validate_authorization

__all__ = [
    "SCHEME_EXACT",
    "ExactEvmClientScheme",
    "ExactEvmFacilitatorScheme",
    "ExactEvmSchemeConfig",
    "ExactEvmServerScheme",
    "register_exact_evm_facilitator",
    "validate_authorization",
]
