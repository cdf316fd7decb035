"""Registration helpers for the EVM exact payment scheme."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ....facilitator import x402Facilitator
    from ..constants import AssetInfo
    from ..signer import FacilitatorEvmSigner
    from .facilitator import ExactEvmSchemeConfig


def register_exact_evm_facilitator(
    facilitator: "x402Facilitator",
    signer: "FacilitatorEvmSigner",
    asset: "AssetInfo",
    networks: str | list[str],
    chain_id: int | None = None,
    config: "ExactEvmSchemeConfig | None" = None,
) -> "x402Facilitator":
    """Register the EVM exact payment scheme to x402Facilitator.

    Args:
        facilitator: x402Facilitator instance.
        signer: EVM chain client for verification/settlement.
        asset: Token served on these networks.
        networks: Network(s) to register.
        chain_id: EIP-712 chain ID (default: derived from the first network).
        config: Optional scheme configuration.

    Returns:
        Facilitator for chaining.
    """
    from ..utils import get_evm_chain_id
    from .facilitator import ExactEvmScheme as ExactEvmFacilitatorScheme

    if isinstance(networks, str):
        networks = [networks]
    if not networks:
        raise ValueError("At least one network is required")

    if chain_id is None:
        chain_id = get_evm_chain_id(networks[0])

    scheme = ExactEvmFacilitatorScheme(signer, asset, chain_id, config)
    facilitator.register(networks, scheme)

    return facilitator
