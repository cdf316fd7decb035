"""EVM mechanisms: ERC-3009 typed data, signature recovery and chain clients."""

from .constants import NETWORK_CONFIGS, AssetInfo, NetworkConfig
from .signer import ClientEvmSigner, FacilitatorEvmSigner
from .signers import EthAccountSigner, FacilitatorWeb3Signer
from .types import ParsedSignature, TransactionReceipt, TransferAuthorization, TypedDataDomain
from .utils import format_amount, get_evm_chain_id, get_network_config, parse_amount

__all__ = [
    "NETWORK_CONFIGS",
    "AssetInfo",
    "ClientEvmSigner",
    "EthAccountSigner",
    "FacilitatorEvmSigner",
    "FacilitatorWeb3Signer",
    "NetworkConfig",
    "ParsedSignature",
    "TransactionReceipt",
    "TransferAuthorization",
    "TypedDataDomain",
    "format_amount",
    "get_evm_chain_id",
    "get_network_config",
    "parse_amount",
]
