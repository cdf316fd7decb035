"""Constants for EVM x402 mechanisms."""

from typing import TypedDict


class NetworkConfig(TypedDict):
    """Static configuration for a supported EVM network."""

    chain_id: int
    is_poa: bool


class AssetInfo(TypedDict):
    """EIP-712 domain and display metadata of an ERC-3009 token."""

    address: str
    name: str
    version: str
    decimals: int


NETWORK_CONFIGS: dict[str, NetworkConfig] = {
    "polygon": {"chain_id": 137, "is_poa": True},
    "polygon-amoy": {"chain_id": 80002, "is_poa": True},
    "base": {"chain_id": 8453, "is_poa": False},
    "base-sepolia": {"chain_id": 84532, "is_poa": False},
}

CAIP2_EVM_PREFIX = "eip155:"

# Defaults for the EIP-3009 token served by the facilitator
DEFAULT_TOKEN_NAME = "JPY Coin"
DEFAULT_TOKEN_VERSION = "1"

# Timeouts (seconds)
DEFAULT_CONFIRMATION_TIMEOUT_SECONDS = 120
DEFAULT_RPC_TIMEOUT_SECONDS = 10
DEFAULT_RECEIPT_POLL_SECONDS = 2.0

# Validity window used by clients when none is requested
DEFAULT_VALIDITY_PERIOD_SECONDS = 3600
VALID_AFTER_SKEW_SECONDS = 60

# Signature layout: r(32) || s(32) || v(1)
SIGNATURE_LENGTH = 65
NONCE_LENGTH = 32

TX_STATUS_SUCCESS = 1

EIP712_DOMAIN_TYPES = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

TRANSFER_WITH_AUTHORIZATION_TYPES = [
    {"name": "from", "type": "address"},
    {"name": "to", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "validAfter", "type": "uint256"},
    {"name": "validBefore", "type": "uint256"},
    {"name": "nonce", "type": "bytes32"},
]

TRANSFER_WITH_AUTHORIZATION_PRIMARY_TYPE = "TransferWithAuthorization"

EIP3009_TOKEN_ABI = [
    {
        "name": "transferWithAuthorization",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "from", "type": "address"},
            {"name": "to", "type": "address"},
            {"name": "value", "type": "uint256"},
            {"name": "validAfter", "type": "uint256"},
            {"name": "validBefore", "type": "uint256"},
            {"name": "nonce", "type": "bytes32"},
            {"name": "v", "type": "uint8"},
            {"name": "r", "type": "bytes32"},
            {"name": "s", "type": "bytes32"},
        ],
        "outputs": [],
    },
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "authorizationState",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "authorizer", "type": "address"},
            {"name": "nonce", "type": "bytes32"},
        ],
        "outputs": [{"name": "", "type": "uint8"}],
    },
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
]
