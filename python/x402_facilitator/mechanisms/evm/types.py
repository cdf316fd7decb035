"""EVM mechanism types."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TypedDataDomain:
    """EIP-712 domain of the token contract.

    Attributes:
        name: Token name as declared in the contract's domain.
        version: Domain version string.
        chain_id: EVM chain ID.
        verifying_contract: Token contract address.
    """

    name: str
    version: str
    chain_id: int
    verifying_contract: str


@dataclass(frozen=True)
class TransferAuthorization:
    """Parsed ERC-3009 authorization with integer amounts and a raw nonce."""

    from_address: str
    to: str
    value: int
    valid_after: int
    valid_before: int
    nonce: bytes


@dataclass(frozen=True)
class ParsedSignature:
    """An ECDSA signature split into the components the token contract takes.

    ``v`` is always in the legacy ``{27, 28}`` form.
    """

    v: int
    r: bytes
    s: bytes


@dataclass
class TransactionReceipt:
    """Minimal view of a mined transaction receipt."""

    transaction_hash: str
    status: int
    block_number: int | None = None
    gas_used: int | None = None
