"""Shared fixtures: deterministic keys, a fake token contract and request builders."""

import asyncio

import pytest
from eth_account import Account

from x402_facilitator import x402Facilitator
from x402_facilitator.mechanisms.evm.eip712 import build_transfer_typed_data
from x402_facilitator.mechanisms.evm.exact import (
    ExactEvmFacilitatorScheme,
    ExactEvmSchemeConfig,
    register_exact_evm_facilitator,
)
from x402_facilitator.mechanisms.evm.signers import EthAccountSigner
from x402_facilitator.mechanisms.evm.types import (
    TransactionReceipt,
    TransferAuthorization,
    TypedDataDomain,
)
from x402_facilitator.mechanisms.evm.utils import bytes_to_hex, hex_to_bytes
from x402_facilitator.nonces import InMemoryNonceStore

NOW = 1_700_000_000
NETWORK = "polygon"
CHAIN_ID = 137
ONE_TOKEN = 10**18

TOKEN_ADDRESS = "0x431d5dff03120afa4bdf332c61a6e1766ef37bdb"
ASSET = {
    "address": TOKEN_ADDRESS,
    "name": "JPY Coin",
    "version": "1",
    "decimals": 18,
}

PAYER = Account.from_key("0x" + "11" * 32)
PAYEE = Account.from_key("0x" + "22" * 32)
RELAYER = Account.from_key("0x" + "33" * 32)
STRANGER = Account.from_key("0x" + "44" * 32)

DOMAIN = TypedDataDomain(
    name=ASSET["name"],
    version=ASSET["version"],
    chain_id=CHAIN_ID,
    verifying_contract=TOKEN_ADDRESS,
)


class FakeTokenChain:
    """In-memory ERC-3009 token implementing FacilitatorEvmSigner."""

    def __init__(self, balance: int = 100 * ONE_TOKEN):
        self.balance = balance
        self.consumed: set[tuple[str, bytes]] = set()
        self.submitted: list[dict] = []
        self.state_error: Exception | None = None
        self.balance_error: BaseException | None = None
        self.submit_error: Exception | None = None
        self.confirmation_error: Exception | None = None
        self.confirmation_delay = 0.0
        self.receipt_status = 1
        self.state_reads = 0
        self.balance_reads = 0

    @property
    def address(self) -> str:
        return RELAYER.address

    async def read_authorization_state(self, authorizer: str, nonce: bytes) -> bool:
        self.state_reads += 1
        if self.state_error is not None:
            raise self.state_error
        return (authorizer.lower(), nonce) in self.consumed

    async def read_balance(self, owner: str) -> int:
        self.balance_reads += 1
        if self.balance_error is not None:
            raise self.balance_error
        return self.balance

    async def transfer_with_authorization(
        self, from_addr, to, value, valid_after, valid_before, nonce, v, r, s
    ) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(
            {
                "from": from_addr,
                "to": to,
                "value": value,
                "valid_after": valid_after,
                "valid_before": valid_before,
                "nonce": nonce,
                "v": v,
                "r": r,
                "s": s,
            }
        )
        if self.receipt_status == 1:
            self.consumed.add((from_addr.lower(), nonce))
            self.balance -= value
        return "0x" + f"{len(self.submitted):064x}"

    async def wait_for_confirmation(self, tx_hash: str, timeout: float) -> TransactionReceipt:
        if self.confirmation_delay:
            await asyncio.sleep(self.confirmation_delay)
        if self.confirmation_error is not None:
            raise self.confirmation_error
        return TransactionReceipt(
            transaction_hash=tx_hash,
            status=self.receipt_status,
            block_number=42,
            gas_used=60_000,
        )


def sign_authorization(account, authorization: dict, domain: TypedDataDomain = DOMAIN) -> str:
    """Sign a wire authorization dict with ``account``."""
    parsed = TransferAuthorization(
        from_address=authorization["from"],
        to=authorization["to"],
        value=int(authorization["value"]),
        valid_after=int(authorization["validAfter"]),
        valid_before=int(authorization["validBefore"]),
        nonce=hex_to_bytes(authorization["nonce"]),
    )
    signer = EthAccountSigner(account)
    return bytes_to_hex(signer.sign_typed_data(build_transfer_typed_data(parsed, domain)))


def build_request(
    value: int | str = ONE_TOKEN,
    max_amount: int | str = ONE_TOKEN,
    valid_after: int | str = NOW - 10,
    valid_before: int | str = NOW + 600,
    nonce: str = "0x" + "ab" * 32,
    payer=PAYER,
    to: str | None = None,
    pay_to: str | None = None,
    signer=None,
    signature: str | None = None,
    network: str = NETWORK,
    version: int = 1,
) -> dict:
    """Build a camelCase verify/settle request body."""
    authorization = {
        "from": payer.address,
        "to": to or PAYEE.address,
        "value": str(value),
        "validAfter": str(valid_after),
        "validBefore": str(valid_before),
        "nonce": nonce,
    }
    if signature is None:
        try:
            signature = sign_authorization(signer or payer, authorization)
        except Exception:
            # Malformed fields cannot be signed; any well-formed signature will do
            signature = "0x" + "00" * 65
    return {
        "x402Version": version,
        "paymentPayload": {
            "x402Version": version,
            "scheme": "exact",
            "network": network,
            "payload": {"signature": signature, "authorization": authorization},
        },
        "paymentRequirements": {
            "scheme": "exact",
            "network": network,
            "maxAmountRequired": str(max_amount),
            "payTo": pay_to or PAYEE.address,
            "asset": TOKEN_ADDRESS,
            "maxTimeoutSeconds": 600,
            "extra": {"name": ASSET["name"], "version": ASSET["version"]},
        },
    }


@pytest.fixture
def chain() -> FakeTokenChain:
    return FakeTokenChain()


@pytest.fixture
def nonce_store() -> InMemoryNonceStore:
    return InMemoryNonceStore()


@pytest.fixture
def scheme_config(nonce_store) -> ExactEvmSchemeConfig:
    return ExactEvmSchemeConfig(
        confirmation_timeout_seconds=5,
        nonce_store=nonce_store,
        clock=lambda: NOW,
    )


@pytest.fixture
def scheme(chain, scheme_config) -> ExactEvmFacilitatorScheme:
    return ExactEvmFacilitatorScheme(chain, ASSET, CHAIN_ID, scheme_config)


@pytest.fixture
def facilitator(chain, scheme_config) -> x402Facilitator:
    facilitator = x402Facilitator()
    register_exact_evm_facilitator(
        facilitator, chain, ASSET, networks=NETWORK, config=scheme_config
    )
    return facilitator


@pytest.fixture
def make_request():
    return build_request
