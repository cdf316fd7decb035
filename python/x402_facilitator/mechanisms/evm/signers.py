"""Signer implementations backed by eth_account and web3."""

import asyncio
import logging
from typing import Any

from aiohttp import ClientTimeout
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted
from web3.middleware import ExtraDataToPOAMiddleware

from ...errors import ChainClientError
from .constants import (
    DEFAULT_RECEIPT_POLL_SECONDS,
    DEFAULT_RPC_TIMEOUT_SECONDS,
    EIP3009_TOKEN_ABI,
)
from .types import TransactionReceipt
from .utils import bytes_to_hex, checksum, get_network_config

logger = logging.getLogger(__name__)


class EthAccountSigner:
    """Client signer wrapping an ``eth_account`` local account."""

    def __init__(self, account: LocalAccount):
        self._account = account

    @classmethod
    def from_private_key(cls, private_key: str) -> "EthAccountSigner":
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        return cls(Account.from_key(private_key))

    @property
    def address(self) -> str:
        return self._account.address

    def sign_typed_data(self, full_message: dict[str, Any]) -> bytes:
        signable = encode_typed_data(full_message=full_message)
        return bytes(self._account.sign_message(signable).signature)


class FacilitatorWeb3Signer:
    """Facilitator chain client for one ERC-3009 token on one network.

    Reads ``authorizationState`` and ``balanceOf`` and submits
    ``transferWithAuthorization`` signed by the relayer account.
    """

    def __init__(
        self,
        account: LocalAccount,
        rpc_url: str,
        token_address: str,
        network: str,
        chain_id: int | None = None,
        rpc_timeout: float = DEFAULT_RPC_TIMEOUT_SECONDS,
        poll_latency: float = DEFAULT_RECEIPT_POLL_SECONDS,
    ):
        """Create a web3-backed facilitator signer.

        Args:
            account: Relayer account paying gas.
            rpc_url: JSON-RPC endpoint.
            token_address: ERC-3009 token contract.
            network: Network identifier, used for chain ID and POA handling.
            chain_id: Explicit chain ID overriding the network table.
            rpc_timeout: Per-request RPC timeout in seconds.
            poll_latency: Receipt polling interval in seconds.
        """
        config = get_network_config(network)
        self._account = account
        self._chain_id = chain_id or config["chain_id"]
        self._poll_latency = poll_latency

        # Serializes relayer nonce allocation across concurrent settlements
        self._submit_lock = asyncio.Lock()
        self._next_nonce: int | None = None

        self._w3 = AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(
                rpc_url,
                request_kwargs={"timeout": ClientTimeout(total=rpc_timeout)},
            )
        )
        if config["is_poa"]:
            self._w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        self._token = self._w3.eth.contract(
            address=checksum(token_address),
            abi=EIP3009_TOKEN_ABI,
        )

    @classmethod
    def from_private_key(
        cls,
        private_key: str,
        rpc_url: str,
        token_address: str,
        network: str,
        **kwargs: Any,
    ) -> "FacilitatorWeb3Signer":
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        return cls(Account.from_key(private_key), rpc_url, token_address, network, **kwargs)

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def chain_id(self) -> int:
        return self._chain_id

    async def read_authorization_state(self, authorizer: str, nonce: bytes) -> bool:
        try:
            state = await self._token.functions.authorizationState(
                checksum(authorizer), nonce
            ).call()
        except Exception as e:
            raise ChainClientError(f"authorizationState call failed: {e}") from e
        # Some tokens return bool, others a uint8 state enum
        return bool(int(state))

    async def read_balance(self, owner: str) -> int:
        try:
            balance = await self._token.functions.balanceOf(checksum(owner)).call()
        except Exception as e:
            raise ChainClientError(f"balanceOf call failed: {e}") from e
        return int(balance)

    async def read_decimals(self) -> int:
        try:
            return int(await self._token.functions.decimals().call())
        except Exception as e:
            raise ChainClientError(f"decimals call failed: {e}") from e

    async def transfer_with_authorization(
        self,
        from_addr: str,
        to: str,
        value: int,
        valid_after: int,
        valid_before: int,
        nonce: bytes,
        v: int,
        r: bytes,
        s: bytes,
    ) -> str:
        """Submit ``transferWithAuthorization`` from the relayer account.

        The relayer nonce is allocated under a lock and tracked locally, so
        concurrent submissions never reuse a nonce even when the node's
        pending count lags behind transactions already sent.
        """
        async with self._submit_lock:
            try:
                pending = await self._w3.eth.get_transaction_count(self.address, "pending")
                tx_nonce = max(pending, self._next_nonce or 0)
                tx_hash = await self._send_transfer(
                    tx_nonce, from_addr, to, value, valid_after, valid_before, nonce, v, r, s
                )
            except Exception as e:
                # Resync from the node on the next submission
                self._next_nonce = None
                raise ChainClientError(f"transferWithAuthorization submission failed: {e}") from e
            self._next_nonce = tx_nonce + 1

        tx_hex = bytes_to_hex(bytes(tx_hash))
        logger.debug("Submitted %s with relayer nonce %d", tx_hex, tx_nonce)
        return tx_hex

    async def _send_transfer(
        self,
        tx_nonce: int,
        from_addr: str,
        to: str,
        value: int,
        valid_after: int,
        valid_before: int,
        nonce: bytes,
        v: int,
        r: bytes,
        s: bytes,
    ) -> Any:
        tx = await self._token.functions.transferWithAuthorization(
            checksum(from_addr),
            checksum(to),
            value,
            valid_after,
            valid_before,
            nonce,
            v,
            r,
            s,
        ).build_transaction(
            {
                "from": self.address,
                "nonce": tx_nonce,
                "chainId": self._chain_id,
            }
        )
        signed = self._account.sign_transaction(tx)
        return await self._w3.eth.send_raw_transaction(signed.raw_transaction)

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        timeout: float,
    ) -> TransactionReceipt:
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=timeout,
                poll_latency=self._poll_latency,
            )
        except TimeExhausted as e:
            raise TimeoutError(f"Transaction {tx_hash} not mined within {timeout}s") from e
        except Exception as e:
            raise ChainClientError(f"Receipt lookup failed for {tx_hash}: {e}") from e

        return TransactionReceipt(
            transaction_hash=tx_hash,
            status=int(receipt["status"]),
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )
