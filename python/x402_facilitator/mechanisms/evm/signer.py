"""Signer protocols for EVM x402 mechanisms."""

from typing import Any, Protocol

from .types import TransactionReceipt


class ClientEvmSigner(Protocol):
    """Protocol for client-side EIP-712 signing."""

    @property
    def address(self) -> str:
        """The payer's address."""
        ...

    def sign_typed_data(self, full_message: dict[str, Any]) -> bytes:
        """Sign an EIP-712 message.

        Args:
            full_message: Typed data with ``types``, ``primaryType``, ``domain``, ``message``.

        Returns:
            65-byte ``r || s || v`` signature.
        """
        ...


class FacilitatorEvmSigner(Protocol):
    """Protocol for the facilitator's chain client.

    Reads token state and submits ``transferWithAuthorization`` from the
    relayer account. Implementations raise ``ChainClientError`` on RPC
    failures and ``TimeoutError`` when a receipt does not arrive in time.
    A reverted transaction is reported through the receipt status.
    """

    @property
    def address(self) -> str:
        """The relayer account that pays gas for settlements."""
        ...

    async def read_authorization_state(self, authorizer: str, nonce: bytes) -> bool:
        """Return whether ``nonce`` has already been used by ``authorizer``."""
        ...

    async def read_balance(self, owner: str) -> int:
        """Return the token balance of ``owner`` in atomic units."""
        ...

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
        """Submit the transfer and return the 0x-prefixed transaction hash."""
        ...

    async def wait_for_confirmation(
        self,
        tx_hash: str,
        timeout: float,
    ) -> TransactionReceipt:
        """Block until ``tx_hash`` is mined or ``timeout`` seconds elapse."""
        ...
