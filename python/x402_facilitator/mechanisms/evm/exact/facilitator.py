"""EVM facilitator implementation for the Exact payment scheme."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ....errors import SettlementError
from ....nonces import InMemoryNonceStore, NonceStore
from ....schemas import (
    Network,
    PaymentPayload,
    PaymentRequirements,
    SettleResponse,
    VerifyResponse,
)
from ....schemas.reasons import (
    ERR_INSUFFICIENT_FUNDS,
    ERR_INVALID_PAYLOAD,
    SETTLE_CONFIRMATION_FAILED,
    SETTLE_CONFIRMATION_TIMEOUT,
    SETTLE_SUBMISSION_FAILED,
    SETTLE_TRANSACTION_REVERTED,
)
from ..constants import DEFAULT_CONFIRMATION_TIMEOUT_SECONDS, TX_STATUS_SUCCESS, AssetInfo
from ..signer import FacilitatorEvmSigner
from ..types import TransferAuthorization, TypedDataDomain
from ..utils import addresses_equal, bytes_to_hex, format_amount
from ..verify import parse_signature, verify_authorization_signature
from .constants import SCHEME_EXACT
from .validation import validate_authorization

logger = logging.getLogger(__name__)


def _unix_now() -> int:
    return int(time.time())


def _invalid(reason: str, payer: str) -> VerifyResponse:
    return VerifyResponse(is_valid=False, invalid_reason=reason, payer=payer)


def _reraise_cancellation(result: Any) -> None:
    if isinstance(result, BaseException) and not isinstance(result, Exception):
        raise result


@dataclass
class ExactEvmSchemeConfig:
    """Configuration for ExactEvmScheme facilitator.

    Attributes:
        confirmation_timeout_seconds: Upper bound on waiting for a receipt.
        nonce_store: Local record of consumed nonces.
        clock: Returns the current unix time in seconds.
    """

    confirmation_timeout_seconds: float = DEFAULT_CONFIRMATION_TIMEOUT_SECONDS
    nonce_store: NonceStore = field(default_factory=InMemoryNonceStore)
    clock: Callable[[], int] = _unix_now


class ExactEvmScheme:
    """EVM facilitator implementation for the Exact payment scheme.

    Verifies ERC-3009 ``transferWithAuthorization`` payloads against the
    payment requirements, token state and the payer's EIP-712 signature,
    and settles them by submitting the transfer from the relayer account.

    Attributes:
        scheme: The scheme identifier ("exact").
    """

    scheme = SCHEME_EXACT

    def __init__(
        self,
        signer: FacilitatorEvmSigner,
        asset: AssetInfo,
        chain_id: int,
        config: ExactEvmSchemeConfig | None = None,
    ):
        """Create ExactEvmScheme facilitator.

        Args:
            signer: Chain client for reads and settlement.
            asset: The ERC-3009 token and its EIP-712 domain metadata.
            chain_id: Chain ID used in the EIP-712 domain.
            config: Optional configuration.
        """
        self._signer = signer
        self._asset = asset
        self._config = config or ExactEvmSchemeConfig()
        self._domain = TypedDataDomain(
            name=asset["name"],
            version=asset["version"],
            chain_id=chain_id,
            verifying_contract=asset["address"],
        )

    @property
    def domain(self) -> TypedDataDomain:
        return self._domain

    def get_extra(self, network: Network) -> dict[str, Any] | None:
        return {
            "name": self._asset["name"],
            "version": self._asset["version"],
            "asset": self._asset["address"],
            "decimals": self._asset["decimals"],
        }

    def get_signers(self, network: Network) -> list[str]:
        return [self._signer.address]

    async def verify(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> VerifyResponse:
        """Verify an exact payment payload.

        Validates, in order:
        - Authorization fields against the requirements
        - Nonce not already consumed (local record, then on-chain, fail-open)
        - Payer balance covers the value (fail-closed)
        - EIP-712 signature recovers to ``from``

        Never mutates state.

        Args:
            payload: Payment payload from client.
            requirements: Payment requirements.

        Returns:
            VerifyResponse with is_valid and payer.
        """
        response, _ = await self._verify(payload, requirements)
        return response

    async def settle(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> SettleResponse:
        """Settle an exact payment on-chain.

        1. Re-verify payment
        2. Execute transferWithAuthorization with the payer's (v, r, s)
        3. Wait for the receipt, bounded by the confirmation timeout
        4. Record the nonce locally

        Args:
            payload: Payment payload from client.
            requirements: Payment requirements.

        Returns:
            SettleResponse with success and transaction hash.
        """
        network = str(requirements.network)
        verification, authorization = await self._verify(payload, requirements)
        if not verification.is_valid or authorization is None:
            return SettleResponse(
                success=False,
                error_reason=verification.invalid_reason,
                payer=verification.payer,
                transaction="",
                network=network,
            )

        payer = verification.payer
        logger.info(
            "Settling authorization from %s to %s, value %s (%s)",
            authorization.from_address,
            authorization.to,
            authorization.value,
            format_amount(authorization.value, self._asset["decimals"]),
        )

        tx_hash = ""
        try:
            signature = parse_signature(payload.payload.signature)
            tx_hash = await self._signer.transfer_with_authorization(
                from_addr=authorization.from_address,
                to=authorization.to,
                value=authorization.value,
                valid_after=authorization.valid_after,
                valid_before=authorization.valid_before,
                nonce=authorization.nonce,
                v=signature.v,
                r=signature.r,
                s=signature.s,
            )
            logger.info("Transaction sent: %s", tx_hash)

            timeout = self._config.confirmation_timeout_seconds
            receipt = await asyncio.wait_for(
                self._signer.wait_for_confirmation(tx_hash, timeout),
                timeout=timeout,
            )
            if getattr(receipt, "status", None) != TX_STATUS_SUCCESS:
                raise SettlementError("Transaction reverted", transaction=tx_hash)

        except (TimeoutError, asyncio.TimeoutError):
            logger.error("Transaction %s not confirmed in time", tx_hash)
            return self._settle_failure(payer, network, tx_hash, SETTLE_CONFIRMATION_TIMEOUT)
        except SettlementError:
            logger.error("Transaction %s reverted", tx_hash)
            return self._settle_failure(payer, network, tx_hash, SETTLE_TRANSACTION_REVERTED)
        except Exception:
            logger.exception("Settlement failed for %s", payer)
            category = SETTLE_CONFIRMATION_FAILED if tx_hash else SETTLE_SUBMISSION_FAILED
            return self._settle_failure(payer, network, tx_hash, category)

        await self._record_nonce(authorization)
        logger.info("Transaction confirmed: %s, block %s", tx_hash, receipt.block_number)

        return SettleResponse(
            success=True,
            payer=payer,
            transaction=tx_hash,
            network=network,
        )

    # --- Internal helpers ---

    async def _verify(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> tuple[VerifyResponse, TransferAuthorization | None]:
        payer = payload.payload.authorization.from_address

        authorization, reason = validate_authorization(
            payload.payload.authorization,
            requirements,
            self._config.clock(),
        )
        if reason is not None or authorization is None:
            logger.info("Rejected authorization from %s: %s", payer, reason)
            return _invalid(reason or ERR_INVALID_PAYLOAD, payer), None

        # The signature only binds the configured token's domain
        if not addresses_equal(requirements.asset, self._asset["address"]):
            logger.info(
                "Rejected authorization from %s: asset %s is not %s",
                payer,
                requirements.asset,
                self._asset["address"],
            )
            return _invalid(ERR_INVALID_PAYLOAD, payer), None

        reason = await self._check_local_nonce(authorization)
        if reason is None:
            reason = await self._check_chain_state(authorization)
        if reason is not None:
            logger.info("Rejected authorization from %s: %s", payer, reason)
            return _invalid(reason, payer), None

        result = verify_authorization_signature(
            authorization,
            payload.payload.signature,
            self._domain,
        )
        if not result.is_valid:
            logger.info("Rejected authorization from %s: %s", payer, result.invalid_reason)
            return _invalid(result.invalid_reason, payer), None

        return VerifyResponse(is_valid=True, payer=payer), authorization

    async def _check_local_nonce(self, authorization: TransferAuthorization) -> str | None:
        try:
            used = await self._config.nonce_store.has(
                authorization.from_address, bytes_to_hex(authorization.nonce)
            )
        except Exception as e:
            logger.warning("Local nonce lookup failed, relying on chain state: %s", e)
            return None
        return ERR_INVALID_PAYLOAD if used else None

    async def _check_chain_state(self, authorization: TransferAuthorization) -> str | None:
        """Read nonce state and balance concurrently and apply their policies.

        A failed nonce read is treated as "not consumed" because the contract
        rejects a reused nonce at settlement. A failed balance read rejects.
        """
        nonce_used, balance = await asyncio.gather(
            self._signer.read_authorization_state(
                authorization.from_address, authorization.nonce
            ),
            self._signer.read_balance(authorization.from_address),
            return_exceptions=True,
        )
        _reraise_cancellation(nonce_used)
        _reraise_cancellation(balance)

        if isinstance(nonce_used, Exception):
            logger.warning(
                "Failed to check authorization state for %s: %s",
                authorization.from_address,
                nonce_used,
            )
        elif nonce_used:
            return ERR_INVALID_PAYLOAD

        if isinstance(balance, Exception):
            logger.warning(
                "Failed to check balance for %s: %s",
                authorization.from_address,
                balance,
            )
            return ERR_INVALID_PAYLOAD
        if not isinstance(balance, int) or isinstance(balance, bool):
            logger.warning("Malformed balance for %s: %r", authorization.from_address, balance)
            return ERR_INVALID_PAYLOAD
        if balance < authorization.value:
            return ERR_INSUFFICIENT_FUNDS

        return None

    async def _record_nonce(self, authorization: TransferAuthorization) -> None:
        try:
            await self._config.nonce_store.add(
                authorization.from_address, bytes_to_hex(authorization.nonce)
            )
        except Exception as e:
            logger.warning("Failed to record nonce locally: %s", e)

    def _settle_failure(
        self,
        payer: str,
        network: str,
        tx_hash: str,
        category: str,
    ) -> SettleResponse:
        return SettleResponse(
            success=False,
            error_reason=ERR_INVALID_PAYLOAD,
            error_message=category,
            payer=payer,
            transaction=tx_hash,
            network=network,
        )
