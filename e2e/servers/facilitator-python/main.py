"""x402 Facilitator Server.

Serves /verify, /settle, /supported and /health for ERC-3009 exact payments
on a single EVM network. Configuration is read from the environment (see
FacilitatorSettings).
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()


async def resolve_decimals(settings, signer) -> int:
    """Use configured decimals, or read them from the token contract."""
    if settings.token_decimals is not None:
        return settings.token_decimals
    return await signer.read_decimals()


def main() -> None:
    """Start the facilitator server."""
    import uvicorn

    from x402_facilitator import ConfigurationError, create_nonce_store, x402Facilitator
    from x402_facilitator.config import FacilitatorSettings
    from x402_facilitator.http import create_app
    from x402_facilitator.mechanisms.evm.exact import (
        ExactEvmSchemeConfig,
        register_exact_evm_facilitator,
    )
    from x402_facilitator.mechanisms.evm.signers import FacilitatorWeb3Signer

    try:
        settings = FacilitatorSettings.from_env(dotenv=False)
    except ConfigurationError as e:
        print(str(e))
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("x402_facilitator.server")

    signer = FacilitatorWeb3Signer.from_private_key(
        settings.relayer_private_key,
        settings.rpc_url,
        settings.token_address,
        settings.network,
        chain_id=settings.chain_id,
        rpc_timeout=settings.rpc_timeout_seconds,
    )
    decimals = asyncio.run(resolve_decimals(settings, signer))

    facilitator = x402Facilitator()
    register_exact_evm_facilitator(
        facilitator,
        signer,
        settings.asset_info(decimals),
        networks=settings.network,
        chain_id=settings.chain_id,
        config=ExactEvmSchemeConfig(
            confirmation_timeout_seconds=settings.confirmation_timeout_seconds,
            nonce_store=create_nonce_store(settings.redis_url),
        ),
    )

    app = create_app(
        facilitator,
        cors_allow_origins=settings.cors_allow_origins,
        service_name=settings.service_name,
    )

    logger.info("Relayer address: %s", signer.address)
    logger.info(
        "Token %s (%s v%s, %d decimals) on %s (chain %d)",
        settings.token_address,
        settings.token_name,
        settings.token_version,
        decimals,
        settings.network,
        settings.chain_id,
    )
    logger.info("Facilitator listening on %s:%d", settings.host, settings.port)

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="warning")


if __name__ == "__main__":
    main()
