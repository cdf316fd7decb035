"""Facilitator settings loaded from the environment."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .errors import ConfigurationError
from .mechanisms.evm.constants import (
    DEFAULT_CONFIRMATION_TIMEOUT_SECONDS,
    DEFAULT_RPC_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_NAME,
    DEFAULT_TOKEN_VERSION,
    AssetInfo,
)
from .mechanisms.evm.utils import get_evm_chain_id, is_evm_address

DEFAULT_NETWORK = "polygon"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 4021
SERVICE_NAME = "x402-facilitator"


@dataclass
class FacilitatorSettings:
    """Runtime settings of the facilitator service.

    ``token_decimals`` of None means "read ``decimals()`` from the token".
    """

    relayer_private_key: str
    rpc_url: str
    token_address: str
    network: str = DEFAULT_NETWORK
    chain_id: int | None = None
    token_name: str = DEFAULT_TOKEN_NAME
    token_version: str = DEFAULT_TOKEN_VERSION
    token_decimals: int | None = None
    confirmation_timeout_seconds: float = DEFAULT_CONFIRMATION_TIMEOUT_SECONDS
    rpc_timeout_seconds: float = DEFAULT_RPC_TIMEOUT_SECONDS
    redis_url: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    cors_allow_origins: list[str] = field(default_factory=lambda: ["*"])
    service_name: str = SERVICE_NAME

    def __post_init__(self) -> None:
        if not is_evm_address(self.token_address):
            raise ConfigurationError(f"Invalid token contract address: {self.token_address}")
        if self.chain_id is None:
            try:
                self.chain_id = get_evm_chain_id(self.network)
            except ValueError as e:
                raise ConfigurationError(f"{e}; set CHAIN_ID explicitly") from e

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "FacilitatorSettings":
        """Load settings from environment variables (and ``.env`` if present).

        Raises:
            ConfigurationError: Listing every missing required variable, or
                naming a malformed one.
        """
        if dotenv:
            load_dotenv()

        relayer_pk = os.getenv("RELAYER_PK", "")
        rpc_url = os.getenv("RPC_URL", "")
        token_address = os.getenv("TOKEN_CONTRACT_ADDRESS") or os.getenv(
            "JPYC_CONTRACT_ADDRESS", ""
        )

        missing = [
            name
            for name, value in (
                ("RELAYER_PK", relayer_pk),
                ("RPC_URL", rpc_url),
                ("TOKEN_CONTRACT_ADDRESS", token_address),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

        return cls(
            relayer_private_key=relayer_pk,
            rpc_url=rpc_url,
            token_address=token_address,
            network=os.getenv("NETWORK", DEFAULT_NETWORK),
            chain_id=_env_int("CHAIN_ID"),
            token_name=os.getenv("TOKEN_NAME", DEFAULT_TOKEN_NAME),
            token_version=os.getenv("TOKEN_VERSION", DEFAULT_TOKEN_VERSION),
            token_decimals=_env_int("TOKEN_DECIMALS"),
            confirmation_timeout_seconds=_env_float(
                "CONFIRMATION_TIMEOUT_SECONDS", DEFAULT_CONFIRMATION_TIMEOUT_SECONDS
            ),
            rpc_timeout_seconds=_env_float("RPC_TIMEOUT_SECONDS", DEFAULT_RPC_TIMEOUT_SECONDS),
            redis_url=os.getenv("REDIS_URL") or None,
            host=os.getenv("HOST", DEFAULT_HOST),
            port=_env_int("PORT") or DEFAULT_PORT,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )

    def asset_info(self, decimals: int) -> AssetInfo:
        """Token metadata for the scheme, with ``decimals`` resolved by the caller."""
        return {
            "address": self.token_address,
            "name": self.token_name,
            "version": self.token_version,
            "decimals": decimals,
        }


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
