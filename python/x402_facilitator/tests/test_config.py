"""Tests for environment-driven facilitator settings."""

import pytest

from x402_facilitator.config import FacilitatorSettings
from x402_facilitator.errors import ConfigurationError

TOKEN = "0x431d5dff03120afa4bdf332c61a6e1766ef37bdb"

ENV_KEYS = [
    "RELAYER_PK",
    "RPC_URL",
    "TOKEN_CONTRACT_ADDRESS",
    "JPYC_CONTRACT_ADDRESS",
    "NETWORK",
    "CHAIN_ID",
    "TOKEN_NAME",
    "TOKEN_VERSION",
    "TOKEN_DECIMALS",
    "CONFIRMATION_TIMEOUT_SECONDS",
    "RPC_TIMEOUT_SECONDS",
    "REDIS_URL",
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "CORS_ALLOW_ORIGINS",
]


@pytest.fixture
def env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("RELAYER_PK", "0x" + "33" * 32)
    monkeypatch.setenv("RPC_URL", "https://polygon-rpc.example")
    monkeypatch.setenv("TOKEN_CONTRACT_ADDRESS", TOKEN)
    return monkeypatch


class TestFromEnv:
    def test_defaults(self, env):
        settings = FacilitatorSettings.from_env(dotenv=False)
        assert settings.network == "polygon"
        assert settings.chain_id == 137
        assert settings.token_name == "JPY Coin"
        assert settings.token_version == "1"
        assert settings.token_decimals is None
        assert settings.confirmation_timeout_seconds == 120
        assert settings.port == 4021
        assert settings.log_level == "INFO"
        assert settings.cors_allow_origins == ["*"]
        assert settings.redis_url is None

    def test_overrides(self, env):
        env.setenv("NETWORK", "polygon-amoy")
        env.setenv("TOKEN_DECIMALS", "6")
        env.setenv("CONFIRMATION_TIMEOUT_SECONDS", "30.5")
        env.setenv("PORT", "8080")
        env.setenv("LOG_LEVEL", "debug")
        env.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
        env.setenv("REDIS_URL", "redis://cache:6379/1")

        settings = FacilitatorSettings.from_env(dotenv=False)

        assert settings.chain_id == 80002
        assert settings.token_decimals == 6
        assert settings.confirmation_timeout_seconds == 30.5
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]
        assert settings.redis_url == "redis://cache:6379/1"

    def test_legacy_token_variable(self, env):
        env.delenv("TOKEN_CONTRACT_ADDRESS")
        env.setenv("JPYC_CONTRACT_ADDRESS", TOKEN)
        assert FacilitatorSettings.from_env(dotenv=False).token_address == TOKEN

    def test_lists_every_missing_variable(self, env):
        env.delenv("RELAYER_PK")
        env.delenv("TOKEN_CONTRACT_ADDRESS")
        with pytest.raises(ConfigurationError) as exc_info:
            FacilitatorSettings.from_env(dotenv=False)
        message = str(exc_info.value)
        assert "RELAYER_PK" in message
        assert "TOKEN_CONTRACT_ADDRESS" in message
        assert "RPC_URL" not in message

    def test_malformed_integer(self, env):
        env.setenv("CHAIN_ID", "polygon")
        with pytest.raises(ConfigurationError, match="CHAIN_ID"):
            FacilitatorSettings.from_env(dotenv=False)

    def test_unknown_network_needs_chain_id(self, env):
        env.setenv("NETWORK", "gnosis")
        with pytest.raises(ConfigurationError, match="CHAIN_ID"):
            FacilitatorSettings.from_env(dotenv=False)

        env.setenv("CHAIN_ID", "100")
        assert FacilitatorSettings.from_env(dotenv=False).chain_id == 100

    def test_invalid_token_address(self, env):
        env.setenv("TOKEN_CONTRACT_ADDRESS", "0x1234")
        with pytest.raises(ConfigurationError, match="token contract"):
            FacilitatorSettings.from_env(dotenv=False)


class TestAssetInfo:
    def test_uses_resolved_decimals(self, env):
        settings = FacilitatorSettings.from_env(dotenv=False)
        assert settings.asset_info(6) == {
            "address": TOKEN,
            "name": "JPY Coin",
            "version": "1",
            "decimals": 6,
        }
