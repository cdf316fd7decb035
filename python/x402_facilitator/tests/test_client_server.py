"""Tests for the exact scheme's resource-server and client helpers."""

from decimal import Decimal

import pytest
from conftest import ASSET, NOW, PAYEE, PAYER

from x402_facilitator.mechanisms.evm.exact import ExactEvmClientScheme, ExactEvmServerScheme
from x402_facilitator.mechanisms.evm.signers import EthAccountSigner
from x402_facilitator.schemas import PaymentRequirements, VerifyRequest

SIX_DECIMAL_ASSET = {**ASSET, "decimals": 6}


class TestCreatePaymentRequirements:
    def test_display_price_uses_asset_decimals(self):
        server = ExactEvmServerScheme(ASSET)
        requirements = server.create_payment_requirements("polygon", PAYEE.address, "$1.5")
        assert requirements["maxAmountRequired"] == "1500000000000000000"
        assert requirements["extra"] == {"name": "JPY Coin", "version": "1", "decimals": 18}

    def test_six_decimal_token(self):
        server = ExactEvmServerScheme(SIX_DECIMAL_ASSET)
        requirements = server.create_payment_requirements(
            "base", PAYEE.address, Decimal("0.01")
        )
        assert requirements["maxAmountRequired"] == "10000"

    def test_int_price_is_atomic(self):
        server = ExactEvmServerScheme(ASSET)
        requirements = server.create_payment_requirements("polygon", PAYEE.address, 5)
        assert requirements["maxAmountRequired"] == "5"

    def test_optional_fields(self):
        server = ExactEvmServerScheme(ASSET)
        requirements = server.create_payment_requirements(
            "polygon",
            PAYEE.address,
            "1",
            resource="https://api.example/report",
            mime_type="application/json",
        )
        assert requirements["resource"] == "https://api.example/report"
        assert requirements["mimeType"] == "application/json"
        assert "description" not in requirements
        PaymentRequirements.model_validate(requirements)

    @pytest.mark.parametrize("price", ["0", "-1", "0.0000000000000000001", 1.5, True])
    def test_rejects_bad_prices(self, price):
        server = ExactEvmServerScheme(ASSET)
        with pytest.raises(ValueError):
            server.create_payment_requirements("polygon", PAYEE.address, price)

    def test_rejects_bad_pay_to(self):
        server = ExactEvmServerScheme(ASSET)
        with pytest.raises(ValueError, match="payTo"):
            server.create_payment_requirements("polygon", "0x1234", "1")

    def test_rejects_unknown_network(self):
        server = ExactEvmServerScheme(ASSET)
        with pytest.raises(ValueError):
            server.create_payment_requirements("solana", PAYEE.address, "1")


class TestCreatePaymentPayload:
    @pytest.fixture
    def requirements(self) -> PaymentRequirements:
        server = ExactEvmServerScheme(ASSET)
        return PaymentRequirements.model_validate(
            server.create_payment_requirements("polygon", PAYEE.address, "1")
        )

    def test_payload_shape(self, requirements):
        client = ExactEvmClientScheme(EthAccountSigner(PAYER))
        payload = client.create_payment_payload(requirements, now=NOW)

        assert payload["x402Version"] == 1
        assert payload["scheme"] == "exact"
        assert payload["network"] == "polygon"
        authorization = payload["payload"]["authorization"]
        assert authorization["from"] == PAYER.address
        assert authorization["to"] == PAYEE.address
        assert authorization["value"] == str(10**18)
        assert authorization["validAfter"] == str(NOW - 60)
        assert authorization["validBefore"] == str(NOW + 3600)
        assert len(authorization["nonce"]) == 66

    def test_nonces_are_unique(self, requirements):
        client = ExactEvmClientScheme(EthAccountSigner(PAYER))
        first = client.create_payment_payload(requirements, now=NOW)
        second = client.create_payment_payload(requirements, now=NOW)
        assert (
            first["payload"]["authorization"]["nonce"]
            != second["payload"]["authorization"]["nonce"]
        )

    @pytest.mark.asyncio
    async def test_payload_verifies(self, requirements, facilitator):
        client = ExactEvmClientScheme(EthAccountSigner(PAYER))
        payload = client.create_payment_payload(requirements, now=NOW)

        request = VerifyRequest.model_validate(
            {
                "x402Version": 1,
                "paymentPayload": payload,
                "paymentRequirements": requirements.to_dict(),
            }
        )
        result = await facilitator.verify(request)
        assert result.is_valid is True

    def test_requires_domain_hints(self, requirements):
        requirements.extra = None
        client = ExactEvmClientScheme(EthAccountSigner(PAYER))
        with pytest.raises(ValueError, match="EIP-712"):
            client.create_payment_payload(requirements, now=NOW)
