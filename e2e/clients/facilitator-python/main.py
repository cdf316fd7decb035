"""x402 Facilitator E2E Test Client.

One-shot client that signs an exact payment for the configured token,
verifies it and settles it through a running facilitator, and outputs a
structured JSON result for the e2e test framework to parse.
"""

import json
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Get environment variables
facilitator_url = os.getenv("FACILITATOR_URL", "").rstrip("/")
evm_private_key = os.getenv("EVM_PRIVATE_KEY", "")
pay_to = os.getenv("EVM_PAYEE_ADDRESS", "")
price = os.getenv("PRICE", "0.01")

if not facilitator_url or not evm_private_key or not pay_to:
    result = {
        "success": False,
        "error": "Missing required environment variables: FACILITATOR_URL, EVM_PRIVATE_KEY, EVM_PAYEE_ADDRESS",
    }
    print(json.dumps(result))
    sys.exit(1)


def main() -> dict:
    """Pay through the facilitator. Returns the e2e result dict."""
    import httpx

    from x402_facilitator import X402_VERSION, PaymentRequirements
    from x402_facilitator.mechanisms.evm.exact import (
        ExactEvmClientScheme,
        ExactEvmServerScheme,
    )
    from x402_facilitator.mechanisms.evm.signers import EthAccountSigner

    try:
        with httpx.Client(base_url=facilitator_url, timeout=180.0) as http:
            # Token and network come from the facilitator's supported kinds
            supported = http.get("/supported").json()
            kind = supported["kinds"][0]
            extra = kind["extra"]

            server = ExactEvmServerScheme(
                {
                    "address": extra["asset"],
                    "name": extra["name"],
                    "version": extra["version"],
                    "decimals": extra["decimals"],
                }
            )
            requirements = PaymentRequirements.model_validate(
                server.create_payment_requirements(
                    kind["network"],
                    pay_to,
                    price,
                    resource="e2e://facilitator",
                    description="Facilitator e2e payment",
                )
            )

            signer = EthAccountSigner.from_private_key(evm_private_key)
            payload = ExactEvmClientScheme(signer).create_payment_payload(requirements)

            body = {
                "x402Version": X402_VERSION,
                "paymentPayload": payload,
                "paymentRequirements": requirements.to_dict(),
            }

            verify = http.post("/verify", json=body)
            verify_result = verify.json()
            if not verify_result.get("isValid"):
                return {
                    "success": False,
                    "status_code": verify.status_code,
                    "verify_response": verify_result,
                }

            settle = http.post("/settle", json=body)
            settle_result = settle.json()

            return {
                "success": bool(settle_result.get("success")),
                "status_code": settle.status_code,
                "verify_response": verify_result,
                "payment_response": settle_result,
            }
    except Exception as e:
        return {
            "success": False,
            "error": str(e),
            "status_code": 500,
        }


if __name__ == "__main__":
    e2e_result = main()
    print(json.dumps(e2e_result))
    sys.exit(0 if e2e_result.get("success") else 1)
