"""EVM server implementation for the Exact payment scheme."""

from decimal import Decimal
from typing import Any

from ..constants import DEFAULT_VALIDITY_PERIOD_SECONDS, AssetInfo
from ..utils import get_network_config, is_evm_address, parse_amount
from .constants import SCHEME_EXACT


class ExactEvmScheme:
    """EVM server for the Exact payment scheme.

    Builds payment requirements for one ERC-3009 token. Display prices are
    converted with the token's own decimals.
    """

    scheme = SCHEME_EXACT

    def __init__(self, asset: AssetInfo):
        self._asset = asset

    def create_payment_requirements(
        self,
        network: str,
        pay_to: str,
        price: str | int | Decimal,
        max_timeout_seconds: int = DEFAULT_VALIDITY_PERIOD_SECONDS,
        resource: str | None = None,
        description: str | None = None,
        mime_type: str | None = None,
    ) -> dict[str, Any]:
        """Create PaymentRequirements for an exact EVM payment.

        ``price`` given as an ``int`` is taken as atomic units. Strings and
        Decimals are display amounts (``"$1.5"``, ``"0.01"``).
        """
        get_network_config(network)

        if not is_evm_address(pay_to):
            raise ValueError(f"Invalid payTo address: {pay_to}")

        if isinstance(price, bool):
            raise ValueError("Boolean is not a price")
        if isinstance(price, int):
            atomic_amount = price
        else:
            atomic_amount = parse_amount(price, self._asset["decimals"])
        if atomic_amount <= 0:
            raise ValueError(f"Price must be positive, got {price!r}")

        requirements: dict[str, Any] = {
            "scheme": SCHEME_EXACT,
            "network": network,
            "maxAmountRequired": str(atomic_amount),
            "payTo": pay_to,
            "asset": self._asset["address"],
            "maxTimeoutSeconds": max_timeout_seconds,
            "extra": {
                "name": self._asset["name"],
                "version": self._asset["version"],
                "decimals": self._asset["decimals"],
            },
        }
        if resource is not None:
            requirements["resource"] = resource
        if description is not None:
            requirements["description"] = description
        if mime_type is not None:
            requirements["mimeType"] = mime_type
        return requirements
