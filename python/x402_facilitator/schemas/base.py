"""Base model and shared aliases for x402 facilitator schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Protocol version spoken by this facilitator
X402_VERSION = 1

# Network identifier, e.g. "polygon" or "eip155:137"
Network = str


class BaseX402Model(BaseModel):
    """Base for all wire models.

    Fields are declared in snake_case and exchanged in camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a camelCase JSON-compatible dict, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
