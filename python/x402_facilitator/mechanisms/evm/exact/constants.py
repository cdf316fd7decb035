"""Constants for the EVM exact scheme."""

# Scheme identifier
SCHEME_EXACT = "exact"
