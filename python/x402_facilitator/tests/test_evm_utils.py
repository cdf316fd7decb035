"""Unit tests for EVM helpers."""

from datetime import timedelta
from decimal import Decimal

import pytest

from x402_facilitator.mechanisms.evm.utils import (
    create_nonce,
    create_validity_window,
    format_amount,
    get_evm_chain_id,
    get_network_config,
    is_evm_address,
    parse_amount,
    parse_integer,
    parse_nonce,
)


class TestNetworks:
    @pytest.mark.parametrize(
        "network,chain_id",
        [
            ("polygon", 137),
            ("polygon-amoy", 80002),
            ("base", 8453),
            ("base-sepolia", 84532),
            ("eip155:137", 137),
            ("eip155:1", 1),
        ],
    )
    def test_chain_ids(self, network, chain_id):
        assert get_evm_chain_id(network) == chain_id

    def test_polygon_is_poa(self):
        assert get_network_config("eip155:137")["is_poa"] is True
        assert get_network_config("base")["is_poa"] is False

    @pytest.mark.parametrize("network", ["solana", "eip155:", "eip155:abc"])
    def test_unknown(self, network):
        with pytest.raises(ValueError):
            get_network_config(network)


class TestAddresses:
    def test_lowercase_is_valid(self):
        assert is_evm_address("0x431d5dff03120afa4bdf332c61a6e1766ef37bdb")

    @pytest.mark.parametrize(
        "value",
        ["", "0x", "0x1234", "431d5dff03120afa4bdf332c61a6e1766ef37bdb", None, 42],
    )
    def test_invalid(self, value):
        assert not is_evm_address(value)


class TestParseInteger:
    def test_big_values_stay_exact(self):
        max_uint256 = 2**256 - 1
        assert parse_integer(str(max_uint256)) == max_uint256
        assert parse_integer(str(10**18 + 1)) == 1_000_000_000_000_000_001

    def test_hex(self):
        assert parse_integer("0x10") == 16

    def test_int_passthrough(self):
        assert parse_integer(10**30) == 10**30

    @pytest.mark.parametrize("value", ["1e18", "1.0", " ", "١٢٣", True, 1.0, None])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValueError):
            parse_integer(value)


class TestNonces:
    def test_create_nonce(self):
        nonce = create_nonce()
        assert len(parse_nonce(nonce)) == 32

    def test_parse_requires_32_bytes(self):
        with pytest.raises(ValueError):
            parse_nonce("0x" + "00" * 31)

    def test_validity_window(self):
        assert create_validity_window(timedelta(minutes=10), now=1000) == (940, 1600)


class TestAmounts:
    @pytest.mark.parametrize(
        "amount,decimals,expected",
        [
            ("1", 18, 10**18),
            ("$0.01", 6, 10_000),
            ("123456789.123456789123456789", 18, 123456789123456789123456789),
            (Decimal("2.5"), 1, 25),
            (7, 2, 700),
        ],
    )
    def test_parse_amount(self, amount, decimals, expected):
        assert parse_amount(amount, decimals) == expected

    @pytest.mark.parametrize("amount", ["1.001", "abc", "-1", "NaN", 0.1])
    def test_parse_amount_rejects(self, amount):
        with pytest.raises(ValueError):
            parse_amount(amount, 2)

    @pytest.mark.parametrize(
        "atomic,decimals,expected",
        [
            (10**18, 18, "1"),
            (1, 18, "0.000000000000000001"),
            (123456789123456789123456789, 18, "123456789.123456789123456789"),
            (1500, 3, "1.5"),
            (42, 0, "42"),
        ],
    )
    def test_format_amount(self, atomic, decimals, expected):
        assert format_amount(atomic, decimals) == expected
