"""Tests for decimal/base-unit conversion and precision resolution."""

from __future__ import annotations

import logging

import pytest

from rotator.chain.contracts import ContractReader
from rotator.engine.units import UnitConverter, from_base_units, to_base_units
from rotator.errors import AmountConversionFailure
from rotator.models import TokenHandle
from tests.chain_mocks import USDC, FakeBinding


@pytest.mark.parametrize(
    ("amount", "decimals", "expected"),
    [
        ("1", 6, 1_000_000),
        ("0.5", 6, 500_000),
        ("1.000001", 6, 1_000_001),
        ("0.000001", 6, 1),
        ("1.5", 8, 150_000_000),
        ("0.00000001", 8, 1),
        ("1", 18, 10**18),
        ("0.4567890123456789012", 18, None),
        ("0", 6, 0),
        (".5", 6, 500_000),
        ("2.", 6, 2_000_000),
        ("7", 0, 7),
    ],
)
def test_to_base_units_exact(amount, decimals, expected):
    if expected is None:
        with pytest.raises(AmountConversionFailure):
            to_base_units(amount, decimals)
    else:
        assert to_base_units(amount, decimals) == expected


def test_to_base_units_accepts_trailing_zero_excess():
    assert to_base_units("1.50000000", 6) == 1_500_000
    assert to_base_units("3.0", 0) == 3


def test_to_base_units_maximal_fraction_digits():
    assert to_base_units("0.123456789012345678", 18) == 123_456_789_012_345_678


def test_to_base_units_never_rounds_through_float():
    # 0.1 + 0.2 style inputs stay exact
    assert to_base_units("0.3", 18) == 3 * 10**17
    assert to_base_units("9007199254740993", 0) == 9007199254740993


@pytest.mark.parametrize("amount", ["", ".", "abc", "-1", "1e6", "1,5", "1.2.3", " "])
def test_to_base_units_rejects_garbage(amount):
    with pytest.raises(AmountConversionFailure):
        to_base_units(amount, 6)


def test_to_base_units_rejects_excess_precision():
    with pytest.raises(AmountConversionFailure):
        to_base_units("1.0000001", 6)


def test_to_base_units_rejects_non_string():
    with pytest.raises(AmountConversionFailure):
        to_base_units(1.5, 6)  # type: ignore[arg-type]


def test_from_base_units_trims():
    assert from_base_units(500_000, 6) == "0.5"
    assert from_base_units(1_000_000, 6) == "1"
    assert from_base_units(1, 18) == "0.000000000000000001"
    assert from_base_units(0, 6) == "0"
    assert from_base_units(12, 0) == "12"


def _handle(decimals, hint=None):
    return TokenHandle(FakeBinding(USDC, {"decimals": decimals}), "USDC", hint)


def test_converter_reads_decimals_each_time():
    binding = FakeBinding(USDC, {"decimals": 8})
    conv = UnitConverter(ContractReader())
    handle = TokenHandle(binding, "USDC")
    assert conv.to_base_units("1", handle) == 100_000_000
    assert conv.to_base_units("2", handle) == 200_000_000
    assert [c[0] for c in binding.calls] == ["decimals", "decimals"]


def test_converter_falls_back_when_lookup_fails(caplog):
    conv = UnitConverter(ContractReader(), fallback_decimals=6)
    handle = _handle(RuntimeError("rpc down"))
    with caplog.at_level(logging.WARNING):
        assert conv.to_base_units("1", handle) == 1_000_000
    assert "decimals() lookup failed" in caplog.text
    assert "Falling back to 6 decimals" in caplog.text


def test_converter_prefers_token_hint_over_global_fallback():
    conv = UnitConverter(ContractReader(), fallback_decimals=6)
    assert conv.resolve_decimals(_handle(RuntimeError("x"), hint=18)) == 18


def test_converter_rejects_unusable_decimals_value():
    conv = UnitConverter(ContractReader(), fallback_decimals=6)
    assert conv.resolve_decimals(_handle("not-a-number")) == 6
    assert conv.resolve_decimals(_handle(200)) == 6


def test_converter_invalid_fallback_raises():
    conv = UnitConverter(ContractReader(), fallback_decimals=-1)
    with pytest.raises(AmountConversionFailure):
        conv.resolve_decimals(_handle(RuntimeError("x")))
