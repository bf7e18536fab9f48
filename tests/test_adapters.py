"""Protocol adapter tests over the recording wallet."""

from __future__ import annotations

import logging

import pytest

from rotator.chain.contracts import ContractReader
from rotator.engine.assembler import TransactionAssembler
from rotator.engine.guard import BalanceGuard
from rotator.engine.units import UnitConverter
from rotator.errors import (
    InsufficientFunds,
    NotInitialized,
    NothingToRedeem,
    SubmissionFailure,
)
from rotator.metrics.exporter import ROTATION_ERRORS_TOTAL, ROTATION_TXS_TOTAL
from rotator.protocols import AaveAdapter, SiloAdapter, WithdrawMode
from tests.chain_mocks import RecordingWallet, make_contracts


def _adapters(wallet=None, **contract_kwargs):
    wallet = wallet or RecordingWallet()
    wallet.connect()
    reader = ContractReader()
    converter = UnitConverter(reader)
    assembler = TransactionAssembler(
        make_contracts(**contract_kwargs), converter, BalanceGuard(converter, reader)
    )
    return wallet, AaveAdapter(wallet, assembler), SiloAdapter(wallet, assembler)


def test_withdraw_modes():
    assert AaveAdapter.withdraw_mode is WithdrawMode.PARTIAL
    assert SiloAdapter.withdraw_mode is WithdrawMode.FULL_BALANCE


def test_aave_deposit_submits_batch_and_counts():
    wallet, aave, _ = _adapters()
    before = ROTATION_TXS_TOTAL.labels("aave", "deposit", "live")._value.get()
    result = aave.deposit("1")
    assert wallet.sent[0][0] == "batch"
    assert result.amount_raw == 1_000_000
    assert ROTATION_TXS_TOTAL.labels("aave", "deposit", "live")._value.get() == before + 1


def test_aave_withdraw_requires_amount():
    _, aave, _ = _adapters()
    with pytest.raises(ValueError):
        aave.withdraw()


def test_aave_withdraw_single_step():
    wallet, aave, _ = _adapters()
    aave.withdraw("0.5")
    kind, step = wallet.sent[0]
    assert kind == "single" and step.args[1] == 500_000


def test_silo_withdraw_ignores_amount_and_redeems_all(caplog):
    wallet, _, silo = _adapters(shares=42)
    with caplog.at_level(logging.WARNING):
        result = silo.withdraw("1")
    assert "ignoring requested amount" in caplog.text
    assert wallet.sent[0][1].args[0] == 42
    assert result.amount_raw == 42


def test_silo_withdraw_without_shares_is_skipped_in_dry_run():
    wallet, _, silo = _adapters(RecordingWallet(dry_run=True), shares=0)
    assert silo.withdraw() is None
    assert wallet.sent == []


def test_silo_withdraw_without_shares_raises_when_live():
    wallet, _, silo = _adapters(shares=0)
    with pytest.raises(NothingToRedeem):
        silo.withdraw()
    assert wallet.sent == []


def test_insufficient_funds_submits_nothing():
    wallet, aave, silo = _adapters(balance=10)
    with pytest.raises(InsufficientFunds):
        aave.deposit("1")
    with pytest.raises(InsufficientFunds):
        silo.deposit("1")
    assert wallet.sent == []


def test_submission_failure_propagates_and_counts_error():
    wallet = RecordingWallet(fail_on=lambda label: label == "silo:deposit")
    _, _, silo = _adapters(wallet)
    before = ROTATION_ERRORS_TOTAL.labels("silo:deposit")._value.get()
    with pytest.raises(SubmissionFailure):
        silo.deposit("1")
    assert ROTATION_ERRORS_TOTAL.labels("silo:deposit")._value.get() == before + 1


def test_adapter_requires_connected_wallet():
    reader = ContractReader()
    converter = UnitConverter(reader)
    assembler = TransactionAssembler(
        make_contracts(), converter, BalanceGuard(converter, reader)
    )
    with pytest.raises(NotInitialized):
        AaveAdapter(RecordingWallet(), assembler).deposit("1")


def test_position_reads():
    _, aave, silo = _adapters(shares=7, atoken_balance=3_000_000)
    assert aave.position_raw() == 3_000_000
    assert silo.position_raw() == 7


def test_aave_position_unknown_without_atoken():
    _, aave, _ = _adapters()
    assert aave.position_raw() is None


def test_mode_follows_wallet():
    _, aave, _ = _adapters(RecordingWallet(dry_run=True))
    assert aave.mode == "dry_run"
