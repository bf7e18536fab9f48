"""Wallet submission tests for the smart account and dry-run wallets."""

from __future__ import annotations

import logging
import types

import pytest

from rotator.chain.wallet import DryRunWallet, SmartAccountWallet, encode_step
from rotator.errors import CalldataEncodingFailure, NotInitialized, SubmissionFailure
from rotator.models import Account, TransactionBatch, TransactionStep
from tests.chain_mocks import ACCOUNT, OWNER, POOL, USDC, FakeBinding


class DummyEntryFunctions:
    """Capture ``execute``/``executeBatch`` arguments."""

    def __init__(self, calls: list) -> None:
        self._calls = calls

    def execute(self, target, value, data):
        self._calls.append(("execute", target, value, data))
        return types.SimpleNamespace(
            build_transaction=lambda params: {**params, "kind": "execute"}
        )

    def executeBatch(self, targets, values, datas):  # noqa: N802
        self._calls.append(("executeBatch", targets, values, datas))
        return types.SimpleNamespace(
            build_transaction=lambda params: {**params, "kind": "executeBatch"}
        )


class DummyEth:
    """Subset of ``w3.eth`` used by :class:`SmartAccountWallet`."""

    def __init__(self, *, status: int = 1, chain_id: int = 146, code: bytes = b"\x60") -> None:
        self.chain_id = chain_id
        self.gas_price = 2 * 10**9
        self.code = code
        self.status = status
        self.entry_calls: list = []
        self.sent_raw: list = []
        self.receipt_timeouts: list = []

    def contract(self, address, abi):
        return types.SimpleNamespace(
            address=address, functions=DummyEntryFunctions(self.entry_calls)
        )

    def get_code(self, address):
        return self.code

    def get_transaction_count(self, owner):
        return 7

    def send_raw_transaction(self, raw):
        self.sent_raw.append(raw)
        return b"\xab" * 32

    def wait_for_transaction_receipt(self, tx_hash, timeout=None):
        self.receipt_timeouts.append(timeout)
        return {"status": self.status}


class DummySigner:
    address = OWNER

    def __init__(self) -> None:
        self.signed: list = []

    def sign_transaction(self, tx):
        self.signed.append(tx)
        return types.SimpleNamespace(raw_transaction=b"\x01\x02")


def _wallet(eth: DummyEth, **kwargs) -> SmartAccountWallet:
    return SmartAccountWallet(types.SimpleNamespace(eth=eth), ACCOUNT, **kwargs)


def _approve_step() -> TransactionStep:
    return TransactionStep(FakeBinding(USDC), "approve", (POOL, 1), label="USDC.approve")


def _supply_step() -> TransactionStep:
    return TransactionStep(FakeBinding(POOL), "supply", (USDC, 1, ACCOUNT, 0), label="pool.supply")


def test_connect_returns_account_and_logs_address(caplog):
    wallet = _wallet(DummyEth(), chain_id=146)
    with caplog.at_level(logging.INFO):
        account = wallet.connect(DummySigner())
    assert account == Account(ACCOUNT, owner=OWNER)
    assert wallet.get_account() is account
    assert f"Smart Wallet Address: {ACCOUNT}" in caplog.text


def test_get_account_before_connect_raises():
    with pytest.raises(NotInitialized):
        _wallet(DummyEth()).get_account()


def test_connect_rejects_wrong_chain():
    with pytest.raises(NotInitialized):
        _wallet(DummyEth(chain_id=1), chain_id=146).connect(DummySigner())


def test_connect_rejects_account_without_code():
    with pytest.raises(NotInitialized):
        _wallet(DummyEth(code=b"")).connect(DummySigner())


class UnreachableEth(DummyEth):
    def get_code(self, address):
        raise ConnectionError("connection refused")


def test_connect_wraps_rpc_errors():
    wallet = _wallet(UnreachableEth(), chain_id=146)
    with pytest.raises(NotInitialized, match="RPC unavailable") as excinfo:
        wallet.connect(DummySigner())
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    with pytest.raises(NotInitialized):
        wallet.get_account()


def test_send_batch_is_one_execute_batch_transaction():
    eth = DummyEth()
    signer = DummySigner()
    wallet = _wallet(eth, tx_timeout_secs=30)
    account = wallet.connect(signer)
    batch = TransactionBatch((_approve_step(), _supply_step()), label="aave:supply")

    result = wallet.send_batch(batch, account)

    assert len(eth.sent_raw) == 1
    kind, targets, values, datas = eth.entry_calls[0]
    assert kind == "executeBatch"
    assert targets == [USDC, POOL]
    assert values == [0, 0]
    assert datas == ["0x" + b"approve".hex(), "0x" + b"supply".hex()]
    assert signer.signed[0]["from"] == OWNER
    assert signer.signed[0]["nonce"] == 7
    assert eth.receipt_timeouts == [30]
    assert result.tx_hash == "0x" + "ab" * 32
    assert result.steps == 2 and result.label == "aave:supply"


def test_send_transaction_uses_execute():
    eth = DummyEth()
    wallet = _wallet(eth)
    account = wallet.connect(DummySigner())
    result = wallet.send_transaction(_approve_step(), account)
    assert eth.entry_calls[0][:3] == ("execute", USDC, 0)
    assert result.steps == 1


def test_reverted_receipt_raises_with_hash():
    eth = DummyEth(status=0)
    wallet = _wallet(eth)
    account = wallet.connect(DummySigner())
    with pytest.raises(SubmissionFailure) as excinfo:
        wallet.send_transaction(_approve_step(), account)
    assert excinfo.value.tx_hash == "0x" + "ab" * 32


def test_gas_ceiling_blocks_submission():
    eth = DummyEth()
    eth.gas_price = 50 * 10**9
    wallet = _wallet(eth, max_gas_price_gwei=10)
    account = wallet.connect(DummySigner())
    with pytest.raises(SubmissionFailure):
        wallet.send_transaction(_approve_step(), account)
    assert eth.sent_raw == []


def test_encoding_failure_prevents_any_submission():
    eth = DummyEth()
    wallet = _wallet(eth)
    account = wallet.connect(DummySigner())
    bad = TransactionStep(FakeBinding(POOL, fail_encode=("supply",)), "supply", ())
    with pytest.raises(CalldataEncodingFailure):
        wallet.send_batch(TransactionBatch((_approve_step(), bad)), account)
    assert eth.sent_raw == []


def test_foreign_account_is_rejected():
    wallet = _wallet(DummyEth())
    wallet.connect(DummySigner())
    with pytest.raises(NotInitialized):
        wallet.send_transaction(_approve_step(), Account(OWNER))


def test_encode_step_rejects_empty_data():
    step = TransactionStep(FakeBinding(USDC, empty_encode=("approve",)), "approve", ())
    with pytest.raises(CalldataEncodingFailure):
        encode_step(step)


def test_dry_run_wallet_returns_synthetic_ids(caplog):
    wallet = DryRunWallet(ACCOUNT)
    account = wallet.connect()
    with caplog.at_level(logging.INFO):
        first = wallet.send_batch(
            TransactionBatch((_approve_step(), _supply_step()), label="aave:supply"),
            account,
        )
        second = wallet.send_transaction(_approve_step(), account)
    assert (first.tx_hash, second.tx_hash) == ("dry-run-1", "dry-run-2")
    assert first.dry_run and first.steps == 2
    assert wallet.submitted == [first, second]
    assert "[dry-run] would send batch" in caplog.text


def test_dry_run_wallet_requires_connect():
    with pytest.raises(NotInitialized):
        DryRunWallet(ACCOUNT).send_transaction(_approve_step(), Account(ACCOUNT))
