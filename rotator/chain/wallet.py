"""Wallet collaborators that submit steps and batches for the smart account.

:class:`SmartAccountWallet` routes every call through the smart account's
``execute``/``executeBatch`` entry points, signed by the owner key. A batch is
therefore a single on-chain transaction: either every step executes or none
does. :class:`DryRunWallet` mirrors the interface without touching the chain.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any

from rotator.abis import SMART_ACCOUNT_ABI
from rotator.errors import CalldataEncodingFailure, NotInitialized, SubmissionFailure
from rotator.models import Account, TransactionBatch, TransactionStep, TxResult

log = logging.getLogger(__name__)


def encode_step(step: TransactionStep) -> str:
    """Return call data for *step*, raising :class:`CalldataEncodingFailure`."""

    try:
        data = step.calldata()
    except Exception as exc:
        raise CalldataEncodingFailure(step.describe(), str(exc)) from exc
    if not data or data == "0x":
        raise CalldataEncodingFailure(step.describe(), "empty call data")
    return data


class Wallet(ABC):
    """Interface for the signing/sending identity."""

    dry_run: bool = False

    @abstractmethod
    def connect(self, signer: Any) -> Account:
        """Attach *signer* and return the smart account it controls."""

    @abstractmethod
    def get_account(self) -> Account:
        """Return the connected account or raise :class:`NotInitialized`."""

    @abstractmethod
    def send_transaction(self, step: TransactionStep, account: Account) -> TxResult:
        """Submit a single call and wait for confirmation."""

    @abstractmethod
    def send_batch(self, batch: TransactionBatch, account: Account) -> TxResult:
        """Submit *batch* atomically and wait for confirmation."""


class SmartAccountWallet(Wallet):
    """Owner-signed smart account backed by ``web3``."""

    def __init__(
        self,
        w3: Any,
        account_address: str,
        *,
        chain_id: int | None = None,
        max_gas_price_gwei: float | None = None,
        tx_timeout_secs: float = 120,
    ) -> None:
        from web3 import Web3

        self._w3 = w3
        self._address = Web3.to_checksum_address(account_address)
        self._chain_id = chain_id
        self._max_gas_price_gwei = max_gas_price_gwei
        self._timeout = tx_timeout_secs
        self._entry = w3.eth.contract(address=self._address, abi=SMART_ACCOUNT_ABI)
        self._signer: Any = None
        self._account: Account | None = None

    def connect(self, signer: Any) -> Account:
        if signer is None:
            raise NotInitialized("a signer is required to connect the smart wallet")
        try:
            actual = int(self._w3.eth.chain_id) if self._chain_id is not None else None
            code = self._w3.eth.get_code(self._address)
        except Exception as exc:
            raise NotInitialized(f"RPC unavailable while connecting: {exc}") from exc
        if actual is not None and actual != int(self._chain_id):
            raise NotInitialized(
                f"RPC is on chain {actual}, expected chain {self._chain_id}"
            )
        if not code:
            raise NotInitialized(f"no smart account deployed at {self._address}")
        self._signer = signer
        self._account = Account(address=self._address, owner=signer.address)
        log.info("Smart Wallet Address: %s (owner %s)", self._address, signer.address)
        return self._account

    def get_account(self) -> Account:
        if self._account is None:
            raise NotInitialized("Smart wallet not initialized. Call connect() first.")
        return self._account

    def _check_account(self, account: Account) -> None:
        if account.address != self.get_account().address:
            raise NotInitialized(
                f"account {account.address} is not the connected smart account"
            )

    def send_transaction(self, step: TransactionStep, account: Account) -> TxResult:
        self._check_account(account)
        data = encode_step(step)
        fn = self._entry.functions.execute(step.target, 0, data)
        return self._submit(fn, step.describe(), 1)

    def send_batch(self, batch: TransactionBatch, account: Account) -> TxResult:
        self._check_account(account)
        datas = [encode_step(step) for step in batch]
        targets = [step.target for step in batch]
        fn = self._entry.functions.executeBatch(targets, [0] * len(targets), datas)
        return self._submit(fn, batch.label or batch.describe(), len(batch))

    def _submit(self, fn: Any, label: str, steps: int) -> TxResult:
        from web3 import Web3

        owner = self._signer.address
        try:
            gas_price = self._w3.eth.gas_price
        except Exception as exc:
            raise SubmissionFailure(f"{label}: gas price unavailable: {exc}") from exc
        if self._max_gas_price_gwei and gas_price > self._max_gas_price_gwei * 10**9:
            raise SubmissionFailure(
                f"{label}: gas price {gas_price} wei exceeds configured maximum "
                f"{self._max_gas_price_gwei} gwei"
            )

        try:
            nonce = self._w3.eth.get_transaction_count(owner)
            tx = fn.build_transaction({"from": owner, "nonce": nonce})
            signed = self._signer.sign_transaction(tx)
            tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as exc:
            raise SubmissionFailure(f"{label}: submission failed: {exc}") from exc

        hash_hex = Web3.to_hex(tx_hash)
        log.debug("%s submitted %s; waiting for receipt", label, hash_hex)
        try:
            receipt = self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._timeout
            )
        except Exception as exc:
            raise SubmissionFailure(
                f"{label}: not confirmed: {exc}", tx_hash=hash_hex
            ) from exc
        if int(receipt["status"]) != 1:
            raise SubmissionFailure(f"{label}: reverted", tx_hash=hash_hex)
        return TxResult(tx_hash=hash_hex, label=label, steps=steps)


class DryRunWallet(Wallet):
    """Encodes and logs submissions, returning synthetic transaction ids."""

    dry_run = True

    def __init__(self, account_address: str) -> None:
        self._address = account_address
        self._account: Account | None = None
        self._counter = itertools.count(1)
        self.submitted: list[TxResult] = []

    def connect(self, signer: Any = None) -> Account:
        owner = getattr(signer, "address", None)
        self._account = Account(address=self._address, owner=owner)
        log.info("[dry-run] Smart Wallet Address: %s", self._address)
        return self._account

    def get_account(self) -> Account:
        if self._account is None:
            raise NotInitialized("Smart wallet not initialized. Call connect() first.")
        return self._account

    def _record(self, label: str, steps: int) -> TxResult:
        result = TxResult(
            tx_hash=f"dry-run-{next(self._counter)}",
            label=label,
            steps=steps,
            dry_run=True,
        )
        self.submitted.append(result)
        return result

    def send_transaction(self, step: TransactionStep, account: Account) -> TxResult:
        self.get_account()
        encode_step(step)
        log.info("[dry-run] would send %s from %s", step.describe(), account.address)
        return self._record(step.describe(), 1)

    def send_batch(self, batch: TransactionBatch, account: Account) -> TxResult:
        self.get_account()
        for step in batch:
            encode_step(step)
        log.info(
            "[dry-run] would send batch %s from %s", batch.describe(), account.address
        )
        return self._record(batch.label or batch.describe(), len(batch))


__all__ = [
    "Wallet",
    "SmartAccountWallet",
    "DryRunWallet",
    "encode_step",
]
