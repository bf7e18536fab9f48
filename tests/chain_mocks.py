"""Test doubles for contract bindings and the signing wallet."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from rotator.chain.contracts import (
    LendingContract,
    ProtocolContracts,
    RouterContract,
    TokenContract,
    VaultContract,
)
from rotator.chain.wallet import Wallet, encode_step
from rotator.config import RotationConfig
from rotator.errors import NotInitialized, SubmissionFailure
from rotator.models import Account, TransactionBatch, TransactionStep, TxResult

# Digit-only addresses are already in checksum form.
ACCOUNT = "0x" + "11" * 20
USDC = "0x" + "22" * 20
POOL = "0x" + "33" * 20
ROUTER = "0x" + "44" * 20
VAULT = "0x" + "55" * 20
ATOKEN = "0x" + "66" * 20
OWNER = "0x" + "77" * 20


class FakeBinding:
    """Contract binding returning canned read values.

    ``values`` maps method names to a value, a callable taking the call
    arguments, or an exception instance to raise.
    """

    def __init__(
        self,
        address: str,
        values: Optional[dict[str, Any]] = None,
        *,
        fail_encode: tuple[str, ...] = (),
        empty_encode: tuple[str, ...] = (),
    ) -> None:
        self.address = address
        self.values = dict(values or {})
        self.fail_encode = set(fail_encode)
        self.empty_encode = set(empty_encode)
        self.encoded: List[tuple[str, tuple]] = []
        self.calls: List[tuple[str, tuple]] = []

    def encode(self, method: str, args) -> str:
        if method in self.fail_encode:
            raise ValueError(f"cannot encode {method}")
        if method in self.empty_encode:
            return "0x"
        self.encoded.append((method, tuple(args)))
        return "0x" + method.encode().hex()

    def call(self, method: str, *args: Any) -> Any:
        self.calls.append((method, args))
        value = self.values[method]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(*args)
        return value


class RecordingWallet(Wallet):
    """Wallet that records every submission and returns fake hashes."""

    def __init__(
        self,
        address: str = ACCOUNT,
        *,
        dry_run: bool = False,
        fail_on: Optional[Callable[[str], bool]] = None,
        on_send: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.address = address
        self.dry_run = dry_run
        self.fail_on = fail_on
        self.on_send = on_send
        self.sent: List[tuple[str, Any]] = []
        self._account: Account | None = None

    def connect(self, signer: Any = None) -> Account:
        self._account = Account(self.address, owner=getattr(signer, "address", None))
        return self._account

    def get_account(self) -> Account:
        if self._account is None:
            raise NotInitialized("Smart wallet not initialized. Call connect() first.")
        return self._account

    def _result(self, label: str, steps: int) -> TxResult:
        if self.fail_on is not None and self.fail_on(label):
            raise SubmissionFailure(f"{label}: reverted", tx_hash="0xdead")
        if self.on_send is not None:
            self.on_send(label)
        return TxResult(f"0x{len(self.sent):064x}", label, steps=steps, dry_run=self.dry_run)

    def send_transaction(self, step: TransactionStep, account: Account) -> TxResult:
        encode_step(step)
        self.sent.append(("single", step))
        return self._result(step.describe(), 1)

    def send_batch(self, batch: TransactionBatch, account: Account) -> TxResult:
        for step in batch:
            encode_step(step)
        self.sent.append(("batch", batch))
        return self._result(batch.label, len(batch))

    @property
    def labels(self) -> list[str]:
        return [
            payload.label if kind == "batch" else payload.describe()
            for kind, payload in self.sent
        ]


def make_contracts(
    *,
    balance: int = 100_000_000,
    decimals: Any = 6,
    shares: int = 0,
    atoken_balance: int | None = None,
    router_binding: Any = None,
) -> ProtocolContracts:
    """Return role wrappers over fake bindings with the given balances."""

    usdc = FakeBinding(USDC, {"decimals": decimals, "balanceOf": lambda owner: balance})
    vault = FakeBinding(VAULT, {"decimals": 6, "balanceOf": lambda owner: shares})
    atoken = None
    if atoken_balance is not None:
        atoken = TokenContract(
            FakeBinding(ATOKEN, {"decimals": 6, "balanceOf": lambda o: atoken_balance}),
            "aUSDC",
        )
    return ProtocolContracts(
        usdc=TokenContract(usdc, "USDC"),
        pool=LendingContract(FakeBinding(POOL)),
        router=RouterContract(router_binding or FakeBinding(ROUTER)),
        vault=VaultContract(vault),
        atoken=atoken,
    )


def make_config(**overrides: Any) -> RotationConfig:
    """Return a dry-run-friendly :class:`RotationConfig` for tests."""

    base = RotationConfig(
        rpc_url="http://localhost:8545",
        chain_id=146,
        private_key=None,
        smart_account_address=ACCOUNT,
        usdc_address=USDC,
        aave_pool_address=POOL,
        aave_atoken_address=None,
        silo_router_address=ROUTER,
        silo_vault_address=VAULT,
        amount="1",
        cycles=1,
        hold_secs=0,
        settle_secs=0,
    )
    return base.with_overrides(**overrides)
