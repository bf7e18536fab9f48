"""Shared data models for rotation operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rotator.chain.contracts import ContractBinding


@dataclass(frozen=True)
class Account:
    """Smart account used as sender and recipient of every call."""

    address: str
    owner: str | None = None


@dataclass(frozen=True)
class TokenHandle:
    """ERC-20 token identity.

    ``decimals_hint`` is only consulted when the on-chain ``decimals()`` read
    fails; precision is otherwise resolved again on every conversion.
    """

    binding: "ContractBinding"
    symbol: str
    decimals_hint: int | None = None

    @property
    def address(self) -> str:
        return self.binding.address


@dataclass(frozen=True)
class TransactionStep:
    """Description of a single contract call that has not been submitted."""

    contract: "ContractBinding"
    method: str
    args: tuple[Any, ...] = ()
    label: str = ""

    @property
    def target(self) -> str:
        return self.contract.address

    def calldata(self) -> str:
        """Return the ABI-encoded call data for this step."""

        return self.contract.encode(self.method, self.args)

    def describe(self) -> str:
        return self.label or f"{self.method}@{self.target}"


@dataclass(frozen=True)
class TransactionBatch:
    """Ordered steps executed atomically by the smart account.

    Order matters: an approval must precede the step that spends it.
    """

    steps: tuple[TransactionStep, ...]
    label: str = ""

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("TransactionBatch requires at least one step")

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def describe(self) -> str:
        return " -> ".join(step.describe() for step in self.steps)


@dataclass(frozen=True)
class TxResult:
    """Outcome of a confirmed (or simulated) submission."""

    tx_hash: str
    label: str
    steps: int = 1
    dry_run: bool = False
    amount_raw: int | None = None


@dataclass(frozen=True)
class CycleState:
    """In-memory rotation position; never persisted."""

    index: int
    total: int
    hold_secs: float
    settle_secs: float

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


@dataclass(frozen=True)
class RotationOp:
    """Audit record for a single rotation step."""

    ts_iso: str
    cycle: int
    protocol: str
    action: str
    mode: str
    ok: bool
    amount: str | None = None
    amount_raw: int | None = None
    tx_hash: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class RotationReport:
    """Summary returned by :meth:`rotator.scheduler.RotationScheduler.run`."""

    state: str
    cycles_completed: int
    results: tuple[TxResult, ...] = field(default_factory=tuple)

    @property
    def tx_hashes(self) -> list[str]:
        return [r.tx_hash for r in self.results]


__all__ = [
    "Account",
    "TokenHandle",
    "TransactionStep",
    "TransactionBatch",
    "TxResult",
    "CycleState",
    "RotationOp",
    "RotationReport",
]
