"""Uniform deposit/withdraw interface over structurally different protocols."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import replace
from enum import Enum
from typing import Callable

from rotator.chain.wallet import Wallet
from rotator.engine.assembler import AssembledTx, TransactionAssembler
from rotator.errors import NothingToRedeem
from rotator.metrics.exporter import (
    ROTATION_ERRORS_TOTAL,
    ROTATION_STEP_LATENCY,
    ROTATION_TXS_TOTAL,
)
from rotator.models import Account, TxResult

log = logging.getLogger(__name__)


class WithdrawMode(str, Enum):
    """How much of a position a protocol lets the rotation withdraw."""

    PARTIAL = "partial"
    FULL_BALANCE = "full_balance"


class ProtocolAdapter(ABC):
    """Interface that both lending integrations implement."""

    name: str = ""
    withdraw_mode: WithdrawMode = WithdrawMode.PARTIAL

    def __init__(self, wallet: Wallet, assembler: TransactionAssembler) -> None:
        self.wallet = wallet
        self.assembler = assembler

    @property
    def mode(self) -> str:
        return "dry_run" if self.wallet.dry_run else "live"

    @abstractmethod
    def deposit(self, amount: str) -> TxResult:
        """Move *amount* (human units) of the stable token into the protocol."""

    @abstractmethod
    def withdraw(self, amount: str | None = None) -> TxResult | None:
        """Withdraw from the protocol according to :attr:`withdraw_mode`."""

    @abstractmethod
    def position_raw(self) -> int | None:
        """Return the current position in base units, or ``None`` if unknown."""

    def _execute(
        self, action: str, assemble: Callable[[Account], AssembledTx]
    ) -> TxResult:
        """Assemble with the connected account, submit and record the result."""

        account = self.wallet.get_account()
        t0 = time.time()
        try:
            assembled = assemble(account)
            if assembled.is_batch:
                result = self.wallet.send_batch(assembled.payload, account)
            else:
                result = self.wallet.send_transaction(assembled.payload, account)
        except NothingToRedeem:
            raise
        except Exception:
            ROTATION_ERRORS_TOTAL.labels(f"{self.name}:{action}").inc()
            raise
        ROTATION_TXS_TOTAL.labels(self.name, action, self.mode).inc()
        ROTATION_STEP_LATENCY.labels(self.name, action).observe(
            max(time.time() - t0, 0.0)
        )
        log.info(
            "%s %s completed: %s (raw=%d, steps=%d)",
            self.name,
            action,
            result.tx_hash,
            assembled.amount_raw,
            result.steps,
        )
        return replace(result, amount_raw=assembled.amount_raw)


__all__ = ["ProtocolAdapter", "WithdrawMode"]
