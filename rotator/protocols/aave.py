"""Direct lending adapter (Aave-style pool)."""

from __future__ import annotations

import logging

from rotator.metrics.exporter import ROTATION_POSITION_RAW
from rotator.models import TxResult

from .base import ProtocolAdapter, WithdrawMode

log = logging.getLogger(__name__)


class AaveAdapter(ProtocolAdapter):
    """Supply via an atomic approve+supply batch; withdraw any amount."""

    name = "aave"
    withdraw_mode = WithdrawMode.PARTIAL

    def deposit(self, amount: str) -> TxResult:
        log.info("Moving %s USDC to Aave...", amount)
        return self._execute(
            "deposit", lambda account: self.assembler.supply_batch(amount, account)
        )

    def withdraw(self, amount: str | None = None) -> TxResult:
        if amount is None:
            raise ValueError("Aave withdrawals require an explicit amount")
        log.info("Withdrawing %s USDC from Aave...", amount)
        return self._execute(
            "withdraw", lambda account: self.assembler.withdraw_direct(amount, account)
        )

    def position_raw(self) -> int | None:
        atoken = self.assembler.contracts.atoken
        if atoken is None:
            return None
        raw = self.assembler.guard.balance_of(atoken.handle, self.wallet.get_account())
        ROTATION_POSITION_RAW.labels(self.name).set(raw)
        return raw


__all__ = ["AaveAdapter"]
