"""Router adapter (Silo-style multicall deposits, full-balance redeems)."""

from __future__ import annotations

import logging

from rotator.errors import NothingToRedeem
from rotator.metrics.exporter import ROTATION_POSITION_RAW
from rotator.models import TxResult

from .base import ProtocolAdapter, WithdrawMode

log = logging.getLogger(__name__)


class SiloAdapter(ProtocolAdapter):
    """Deposit through the router multicall; always redeem every share."""

    name = "silo"
    withdraw_mode = WithdrawMode.FULL_BALANCE

    def deposit(self, amount: str) -> TxResult:
        log.info("Moving %s USDC to Silo...", amount)
        return self._execute(
            "deposit",
            lambda account: self.assembler.router_deposit_batch(amount, account),
        )

    def withdraw(self, amount: str | None = None) -> TxResult | None:
        """Redeem the full share balance; a requested *amount* is ignored.

        A dry-run wallet never lands shares on chain, so an empty position
        returns ``None`` there. Live wallets re-raise :class:`NothingToRedeem`.
        """

        if amount is not None:
            log.warning(
                "Silo positions are redeemed in full; ignoring requested amount %s",
                amount,
            )
        log.info("Withdrawing full position from Silo...")
        try:
            return self._execute(
                "withdraw", lambda account: self.assembler.router_redeem(account)
            )
        except NothingToRedeem as exc:
            if not self.wallet.dry_run:
                raise
            log.info("[dry-run] Silo withdraw skipped: %s", exc)
            return None

    def position_raw(self) -> int | None:
        vault = self.assembler.contracts.vault
        if vault is None:
            return None
        raw = self.assembler.guard.balance_of(vault.handle, self.wallet.get_account())
        ROTATION_POSITION_RAW.labels(self.name).set(raw)
        return raw


__all__ = ["SiloAdapter"]
