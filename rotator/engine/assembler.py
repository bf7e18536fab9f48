"""Build the ordered calls for each protocol interaction.

Deposits are guarded: the wallet balance is checked before any step is
assembled, and a failed check raises :class:`InsufficientFunds` so that
nothing reaches the wallet. Approvals always precede the step that spends
them. Zero amounts are rejected before any step is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from rotator.chain.contracts import ProtocolContracts
from rotator.errors import (
    AmountConversionFailure,
    CalldataEncodingFailure,
    NothingToRedeem,
)
from rotator.models import Account, TransactionBatch, TransactionStep

from .calldata import CalldataBuilder, is_empty
from .guard import BalanceGuard
from .units import UnitConverter

log = logging.getLogger(__name__)

DEFAULT_REFERRAL_CODE = 0
DEFAULT_COLLATERAL_TAG = 1


def _require_positive(amount: str, raw: int) -> int:
    if raw <= 0:
        raise AmountConversionFailure(f"amount must be greater than zero, got {amount!r}")
    return raw


@dataclass(frozen=True)
class AssembledTx:
    """A batch or single step ready for submission, plus its raw amount."""

    payload: Union[TransactionBatch, TransactionStep]
    amount_raw: int

    @property
    def is_batch(self) -> bool:
        return isinstance(self.payload, TransactionBatch)


class TransactionAssembler:
    """Produce supply, withdraw, deposit and redeem transactions."""

    def __init__(
        self,
        contracts: ProtocolContracts,
        converter: UnitConverter,
        guard: BalanceGuard,
        builder: CalldataBuilder | None = None,
        *,
        referral_code: int = DEFAULT_REFERRAL_CODE,
        collateral_tag: int = DEFAULT_COLLATERAL_TAG,
    ) -> None:
        self.contracts = contracts
        self.converter = converter
        self.guard = guard
        self._builder = builder
        self.referral_code = referral_code
        self.collateral_tag = collateral_tag

    @property
    def builder(self) -> CalldataBuilder:
        if self._builder is None:
            self._builder = CalldataBuilder(self.contracts.require("router").binding)
        return self._builder

    # ------------------------------------------------------------------
    def supply_batch(self, amount: str, account: Account) -> AssembledTx:
        """``[approve(pool), pool.supply(...)]`` as one atomic batch."""

        usdc = self.contracts.require("usdc")
        pool = self.contracts.require("pool")
        check = self.guard.check_before_deposit(amount, usdc.handle, account)
        raw = _require_positive(amount, check.required_raw)
        batch = TransactionBatch(
            (
                usdc.approve(pool.address, raw),
                pool.supply(usdc.address, raw, account.address, self.referral_code),
            ),
            label="aave:supply",
        )
        return AssembledTx(batch, raw)

    def withdraw_direct(self, amount: str, account: Account) -> AssembledTx:
        """Single ``pool.withdraw(asset, amount, account)`` call."""

        usdc = self.contracts.require("usdc")
        pool = self.contracts.require("pool")
        raw = self.converter.to_base_units(amount, usdc.handle)
        raw = _require_positive(amount, raw)
        return AssembledTx(pool.withdraw(usdc.address, raw, account.address), raw)

    def router_deposit_batch(self, amount: str, account: Account) -> AssembledTx:
        """``[approve(router), router.multicall([transferFrom, approve, deposit])]``.

        The inner order is fixed: funds must reach the router before it can
        approve the vault and deposit into it.

        Raises:
            CalldataEncodingFailure: If any inner call failed to encode.
        """

        usdc = self.contracts.require("usdc")
        router = self.contracts.require("router")
        vault = self.contracts.require("vault")
        check = self.guard.check_before_deposit(amount, usdc.handle, account)
        raw = _require_positive(amount, check.required_raw)

        inner = [
            (
                "transferFrom",
                self.builder.encode_transfer_from(usdc.address, router.address, raw),
            ),
            ("approve", self.builder.encode_approve(usdc.address, vault.address, raw)),
            (
                "deposit",
                self.builder.encode_deposit(vault.address, raw, self.collateral_tag),
            ),
        ]
        for name, blob in inner:
            if is_empty(blob):
                raise CalldataEncodingFailure(f"router.{name}", "encoder returned no data")

        batch = TransactionBatch(
            (
                usdc.approve(router.address, raw),
                router.multicall([blob for _, blob in inner]),
            ),
            label="silo:deposit",
        )
        return AssembledTx(batch, raw)

    def router_redeem(self, account: Account) -> AssembledTx:
        """Redeem the account's entire share balance.

        Raises:
            NothingToRedeem: If the account holds no shares.
        """

        vault = self.contracts.require("vault")
        shares = self.guard.balance_of(vault.handle, account)
        log.info("Shares balance: %d", shares)
        if shares <= 0:
            raise NothingToRedeem(f"no {vault.handle.symbol} shares to redeem")
        step = vault.redeem(shares, account.address, account.address, self.collateral_tag)
        return AssembledTx(step, shares)


__all__ = [
    "AssembledTx",
    "DEFAULT_COLLATERAL_TAG",
    "DEFAULT_REFERRAL_CODE",
    "TransactionAssembler",
]
