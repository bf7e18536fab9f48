"""Balance checks performed before any capital-moving operation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rotator.errors import BalanceLookupFailure, InsufficientFunds
from rotator.models import Account, TokenHandle

from .units import UnitConverter, from_base_units, to_base_units

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceCheck:
    """Result of a balance comparison in base units."""

    required_raw: int
    available_raw: int
    decimals: int

    @property
    def ok(self) -> bool:
        return self.available_raw >= self.required_raw

    @property
    def shortfall_raw(self) -> int:
        return max(self.required_raw - self.available_raw, 0)


class BalanceGuard:
    """Compare wallet balances against required amounts as integers."""

    def __init__(self, converter: UnitConverter, reader: Any) -> None:
        self.converter = converter
        self.reader = reader

    def balance_of(self, token: TokenHandle, account: Account) -> int:
        """Return the raw ``balanceOf`` for *account*.

        Raises:
            BalanceLookupFailure: If the balance cannot be read.
        """

        try:
            value = self.reader.read(token.binding, "balanceOf", (account.address,))
            return int(value)
        except Exception as exc:
            raise BalanceLookupFailure(
                f"cannot read {token.symbol} balance for {account.address}: {exc}"
            ) from exc

    def check(self, amount: str, token: TokenHandle, account: Account) -> BalanceCheck:
        decimals = self.converter.resolve_decimals(token)
        required = to_base_units(amount, decimals)
        available = self.balance_of(token, account)
        return BalanceCheck(required, available, decimals)

    def has_sufficient_balance(
        self, amount: str, token: TokenHandle, account: Account
    ) -> bool:
        result = self.check(amount, token, account)
        if not result.ok:
            log.info(
                "Insufficient %s balance. Required: %s %s, Available: %s %s",
                token.symbol,
                amount,
                token.symbol,
                from_base_units(result.available_raw, result.decimals),
                token.symbol,
            )
        return result.ok

    def check_before_deposit(
        self, amount: str, token: TokenHandle, account: Account
    ) -> BalanceCheck:
        """Return the passing check or raise :class:`InsufficientFunds`."""

        result = self.check(amount, token, account)
        if result.ok:
            return result
        err = InsufficientFunds(
            token.symbol,
            required=from_base_units(result.required_raw, result.decimals),
            available=from_base_units(result.available_raw, result.decimals),
            shortfall=from_base_units(result.shortfall_raw, result.decimals),
            required_raw=result.required_raw,
            available_raw=result.available_raw,
        )
        log.warning("%s", err)
        raise err


__all__ = ["BalanceCheck", "BalanceGuard"]
