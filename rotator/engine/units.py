"""Conversion between human decimal strings and token base units.

All arithmetic is done on integers; floats never touch an amount.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from rotator.errors import AmountConversionFailure
from rotator.models import TokenHandle

log = logging.getLogger(__name__)

DEFAULT_FALLBACK_DECIMALS = 6
MAX_DECIMALS = 77  # 10**78 overflows uint256

_AMOUNT_RE = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?$")


def _valid_decimals(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_DECIMALS


def to_base_units(amount: str, decimals: int) -> int:
    """Return *amount* scaled by ``10**decimals`` as an exact integer.

    Trailing zeros beyond *decimals* are accepted since they do not change the
    value; any other excess precision is rejected rather than truncated.

    Raises:
        AmountConversionFailure: If *amount* is not a non-negative decimal
            string or cannot be represented at *decimals* precision.
    """

    if not _valid_decimals(decimals):
        raise AmountConversionFailure(f"invalid token precision: {decimals!r}")
    if not isinstance(amount, str):
        raise AmountConversionFailure(f"amount must be a decimal string, got {amount!r}")
    match = _AMOUNT_RE.match(amount.strip())
    if match is None:
        raise AmountConversionFailure(f"not a decimal amount: {amount!r}")
    whole = match.group("whole") or ""
    frac = match.group("frac") or ""
    if not whole and not frac:
        raise AmountConversionFailure(f"not a decimal amount: {amount!r}")

    frac = frac.rstrip("0")
    if len(frac) > decimals:
        raise AmountConversionFailure(
            f"{amount!r} has more than {decimals} fractional digits"
        )
    return int(whole or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")


def from_base_units(raw: int, decimals: int) -> str:
    """Return *raw* base units as a trimmed human decimal string.

    ``from_base_units(500_000, 6)`` gives ``"0.5"``; whole values carry no
    fractional part.
    """

    if not _valid_decimals(decimals):
        raise AmountConversionFailure(f"invalid token precision: {decimals!r}")
    raw = int(raw)
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10**decimals)
    if decimals == 0 or frac == 0:
        return f"{sign}{whole}"
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{frac_str}"


class UnitConverter:
    """Resolve token precision on chain and convert amounts with it."""

    def __init__(self, reader: Any, fallback_decimals: int = DEFAULT_FALLBACK_DECIMALS):
        self.reader = reader
        self.fallback_decimals = fallback_decimals

    def resolve_decimals(self, token: TokenHandle) -> int:
        """Return ``decimals()`` for *token*, degrading to a fallback.

        The lookup runs on every call. Failures are logged and replaced by
        ``token.decimals_hint`` or :attr:`fallback_decimals`.
        """

        try:
            value = self.reader.read(token.binding, "decimals")
        except Exception as exc:
            log.warning(
                "decimals() lookup failed for %s (%s): %s",
                token.symbol,
                token.address,
                exc,
            )
        else:
            try:
                decimals = int(value)
            except (TypeError, ValueError):
                decimals = -1
            if _valid_decimals(decimals):
                return decimals
            log.warning(
                "decimals() for %s returned unusable value %r", token.symbol, value
            )

        fallback = (
            token.decimals_hint
            if token.decimals_hint is not None
            else self.fallback_decimals
        )
        if not _valid_decimals(fallback):
            raise AmountConversionFailure(
                f"cannot resolve precision for {token.symbol}: fallback {fallback!r} is invalid"
            )
        log.warning("Falling back to %d decimals for %s", fallback, token.symbol)
        return fallback

    def to_base_units(self, amount: str, token: TokenHandle) -> int:
        return to_base_units(amount, self.resolve_decimals(token))


__all__ = [
    "DEFAULT_FALLBACK_DECIMALS",
    "UnitConverter",
    "from_base_units",
    "to_base_units",
]
