"""Exception types raised by the rotation engine.

Every capital-moving operation either returns a :class:`~rotator.models.TxResult`
or raises one of the errors below. The scheduler never continues past them;
the CLI maps :class:`RotationError` to a non-zero exit code.
"""

from __future__ import annotations


class RotationError(Exception):
    """Base class for all rotation failures."""


class NotInitialized(RotationError):
    """Wallet is not connected or a required contract handle is missing."""


class AmountConversionFailure(RotationError):
    """A decimal amount could not be converted to token base units."""


class BalanceLookupFailure(RotationError):
    """The on-chain balance could not be determined."""


class InsufficientFunds(RotationError):
    """Wallet balance is below the amount required for a deposit.

    Human-unit strings (``required``, ``available``, ``shortfall``) are
    formatted with the token's precision so operators can read them directly.
    """

    def __init__(
        self,
        symbol: str,
        *,
        required: str,
        available: str,
        shortfall: str,
        required_raw: int,
        available_raw: int,
    ) -> None:
        self.symbol = symbol
        self.required = required
        self.available = available
        self.shortfall = shortfall
        self.required_raw = required_raw
        self.available_raw = available_raw
        super().__init__(
            f"Insufficient {symbol} balance. Required: {required} {symbol}, "
            f"Available: {available} {symbol}, Shortfall: {shortfall} {symbol}"
        )


class CalldataEncodingFailure(RotationError):
    """A multicall payload could not be encoded; nothing was submitted."""

    def __init__(self, call: str, detail: str | None = None) -> None:
        self.call = call
        msg = f"failed to encode {call} calldata"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class SubmissionFailure(RotationError):
    """The chain rejected, reverted or never confirmed a transaction."""

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        self.tx_hash = tx_hash
        if tx_hash:
            message = f"{message} (tx {tx_hash})"
        super().__init__(message)


class NothingToRedeem(RotationError):
    """The router position holds no shares to redeem."""


__all__ = [
    "RotationError",
    "NotInitialized",
    "AmountConversionFailure",
    "BalanceLookupFailure",
    "InsufficientFunds",
    "CalldataEncodingFailure",
    "SubmissionFailure",
    "NothingToRedeem",
]
