"""Hand-encoded calls for the router's ``multicall`` entry point.

The router executes each blob against its own interface, so every payload is
encoded with the router binding rather than the generic ERC-20 ABI. Encoders
never raise: failures are logged and return :data:`EMPTY_CALLDATA`, which the
assembler must reject before anything is submitted.
"""

from __future__ import annotations

import logging
from typing import Any

from rotator.chain.contracts import ContractBinding

log = logging.getLogger(__name__)

EMPTY_CALLDATA = ""


def is_empty(blob: str | None) -> bool:
    """Return ``True`` when *blob* is missing or carries no call data."""

    return not blob or blob in ("0x", "0X")


class CalldataBuilder:
    """Encode router calls as raw hex call data."""

    def __init__(self, router: ContractBinding) -> None:
        self.router = router

    def _encode(self, method: str, args: tuple[Any, ...]) -> str:
        try:
            blob = self.router.encode(method, args)
        except Exception as exc:
            log.error("Error generating %s calldata: %s", method, exc)
            return EMPTY_CALLDATA
        return blob or EMPTY_CALLDATA

    def encode_transfer_from(self, token: str, to: str, amount: int) -> str:
        """Pull *amount* of *token* from the calling account into *to*."""

        return self._encode("transferFrom", (token, to, int(amount)))

    def encode_approve(self, token: str, spender: str, amount: int) -> str:
        """Let *spender* take *amount* of the router's *token* holdings."""

        return self._encode("approve", (token, spender, int(amount)))

    def encode_deposit(self, asset: str, amount: int, collateral_tag: int) -> str:
        return self._encode("deposit", (asset, int(amount), int(collateral_tag)))


__all__ = ["EMPTY_CALLDATA", "CalldataBuilder", "is_empty"]
