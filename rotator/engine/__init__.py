"""Amount conversion, balance checks and transaction assembly."""

from __future__ import annotations

from .assembler import AssembledTx, TransactionAssembler
from .calldata import EMPTY_CALLDATA, CalldataBuilder
from .guard import BalanceCheck, BalanceGuard
from .units import UnitConverter, from_base_units, to_base_units

__all__ = [
    "AssembledTx",
    "BalanceCheck",
    "BalanceGuard",
    "CalldataBuilder",
    "EMPTY_CALLDATA",
    "TransactionAssembler",
    "UnitConverter",
    "from_base_units",
    "to_base_units",
]
