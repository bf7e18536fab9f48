"""Fund rotation between a direct lending pool and a multicall router."""

from __future__ import annotations

from .errors import (
    AmountConversionFailure,
    BalanceLookupFailure,
    CalldataEncodingFailure,
    InsufficientFunds,
    NotInitialized,
    NothingToRedeem,
    RotationError,
    SubmissionFailure,
)
from .models import (
    Account,
    RotationReport,
    TokenHandle,
    TransactionBatch,
    TransactionStep,
    TxResult,
)

__all__ = [
    "Account",
    "AmountConversionFailure",
    "BalanceLookupFailure",
    "CalldataEncodingFailure",
    "InsufficientFunds",
    "NotInitialized",
    "NothingToRedeem",
    "RotationError",
    "RotationReport",
    "SubmissionFailure",
    "TokenHandle",
    "TransactionBatch",
    "TransactionStep",
    "TxResult",
]
