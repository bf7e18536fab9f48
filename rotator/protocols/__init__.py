"""Protocol adapters exposing a uniform deposit/withdraw capability."""

from .aave import AaveAdapter
from .base import ProtocolAdapter, WithdrawMode
from .silo import SiloAdapter

__all__ = ["ProtocolAdapter", "WithdrawMode", "AaveAdapter", "SiloAdapter"]
