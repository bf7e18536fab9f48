"""Chain collaborators: contract bindings, reads and wallet submission."""

from .contracts import (
    ContractBinding,
    ContractReader,
    LendingContract,
    ProtocolContracts,
    RouterContract,
    TokenContract,
    VaultContract,
    Web3ContractBinding,
    build_contracts,
)
from .wallet import DryRunWallet, SmartAccountWallet, Wallet

__all__ = [
    "ContractBinding",
    "ContractReader",
    "LendingContract",
    "ProtocolContracts",
    "RouterContract",
    "TokenContract",
    "VaultContract",
    "Web3ContractBinding",
    "build_contracts",
    "Wallet",
    "SmartAccountWallet",
    "DryRunWallet",
]
