"""Contract bindings and role interfaces.

A :class:`ContractBinding` is the only object that knows how to encode or
call a contract. Role wrappers (:class:`TokenContract`,
:class:`LendingContract`, :class:`RouterContract`, :class:`VaultContract`)
turn typed arguments into :class:`~rotator.models.TransactionStep` objects so
that the engine never deals with raw web3 handles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from rotator.abis import (
    AAVE_POOL_ABI,
    ERC20_ABI,
    SILO_ROUTER_ABI,
    SILO_VAULT_ABI,
)
from rotator.errors import NotInitialized
from rotator.models import TokenHandle, TransactionStep

log = logging.getLogger(__name__)


class ContractBinding(Protocol):
    """Encode and read access to a single deployed contract."""

    address: str

    def encode(self, method: str, args: Sequence[Any]) -> str:
        """Return hex call data for ``method(*args)``."""

    def call(self, method: str, *args: Any) -> Any:
        """Execute a read-only call and return the decoded result."""


class Web3ContractBinding:
    """:class:`ContractBinding` backed by a ``web3`` contract object."""

    def __init__(self, w3: Any, address: str, abi: list[dict], name: str = "") -> None:
        from web3 import Web3

        self.address = Web3.to_checksum_address(address)
        self.abi = abi
        self.name = name or self.address
        self._contract = w3.eth.contract(address=self.address, abi=abi)

    def encode(self, method: str, args: Sequence[Any]) -> str:
        return self._contract.encode_abi(method, args=list(args))

    def call(self, method: str, *args: Any) -> Any:
        return self.function(method, *args).call()

    def function(self, method: str, *args: Any) -> Any:
        """Return the bound web3 ``ContractFunction`` for ``method``."""

        return getattr(self._contract.functions, method)(*args)

    def __repr__(self) -> str:
        return f"Web3ContractBinding({self.name}@{self.address})"


class ContractReader:
    """Generic read collaborator used for ``decimals`` and ``balanceOf``."""

    def read(self, contract: ContractBinding, method: str, args: Sequence[Any] = ()) -> Any:
        return contract.call(method, *args)


class TokenContract:
    """ERC-20 token role."""

    def __init__(
        self, binding: ContractBinding, symbol: str, decimals_hint: int | None = None
    ) -> None:
        self.binding = binding
        self.handle = TokenHandle(binding, symbol, decimals_hint)

    @property
    def address(self) -> str:
        return self.binding.address

    @property
    def symbol(self) -> str:
        return self.handle.symbol

    def approve(self, spender: str, amount: int) -> TransactionStep:
        return TransactionStep(
            self.binding,
            "approve",
            (spender, int(amount)),
            label=f"{self.symbol}.approve",
        )


class LendingContract:
    """Direct lending pool role (Aave-style ``supply``/``withdraw``)."""

    def __init__(self, binding: ContractBinding) -> None:
        self.binding = binding

    @property
    def address(self) -> str:
        return self.binding.address

    def supply(
        self, asset: str, amount: int, on_behalf_of: str, referral_code: int
    ) -> TransactionStep:
        return TransactionStep(
            self.binding,
            "supply",
            (asset, int(amount), on_behalf_of, int(referral_code)),
            label="pool.supply",
        )

    def withdraw(self, asset: str, amount: int, to: str) -> TransactionStep:
        return TransactionStep(
            self.binding, "withdraw", (asset, int(amount), to), label="pool.withdraw"
        )


class RouterContract:
    """Router role whose batch entry point accepts raw encoded calls."""

    def __init__(self, binding: ContractBinding) -> None:
        self.binding = binding

    @property
    def address(self) -> str:
        return self.binding.address

    def multicall(self, calls: Sequence[str]) -> TransactionStep:
        return TransactionStep(
            self.binding, "multicall", (list(calls),), label="router.multicall"
        )


class VaultContract:
    """Wrapped receipt asset role (share token with collateral-aware redeem)."""

    def __init__(self, binding: ContractBinding, symbol: str = "bUSDC") -> None:
        self.binding = binding
        self.handle = TokenHandle(binding, symbol)

    @property
    def address(self) -> str:
        return self.binding.address

    def redeem(
        self, shares: int, receiver: str, owner: str, collateral_type: int
    ) -> TransactionStep:
        return TransactionStep(
            self.binding,
            "redeem",
            (int(shares), receiver, owner, int(collateral_type)),
            label=f"{self.handle.symbol}.redeem",
        )


@dataclass(frozen=True)
class ProtocolContracts:
    """Every contract handle the rotation needs; any may be unset."""

    usdc: TokenContract | None = None
    pool: LendingContract | None = None
    router: RouterContract | None = None
    vault: VaultContract | None = None
    atoken: TokenContract | None = None

    def require(self, name: str) -> Any:
        """Return the handle called *name* or raise :class:`NotInitialized`."""

        value = getattr(self, name, None)
        if value is None:
            raise NotInitialized(f"{name} contract not initialized")
        return value


def build_contracts(w3: Any, config: Any) -> ProtocolContracts:
    """Construct web3-backed role wrappers from a :class:`RotationConfig`.

    Missing addresses leave the corresponding handle unset so that failures
    surface as :class:`NotInitialized` at the point of use.
    """

    def _bind(address: str | None, abi: list[dict], name: str):
        if not address:
            log.info("%s address not configured", name)
            return None
        binding = Web3ContractBinding(w3, address, abi, name=name)
        log.info("%s initialized: %s", name, binding.address)
        return binding

    usdc = _bind(config.usdc_address, ERC20_ABI, "USDC")
    pool = _bind(config.aave_pool_address, AAVE_POOL_ABI, "Aave pool")
    router = _bind(config.silo_router_address, SILO_ROUTER_ABI, "Silo router")
    vault = _bind(config.silo_vault_address, SILO_VAULT_ABI, "Silo vault")
    atoken = _bind(config.aave_atoken_address, ERC20_ABI, "Aave aToken")
    return ProtocolContracts(
        usdc=TokenContract(usdc, "USDC") if usdc else None,
        pool=LendingContract(pool) if pool else None,
        router=RouterContract(router) if router else None,
        vault=VaultContract(vault) if vault else None,
        atoken=TokenContract(atoken, "aUSDC") if atoken else None,
    )


__all__ = [
    "ContractBinding",
    "Web3ContractBinding",
    "ContractReader",
    "TokenContract",
    "LendingContract",
    "RouterContract",
    "VaultContract",
    "ProtocolContracts",
    "build_contracts",
]
