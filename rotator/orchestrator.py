"""Wire configuration, chain collaborators and adapters into one object."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from rotator.chain.contracts import ContractReader, ProtocolContracts, build_contracts
from rotator.chain.wallet import DryRunWallet, SmartAccountWallet, Wallet
from rotator.config import RotationConfig
from rotator.engine.assembler import TransactionAssembler
from rotator.engine.guard import BalanceGuard
from rotator.engine.units import UnitConverter
from rotator.errors import NotInitialized
from rotator.models import Account, RotationOp, RotationReport
from rotator.protocols.aave import AaveAdapter
from rotator.protocols.silo import SiloAdapter
from rotator.scheduler import RotationScheduler

log = logging.getLogger(__name__)


@dataclass
class Orchestrator:
    """Fully connected rotation components sharing one account."""

    config: RotationConfig
    wallet: Wallet
    account: Account
    contracts: ProtocolContracts
    converter: UnitConverter
    guard: BalanceGuard
    assembler: TransactionAssembler
    aave: AaveAdapter
    silo: SiloAdapter

    def scheduler(
        self,
        *,
        sleep: Callable[[float], None] = time.sleep,
        recorder: Optional[Callable[[RotationOp], Any]] = None,
        notify: Optional[Callable[..., None]] = None,
        config: RotationConfig | None = None,
    ) -> RotationScheduler:
        return RotationScheduler(
            self.aave,
            self.silo,
            config or self.config,
            sleep=sleep,
            recorder=recorder,
            notify=notify,
        )

    def wallet_balance_raw(self) -> int:
        usdc = self.contracts.require("usdc")
        return self.guard.balance_of(usdc.handle, self.account)


def _web3(config: RotationConfig) -> Any:
    from web3 import Web3

    return Web3(Web3.HTTPProvider(config.rpc_url))


def build_wallet(config: RotationConfig, w3: Any) -> tuple[Wallet, Any]:
    """Return the wallet for *config* and the signer to connect it with."""

    if not config.smart_account_address:
        raise NotInitialized("SMART_ACCOUNT_ADDRESS must be configured")
    signer = w3.eth.account.from_key(config.private_key) if config.private_key else None
    if config.dry_run:
        return DryRunWallet(config.smart_account_address), signer
    if signer is None:
        raise NotInitialized("PRIVATE_KEY must be configured for live rotation")
    wallet = SmartAccountWallet(
        w3,
        config.smart_account_address,
        chain_id=config.chain_id,
        max_gas_price_gwei=config.max_gas_price_gwei,
        tx_timeout_secs=config.tx_timeout_secs,
    )
    return wallet, signer


def build_orchestrator(
    config: RotationConfig,
    *,
    w3: Any = None,
    wallet: Wallet | None = None,
    signer: Any = None,
    contracts: ProtocolContracts | None = None,
    reader: Any = None,
) -> Orchestrator:
    """Construct and connect every rotation component from *config*.

    Collaborators may be injected; anything omitted is built against a web3
    HTTP provider for ``config.rpc_url``.
    """

    if w3 is None and (wallet is None or contracts is None):
        w3 = _web3(config)
    if wallet is None:
        wallet, built_signer = build_wallet(config, w3)
        signer = signer or built_signer
    account = wallet.connect(signer)
    if contracts is None:
        contracts = build_contracts(w3, config)
    reader = reader or ContractReader()

    converter = UnitConverter(reader, fallback_decimals=config.fallback_decimals)
    guard = BalanceGuard(converter, reader)
    assembler = TransactionAssembler(
        contracts,
        converter,
        guard,
        referral_code=config.referral_code,
        collateral_tag=config.collateral_type,
    )
    log.debug("orchestrator ready for %s (dry_run=%s)", account.address, wallet.dry_run)
    return Orchestrator(
        config=config,
        wallet=wallet,
        account=account,
        contracts=contracts,
        converter=converter,
        guard=guard,
        assembler=assembler,
        aave=AaveAdapter(wallet, assembler),
        silo=SiloAdapter(wallet, assembler),
    )


def rotate(config: RotationConfig, **kwargs: Any) -> RotationReport:
    """Build an orchestrator for *config* and run the full rotation."""

    scheduler_kwargs = {
        k: kwargs.pop(k) for k in ("sleep", "recorder", "notify") if k in kwargs
    }
    return build_orchestrator(config, **kwargs).scheduler(**scheduler_kwargs).run()


__all__ = ["Orchestrator", "build_orchestrator", "build_wallet", "rotate"]
