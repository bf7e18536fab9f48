"""Wallet inspection CLI commands."""

from __future__ import annotations

from rotator.config import settings
from rotator.engine.units import from_base_units
from rotator.errors import RotationError

from .. import utils as cli_utils
from ..core import app, log


@app.command("wallet:check")
@app.command("wallet_check")
def wallet_check() -> None:
    """Connect the smart account and print its address."""

    cfg = settings.rotation_config()
    try:
        orchestrator = cli_utils.make_orchestrator(cfg)
    except RotationError as exc:
        cli_utils.fail("wallet:check", exc)
        return
    account = orchestrator.account
    log.info(
        "wallet:check chain=%s account=%s owner=%s dry_run=%s",
        cfg.chain_id,
        account.address,
        account.owner or "-",
        orchestrator.wallet.dry_run,
    )


@app.command("balances")
def balances() -> None:
    """Show wallet USDC and both protocol positions."""

    try:
        orchestrator = cli_utils.make_orchestrator(settings.rotation_config())
        usdc = orchestrator.contracts.require("usdc")
        decimals = orchestrator.converter.resolve_decimals(usdc.handle)
        wallet_raw = orchestrator.wallet_balance_raw()
        aave_raw = orchestrator.aave.position_raw()
        silo_raw = orchestrator.silo.position_raw()
    except RotationError as exc:
        cli_utils.fail("balances", exc)
        return

    cli_utils.emit_status(
        "balances",
        {
            "account": orchestrator.account.address,
            "wallet_usdc": from_base_units(wallet_raw, decimals),
            "aave_usdc": (
                from_base_units(aave_raw, decimals) if aave_raw is not None else None
            ),
            "silo_shares_raw": silo_raw,
        },
    )


__all__ = ["balances", "wallet_check"]
