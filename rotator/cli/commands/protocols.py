"""Single-step Aave and Silo CLI commands."""

from __future__ import annotations

from rotator.config import settings
from rotator.errors import RotationError

from .. import utils as cli_utils
from ..core import app


def _config():
    return settings.rotation_config()


@app.command("aave:supply")
@app.command("aave_supply")
def aave_supply(amount: str) -> None:
    """Approve and supply AMOUNT USDC to Aave in one batch."""

    try:
        result = cli_utils.make_orchestrator(_config()).aave.deposit(amount)
    except RotationError as exc:
        cli_utils.fail("aave:supply", exc)
        return
    cli_utils.report_tx("aave:supply", result, amount=amount)


@app.command("aave:withdraw")
@app.command("aave_withdraw")
def aave_withdraw(amount: str) -> None:
    """Withdraw AMOUNT USDC from Aave to the smart account."""

    try:
        result = cli_utils.make_orchestrator(_config()).aave.withdraw(amount)
    except RotationError as exc:
        cli_utils.fail("aave:withdraw", exc)
        return
    cli_utils.report_tx("aave:withdraw", result, amount=amount)


@app.command("silo:deposit")
@app.command("silo_deposit")
def silo_deposit(amount: str) -> None:
    """Deposit AMOUNT USDC to Silo through the router multicall."""

    try:
        result = cli_utils.make_orchestrator(_config()).silo.deposit(amount)
    except RotationError as exc:
        cli_utils.fail("silo:deposit", exc)
        return
    cli_utils.report_tx("silo:deposit", result, amount=amount)


@app.command("silo:withdraw")
@app.command("silo_withdraw")
def silo_withdraw() -> None:
    """Redeem the entire Silo share balance."""

    try:
        result = cli_utils.make_orchestrator(_config()).silo.withdraw()
    except RotationError as exc:
        cli_utils.fail("silo:withdraw", exc)
        return
    cli_utils.report_tx("silo:withdraw", result)


__all__ = ["aave_supply", "aave_withdraw", "silo_deposit", "silo_withdraw"]
