"""Rotator CLI package that exposes the Typer application and command helpers."""

from __future__ import annotations

from .core import CLIApp, app, log

# Import command modules for side-effect registration
from . import commands
from .commands.notify import notify_test
from .commands.protocols import aave_supply, aave_withdraw, silo_deposit, silo_withdraw
from .commands.rotate import rotate
from .commands.wallet import balances, wallet_check

__all__ = [
    "CLIApp",
    "aave_supply",
    "aave_withdraw",
    "app",
    "balances",
    "commands",
    "log",
    "notify_test",
    "rotate",
    "silo_deposit",
    "silo_withdraw",
    "wallet_check",
]
