"""Grouped Typer command modules for the rotator CLI."""

from __future__ import annotations

from . import notify, protocols, rotate, wallet

__all__ = ["notify", "protocols", "rotate", "wallet"]
