"""Configuration management and credential helpers.

This module loads environment variables from a local ``.env`` file if one is
present so that credentials such as the signer key are available without
manual exports. Values in the real environment take precedence over those in
the file.

:class:`Settings` is the mutable, environment-backed view used by the CLI.
The engine itself only ever receives the immutable :class:`RotationConfig`
produced by :meth:`Settings.rotation_config`.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_AMOUNT_RE = re.compile(r"^\s*(?:[0-9]+\.?[0-9]*|\.[0-9]+)\s*$")


def _load_env_file(path: str = ".env") -> None:
    """Populate :mod:`os.environ` with key/value pairs from *path*.

    Lines starting with ``#`` or lacking an ``=`` separator are ignored.
    Existing keys are not overwritten. Values wrapped in single or double
    quotes are unquoted to match typical ``.env`` file behavior.
    """

    try:
        for line in Path(path).read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            value = value.strip()
            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            os.environ.setdefault(key.strip(), value)
    except FileNotFoundError:
        # Variables may be supplied via shell exports instead.
        pass


_load_env_file()


def _checksum(value: Any) -> str | None:
    """Return *value* as a checksum address, ``None`` for blanks."""

    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None
    from web3 import Web3

    if not Web3.is_address(raw):
        raise ValueError(f"invalid address: {raw!r}")
    return Web3.to_checksum_address(raw)


@dataclass(frozen=True)
class RotationConfig:
    """Immutable settings injected into the orchestrator at startup."""

    rpc_url: str
    chain_id: int
    private_key: str | None
    smart_account_address: str | None
    usdc_address: str | None
    aave_pool_address: str | None
    aave_atoken_address: str | None
    silo_router_address: str | None
    silo_vault_address: str | None
    amount: str = "1"
    cycles: int = 10
    hold_secs: float = 15.0
    settle_secs: float = 2.0
    unwind_on_finish: bool = False
    fallback_decimals: int = 6
    referral_code: int = 0
    collateral_type: int = 1
    max_gas_price_gwei: float | None = None
    tx_timeout_secs: float = 120.0
    dry_run: bool = True

    def with_overrides(self, **changes: Any) -> "RotationConfig":
        """Return a copy with the non-``None`` *changes* applied."""

        return replace(self, **{k: v for k, v in changes.items() if v is not None})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    env: str = "dev"
    log_level: str = "INFO"
    # Optional log file path; when set, logs also write to this file.
    log_file: str | None = "data/rotator.log"
    log_max_bytes: int = 1_000_000
    log_backup_count: int = 3
    dry_run: bool = True

    # Sonic chain
    rpc_url: str = "https://rpc.ankr.com/sonic_mainnet"
    chain_id: int = 146
    explorer_url: str = "https://sonicscan.org/"
    private_key: str | None = None
    smart_account_address: str | None = None
    max_gas_price_gwei: float | None = None  # unset disables the ceiling
    tx_timeout_secs: float = 120.0

    # Contract addresses on Sonic
    usdc_address: str | None = "0x29219dd400f2Bf60E5a23d13Be72B486D4038894"
    aave_pool_address: str | None = "0x5362dBb1e601abF3a4c14c22ffEdA64042E5eAA3"
    aave_atoken_address: str | None = None
    silo_router_address: str | None = "0x9Fa3C1E843d8eb1387827E5d77c07E8BB97B1e50"
    silo_vault_address: str | None = "0x322e1d5384aa4ED66AeCa770B95686271de61dc3"

    # Rotation schedule
    rotate_amount: str = "1"
    rotate_cycles: int = 10
    rotate_hold_secs: float = 15.0
    rotate_settle_secs: float = 2.0
    rotate_unwind_on_finish: bool = False

    # Unverified assumptions carried over as configurable defaults
    fallback_decimals: int = 6
    aave_referral_code: int = 0
    silo_collateral_type: int = 1

    prom_port: int = 9110
    sqlite_path: str = "rotator.db"
    discord_webhook_url: str | None = None
    discord_notify: bool = True

    @field_validator(
        "usdc_address",
        "aave_pool_address",
        "aave_atoken_address",
        "silo_router_address",
        "silo_vault_address",
        "smart_account_address",
        mode="before",
    )
    @classmethod
    def _validate_address(cls, value: Any) -> str | None:
        return _checksum(value)

    @field_validator("rotate_amount", mode="before")
    @classmethod
    def _validate_amount(cls, value: Any) -> str:
        text = str(value)
        if not _AMOUNT_RE.match(text):
            raise ValueError(f"ROTATE_AMOUNT must be a decimal string, got {text!r}")
        return text.strip()

    @field_validator("rotate_cycles")
    @classmethod
    def _validate_cycles(cls, value: int) -> int:
        if value < 1:
            raise ValueError("ROTATE_CYCLES must be at least 1")
        return value

    @field_validator("rotate_hold_secs", "rotate_settle_secs")
    @classmethod
    def _validate_delay(cls, value: float) -> float:
        return max(float(value), 0.0)

    def rotation_config(self) -> RotationConfig:
        """Freeze the current settings into a :class:`RotationConfig`."""

        return RotationConfig(
            rpc_url=self.rpc_url,
            chain_id=self.chain_id,
            private_key=self.private_key,
            smart_account_address=self.smart_account_address,
            usdc_address=self.usdc_address,
            aave_pool_address=self.aave_pool_address,
            aave_atoken_address=self.aave_atoken_address,
            silo_router_address=self.silo_router_address,
            silo_vault_address=self.silo_vault_address,
            amount=self.rotate_amount,
            cycles=self.rotate_cycles,
            hold_secs=self.rotate_hold_secs,
            settle_secs=self.rotate_settle_secs,
            unwind_on_finish=self.rotate_unwind_on_finish,
            fallback_decimals=self.fallback_decimals,
            referral_code=self.aave_referral_code,
            collateral_type=self.silo_collateral_type,
            max_gas_price_gwei=self.max_gas_price_gwei,
            tx_timeout_secs=self.tx_timeout_secs,
            dry_run=self.dry_run,
        )

    def tx_url(self, tx_hash: str) -> str:
        """Return an explorer link for *tx_hash* (dry-run ids pass through)."""

        if not tx_hash.startswith("0x") or not self.explorer_url:
            return tx_hash
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"


# Singleton settings instance populated on import.
settings = Settings()

__all__ = ["RotationConfig", "Settings", "settings"]
