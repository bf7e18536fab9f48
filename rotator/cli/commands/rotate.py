"""Rotation loop CLI command."""

from __future__ import annotations

from rotator.config import settings
from rotator.errors import RotationError
from rotator.notify import notify_discord

from .. import utils as cli_utils
from ..core import app, log


@app.command("rotate")
def rotate(
    cycles: int | None = None,
    amount: str | None = None,
    hold_secs: float | None = None,
    settle_secs: float | None = None,
    unwind: bool = False,
    persist: bool = True,
    metrics: bool = False,
) -> None:
    """Rotate USDC between Aave and Silo for the configured number of cycles."""

    cfg = settings.rotation_config().with_overrides(
        cycles=cycles,
        amount=amount,
        hold_secs=hold_secs,
        settle_secs=settle_secs,
        unwind_on_finish=True if unwind else None,
    )
    if cfg.cycles < 1:
        log.error("rotate: --cycles must be at least 1")
        raise SystemExit(2)

    if metrics:
        cli_utils.maybe_start_metrics()
    recorder = cli_utils.db_recorder(settings.sqlite_path) if persist else None
    notifier = notify_discord if settings.discord_notify else None

    mode = "dry_run" if cfg.dry_run else "live"
    cli_utils.emit_status(
        "rotate",
        {
            "stage": "plan",
            "mode": mode,
            "amount": cfg.amount,
            "cycles": cfg.cycles,
            "hold_secs": cfg.hold_secs,
            "settle_secs": cfg.settle_secs,
            "unwind_on_finish": cfg.unwind_on_finish,
        },
    )
    try:
        orchestrator = cli_utils.make_orchestrator(cfg)
        report = orchestrator.scheduler(recorder=recorder, notify=notifier).run()
    except RotationError as exc:
        cli_utils.fail("rotate", exc)
        return

    cli_utils.emit_status(
        "rotate",
        {
            "stage": report.state,
            "mode": mode,
            "cycles_completed": report.cycles_completed,
            "txs": report.tx_hashes,
        },
    )


__all__ = ["rotate"]
