"""Shared helpers used across rotator CLI command modules."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

import typer
from rotator.config import RotationConfig, settings
from rotator.errors import RotationError
from rotator.metrics.exporter import start_metrics_server
from rotator.models import RotationOp, TxResult
from rotator.orchestrator import Orchestrator, build_orchestrator
from rotator.persistence.db import init_db, insert_rotation_op

log = logging.getLogger("rotator")


def make_orchestrator(config: RotationConfig) -> Orchestrator:
    """Factory for the connected orchestrator; replaced in tests."""

    return build_orchestrator(config)


def emit_status(event: str, context: dict[str, object]) -> None:
    """Emit *context* as a structured log entry for *event*."""

    try:
        payload = json.dumps(context, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        payload = str(context)
    log.info("%s | %s", event, payload)


def report_tx(event: str, result: TxResult | None, **context: object) -> None:
    """Log a completed step with its transaction id and explorer link."""

    if result is None:
        emit_status(event, {**context, "result": "skipped"})
        return
    emit_status(
        event,
        {
            **context,
            "tx": result.tx_hash,
            "url": settings.tx_url(result.tx_hash),
            "steps": result.steps,
            "amount_raw": result.amount_raw,
            "dry_run": result.dry_run,
        },
    )


def db_recorder(path: str) -> Optional[Callable[[RotationOp], Any]]:
    """Return a callable persisting ops to *path*, or ``None`` on failure."""

    try:
        conn = init_db(path)
    except Exception as exc:
        log.warning("audit log disabled (%s): %s", path, exc)
        return None
    return lambda op: insert_rotation_op(conn, op)


def maybe_start_metrics() -> None:
    try:
        start_metrics_server(settings.prom_port)
    except OSError as exc:
        log.warning("metrics server not started on port %s: %s", settings.prom_port, exc)


def fail(command: str, exc: RotationError) -> None:
    """Log *exc* for *command* and exit with status 1."""

    log.error("%s failed: %s", command, exc)
    raise typer.Exit(code=1)


__all__ = [
    "db_recorder",
    "emit_status",
    "fail",
    "make_orchestrator",
    "maybe_start_metrics",
    "report_tx",
]
