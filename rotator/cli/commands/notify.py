"""Notification utility CLI commands."""

from __future__ import annotations

from rotator.config import settings
from rotator.notify import notify_discord

from ..core import app, log


@app.command("notify:test")
@app.command("notify_test")
def notify_test(message: str = "[notify] test message from rotator") -> None:
    """Send a test message to the configured Discord webhook."""

    if not getattr(settings, "discord_webhook_url", None):
        log.error("notify:test no webhook configured (set DISCORD_WEBHOOK_URL)")
        raise SystemExit(1)
    notify_discord("notify", message)


__all__ = ["notify_test"]
