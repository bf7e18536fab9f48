"""Notification helpers for external services.

Currently supports sending simple messages to a Discord webhook so that an
unattended rotation can report progress and failures remotely.
"""

from __future__ import annotations

import json
import logging
import urllib.request
from typing import Any, Mapping, Optional

from .config import settings
from .metrics.exporter import ROTATION_ERRORS_TOTAL

log = logging.getLogger("rotator")


def notify_discord(
    source: str,
    message: str,
    url: Optional[str] = None,
    *,
    severity: str | None = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> None:
    """Send *message* to a Discord webhook.

    Parameters
    ----------
    source:
        Subsystem issuing the notification. Used for labeling error metrics.
    message:
        Text content to send to Discord.
    url:
        Optional override for the webhook URL. Defaults to
        ``settings.discord_webhook_url``.
    severity:
        Console logging level hint: ``"info"``, ``"warning"`` or ``"error"``.
    extra:
        Optional structured context appended to the message as a JSON block.

    Notes
    -----
    Network or configuration errors are logged and never raised. Failures increment
    ``rotation_errors_total`` with stage ``discord_send``.
    """

    sev = (severity or "info").lower()
    if extra:
        try:
            pretty = json.dumps(extra, separators=(",", ":"))
        except (TypeError, ValueError):
            pretty = str(extra)
        msg_for_console = f"{message} | ctx={pretty}"
    else:
        msg_for_console = message
    if sev == "error":
        log.error("[discord] %s", msg_for_console)
    elif sev in ("warn", "warning"):
        log.warning("[discord] %s", msg_for_console)
    else:
        log.info("[discord] %s", msg_for_console)

    webhook = url or getattr(settings, "discord_webhook_url", None)
    if not webhook:
        log.debug("notify_discord: webhook not configured; skipping network send")
        return

    content = message
    if extra:
        try:
            content += "\n```json\n" + json.dumps(extra, indent=2) + "\n```"
        except (TypeError, ValueError):
            content += f"\n```\n{extra}\n```"
    payload = json.dumps({"content": content}).encode("utf-8")
    req = urllib.request.Request(
        webhook,
        data=payload,
        headers={
            "Content-Type": "application/json",
            "User-Agent": "rotator/1.0",
        },
        method="POST",
    )
    try:
        with urllib.request.urlopen(req, timeout=3):
            log.debug("notify_discord: sent message (%d chars)", len(message or ""))
            return
    except Exception as e:
        code = getattr(e, "code", None)
        if code is not None:
            log.error("notify_discord: HTTP %s error: %s", code, e)
        else:
            log.error("notify_discord: send failed: %s", e)
        ROTATION_ERRORS_TOTAL.labels("discord_send").inc()
