"""Core Typer application and logging bootstrap for the rotator CLI package."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import typer
from rotator.config import settings

from .help_text import VERBOSE_COMMAND_HELP, VERBOSE_GLOBAL_OVERVIEW


class CLIApp(typer.Typer):
    """Typer application with an extra ``--help-verbose`` catalog."""

    # ------------------------------------------------------------------
    def _unique_commands(self) -> dict[str, dict[str, Any]]:
        """Return mapping of canonical command names to command/aliases."""

        mapping: dict[str, dict[str, Any]] = {}
        for info in self.registered_commands:
            name = info.name or info.callback.__name__
            canonical = name.replace("_", ":")
            entry = mapping.setdefault(canonical, {"command": info, "aliases": []})
            entry["aliases"].append(name)
        return mapping

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        argv = sys.argv[1:]
        if "--help-verbose" in argv:
            idx = argv.index("--help-verbose")
            if idx == 0:
                self._print_verbose_help()
            else:
                target = argv[0]
                canonical = None
                for cname, info in self._unique_commands().items():
                    if target == cname or target in info["aliases"]:
                        canonical = cname
                        break
                self._print_verbose_help(canonical or target)
            raise SystemExit(0)
        return super().__call__(*args, **kwargs)

    # ------------------------------------------------------------------
    def _print_verbose_help(self, command: str | None = None) -> None:
        """Print detailed command reference with optional command filtering."""

        typer.echo(VERBOSE_GLOBAL_OVERVIEW.strip())
        typer.echo()

        if command:
            text = VERBOSE_COMMAND_HELP.get(command)
            if text:
                typer.echo(text.rstrip())
            else:
                typer.echo(f"No verbose help available for '{command}'.")
            return

        for cname, info in sorted(self._unique_commands().items()):
            text = VERBOSE_COMMAND_HELP.get(cname)
            if not text:
                continue
            typer.echo(text.rstrip())
            aliases = [
                alias.replace("_", ":")
                for alias in info["aliases"]
                if alias.replace("_", ":") != cname
            ]
            if aliases:
                typer.echo(f"  Aliases: {', '.join(sorted(set(aliases)))}")
            typer.echo()


app = CLIApp(help="Rotate USDC between Aave and Silo on Sonic.", no_args_is_help=True)
log = logging.getLogger("rotator")

# Configure logging once with console + optional rotating file handler
if not getattr(log, "_configured", False):
    log.setLevel(getattr(logging, str(settings.log_level).upper(), logging.INFO))
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    ch = logging.StreamHandler()
    ch.setLevel(log.level)
    ch.setFormatter(fmt)
    log.addHandler(ch)
    log_path = settings.log_file
    if log_path:
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            fh = RotatingFileHandler(
                log_path,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
            )
        except OSError as exc:
            log.warning("file logging disabled (%s): %s", log_path, exc)
        else:
            fh.setLevel(log.level)
            fh.setFormatter(fmt)
            log.addHandler(fh)
    setattr(log, "_configured", True)

__all__ = ["CLIApp", "app", "log"]
