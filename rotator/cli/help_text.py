"""Verbose help content for the rotator CLI package."""

from __future__ import annotations

from textwrap import dedent

VERBOSE_GLOBAL_OVERVIEW = dedent(
    """\
    Command reference

    Use ``--help`` for a compact summary of commands.
    Use ``--help-verbose`` either globally for the full catalog or after a command
    to drill into that command's flags, typical output, and operational tips.

    Protocols: aave (direct pool calls), silo (router multicall). Chain: Sonic.
    DRY_RUN defaults to true; set DRY_RUN=false to submit real transactions.
    """
)


VERBOSE_COMMAND_HELP: dict[str, str] = {
    "rotate": dedent(
        """\
        rotate
          Purpose:
            Run the unattended rotation: Aave deposit, hold, Aave withdraw, Silo
            deposit, hold; from the second cycle on the Silo position is redeemed
            first.
          Key flags:
            --cycles INTEGER        Number of cycles (default: ROTATE_CYCLES).
            --amount TEXT           USDC per cycle in human units (default: ROTATE_AMOUNT).
            --hold-secs FLOAT       Holding period between transitions.
            --settle-secs FLOAT     Pause between the Aave withdraw and Silo deposit.
            --unwind/--no-unwind    Redeem the Silo position after the final cycle.
            --persist/--no-persist  Write each step to the SQLite audit log.
            --metrics/--no-metrics  Serve Prometheus metrics on PROM_PORT while running.
          Usage tips:
            - Any failure aborts the run; restart from cycle zero after fixing it.
            - Run ``balances`` first to confirm the smart account holds enough USDC.
          Sample log lines:
            rotate | {"amount":"1","cycles":10,"mode":"dry_run","stage":"plan",...}
            rotate | {"cycles_completed":10,"mode":"dry_run","stage":"completed",...}
        """
    ),
    "balances": dedent(
        """\
        balances
          Purpose:
            Show wallet USDC, the Aave aToken balance (when AAVE_ATOKEN_ADDRESS is
            set) and Silo vault shares for the smart account.
        """
    ),
    "aave:supply": dedent(
        """\
        aave:supply AMOUNT
          Purpose:
            Approve and supply AMOUNT USDC to Aave in one atomic batch.
        """
    ),
    "aave:withdraw": dedent(
        """\
        aave:withdraw AMOUNT
          Purpose:
            Withdraw AMOUNT USDC from Aave back to the smart account.
        """
    ),
    "silo:deposit": dedent(
        """\
        silo:deposit AMOUNT
          Purpose:
            Approve the router, then run transferFrom -> approve -> deposit in a
            single router multicall.
        """
    ),
    "silo:withdraw": dedent(
        """\
        silo:withdraw
          Purpose:
            Redeem every bUSDC share held by the smart account. Partial amounts are
            not supported by this integration.
        """
    ),
    "wallet:check": dedent(
        """\
        wallet:check
          Purpose:
            Connect the smart account, verify the chain id and print its address.
        """
    ),
    "notify:test": dedent(
        """\
        notify:test
          Purpose:
            Send a test message to DISCORD_WEBHOOK_URL.
        """
    ),
}
