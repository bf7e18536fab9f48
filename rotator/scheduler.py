"""Outer control loop that rotates funds between the two protocols.

Each cycle deposits into the direct adapter, holds, withdraws, then deposits
into the router adapter. From the second cycle on, the router position left by
the previous cycle is unwound first. Steps run strictly one after another and
any error aborts the whole run: it is recorded and re-raised unchanged.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from rotator.metrics.exporter import (
    ROTATION_CYCLE_INDEX,
    ROTATION_CYCLES_TOTAL,
    ROTATION_ERRORS_TOTAL,
)
from rotator.models import CycleState, RotationOp, RotationReport, TxResult
from rotator.protocols.base import ProtocolAdapter

log = logging.getLogger(__name__)


class RotationState(str, Enum):
    IDLE = "idle"
    UNWINDING_ROUTER = "unwinding_router"
    DEPOSITING_DIRECT = "depositing_direct"
    HOLDING = "holding"
    WITHDRAWING_DIRECT = "withdrawing_direct"
    DEPOSITING_ROUTER = "depositing_router"
    COMPLETED = "completed"
    FAILED = "failed"


class RotationScheduler:
    """Sequence deposit/withdraw steps across time-delayed cycles.

    Parameters
    ----------
    direct:
        Adapter for the first protocol (partial withdrawals).
    router:
        Adapter for the second protocol (full-balance withdrawals).
    config:
        Object exposing ``amount``, ``cycles``, ``hold_secs``,
        ``settle_secs`` and ``unwind_on_finish``; usually a
        :class:`~rotator.config.RotationConfig`.
    sleep:
        Blocking wait used for holding periods. Injected in tests.
    recorder:
        Optional callable receiving a :class:`RotationOp` per step.
    notify:
        Optional ``notify(source, message, severity=..., extra=...)`` hook for
        run-level events.
    """

    def __init__(
        self,
        direct: ProtocolAdapter,
        router: ProtocolAdapter,
        config: Any,
        *,
        sleep: Callable[[float], None] = time.sleep,
        recorder: Optional[Callable[[RotationOp], Any]] = None,
        notify: Optional[Callable[..., None]] = None,
    ) -> None:
        self.direct = direct
        self.router = router
        self.amount = str(config.amount)
        self.cycles = int(config.cycles)
        self.hold_secs = float(config.hold_secs)
        self.settle_secs = float(config.settle_secs)
        self.unwind_on_finish = bool(getattr(config, "unwind_on_finish", False))
        self._sleep = sleep
        self._recorder = recorder
        self._notify = notify
        self.state = RotationState.IDLE
        self.history: list[RotationState] = [RotationState.IDLE]
        self._running = False

    # ------------------------------------------------------------------
    def run(self) -> RotationReport:
        """Execute every cycle and return a :class:`RotationReport`.

        Raises whatever the failing adapter raised, after moving to
        :attr:`RotationState.FAILED`.
        """

        if self._running:
            raise RuntimeError("rotation already running")
        if self.cycles < 1:
            raise ValueError("cycles must be at least 1")
        self._running = True
        results: list[TxResult] = []
        completed = 0
        cycle = CycleState(0, self.cycles, self.hold_secs, self.settle_secs)
        self._emit(
            f"rotation started: {self.cycles} cycles of {self.amount} ({self.direct.mode})",
            "info",
        )
        try:
            for index in range(self.cycles):
                cycle = CycleState(index, self.cycles, self.hold_secs, self.settle_secs)
                self._run_cycle(cycle, results)
                completed += 1
                ROTATION_CYCLES_TOTAL.labels(self.direct.mode).inc()
                if not cycle.is_last:
                    self._hold(cycle.hold_secs, "before next cycle")
            if self.unwind_on_finish:
                self._step(cycle, RotationState.UNWINDING_ROUTER, self.router, "withdraw", None, results)
        except Exception as exc:
            self._transition(RotationState.FAILED)
            ROTATION_ERRORS_TOTAL.labels("rotation").inc()
            log.error(
                "Error during fund rotation (cycle %d of %d): %s",
                cycle.index + 1,
                self.cycles,
                exc,
            )
            self._emit(
                f"rotation failed in cycle {cycle.index + 1}/{self.cycles}: {exc}",
                "error",
                {"cycles_completed": completed, "error": type(exc).__name__},
            )
            raise
        finally:
            self._running = False

        self._transition(RotationState.COMPLETED)
        log.info("Fund rotation completed successfully!")
        self._emit(
            f"rotation completed: {completed} cycles, {len(results)} transactions",
            "info",
        )
        return RotationReport(
            state=self.state.value, cycles_completed=completed, results=tuple(results)
        )

    def _run_cycle(self, cycle: CycleState, results: list[TxResult]) -> None:
        ROTATION_CYCLE_INDEX.set(cycle.index)
        log.info("Cycle %d of %d", cycle.index + 1, cycle.total)
        if not cycle.is_first:
            self._step(cycle, RotationState.UNWINDING_ROUTER, self.router, "withdraw", None, results)
        self._step(cycle, RotationState.DEPOSITING_DIRECT, self.direct, "deposit", self.amount, results)
        self._hold(cycle.hold_secs)
        self._step(cycle, RotationState.WITHDRAWING_DIRECT, self.direct, "withdraw", self.amount, results)
        self._hold(cycle.settle_secs)
        self._step(cycle, RotationState.DEPOSITING_ROUTER, self.router, "deposit", self.amount, results)

    # ------------------------------------------------------------------
    def _step(
        self,
        cycle: CycleState,
        state: RotationState,
        adapter: ProtocolAdapter,
        action: str,
        amount: str | None,
        results: list[TxResult],
    ) -> TxResult | None:
        self._transition(state)
        try:
            if action == "deposit":
                result = adapter.deposit(amount)
            else:
                result = adapter.withdraw(amount)
        except Exception as exc:
            self._record(cycle, adapter, action, amount, None, exc)
            raise
        if result is not None:
            results.append(result)
        self._record(cycle, adapter, action, amount, result, None)
        return result

    def _hold(self, secs: float, reason: str = "") -> None:
        self._transition(RotationState.HOLDING)
        if secs <= 0:
            return
        log.info("Waiting %s seconds%s...", f"{secs:g}", f" {reason}" if reason else "")
        self._sleep(secs)

    def _transition(self, state: RotationState) -> None:
        log.debug("rotation state %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _record(
        self,
        cycle: CycleState,
        adapter: ProtocolAdapter,
        action: str,
        amount: str | None,
        result: TxResult | None,
        error: BaseException | None,
    ) -> None:
        if self._recorder is None:
            return
        op = RotationOp(
            ts_iso=datetime.now(timezone.utc).isoformat(),
            cycle=cycle.index,
            protocol=adapter.name,
            action=action,
            mode=adapter.mode,
            ok=error is None,
            amount=amount,
            amount_raw=result.amount_raw if result is not None else None,
            tx_hash=result.tx_hash if result is not None else None,
            error=str(error) if error is not None else None,
        )
        try:
            self._recorder(op)
        except Exception as exc:
            log.warning("failed to persist rotation op: %s", exc)

    def _emit(self, message: str, severity: str, extra: dict | None = None) -> None:
        if self._notify is None:
            return
        self._notify("rotation", message, severity=severity, extra=extra)


__all__ = ["RotationScheduler", "RotationState"]
