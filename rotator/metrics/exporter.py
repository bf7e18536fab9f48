"""Prometheus metrics collectors and helpers.

This module exposes counters and gauges for tracking rotation transactions,
cycles and failures as well as a helper for starting the metrics HTTP server.
"""

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Metric collectors
ROTATION_TXS_TOTAL = Counter(
    "rotation_txs_total",
    "Transactions submitted by the rotation",
    ["protocol", "action", "mode"],
)
ROTATION_ERRORS_TOTAL = Counter(
    "rotation_errors_total", "Rotation errors encountered", ["stage"]
)
ROTATION_CYCLES_TOTAL = Counter(
    "rotation_cycles_total", "Rotation cycles completed", ["mode"]
)
ROTATION_CYCLE_INDEX = Gauge(
    "rotation_cycle_index", "Zero-based index of the cycle currently running"
)
ROTATION_STEP_LATENCY = Histogram(
    "rotation_step_latency_seconds",
    "Time from assembly to confirmation for a rotation step",
    ["protocol", "action"],
)
ROTATION_POSITION_RAW = Gauge(
    "rotation_position_raw",
    "Last observed position size in token base units",
    ["protocol"],
)


def start_metrics_server(port: int) -> None:
    """Start the Prometheus metrics server on the provided ``port``.

    Parameters
    ----------
    port:
        TCP port to bind the HTTP server to.
    """

    # Be tolerant of env-sourced strings like "9109".
    start_http_server(int(port))
