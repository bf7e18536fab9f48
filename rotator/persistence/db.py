"""SQLite audit log of rotation steps.

Rows are written as steps complete or fail. They are never read back to
resume a run; a restarted process always begins at cycle zero.
"""

from __future__ import annotations

import sqlite3
from sqlite3 import Connection

from ..models import RotationOp


def init_db(db_path: str = "rotator.db") -> Connection:
    """Create a database connection and ensure required tables exist."""
    conn = sqlite3.connect(db_path)
    create_schema(conn)
    return conn


def create_schema(conn: Connection) -> None:
    """Create database tables if they are missing."""
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS rotation_ops (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            ts_iso TEXT NOT NULL,
            cycle INTEGER NOT NULL,
            protocol TEXT NOT NULL,
            action TEXT NOT NULL,
            mode TEXT NOT NULL,
            ok INTEGER NOT NULL,
            amount TEXT,
            amount_raw TEXT,
            tx_hash TEXT,
            error TEXT
        )
        """
    )
    conn.commit()


def insert_rotation_op(conn: Connection, op: RotationOp) -> int:
    """Insert a rotation step record and return its row id."""
    cur = conn.cursor()
    cur.execute(
        """
        INSERT INTO rotation_ops (
            ts_iso, cycle, protocol, action, mode, ok, amount, amount_raw,
            tx_hash, error
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            op.ts_iso,
            op.cycle,
            op.protocol,
            op.action,
            op.mode,
            int(op.ok),
            op.amount,
            # uint256 values overflow SQLite INTEGER; store as text
            str(op.amount_raw) if op.amount_raw is not None else None,
            op.tx_hash,
            op.error,
        ),
    )
    conn.commit()
    return cur.lastrowid


def recent_ops(conn: Connection, limit: int = 20) -> list[RotationOp]:
    """Return the newest *limit* rotation steps, newest first."""
    cur = conn.cursor()
    cur.execute(
        """
        SELECT ts_iso, cycle, protocol, action, mode, ok, amount, amount_raw,
               tx_hash, error
        FROM rotation_ops ORDER BY id DESC LIMIT ?
        """,
        (int(limit),),
    )
    out: list[RotationOp] = []
    for row in cur.fetchall():
        out.append(
            RotationOp(
                ts_iso=row[0],
                cycle=row[1],
                protocol=row[2],
                action=row[3],
                mode=row[4],
                ok=bool(row[5]),
                amount=row[6],
                amount_raw=int(row[7]) if row[7] is not None else None,
                tx_hash=row[8],
                error=row[9],
            )
        )
    return out
