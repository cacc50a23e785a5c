"""
One shared SQLite connection per database file.

The listing API serves requests from uvicorn's worker threads and the
local fetcher queries from ``asyncio.to_thread`` workers, so connections
are opened with ``check_same_thread=False`` and reused for the lifetime
of the process. Rows come back as ``sqlite3.Row``.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Optional

from estatesearch.config.settings import StorageSettings, get_settings

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_open_connections: dict[str, sqlite3.Connection] = {}


def _resolve(db_path: Optional[Path]) -> Path:
    return get_settings().db_path if db_path is None else Path(db_path)


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _open(db_path: Path, storage: StorageSettings) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False, timeout=10.0)
    conn.execute(f"PRAGMA journal_mode={storage.journal_mode}")
    conn.execute(f"PRAGMA busy_timeout={storage.busy_timeout_ms}")
    # fsync at WAL checkpoints only
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.row_factory = sqlite3.Row
    # SQLite's LOWER/LIKE fold ASCII only; name search needs full Unicode folding
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    logger.info("Opened listing database %s (journal_mode=%s)", db_path, storage.journal_mode)
    return conn


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """
    Return the shared connection for db_path, opening it on first use.

    Args:
        db_path: SQLite file. Defaults to ``Settings.db_path``.
    """
    path = _resolve(db_path)
    with _registry_lock:
        conn = _open_connections.get(str(path))
        if conn is None:
            conn = _open(path, get_settings().storage)
            _open_connections[str(path)] = conn
        return conn


def close_connection(db_path: Optional[Path] = None) -> None:
    """Close and forget the connection for db_path, if one is open."""
    path = _resolve(db_path)
    with _registry_lock:
        conn = _open_connections.pop(str(path), None)
    if conn is not None:
        conn.close()
        logger.info("Closed listing database %s", path)


def close_all_connections() -> None:
    """Close every open connection, e.g. on server shutdown."""
    with _registry_lock:
        connections = list(_open_connections.items())
        _open_connections.clear()
    for key, conn in connections:
        conn.close()
        logger.info("Closed listing database %s", key)
