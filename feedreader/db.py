from __future__ import annotations

# feedreader/db.py
import logging
import os
import sqlite3

import yaml

from .contract import FEED_READER

logger = logging.getLogger(__name__)

# DB path resolution order:
# 1) explicit path argument
# 2) env FEEDREADER_DB_PATH
# 3) config.yaml test_db_path (under pytest / APP_ENV=test)
# 4) config.yaml db_path
# 5) <project root>/<contract file name>
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

BUSY_TIMEOUT_MS = 5000


_PATH_KEYS = ("db_path", "test_db_path")


def _read_config_yaml() -> dict[str, str]:
    """Path keys from <project root>/config.yaml; anything unusable yields {}."""
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"ignoring unreadable {cfg_path}: {e}")
        return {}
    if not isinstance(raw, dict):
        return {}
    return {
        k: raw[k].strip()
        for k in _PATH_KEYS
        if isinstance(raw.get(k), str) and raw[k].strip()
    }


def get_db_path(db_path: str | None = None, file_name: str = FEED_READER.file_name) -> str:
    env_path = os.environ.get("FEEDREADER_DB_PATH")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if db_path:
        path = db_path
    elif env_path:
        path = env_path
    else:
        cfg = _read_config_yaml()
        if is_test and cfg.get("test_db_path"):
            path = cfg["test_db_path"]
        elif cfg.get("db_path"):
            path = cfg["db_path"]
        else:
            path = os.path.join(_PROJECT_ROOT, file_name)

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def connect(path: str, read_only: bool = False) -> sqlite3.Connection:
    """
    Open an autocommit SQLite connection with Row factory and busy timeout.
    Read-only connections use the ``mode=ro`` URI so writes are rejected by SQLite itself.
    Write connections switch the file to WAL so open readers never block the writer.
    """
    if read_only:
        uri = "file:" + path.replace("?", "%3f").replace("#", "%23") + "?mode=ro"
        conn = sqlite3.connect(
            uri, uri=True, check_same_thread=False, isolation_level=None, timeout=BUSY_TIMEOUT_MS / 1000
        )
    else:
        conn = sqlite3.connect(
            path, check_same_thread=False, isolation_level=None, timeout=BUSY_TIMEOUT_MS / 1000
        )
    try:
        conn.row_factory = sqlite3.Row
        conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")
        if not read_only:
            conn.execute("PRAGMA journal_mode = WAL")
    except sqlite3.Error:
        conn.close()
        raise
    return conn
