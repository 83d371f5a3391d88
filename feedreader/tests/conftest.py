import sqlite3
import sys
from pathlib import Path

import pytest

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture()
def tmp_db_path(tmp_path, monkeypatch):
    path = tmp_path / "db" / "FeedReader.db"
    # Point the store at this temp DB
    monkeypatch.setenv("FEEDREADER_DB_PATH", str(path))
    return str(path)


@pytest.fixture()
def helper(tmp_db_path):
    from feedreader.helper import StoreHelper
    h = StoreHelper()
    yield h
    h.close()


@pytest.fixture()
def db(helper):
    return helper.writable_database


@pytest.fixture()
def raw_conn():
    """Open a plain sqlite3 connection to inspect a file behind the store's back."""
    opened = []

    def _open(path):
        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        opened.append(conn)
        return conn

    yield _open
    for c in opened:
        c.close()
