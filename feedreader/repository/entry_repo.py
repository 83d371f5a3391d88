from __future__ import annotations

from ..contract import FEED_ENTRY
from ..helper import StoreHandle
from ..models import Entry
from ..predicate import Predicate

TABLE = FEED_ENTRY.table_name
TITLE, SUBTITLE = FEED_ENTRY.columns


def add_entry(handle: StoreHandle, title: str | None, subtitle: str | None = None) -> int:
    return handle.insert({TITLE: title, SUBTITLE: subtitle}, table=TABLE)


def get_entry(handle: StoreHandle, entry_id: int) -> Entry | None:
    with handle.query(predicate=Predicate.eq(FEED_ENTRY.id_column, entry_id), table=TABLE) as cur:
        row = next(cur, None)
        return Entry.from_row(row, FEED_ENTRY.id_column) if row is not None else None


def find_by_title(handle: StoreHandle, title: str, pattern: bool = False, order_by: str | None = None) -> list[Entry]:
    """Exact match by default; ``pattern=True`` matches with SQL LIKE."""
    pred = Predicate.like(TITLE, title) if pattern else Predicate.eq(TITLE, title)
    with handle.query(predicate=pred, order_by=order_by, table=TABLE) as cur:
        return [Entry.from_row(r, FEED_ENTRY.id_column) for r in cur]


def list_titles(handle: StoreHandle, predicate: Predicate | None = None, order_by: str | None = None) -> list[str | None]:
    with handle.query([TITLE], predicate, order_by, table=TABLE) as cur:
        return [r[TITLE] for r in cur]


def list_entries(handle: StoreHandle) -> list[Entry]:
    with handle.query(order_by=FEED_ENTRY.id_column, table=TABLE) as cur:
        return [Entry.from_row(r, FEED_ENTRY.id_column) for r in cur]


def rename_title(handle: StoreHandle, old_title: str, new_title: str) -> int:
    return handle.update({TITLE: new_title}, Predicate.like(TITLE, old_title), table=TABLE)


def remove_by_title(handle: StoreHandle, title: str) -> int:
    return handle.delete(Predicate.like(TITLE, title), table=TABLE)


def count_entries(handle: StoreHandle) -> int:
    return handle.count(table=TABLE)
