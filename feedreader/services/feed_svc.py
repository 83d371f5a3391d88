from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from ..contract import FEED_ENTRY
from ..helper import StoreHandle, StoreHelper
from ..predicate import Predicate
from ..repository import entry_repo

logger = logging.getLogger(__name__)


def crud_walkthrough(helper: StoreHelper) -> dict[str, Any]:
    """
    Insert, read back, rename, verify and delete one entry, then close the store.

    Returns the intermediate results:
    - new_row_id: id assigned to the inserted row
    - titles: titles matching ``title = 'Prueba'`` (subtitle DESC)
    - updated: rows renamed from 'My Title' to 'MyNewTitle'
    - titles_after_update: titles matching ``title LIKE 'MyNewTitle'``
    - deleted: rows removed by ``title LIKE 'MyNewTitle'``
    """
    title_col = entry_repo.TITLE
    order = f"{entry_repo.SUBTITLE} DESC"
    try:
        db = helper.writable_database
        new_row_id = entry_repo.add_entry(db, "Prueba", "prueba")
        logger.info(f"inserted row {new_row_id}")

        dbr = helper.readable_database
        titles = entry_repo.list_titles(dbr, Predicate.eq(title_col, "Prueba"), order)
        logger.info(f"titles = {titles}")

        new_title = "MyNewTitle"
        updated = entry_repo.rename_title(db, "My Title", new_title)
        logger.info(f"updated {updated} row(s)")

        titles_after = entry_repo.list_titles(dbr, Predicate.like(title_col, new_title), order)
        logger.info(f"titles after update = {titles_after}")

        deleted = entry_repo.remove_by_title(db, new_title)
        logger.info(f"deleted {deleted} row(s)")
    finally:
        helper.close()

    return {
        "new_row_id": new_row_id,
        "titles": titles,
        "updated": updated,
        "titles_after_update": titles_after,
        "deleted": deleted,
    }


def entries_frame(handle: StoreHandle) -> pd.DataFrame:
    """All entries as a DataFrame ordered by row id."""
    columns = list(FEED_ENTRY.all_columns)
    with handle.query(columns, order_by=FEED_ENTRY.id_column, table=FEED_ENTRY.table_name) as cur:
        rows = [dict(r) for r in cur]
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)
