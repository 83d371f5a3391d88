"""FeedReader: a schema-versioned local record store on SQLite."""
from __future__ import annotations

from .contract import FEED_ENTRY, FEED_READER, StoreContract, TableContract
from .errors import (
    ColumnNotFound,
    InsertFailed,
    ResourceMisuse,
    StorageUnavailable,
    StoreError,
    WriteFailed,
)
from .helper import Cursor, Mode, StoreHandle, StoreHelper
from .models import Entry
from .predicate import Predicate

__all__ = [
    "FEED_ENTRY",
    "FEED_READER",
    "StoreContract",
    "TableContract",
    "StoreError",
    "StorageUnavailable",
    "WriteFailed",
    "InsertFailed",
    "ResourceMisuse",
    "ColumnNotFound",
    "StoreHelper",
    "StoreHandle",
    "Cursor",
    "Mode",
    "Entry",
    "Predicate",
]
