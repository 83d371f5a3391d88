from __future__ import annotations


class StoreError(Exception):
    """Base class for every error raised by the store."""


class StorageUnavailable(StoreError):
    """The database file cannot be opened or is corrupt."""


class WriteFailed(StoreError):
    """The medium rejected a write (update/delete)."""


class InsertFailed(WriteFailed):
    pass


class ResourceMisuse(StoreError):
    """Handle used after close, cursor used outside its block, or leaked on close."""


class ColumnNotFound(StoreError, ValueError):
    def __init__(self, column: str, table: str):
        super().__init__(f"no such column: {column!r} in table {table!r}")
        self.column = column
        self.table = table
