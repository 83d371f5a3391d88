"""Schema contract: table/column names and the DDL derived from them.

Contracts are plain immutable values; pass one to ``StoreHelper`` instead of
reaching for module globals, so two stores (e.g. in tests) never collide.
"""
from __future__ import annotations

from dataclasses import dataclass

# Android's BaseColumns._ID; kept for file compatibility.
ROW_ID = "_id"


@dataclass(frozen=True)
class TableContract:
    table_name: str
    columns: tuple[str, ...]
    id_column: str = ROW_ID

    @property
    def all_columns(self) -> tuple[str, ...]:
        return (self.id_column, *self.columns)

    @property
    def create_sql(self) -> str:
        cols = "".join(f",{c} TEXT" for c in self.columns)
        return f"CREATE TABLE {self.table_name} ({self.id_column} INTEGER PRIMARY KEY{cols})"

    @property
    def drop_sql(self) -> str:
        return f"DROP TABLE IF EXISTS {self.table_name}"

    def has_column(self, name: str) -> bool:
        return name in self.all_columns


@dataclass(frozen=True)
class StoreContract:
    """A named, versioned database file holding one or more tables."""
    name: str
    version: int
    tables: tuple[TableContract, ...]

    @property
    def file_name(self) -> str:
        return f"{self.name}.db"

    def table(self, table_name: str) -> TableContract:
        for t in self.tables:
            if t.table_name == table_name:
                return t
        raise KeyError(table_name)


FEED_ENTRY = TableContract(table_name="entry", columns=("title", "subtitle"))

# Bump the version whenever the schema changes; mismatches wipe the table.
FEED_READER = StoreContract(name="FeedReader", version=1, tables=(FEED_ENTRY,))
