from __future__ import annotations

from pydantic import BaseModel

from .contract import ROW_ID


class Entry(BaseModel):
    id: int
    title: str | None = None
    subtitle: str | None = None

    @classmethod
    def from_row(cls, row, id_column: str = ROW_ID) -> "Entry":
        return cls(id=row[id_column], title=row["title"], subtitle=row["subtitle"])
