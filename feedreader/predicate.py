"""Parameterized filters and ordering for store queries.

Only column names taken from the contract ever reach the SQL text; values are
always bound as parameters.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .contract import TableContract
from .errors import ColumnNotFound

_OPS = ("=", "LIKE")


@dataclass(frozen=True)
class Predicate:
    """AND-ed list of ``(column, op, value)`` comparisons."""
    clauses: tuple[tuple[str, str, Any], ...] = ()

    @classmethod
    def eq(cls, column: str, value: Any) -> "Predicate":
        return cls(((column, "=", value),))

    @classmethod
    def like(cls, column: str, pattern: str) -> "Predicate":
        return cls(((column, "LIKE", pattern),))

    def __and__(self, other: "Predicate") -> "Predicate":
        return Predicate(self.clauses + other.clauses)

    def to_sql(self, table: TableContract) -> tuple[str, list[Any]]:
        """Return ``(where_fragment, params)``; empty fragment when no clauses."""
        parts: list[str] = []
        params: list[Any] = []
        for column, op, value in self.clauses:
            require_column(table, column)
            if op not in _OPS:
                raise ValueError(f"unsupported operator: {op!r}")
            if value is None and op == "=":
                parts.append(f"{column} IS NULL")
                continue
            parts.append(f"{column} {op} ?")
            params.append(value)
        return " AND ".join(parts), params


def require_column(table: TableContract, column: str) -> str:
    if not table.has_column(column):
        raise ColumnNotFound(column, table.table_name)
    return column


def where_clause(table: TableContract, predicate: Predicate | None) -> tuple[str, list[Any]]:
    if predicate is None:
        return "", []
    sql, params = predicate.to_sql(table)
    return (f" WHERE {sql}" if sql else ""), params


def order_clause(table: TableContract, order_by: str | Sequence[str] | None) -> str:
    """Accepts ``"subtitle DESC"``, ``"title, _id DESC"`` or a list of such terms."""
    if not order_by:
        return ""
    terms: Iterable[str] = order_by.split(",") if isinstance(order_by, str) else order_by
    out = []
    for term in terms:
        bits = term.split()
        if not bits or len(bits) > 2:
            raise ValueError(f"bad order term: {term!r}")
        column = require_column(table, bits[0])
        direction = bits[1].upper() if len(bits) == 2 else "ASC"
        if direction not in ("ASC", "DESC"):
            raise ValueError(f"bad order direction: {bits[1]!r}")
        out.append(f"{column} {direction}")
    return " ORDER BY " + ", ".join(out)
