"""
Backend-neutral query filters.

The action layer builds these; each gateway translates them into its own
query language (Appwrite query strings, or plain Python predicates for the
in-memory gateway).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Query:
    method: str
    attribute: Optional[str] = None
    values: tuple = ()

    @classmethod
    def equal(cls, attribute: str, values: Iterable[Any]) -> "Query":
        return cls("equal", attribute, tuple(values))

    @classmethod
    def contains(cls, attribute: str, values: Any) -> "Query":
        if isinstance(values, str):
            values = [values]
        return cls("contains", attribute, tuple(values))

    @classmethod
    def order_asc(cls, attribute: str) -> "Query":
        return cls("orderAsc", attribute)

    @classmethod
    def order_desc(cls, attribute: str) -> "Query":
        return cls("orderDesc", attribute)

    @classmethod
    def limit(cls, count: int) -> "Query":
        return cls("limit", None, (count,))

    @classmethod
    def any_of(cls, *queries: "Query") -> "Query":
        return cls("or", None, tuple(queries))
