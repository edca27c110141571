"""
PostgREST query-string helpers.

Filters are rendered as `<operator>.<value>` and passed as httpx params, so
values are URL-encoded once by the client.
"""
from __future__ import annotations
from typing import Any, Dict

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0


def eq(value: Any) -> str:
    return f"eq.{value}"


def order_desc(column: str) -> str:
    return f"{column}.desc"


def page(limit: int = DEFAULT_LIMIT, offset: int = DEFAULT_OFFSET) -> Dict[str, str]:
    if limit < 0 or offset < 0:
        raise ValueError(f"limit/offset must be >= 0 (got limit={limit}, offset={offset})")
    return {"limit": str(int(limit)), "offset": str(int(offset))}
