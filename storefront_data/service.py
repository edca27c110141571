from __future__ import annotations
from typing import List, Mapping, Optional
import httpx
from . import returns, reviews
from .config import CFG, DEFAULT_POSTGREST_URL, optional_float
from .filters import DEFAULT_LIMIT, DEFAULT_OFFSET
from .postgrest_client import PostgrestClient
from .schemas import (
    ReturnData,
    ReturnDetails,
    ReturnRecord,
    ReviewData,
    ReviewRecord,
    ReviewStats,
    ReviewWithImages,
    RowId,
)


class PostgresService:
    """
    Reviews and return requests persisted through PostgREST.
    Stateless apart from the HTTP client; safe to build per request.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.client = PostgrestClient(base_url, api_key, timeout=timeout, transport=transport)

    def __enter__(self) -> "PostgresService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    # ---------------- reviews ----------------
    def create_review(self, data: ReviewData) -> Optional[ReviewRecord]:
        return reviews.create_review(self.client, data)

    def get_reviews(self, product_handle: str, limit: int = DEFAULT_LIMIT,
                    offset: int = DEFAULT_OFFSET) -> List[ReviewWithImages]:
        return reviews.get_reviews(self.client, product_handle, limit, offset)

    def get_review_stats(self, product_handle: str) -> ReviewStats:
        return reviews.get_review_stats(self.client, product_handle)

    # ---------------- returns ----------------
    def create_return(self, data: ReturnData) -> ReturnRecord:
        return returns.create_return(self.client, data)

    def get_return(self, return_id: RowId) -> Optional[ReturnDetails]:
        return returns.get_return(self.client, return_id)

    def get_returns_by_order(self, order_id: str) -> List[ReturnDetails]:
        return returns.get_returns_by_order(self.client, order_id)

    def update_return_status(self, return_id: RowId, status: str) -> List[ReturnRecord]:
        return returns.update_return_status(self.client, return_id, status)


def create_postgres_service(env: Optional[Mapping[str, str]] = None, **kwargs) -> PostgresService:
    """
    Build a service from POSTGREST_URL / POSTGREST_API_KEY / POSTGREST_TIMEOUT.
    Without `env`, the process settings (CFG) are used.
    """
    if env is None:
        return PostgresService(CFG.postgrest_url, CFG.postgrest_api_key, timeout=CFG.request_timeout, **kwargs)

    return PostgresService(
        env.get("POSTGREST_URL") or DEFAULT_POSTGREST_URL,
        env.get("POSTGREST_API_KEY") or None,
        timeout=optional_float(env.get("POSTGREST_TIMEOUT")),
        **kwargs,
    )
