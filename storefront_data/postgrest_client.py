# storefront_data/postgrest_client.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from .errors import PostgrestAPIError, ResponseShapeError

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = {"Prefer": "return=representation"}

M = TypeVar("M", bound=BaseModel)


class PostgrestClient:
    """
    Thin transport over a PostgREST endpoint:
      - request(endpoint, method, params=, json=, headers=) -> parsed JSON (or None)
      - rows(endpoint, model, ...) -> List[model]
    Every non-2xx answer raises PostgrestAPIError(status, body). Nothing is retried.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        kwargs: Dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        self.session = httpx.Client(**kwargs)

    def __enter__(self) -> "PostgrestClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    # ---------------- headers ----------------
    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if extra:
            headers.update(extra)
        return headers

    # ---------------- requests ----------------
    def request(self, endpoint: str, method: str = "GET", *,
                params: Optional[Dict[str, str]] = None,
                json: Any = None,
                headers: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)
        r = self.session.request(method, url, params=params, json=json, headers=self._headers(headers))

        if not r.is_success:
            logger.warning("%s %s failed with %s", method, endpoint, r.status_code)
            raise PostgrestAPIError(r.status_code, r.text)

        # 201/204 without a representation carry no body
        if not r.content.strip():
            return None
        try:
            return r.json()
        except ValueError as e:
            raise ResponseShapeError(endpoint, f"invalid JSON: {e}") from e

    def rows(self, endpoint: str, model: Type[M], method: str = "GET", **kwargs) -> List[M]:
        return parse_rows(self.request(endpoint, method, **kwargs), model, endpoint)


def parse_rows(payload: Any, model: Type[M], endpoint: str) -> List[M]:
    """Validate a PostgREST array payload into typed rows."""
    if not isinstance(payload, list):
        raise ResponseShapeError(endpoint, f"expected a JSON array, got {type(payload).__name__}")
    try:
        return TypeAdapter(List[model]).validate_python(payload)
    except ValidationError as e:
        raise ResponseShapeError(endpoint, str(e)) from e
