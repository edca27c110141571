from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from .errors import ChildWriteError, PostgrestAPIError, ReturnCreationError
from .filters import eq
from .postgrest_client import RETURN_REPRESENTATION, PostgrestClient, parse_rows
from .schemas import ReturnData, ReturnDetails, ReturnRecord, RowId, has_id

logger = logging.getLogger(__name__)

RETURNS = "/returns"
RETURN_ITEMS = "/return_items"
RETURN_IMAGES = "/return_images"
RETURNS_VIEW = "/returns_with_details"

PENDING = "pending"


def create_return(client: PostgrestClient, data: ReturnData) -> ReturnRecord:
    """
    Create a return request and its children, in order:
      1) returns row (status "pending")
      2) return_items batch, if any
      3) return_images batch, if any
    A missing generated id aborts before any child write. A failing child
    batch leaves the return (and any earlier batch) in place.
    """
    payload = data.model_dump(exclude={"items", "images"}, exclude_none=True)
    payload["status"] = PENDING

    created = parse_rows(
        client.request(RETURNS, "POST", json=payload, headers=RETURN_REPRESENTATION),
        ReturnRecord,
        RETURNS,
    )
    record = created[0] if created else None
    if record is None or not has_id(record.id):
        raise ReturnCreationError()

    if data.items:
        items = [{"return_id": record.id, **item.model_dump()} for item in data.items]
        _write_children(client, RETURN_ITEMS, items, record)

    if data.images:
        images = [{"return_id": record.id, "image_url": url} for url in data.images]
        _write_children(client, RETURN_IMAGES, images, record)

    return record


def _write_children(client: PostgrestClient, endpoint: str,
                    rows: List[Dict[str, Any]], parent: ReturnRecord) -> None:
    try:
        client.request(endpoint, "POST", json=rows)
    except PostgrestAPIError as e:
        resource = endpoint.lstrip("/")
        logger.error(
            "return %s (order %s) committed but %d %s row(s) failed (%s); needs reconciliation",
            parent.id, parent.order_id, len(rows), resource, e.status_code,
        )
        raise ChildWriteError(e.status_code, e.body, resource=resource, parent=parent) from e


def get_return(client: PostgrestClient, return_id: RowId) -> Optional[ReturnDetails]:
    rows = client.rows(RETURNS_VIEW, ReturnDetails, params={"id": eq(return_id)})
    return rows[0] if rows else None


def get_returns_by_order(client: PostgrestClient, order_id: str) -> List[ReturnDetails]:
    return client.rows(RETURNS_VIEW, ReturnDetails, params={"order_id": eq(order_id)})


def update_return_status(client: PostgrestClient, return_id: RowId, status: str) -> List[ReturnRecord]:
    # no transition rules here; any status string is written as-is
    return client.rows(
        RETURNS, ReturnRecord, "PATCH",
        params={"id": eq(return_id)},
        json={"status": status},
        headers=RETURN_REPRESENTATION,
    )
