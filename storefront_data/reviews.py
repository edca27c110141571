"""
Product reviews on top of PostgREST.

Write side: one `product_reviews` row, then (optionally) a single batched
insert into `review_images` referencing the new review id.
Read side: paginated listing from the `reviews_with_images` view and rating
statistics computed from the bare `product_reviews` ratings.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence
from .errors import ChildWriteError, PostgrestAPIError
from .filters import DEFAULT_LIMIT, DEFAULT_OFFSET, eq, order_desc, page
from .postgrest_client import RETURN_REPRESENTATION, PostgrestClient, parse_rows
from .schemas import RatingRow, ReviewData, ReviewRecord, ReviewStats, ReviewWithImages, has_id

logger = logging.getLogger(__name__)

REVIEWS = "/product_reviews"
REVIEW_IMAGES = "/review_images"
REVIEWS_VIEW = "/reviews_with_images"

RATING_BUCKETS = (1, 2, 3, 4, 5)


# ---------------- write ----------------

def create_review(client: PostgrestClient, data: ReviewData) -> Optional[ReviewRecord]:
    """
    Returns the created review row. Images are attached only when the store
    handed back a generated id; otherwise they are dropped with a warning.
    """
    payload = data.model_dump(exclude={"images"})
    created = parse_rows(
        client.request(REVIEWS, "POST", json=payload, headers=RETURN_REPRESENTATION),
        ReviewRecord,
        REVIEWS,
    )
    review = created[0] if created else None

    if data.images:
        if review is None or not has_id(review.id):
            logger.warning(
                "review for %s created without an id; dropping %d image(s)",
                data.product_handle, len(data.images),
            )
        else:
            _attach_images(client, review, data.images)

    return review


def _attach_images(client: PostgrestClient, review: ReviewRecord, urls: Sequence[str]) -> None:
    images = [{"review_id": review.id, "image_url": url} for url in urls]
    try:
        client.request(REVIEW_IMAGES, "POST", json=images)
    except PostgrestAPIError as e:
        logger.error(
            "review %s committed but %d image(s) failed (%s); needs reconciliation",
            review.id, len(images), e.status_code,
        )
        raise ChildWriteError(e.status_code, e.body, resource="review_images", parent=review) from e


# ---------------- read ----------------

def get_reviews(client: PostgrestClient, product_handle: str,
                limit: int = DEFAULT_LIMIT, offset: int = DEFAULT_OFFSET) -> List[ReviewWithImages]:
    params = {
        "product_handle": eq(product_handle),
        "order": order_desc("created_at"),
        **page(limit, offset),
    }
    return client.rows(REVIEWS_VIEW, ReviewWithImages, params=params)


def get_review_stats(client: PostgrestClient, product_handle: str) -> ReviewStats:
    rows = client.rows(REVIEWS, RatingRow, params={
        "product_handle": eq(product_handle),
        "select": "rating",
    })
    return compute_review_stats(rows)


def compute_review_stats(rows: Sequence[RatingRow]) -> ReviewStats:
    total = len(rows)
    average = sum(r.rating for r in rows) / total if total > 0 else 0
    ratings: Dict[int, int] = {
        bucket: sum(1 for r in rows if r.rating == bucket) for bucket in RATING_BUCKETS
    }
    return ReviewStats(total=total, average=average, ratings=ratings)
