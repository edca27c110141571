from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

RowId = Union[int, str]


def has_id(row_id: Optional[RowId]) -> bool:
    """True when a generated identifier is usable as a foreign reference."""
    return row_id is not None and row_id != ""


def _embedded_images(value: Any) -> Any:
    # views embed images either as objects or as bare URLs; null -> no images
    if value is None:
        return []
    if isinstance(value, list):
        return [{"image_url": v} if isinstance(v, str) else v for v in value]
    return value


# ---------------- inputs ----------------

class ReviewData(BaseModel):
    product_id: str
    product_handle: str
    rating: int = Field(ge=1, le=5)
    title: str
    description: str
    customer_name: str
    customer_email: str
    images: List[str] = Field(default_factory=list)


class ReturnItem(BaseModel):
    line_item_id: str
    product_id: Optional[str] = None
    product_title: Optional[str] = None
    variant_id: Optional[str] = None
    variant_title: Optional[str] = None
    quantity: int = Field(ge=1)
    reason: Optional[str] = None


class ReturnData(BaseModel):
    order_id: str
    order_name: str
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    reason: Optional[str] = None
    items: List[ReturnItem] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)


# ---------------- rows (as returned by PostgREST) ----------------

class _Row(BaseModel):
    model_config = ConfigDict(extra="allow")


class ReviewRecord(_Row):
    id: Optional[RowId] = None
    product_id: str
    product_handle: str
    rating: int
    title: Optional[str] = None
    description: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    created_at: Optional[str] = None


class ReviewImage(_Row):
    id: Optional[RowId] = None
    review_id: Optional[RowId] = None
    image_url: str


class ReviewWithImages(ReviewRecord):
    images: List[ReviewImage] = Field(default_factory=list)

    @field_validator("images", mode="before")
    @classmethod
    def coerce_images(cls, value: Any) -> Any:
        return _embedded_images(value)


class RatingRow(_Row):
    rating: int = Field(ge=1, le=5)


class ReturnRecord(_Row):
    id: Optional[RowId] = None
    order_id: str
    order_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    reason: Optional[str] = None
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ReturnItemRecord(_Row):
    id: Optional[RowId] = None
    return_id: Optional[RowId] = None
    line_item_id: str
    product_id: Optional[str] = None
    product_title: Optional[str] = None
    variant_id: Optional[str] = None
    variant_title: Optional[str] = None
    quantity: int
    reason: Optional[str] = None


class ReturnImage(_Row):
    id: Optional[RowId] = None
    return_id: Optional[RowId] = None
    image_url: str


class ReturnDetails(ReturnRecord):
    items: List[ReturnItemRecord] = Field(default_factory=list)
    images: List[ReturnImage] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def null_items(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("images", mode="before")
    @classmethod
    def coerce_images(cls, value: Any) -> Any:
        return _embedded_images(value)


# ---------------- derived ----------------

class ReviewStats(BaseModel):
    total: int
    average: float
    ratings: Dict[int, int]
