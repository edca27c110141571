from __future__ import annotations
from typing import Any


class PostgrestError(Exception):
    """Base class for everything raised by this package."""


class PostgrestAPIError(PostgrestError):
    """Non-2xx answer from the PostgREST endpoint."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"PostgreSQL API error: {status_code} {body}")


class ChildWriteError(PostgrestAPIError):
    """
    A child batch (images, return items) was rejected after the parent row
    was already committed. The parent is NOT rolled back:
      - resource: the child resource that failed, e.g. "review_images"
      - parent:   the committed parent row, for reconciliation
    """

    def __init__(self, status_code: int, body: str, *, resource: str, parent: Any):
        super().__init__(status_code, body)
        self.resource = resource
        self.parent = parent


class ReturnCreationError(PostgrestError):
    def __init__(self, message: str = "Failed to create return"):
        super().__init__(message)


class ResponseShapeError(PostgrestError):
    """2xx response whose JSON does not match the expected row schema."""

    def __init__(self, endpoint: str, detail: str):
        self.endpoint = endpoint
        super().__init__(f"Unexpected response from {endpoint}: {detail}")
