import json

import httpx
import pytest

from storefront_data.service import PostgresService

BASE_URL = "http://postgrest.test/"


class Recorder:
    """Collects every request sent through the mock transport."""

    def __init__(self, handler):
        self.handler = handler
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.handler(request)

    def bodies(self):
        return [json.loads(r.content) if r.content else None for r in self.calls]


@pytest.fixture
def make_service():
    """Build a PostgresService whose HTTP traffic goes to `handler`."""
    created = []

    def _make(handler, api_key="secret-key"):
        recorder = Recorder(handler)
        service = PostgresService(BASE_URL, api_key, transport=httpx.MockTransport(recorder))
        created.append(service)
        return service, recorder

    yield _make
    for s in created:
        s.close()
