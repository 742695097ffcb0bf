import asyncio
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import aiohttp
import pytest

from game_catalog.models.item import MappedRecord
from game_catalog.sources.base import SourceAdapter


class FakeAdapter(SourceAdapter):
    """Adapter serving canned records without touching the network."""

    def __init__(
        self,
        source_id: str,
        records: Optional[List[Any]] = None,
        category: str = "Agent",
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        gate: Optional[asyncio.Event] = None,
        precedence: int = 0,
    ):
        super().__init__(
            session=None,
            source_id=source_id,
            category=category,
            urls=[f"https://example.test/{source_id}"],
            precedence=precedence,
            use_cache=False,
        )
        self.records = records or []
        self.error = error
        self.delay = delay
        self.gate = gate
        self.calls = 0

    async def _fetch_payloads(self) -> List[Any]:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [list(self.records)]

    def map_record(self, category: str, raw: Dict[str, Any]) -> Optional[MappedRecord]:
        return MappedRecord(
            id=raw.get("id"),
            name=raw.get("name"),
            image_url=raw.get("image"),
            description=raw.get("description"),
            attributes=raw.get("attributes", {}),
        )


class FakeResponse:
    def __init__(self, url: str, payload: Any = None, status: int = 200, body_error: Optional[Exception] = None):
        self.url = url
        self.payload = payload
        self.status = status
        self.body_error = body_error

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                request_info=MagicMock(real_url=self.url),
                history=(),
                status=self.status,
                message="error",
            )

    async def json(self, content_type: Optional[str] = "application/json") -> Any:
        if self.body_error is not None:
            raise self.body_error
        return self.payload

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        return False


class FakeSession:
    """Minimal stand-in for aiohttp.ClientSession.get(). Routes map a URL to a payload,
    a FakeResponse, an exception, or a list of those consumed one call at a time."""

    def __init__(self, routes: Dict[str, Any]):
        self.routes = routes
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, headers: Optional[Dict[str, str]] = None, timeout: Any = None) -> FakeResponse:
        self.calls.append({"url": url, "headers": headers or {}})
        if url not in self.routes:
            return FakeResponse(url, status=404)
        route = self.routes[url]
        if isinstance(route, list) and route and isinstance(route[0], (FakeResponse, BaseException)):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(url, payload=route)

    def urls(self) -> List[str]:
        return [call["url"] for call in self.calls]


@pytest.fixture
def fake_adapter():
    return FakeAdapter


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def agent_records() -> List[Dict[str, Any]]:
    return [
        {"id": "a1", "name": "Agent Smith", "image": "https://img.test/a1.png"},
        {"id": "a2", "name": "Agile"},
        {"id": "a3", "name": "Brimstone", "image": "https://img.test/a3.png"},
    ]


@pytest.fixture
def map_records() -> List[Dict[str, Any]]:
    return [
        {"id": "m1", "name": "Maps", "image": "https://img.test/m1.png"},
        {"id": "m2", "name": "Ascent"},
    ]
