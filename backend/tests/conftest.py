import os

# Set *before* any project imports so settings pick it up
os.environ["TESTING"] = "1"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import asyncio
import json
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import List
from typing import Union

import httpx
import pytest
from fastapi.testclient import TestClient

from galaxy.factory import create_app
from galaxy.registry import FeatureDescriptor
from galaxy.registry import GalaxyInstance
from galaxy.registry import InstanceIdentity
from galaxy.registry import Registry
from galaxy.registry import Role

CV_GEN = FeatureDescriptor(
    id="cv-gen",
    name="CV Generator",
    base_url="https://cvgen.ai",
    api_endpoint="https://cvgen.ai/api/generate",
)
COVER_LETTER = FeatureDescriptor(
    id="cover-letter",
    name="Cover Letter AI",
    base_url="https://coverletter.app",
    api_endpoint="https://coverletter.app/api/generate",
)
# Listed in the registry but exposes no API
BLOG = FeatureDescriptor(id="blog", name="Galaxy Blog", base_url="https://blog.galaxy.dev")


Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class FakeGalaxy:
    """Routes outbound requests by URL to per-endpoint handlers and records them."""

    def __init__(self) -> None:
        self.routes: Dict[str, Handler] = {}
        self.requests: List[httpx.Request] = []

    def route(self, url: str, handler: Handler) -> None:
        self.routes[url] = handler

    def respond(self, url: str, status_code: int = 200, json_body: Any = None) -> None:
        self.route(url, lambda request: httpx.Response(status_code, json=json_body))

    def calls_to(self, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]

    def bodies_to(self, url: str) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.calls_to(url)]

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(str(request.url))
        if handler is None:
            raise httpx.ConnectError(f"No route to {request.url}", request=request)
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records the requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class InFlightTracker:
    """Builds slow handlers and records the peak number of concurrent requests."""

    def __init__(self) -> None:
        self.current = 0
        self.peak = 0

    def handler(self, delay: float, json_body: Any = None) -> Handler:
        async def _handle(request: httpx.Request) -> httpx.Response:
            self.current += 1
            self.peak = max(self.peak, self.current)
            try:
                await asyncio.sleep(delay)
            finally:
                self.current -= 1
            return httpx.Response(200, json=json_body)

        return _handle


@pytest.fixture
def fake_galaxy():
    return FakeGalaxy()


@pytest.fixture
def fake_sleep():
    return RecordingSleep()


@pytest.fixture
def registry():
    return Registry([CV_GEN, BLOG, COVER_LETTER])


@pytest.fixture
def core_instance(registry):
    identity = InstanceIdentity(
        id="galaxy-core",
        name="Galaxy Dashboard",
        role=Role.CORE,
        api_endpoint="https://galaxy.dev/api/orchestrate",
        tagline="All your career tools",
        description="Dashboard for the career galaxy",
    )
    return GalaxyInstance(identity=identity, registry=registry)


@pytest.fixture
def feature_instance(registry):
    identity = InstanceIdentity(
        id="cv-gen",
        name="CV Generator",
        role=Role.FEATURE,
        api_endpoint="https://cvgen.ai/api/generate",
        core_app_url="https://galaxy.dev",
    )
    return GalaxyInstance(identity=identity, registry=registry)


@pytest.fixture
def core_client(core_instance, fake_galaxy):
    app = create_app(core_instance, transport=fake_galaxy.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def feature_client(feature_instance, fake_galaxy):
    app = create_app(feature_instance, transport=fake_galaxy.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def in_flight():
    return InFlightTracker()
