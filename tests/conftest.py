"""Shared fixtures: an in-memory backend and a client wired to it."""

import pytest
from httpx import ASGITransport

from livedrop.client import StorefrontClient
from livedrop.config import get_settings

from tests._fake_backend import make_backend

get_settings.cache_clear()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def backend():
    return make_backend()


@pytest.fixture
async def client(backend):
    transport = ASGITransport(app=backend)
    async with StorefrontClient("http://test", transport=transport) as c:
        yield c
