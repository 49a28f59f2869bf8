from __future__ import annotations

import random
from collections.abc import Callable
from typing import Any

import pytest

from sentinel.config.settings import Settings, settings
from sentinel.core.api_client import ApiClient, create_http_client
from sentinel.fixtures.pool import FixturePool


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if settings.live_api_enabled:
        return
    skip_live = pytest.mark.skip(reason="live API disabled: set API_BASE_URL and API_TOKEN")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture()
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture()
def pool() -> FixturePool:
    return FixturePool(rng=random.Random(1234))


@pytest.fixture()
def media_list() -> list[dict[str, Any]]:
    return [
        {
            "id": "m1",
            "title": "Hello World",
            "type": "video",
            "duration": 5400,
            "views": 120,
            "created_at": "2024-03-10T12:00:00.000Z",
            "categories": [{"id": "c1", "name": "News"}, {"id": "c2", "name": "Sports"}],
            "tags": [{"name": "launch"}, "promo"],
        },
        {
            "id": "m2",
            "title": "Second Clip",
            "type": "audio",
            "categories": [{"id": "c1", "name": "News"}],
            "tags": ["promo", {"name": "weekly"}],
        },
        {"_id": "m3", "title": "   ", "type": "video"},
    ]


@pytest.fixture(scope="session")
def live_pool() -> FixturePool:
    return FixturePool()


@pytest.fixture()
async def api_client() -> ApiClient:
    async with create_http_client(settings) as http_client:
        yield ApiClient(http_client, settings)
