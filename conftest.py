import inspect

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.core.config import settings
from app.services.pricing_table import DEFAULT_PRICING_TABLE, get_pricing_table


@pytest.fixture(autouse=True)
def reset_pricing_table_cache():
    get_pricing_table.cache_clear()
    yield
    get_pricing_table.cache_clear()


@pytest.fixture
async def test_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def pricing_table():
    return DEFAULT_PRICING_TABLE


@pytest.fixture
def graphic_request_data():
    """Ten social posts, nothing else"""
    return {
        "service_type": "graphic",
        "graphic": {
            "social_posts": 10,
            "banners": 0,
            "brochures": 0,
            "illustrations": 0,
            "packaging": 0,
            "bilingual": False,
        },
    }


@pytest.fixture
def video_request_data():
    """Fifteen basic edits, short form, no add-ons"""
    return {
        "service_type": "video",
        "video": {
            "basic_edits": 15,
            "duration": "under_60s",
            "captions": False,
            "stock_footage": False,
            "scripting_support": False,
        },
    }


@pytest.fixture
def bundle_request_data(graphic_request_data, video_request_data):
    return {
        "service_type": "both",
        "graphic": graphic_request_data["graphic"],
        "video": video_request_data["video"],
    }


@pytest.fixture
def app_settings():
    """Return application settings"""
    return settings


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "api: marks tests that go through the HTTP layer"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to handle asyncio tests
    """
    for item in items:
        if inspect.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
