"""
HexNet — Test Configuration (conftest.py)
===========================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── sample_blob:     A two-record hex stream and its expected records
    ├── converter:       A ConverterService with small, known limits
    ├── app:             A fresh FastAPI app per test (rate limiter state is per app)
    └── test_client:     HTTPX AsyncClient bound to `app` through ASGITransport
"""

import os

# Set before any hexnet import so the Settings singleton picks them up
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["MAX_INPUT_LINES"] = "500"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from hexnet.services.converter_service import ConverterService


@pytest.fixture
def sample_blob():
    """
    Two concatenated records:
        18 c0a800 c0a80001   192.168.0.0/24 via 192.168.0.1
        00        0a000001   0.0.0.0/0      via 10.0.0.1
    """
    return {
        "blob": "0x18c0a800c0a80001000a000001",
        "records": [
            ("192.168.0.0/24", "192.168.0.1", "0x18c0a800c0a80001"),
            ("0.0.0.0/0", "10.0.0.1", "0x000a000001"),
        ],
    }


@pytest.fixture
def converter():
    return ConverterService(max_lines=5, max_bytes=2048)


@pytest.fixture
def app():
    from hexnet.main import create_app
    return create_app()


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
