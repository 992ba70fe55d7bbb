"""
Shared fixtures for the MEXC client tests.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from mexc_api import ClientConfig, Credentials, HttpResponse


FIXED_TS = 1717363075282


@pytest.fixture
def make_transport():
    """Factory for a mock transport answering (status, body) pairs in order."""
    def _make(*responses):
        transport = MagicMock()
        transport.request = AsyncMock(side_effect=[
            HttpResponse(status, body if isinstance(body, str) else json.dumps(body))
            for status, body in responses
        ])
        transport.close = AsyncMock()
        return transport

    return _make


@pytest.fixture
def clock():
    return lambda: FIXED_TS


@pytest.fixture
def credentials():
    return Credentials(api_key="mx0vgl-key", api_secret="spot-secret", web_token="WEB-session-token")


@pytest.fixture
def config():
    return ClientConfig()
