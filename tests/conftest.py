"""
Pytest configuration and fixtures for the DSBmobile client.
"""
from collections.abc import Callable

import httpx
import pytest

from dsbmobile.client import DSBClient
from dsbmobile.config import DSBConfig
from dsbmobile.session import DSBSession

from dsb_builder import FIXED_APP_ID, FIXED_NOW, StubExtractor


@pytest.fixture
def config() -> DSBConfig:
    return DSBConfig(
        username="299761",
        password="geheim",
        max_attempts=2,
        retry_wait=0,
        request_timeout=5,
    )


@pytest.fixture
def make_session(config: DSBConfig) -> Callable[[Callable[[httpx.Request], httpx.Response]], DSBSession]:
    """Build a DSBSession whose HTTP traffic goes to a handler function."""

    def _make(handler):
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return DSBSession(config, client=client)

    return _make


@pytest.fixture
def make_client(config: DSBConfig, make_session):
    """Build a DSBClient with a mock transport, fixed id and fixed clock."""

    def _make(handler, table_mapper=None, extractor=None):
        return DSBClient(
            table_mapper=table_mapper,
            config=config,
            session=make_session(handler),
            image_extractor=extractor or StubExtractor(),
            id_provider=lambda: FIXED_APP_ID,
            clock=lambda: FIXED_NOW,
        )

    return _make
