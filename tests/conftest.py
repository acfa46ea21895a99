"""Shared pytest fixtures for voicenav tests.

Fixture Organization:
    - Environment isolation: VOICENAV_* / OPENAI_API_KEY cleared, config cache reset
    - Core objects: catalog, scorer, resolver
    - Page contexts: index, about and project pages
    - HTTP mocking: httpx.MockTransport clients for the interpreter and proxy
"""

import os
from collections.abc import Callable

import httpx
import pytest

from src.voicenav.catalog import default_catalog
from src.voicenav.config import VoiceNavConfig, reset_config
from src.voicenav.models import PageContext
from src.voicenav.resolver import NavigationResolver
from src.voicenav.scorer import LocalScorer


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep tests independent of the developer's shell and .env file."""
    for key in list(os.environ):
        if key.upper().startswith("VOICENAV_") or key.upper() == "OPENAI_API_KEY":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setitem(VoiceNavConfig.model_config, "env_file", None)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def scorer(catalog):
    return LocalScorer(catalog)


@pytest.fixture
def resolver(catalog):
    return NavigationResolver(catalog)


@pytest.fixture
def make_context(catalog) -> Callable[[str], PageContext]:
    """Build a PageContext from a location path."""

    def _make(path: str) -> PageContext:
        return PageContext.from_path(path, catalog.project_pages)

    return _make


@pytest.fixture
def index_context(make_context):
    return make_context("/index.html")


@pytest.fixture
def about_context(make_context):
    return make_context("/about.html")


@pytest.fixture
def project_context(make_context):
    """Visitor on the Tidbit case study page."""
    return make_context("/tidbit.html")


@pytest.fixture
def mock_http_client():
    """Factory for an httpx.AsyncClient served by a request handler.

    Example:
        client = mock_http_client(lambda request: httpx.Response(200, json={...}))
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
