"""Shared fixtures: isolated settings, a recording cache and a mocked transport."""

import os

import httpx
import pytest

from adapters.omeda_client import OmedaApiClient
from core.config import AppSettings


class RecordingCache:
    """In-memory `ResponseCache` that records every call."""

    def __init__(self):
        self.store = {}
        self.get_calls = []
        self.set_calls = []

    def build_key(self, *, environment, brand, operation, endpoint, ttl):
        return f"{environment}:{brand}:{operation}:{endpoint}:{ttl}"

    async def get(self, key):
        self.get_calls.append(key)
        return self.store.get(key)

    async def set(self, key, body, ttl, content_type):
        self.set_calls.append((key, body, ttl, content_type))
        self.store[key] = {"content_type": content_type, "body": body}


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for key in list(os.environ):
        if key.upper().startswith("OMEDA_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings():
    return AppSettings(_env_file=None)


@pytest.fixture
def cache():
    return RecordingCache()


@pytest.fixture
def make_client(settings):
    """Build a client whose requests are answered by `handler`."""

    def factory(handler, **kwargs):
        kwargs.setdefault("app_id", "app-123")
        kwargs.setdefault("brand", "ABC")
        return OmedaApiClient(settings=settings, transport=httpx.MockTransport(handler), **kwargs)

    return factory
