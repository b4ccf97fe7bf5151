"""httpx wrapper.

Why a wrapper:
- Standardizes transport timeouts and identity headers for every call.
- Makes testing easy: pass a `transport` (e.g. `httpx.MockTransport`).
"""

from __future__ import annotations

import re

import httpx

from core.config import AppSettings
from core.domain.models import BuildInfo


def build_async_client(
    settings: AppSettings | None = None,
    *,
    build_info: BuildInfo | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the client's defaults.

    Why a builder:
    - Timeouts are a transport concern; the request pipeline owns none.
    - The user-agent is derived from `BuildInfo`, never from global state.
    """

    settings = settings or AppSettings()
    build_info = build_info or BuildInfo()
    headers: dict[str, str] = {
        "user-agent": build_info.user_agent,
        "accept": "application/json, text/plain;q=0.9, */*;q=0.1",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def clean_path(value: str) -> str:
    """Strip surrounding slashes and collapse repeated ones."""

    return re.sub(r"/{2,}", "/", value.strip()).strip("/")
