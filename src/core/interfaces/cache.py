"""Response cache contract.

Why Protocol:
- The client depends on a structural contract (duck typing) rather than a
  concrete store; Redis, in-memory or no-op caches can be injected.
- The cache is advisory: failures raised by an implementation propagate to
  the caller of `OmedaApiClient.get`.
"""

from __future__ import annotations

from typing import Any, Hashable, Protocol, TypedDict, runtime_checkable


class CachedResponse(TypedDict):
    """Payload returned by `ResponseCache.get` on a hit."""

    content_type: str
    body: Any


@runtime_checkable
class ResponseCache(Protocol):
    """Minimal contract for a GET response cache.

    Design rules:
    - `build_key` is synchronous and deterministic for the same inputs.
    - `get`/`set` are async because real stores do I/O.
    """

    def build_key(
        self,
        *,
        environment: str,
        brand: str,
        operation: str,
        endpoint: str,
        ttl: int | None,
    ) -> Hashable:
        """Derive a cache key; the client treats it as opaque."""

        ...

    async def get(self, key: Hashable) -> CachedResponse | None:
        """Return the stored `{content_type, body}` or `None` on a miss."""

        ...

    async def set(self, key: Hashable, body: Any, ttl: int | None, content_type: str) -> None:
        """Store a response body under `key`."""

        ...
