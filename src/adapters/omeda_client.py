"""Omeda API client: the HTTP request pipeline.

Responsibilities:
- Build brand- or client-scoped URLs and attach identity headers.
- Classify the response body as `json` or `text` from its content type.
- Return a success wrapper or raise the matching `ApiResponseError`.
- Front GET requests with an optional `ResponseCache`.

Not handled here: retries, in-flight deduplication of identical requests,
timeouts (configured on the httpx transport).
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import re
import time
from typing import Any, Callable, Hashable

import httpx

from adapters.http_client import build_async_client, clean_path
from adapters.resources import BrandResource, CustomerResource, EmailResource
from adapters.resources.base import AbstractResource
from adapters.responses import (
    JSON,
    TEXT,
    ApiClientResponse,
    build_api_error,
    build_api_response,
)
from core.config import AppSettings
from core.domain.models import BuildInfo
from core.errors import (
    ConfigurationError,
    JSONParseError,
    UnknownResourceError,
    UnsupportedContentTypeError,
)
from core.interfaces.cache import ResponseCache

logger = logging.getLogger(__name__)

RequestLogger = Callable[[dict[str, Any]], Any]

_JSON_CONTENT_TYPE = re.compile(r"^application/json", re.IGNORECASE)
_TEXT_CONTENT_TYPE = re.compile(r"^text/", re.IGNORECASE)


def elapsed_ms(start: float) -> float:
    """Milliseconds elapsed since a `time.perf_counter()` reading."""

    return (time.perf_counter() - start) * 1000


def parse_json(body: str) -> Any:
    """Decode a JSON body; keeps the raw body on failure for diagnostics."""

    if not body.strip():
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise JSONParseError(body, exc) from exc


def parse_response_body(response: httpx.Response) -> tuple[str, Any]:
    """Return `(content_type, body)` where content_type is `json` or `text`."""

    body = response.text
    declared = response.headers.get("content-type")
    if declared and _JSON_CONTENT_TYPE.match(declared):
        return JSON, parse_json(body)
    if declared and _TEXT_CONTENT_TYPE.match(declared):
        return TEXT, body
    raise UnsupportedContentTypeError(declared)


class OmedaApiClient:
    """Async client for the Omeda REST API.

    Arguments left as `None` are read from `AppSettings` (env `OMEDA_*`).
    An injected `http_client` is reused across calls and never closed here;
    without one, a short-lived client is opened per request.
    """

    def __init__(
        self,
        *,
        app_id: str | None = None,
        brand: str | None = None,
        client_abbrev: str | None = None,
        input_id: str | None = None,
        use_staging: bool | None = None,
        cache: ResponseCache | None = None,
        request_logger: RequestLogger | None = None,
        settings: AppSettings | None = None,
        build_info: BuildInfo | None = None,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.app_id = app_id or self.settings.app_id
        self.brand = brand or self.settings.brand
        if not self.app_id:
            raise ConfigurationError("The Omeda API App ID is required.")
        if not self.brand:
            raise ConfigurationError("The Omeda brand abbreviation is required.")

        self.client_abbrev = client_abbrev or self.settings.client_abbrev
        self.input_id = input_id or self.settings.input_id
        self.use_staging = self.settings.use_staging if use_staging is None else use_staging
        self.cache = cache
        self.request_logger = request_logger
        self.build_info = build_info or BuildInfo()

        self._http_client = http_client
        self._transport = transport
        self._pending_logs: set[asyncio.Future[Any]] = set()
        self.resources: dict[str, AbstractResource] = {
            "brand": BrandResource(client=self),
            "customer": CustomerResource(client=self),
            "email": EmailResource(client=self),
        }

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None, **overrides: Any) -> "OmedaApiClient":
        return cls(settings=settings or AppSettings(), **overrides)

    def resource(self, name: str) -> AbstractResource:
        """Return the API resource registered under `name` (`brand`, `customer`...)."""

        try:
            return self.resources[name]
        except KeyError:
            raise UnknownResourceError(name) from None

    @property
    def environment(self) -> str:
        return "staging" if self.use_staging else "production"

    @property
    def host(self) -> str:
        root = "omedastaging" if self.environment == "staging" else "omeda"
        return f"ows.{root}.com"

    @property
    def url(self) -> str:
        return f"https://{self.host}"

    def brand_url(self, endpoint: str) -> str:
        return f"{self.url}/webservices/rest/brand/{self.brand}/{clean_path(endpoint)}"

    def client_url(self, endpoint: str) -> str:
        if not self.client_abbrev:
            raise ConfigurationError(
                "Unable to perform operation: no client abbreviation was set on the API client."
            )
        return f"{self.url}/webservices/rest/client/{self.client_abbrev}/{clean_path(endpoint)}"

    def build_cache_key(self, *, endpoint: str, operation: str = "brand", ttl: int | None = None) -> Hashable:
        if self.cache is None:
            raise ConfigurationError("No response cache was set on the API client.")
        return self.cache.build_key(
            environment=self.environment,
            brand=self.brand,
            operation=operation,
            endpoint=clean_path(endpoint),
            ttl=ttl,
        )

    async def get(
        self,
        endpoint: str,
        *,
        error_on_not_found: bool = True,
        use_client_url: bool = False,
        cache: bool = True,
        ttl: int | None = None,
    ) -> ApiClientResponse:
        """GET `endpoint`, served from the response cache when possible.

        Concurrent misses for the same key each reach the network; there is
        no request coalescing.
        """

        if not (cache and self.cache is not None):
            return await self.request(
                "GET",
                endpoint,
                error_on_not_found=error_on_not_found,
                use_client_url=use_client_url,
            )

        _require_endpoint(endpoint)
        start = time.perf_counter()
        key = self.build_cache_key(endpoint=endpoint, ttl=ttl)
        cached = await self.cache.get(key)
        if cached:
            logger.debug("Omeda cache hit for %s", endpoint)
            return build_api_response(
                cached.get("content_type"),
                cached.get("body"),
                time=elapsed_ms(start),
                from_cache=True,
            )

        logger.debug("Omeda cache miss for %s", endpoint)
        response = await self.request(
            "GET",
            endpoint,
            error_on_not_found=error_on_not_found,
            use_client_url=use_client_url,
        )
        await self.cache.set(key, response.get_body(), ttl, response.content_type)
        return response

    async def post(
        self,
        endpoint: str,
        body: Any,
        *,
        input_id: str | None = None,
        use_client_url: bool = False,
    ) -> ApiClientResponse:
        return await self.request(
            "POST",
            endpoint,
            body=body,
            input_id=input_id,
            use_client_url=use_client_url,
        )

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        body: Any = None,
        input_id: str | None = None,
        error_on_not_found: bool = True,
        use_client_url: bool = False,
    ) -> ApiClientResponse:
        """Perform a request and wrap the outcome.

        404 handling:
        - an inactive record ("valid but not active") always raises;
        - otherwise `error_on_not_found=False` yields an empty success response;
        - otherwise the 404 error is raised.
        """

        start = time.perf_counter()
        _require_endpoint(endpoint)
        url = self.client_url(endpoint) if use_client_url else self.brand_url(endpoint)

        headers = {
            "x-omeda-appid": self.app_id,
            "user-agent": self.build_info.user_agent,
        }
        iid = input_id or self.input_id
        if iid:
            headers["x-omeda-inputid"] = iid
        content: str | None = None
        if body is not None:
            headers["content-type"] = "application/json"
            content = json.dumps(body)

        params: dict[str, Any] = {"method": method, "headers": headers}
        if content is not None:
            params["body"] = content
        self._log_request(endpoint=endpoint, url=url, params=params)

        response = await self._send(method, url, headers=headers, content=content)
        content_type, response_body = parse_response_body(response)
        elapsed = elapsed_ms(start)

        if response.is_success:
            return build_api_response(content_type, response_body, fetch_response=response, time=elapsed)

        error = build_api_error(content_type, response_body, fetch_response=response, time=elapsed)
        if response.status_code == 404:
            if error.is_valid_but_not_active:
                logger.info("Omeda %s %s: record is valid but not active", method, url)
                raise error
            if error_on_not_found is False:
                return build_api_response(content_type, fetch_response=response, time=elapsed)

        logger.info("Omeda %s %s failed with %s: %s", method, url, response.status_code, error.message)
        raise error

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        content: str | None,
    ) -> httpx.Response:
        logger.debug("Omeda %s %s", method, url)
        if self._http_client is not None:
            return await self._http_client.request(method, url, headers=headers, content=content)
        async with build_async_client(
            self.settings, build_info=self.build_info, transport=self._transport
        ) as client:
            return await client.request(method, url, headers=headers, content=content)

    def _log_request(self, *, endpoint: str, url: str, params: dict[str, Any]) -> None:
        if not callable(self.request_logger):
            return
        result = self.request_logger(
            {
                "endpoint": clean_path(endpoint),
                "url": url,
                "params": params,
                "brand": self.brand,
                "client_abbrev": self.client_abbrev,
                "use_staging": self.use_staging,
            }
        )
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending_logs.add(task)
            task.add_done_callback(self._request_logged)

    def _request_logged(self, task: asyncio.Future[Any]) -> None:
        self._pending_logs.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Omeda request logger failed: %s", exc, exc_info=exc)


def _require_endpoint(endpoint: str | None) -> None:
    if not endpoint or not clean_path(endpoint):
        raise ConfigurationError("An API endpoint is required.")
