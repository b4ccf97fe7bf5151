"""Response and error wrappers returned by `OmedaApiClient`.

Two parallel pairs, selected by the response content type:
- success: `ApiClientJSONResponse` / `ApiClientTextResponse`
- failure: `ApiResponseJSONError` / `ApiResponseTextError`

All of them carry the `httpx.Response` (absent for cache hits), the elapsed
time in milliseconds and whether the body came from the cache.
"""

from __future__ import annotations

import re
from abc import ABC, ABCMeta, abstractmethod
from typing import Any, ClassVar

import httpx

from core.errors import OmedaError, UnsupportedContentTypeError
from core.schema.builder import as_array

JSON = "json"
TEXT = "text"
CONTENT_TYPES = (JSON, TEXT)

# Omeda reports inactive-but-existing records as a 404 with this wording.
VALID_BUT_NOT_ACTIVE = re.compile(r"valid but not active")

_MISSING = object()


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Read a dot-notated path (`"Errors.0.Error"`) from nested dicts/lists."""

    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part, _MISSING)
        elif isinstance(current, list) and part.lstrip("-").isdigit():
            index = int(part)
            current = current[index] if -len(current) <= index < len(current) else _MISSING
        else:
            current = _MISSING
        if current is _MISSING:
            return default
    return default if current is None else current


class ApiClientResponse(ABC):
    """Common accessor surface of successful responses."""

    content_type: ClassVar[str]

    def __init__(
        self,
        *,
        fetch_response: httpx.Response | None = None,
        time: float = 0.0,
        from_cache: bool = False,
    ) -> None:
        self.fetch_response = fetch_response
        self.time = time
        self.from_cache = from_cache

    @property
    def json(self) -> Any:
        return None

    @property
    def status_code(self) -> int | None:
        return self.fetch_response.status_code if self.fetch_response is not None else None

    @abstractmethod
    def get_body(self) -> Any: ...

    def get(self, path: str, default: Any = None) -> Any:
        return get_path(self.json, path, default)

    def get_as_array(self, path: str) -> list[Any]:
        return as_array(self.get(path))

    def get_as_object(self, path: str) -> dict[str, Any]:
        value = self.get(path)
        return value if isinstance(value, dict) else {}

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"time={self.time:.2f}ms, from_cache={self.from_cache})"
        )


class ApiClientJSONResponse(ApiClientResponse):
    content_type = JSON

    def __init__(self, *, json: Any = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._json = json if json is not None else {}

    @property
    def json(self) -> Any:
        return self._json

    def get_body(self) -> Any:
        return self._json


class ApiClientTextResponse(ApiClientResponse):
    content_type = TEXT

    def __init__(self, *, text: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.text = text or ""

    def get_body(self) -> str:
        return self.text


class ApiResponseError(OmedaError, metaclass=ABCMeta):
    """Non-2xx response from the Omeda API."""

    content_type: ClassVar[str]

    def __init__(
        self,
        message: str,
        *,
        fetch_response: httpx.Response | None = None,
        time: float = 0.0,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.fetch_response = fetch_response
        self.time = time

    @property
    def status_code(self) -> int | None:
        return self.fetch_response.status_code if self.fetch_response is not None else None

    @property
    def is_valid_but_not_active(self) -> bool:
        """True when Omeda reports the record exists but is inactive.

        This is a heuristic on human-readable text; it is the only place that
        knows the wording.
        """

        return VALID_BUT_NOT_ACTIVE.search(self.message) is not None

    @abstractmethod
    def get_body(self) -> Any: ...


def _fallback_message(fetch_response: httpx.Response | None) -> str:
    if fetch_response is None:
        return "An unknown Omeda API error was encountered."
    reason = fetch_response.reason_phrase or "Unknown Error"
    return f"Omeda API error ({fetch_response.status_code} {reason})"


def _json_error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    errors = [
        str(item.get("Error")).strip()
        for item in as_array(body.get("Errors"))
        if isinstance(item, dict) and item.get("Error")
    ]
    if errors:
        return "; ".join(errors)
    for key in ("Message", "message"):
        if isinstance(body.get(key), str) and body[key].strip():
            return body[key].strip()
    return None


class ApiResponseJSONError(ApiResponseError):
    content_type = JSON

    def __init__(
        self,
        *,
        json: Any = None,
        fetch_response: httpx.Response | None = None,
        time: float = 0.0,
    ) -> None:
        message = _json_error_message(json) or _fallback_message(fetch_response)
        super().__init__(message, fetch_response=fetch_response, time=time)
        self.json = json

    @property
    def errors(self) -> list[dict[str, Any]]:
        if not isinstance(self.json, dict):
            return []
        return [item for item in as_array(self.json.get("Errors")) if isinstance(item, dict)]

    def get_body(self) -> Any:
        return self.json


class ApiResponseTextError(ApiResponseError):
    content_type = TEXT

    def __init__(
        self,
        *,
        text: str | None = None,
        fetch_response: httpx.Response | None = None,
        time: float = 0.0,
    ) -> None:
        message = (text or "").strip() or _fallback_message(fetch_response)
        super().__init__(message, fetch_response=fetch_response, time=time)
        self.text = text or ""

    def get_body(self) -> str:
        return self.text


def build_api_response(
    content_type: str,
    body: Any = None,
    *,
    fetch_response: httpx.Response | None = None,
    time: float = 0.0,
    from_cache: bool = False,
) -> ApiClientResponse:
    if content_type == JSON:
        return ApiClientJSONResponse(json=body, fetch_response=fetch_response, time=time, from_cache=from_cache)
    if content_type == TEXT:
        return ApiClientTextResponse(text=body, fetch_response=fetch_response, time=time, from_cache=from_cache)
    raise UnsupportedContentTypeError(content_type)


def build_api_error(
    content_type: str,
    body: Any = None,
    *,
    fetch_response: httpx.Response | None = None,
    time: float = 0.0,
) -> ApiResponseError:
    if content_type == JSON:
        return ApiResponseJSONError(json=body, fetch_response=fetch_response, time=time)
    if content_type == TEXT:
        return ApiResponseTextError(text=body, fetch_response=fetch_response, time=time)
    raise UnsupportedContentTypeError(content_type)
