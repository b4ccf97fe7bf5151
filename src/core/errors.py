"""Error taxonomy for the Omeda client.

Why a single module:
- Callers catch `OmedaError` for anything raised by this library.
- The HTTP error variants (`ApiResponseError`) live in `adapters.responses`
  because they wrap transport objects; they still derive from `OmedaError`.
"""

from __future__ import annotations

from typing import Any


class OmedaError(Exception):
    """Base class for every error raised by the client."""


class ConfigurationError(OmedaError, ValueError):
    """Missing or invalid client configuration (app id, brand, endpoint...)."""


class UnsupportedContentTypeError(OmedaError):
    """A content type outside the json/text families was encountered."""

    def __init__(self, content_type: str | None) -> None:
        super().__init__(f"Unsupported API response content type encountered: {content_type}")
        self.content_type = content_type


class UnknownSchemaTypeError(OmedaError, TypeError):
    """A schema entry references a type token with no coercion rule."""

    def __init__(self, type_token: Any, *, field: str | None = None) -> None:
        message = f"An unknown Omeda data type was encountered: '{type_token}'"
        if field:
            message = f"{message} (field '{field}')"
        super().__init__(message)
        self.type_token = type_token
        self.field = field


class JSONParseError(OmedaError, ValueError):
    """The response declared JSON but the body could not be decoded."""

    def __init__(self, body: str, original_error: Exception) -> None:
        super().__init__(f"Unable to parse JSON response body: {original_error}")
        self.body = body
        self.original_error = original_error


class UnknownResourceError(OmedaError, KeyError):
    """`OmedaApiClient.resource()` was asked for a resource it does not have."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No API resource found for '{name}'")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])
