from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.omeda_client import OmedaApiClient


class AbstractResource:
    """Base for resources; holds the client that performs the requests."""

    def __init__(self, *, client: "OmedaApiClient") -> None:
        self.client = client
