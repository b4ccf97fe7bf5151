"""Email deployment endpoints (client scoped)."""

from __future__ import annotations

from adapters.resources.base import AbstractResource
from core.domain.models import LinkClickEntity


class EmailResource(AbstractResource):
    async def link_clicks(self, track_id: str) -> list[LinkClickEntity]:
        """Clicks per link for a deployment, real and unreal (bot) clicks included.

        Click counts change continuously, so the response is never cached.
        """

        response = await self.client.get(
            f"deployment/clicks/{track_id}/*",
            use_client_url=True,
            cache=False,
        )
        return [LinkClickEntity(obj) for obj in response.get_as_array("links")]
