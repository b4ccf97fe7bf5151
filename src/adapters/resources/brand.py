"""Brand endpoints.

Brand lookups are meant to be cached and refreshed periodically rather than
called on every web request, so `comprehensive_lookup` goes through the
response cache when the client has one.
"""

from __future__ import annotations

from adapters.resources.base import AbstractResource
from adapters.responses import ApiClientResponse
from core.domain.models import BrandDemographicEntity, BrandProductEntity
from core.schema.builder import to_integer, to_string


class BrandComprehensiveResponse:
    """Brand comprehensive lookup, with demographics and products normalized."""

    def __init__(self, *, response: ApiClientResponse) -> None:
        self.response = response
        self.brand_id = to_integer(response.get("Id"))
        self.description = to_string(response.get("Description"))
        self.demographics = [BrandDemographicEntity(obj) for obj in response.get_as_array("Demographics")]
        self.products = [BrandProductEntity(obj) for obj in response.get_as_array("Products")]

    def demographic(self, demographic_id: int) -> BrandDemographicEntity | None:
        for demographic in self.demographics:
            if demographic.Id == demographic_id:
                return demographic
        return None


class BrandResource(AbstractResource):
    async def comprehensive_lookup(self, *, ttl: int | None = None) -> BrandComprehensiveResponse:
        response = await self.client.get("comp/*", ttl=ttl)
        return BrandComprehensiveResponse(response=response)

    async def behavior_lookup(self) -> ApiClientResponse:
        return await self.client.get("behavior/*", error_on_not_found=False)

    async def behavior_actions_lookup(self) -> ApiClientResponse:
        return await self.client.get("behavior/action/*", error_on_not_found=False)

    async def behavior_categories_lookup(self) -> ApiClientResponse:
        return await self.client.get("behavior/category/*", error_on_not_found=False)

    async def behavior_attributes_lookup(self) -> ApiClientResponse:
        # Undocumented upstream; shape inferred from the other behavior lookups.
        return await self.client.get("behavior/attribute/*", error_on_not_found=False)
