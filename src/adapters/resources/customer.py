"""Customer endpoints."""

from __future__ import annotations

from adapters.resources.base import AbstractResource
from core.domain.models import CustomerEmailEntity


class CustomerResource(AbstractResource):
    async def lookup_emails(self, customer_id: int | str) -> list[CustomerEmailEntity]:
        """Email addresses stored for a customer; empty when the customer is unknown.

        An inactive customer still raises `ApiResponseError`.
        """

        response = await self.client.get(f"customer/{customer_id}/email/*", error_on_not_found=False)
        return [CustomerEmailEntity(obj) for obj in response.get_as_array("Emails")]
