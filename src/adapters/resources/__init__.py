"""API resources: thin groupings of Omeda endpoints over `OmedaApiClient`."""

from adapters.resources.brand import BrandComprehensiveResponse, BrandResource
from adapters.resources.customer import CustomerResource
from adapters.resources.email import EmailResource

__all__ = [
    "BrandComprehensiveResponse",
    "BrandResource",
    "CustomerResource",
    "EmailResource",
]
