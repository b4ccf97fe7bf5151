"""Field tables for the entities returned by the Omeda API.

Names follow the casing of the actual response bodies, which sometimes
differs from Omeda's documentation (e.g. `clicks` / `unrealClicks`).
"""

from __future__ import annotations

from core.schema.types import SchemaType as T
from core.schema.types import define_schema

BRAND_DEMOGRAPHIC = define_schema(
    ("Id", T.INTEGER),
    ("Description", T.STRING),
    ("DemographicType", T.INTEGER),
    ("LegacyId", T.STRING),
    ("OmedaWebformText", T.STRING),
    ("OmedaWebformViewCode", T.INTEGER),
    ("OmedaWebformSequence", T.INTEGER),
    ("AuditedDemographicId", T.INTEGER),
    ("DemographicValues", T.ARRAY),
)

BRAND_DEMOGRAPHIC_VALUE = define_schema(
    ("Id", T.INTEGER),
    ("Description", T.STRING),
    ("ShortDescription", T.STRING),
    ("DemographicValueType", T.INTEGER),
    ("Sequence", T.INTEGER),
    ("AlternateId", T.STRING),
    ("OmedaWebformViewCode", T.INTEGER),
    ("OmedaWebformSequence", T.INTEGER),
)

BRAND_PRODUCT = define_schema(
    ("Id", T.INTEGER),
    ("Description", T.STRING),
    ("ProductType", T.INTEGER),
    ("DeploymentTypeId", T.INTEGER),
    ("MarketingClassId", T.STRING),
    ("AlternateId", T.STRING),
    ("IsPaid", T.SHORT_BOOLEAN),
    ("Frequency", T.STRING),
    ("FrequencyType", T.STRING),
)

CUSTOMER_EMAIL = define_schema(
    ("Id", T.INTEGER),
    ("EmailContactType", T.INTEGER),
    ("ChangedDate", T.DATETIME),
    ("StatusCode", T.INTEGER),
    ("EmailAddress", T.STRING),
    ("HashedEmailAddress", T.STRING),
)

CLICK_LINK = define_schema(
    ("TotalClicks", T.INTEGER),
    ("LinkURL", T.LINK),
    ("clicks", T.STRING),
    ("TotalUnrealClicks", T.INTEGER),
    ("unrealClicks", T.STRING),
)

CLICK = define_schema(
    ("NumberOfClicks", T.INTEGER),
    ("ClickDate", T.DATE),
    ("FirstName", T.STRING),
    ("LastName", T.STRING),
    ("CustomerId", T.INTEGER),
    ("EncryptedCustomerId", T.STRING),
    ("EmailAddress", T.STRING),
    ("Keyword", T.STRING),
    ("Category", T.STRING),
    ("CategoryValue", T.STRING),
)

UNREAL_CLICK = define_schema(
    ("UnrealClicks", T.STRING),
    ("FirstName", T.STRING),
    ("LastName", T.STRING),
    ("CustomerId", T.INTEGER),
    ("EncryptedCustomerId", T.STRING),
    ("EmailAddress", T.STRING),
    ("Keyword", T.STRING),
    ("Category", T.STRING),
    ("CategoryValue", T.STRING),
)

UNREAL_CLICK_REASON = define_schema(
    ("NumberOfUnrealClicks", T.INTEGER),
    ("ClickDate", T.DATE),
    ("Reason", T.INTEGER),
)
