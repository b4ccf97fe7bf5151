import asyncio
import json
import logging
import math

import httpx
import pytest

from adapters.omeda_client import OmedaApiClient
from adapters.responses import (
    ApiClientJSONResponse,
    ApiClientTextResponse,
    ApiResponseJSONError,
    ApiResponseTextError,
)
from core.domain.models import BuildInfo
from core.errors import (
    ConfigurationError,
    JSONParseError,
    UnknownResourceError,
    UnsupportedContentTypeError,
)

INACTIVE = {"Errors": [{"Error": "Customer 42 is valid but not active."}]}
NOT_FOUND = {"Errors": [{"Error": "Customer 42 was not found."}]}


def test_requires_app_id_and_brand(settings):
    with pytest.raises(ConfigurationError):
        OmedaApiClient(brand="ABC", settings=settings)
    with pytest.raises(ConfigurationError):
        OmedaApiClient(app_id="app", settings=settings)


def test_settings_fill_missing_arguments(monkeypatch):
    monkeypatch.setenv("OMEDA_APP_ID", "env-app")
    monkeypatch.setenv("OMEDA_BRAND", "ENV")
    monkeypatch.setenv("OMEDA_USE_STAGING", "true")
    from core.config import AppSettings

    client = OmedaApiClient.from_settings(AppSettings(_env_file=None), brand="ARG")
    assert client.app_id == "env-app"
    assert client.brand == "ARG"
    assert client.environment == "staging"


def test_urls(settings):
    client = OmedaApiClient(app_id="app", brand="ABC", client_abbrev="XYZ", settings=settings)
    assert client.host == "ows.omeda.com"
    assert client.brand_url("/comp/*") == "https://ows.omeda.com/webservices/rest/brand/ABC/comp/*"
    assert client.client_url("deployment//search/") == (
        "https://ows.omeda.com/webservices/rest/client/XYZ/deployment/search"
    )

    staging = OmedaApiClient(app_id="app", brand="ABC", use_staging=True, settings=settings)
    assert staging.url == "https://ows.omedastaging.com"
    with pytest.raises(ConfigurationError):
        staging.client_url("deployment/search")


def test_resource_lookup(settings):
    client = OmedaApiClient(app_id="app", brand="ABC", settings=settings)
    assert client.resource("brand") is client.resources["brand"]
    with pytest.raises(UnknownResourceError):
        client.resource("nope")


@pytest.mark.asyncio
async def test_get_sends_identity_headers(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"Id": 1})

    client = make_client(handler, input_id="input-9", build_info=BuildInfo(version="9.9.9"))
    response = await client.get("comp/*")

    assert isinstance(response, ApiClientJSONResponse)
    assert response.get("Id") == 1
    assert response.status_code == 200
    assert response.time >= 0
    request = seen[0]
    assert str(request.url) == "https://ows.omeda.com/webservices/rest/brand/ABC/comp/*"
    assert request.method == "GET"
    assert request.headers["x-omeda-appid"] == "app-123"
    assert request.headers["x-omeda-inputid"] == "input-9"
    assert request.headers["user-agent"].startswith("omeda-client v9.9.9")
    assert "content-type" not in request.headers


@pytest.mark.asyncio
async def test_post_serializes_body(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ResponseInfo": [{"TransactionId": 5}]})

    client = make_client(handler)
    response = await client.post("storecustomerandorder/*", {"FirstName": "Ada"}, input_id="override")

    assert response.get("ResponseInfo.0.TransactionId") == 5
    request = seen[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert request.headers["x-omeda-inputid"] == "override"
    assert json.loads(request.content) == {"FirstName": "Ada"}


@pytest.mark.asyncio
async def test_text_responses(make_client):
    client = make_client(lambda request: httpx.Response(200, text="plain body"))
    response = await client.get("something/*")
    assert isinstance(response, ApiClientTextResponse)
    assert response.get_body() == "plain body"


@pytest.mark.asyncio
async def test_unsupported_content_type(make_client):
    def handler(request):
        return httpx.Response(200, content=b"<a/>", headers={"content-type": "application/xml"})

    client = make_client(handler)
    with pytest.raises(UnsupportedContentTypeError) as excinfo:
        await client.get("comp/*")
    assert excinfo.value.content_type == "application/xml"


@pytest.mark.asyncio
async def test_invalid_json_keeps_raw_body(make_client):
    def handler(request):
        return httpx.Response(200, content=b"{nope", headers={"content-type": "application/json"})

    client = make_client(handler)
    with pytest.raises(JSONParseError) as excinfo:
        await client.get("comp/*")
    assert excinfo.value.body == "{nope"
    assert isinstance(excinfo.value.original_error, json.JSONDecodeError)


@pytest.mark.asyncio
async def test_server_errors_raise_matching_variant(make_client):
    client = make_client(lambda request: httpx.Response(500, json={"Errors": [{"Error": "Boom"}]}))
    with pytest.raises(ApiResponseJSONError) as excinfo:
        await client.get("comp/*", error_on_not_found=False)
    assert excinfo.value.message == "Boom"
    assert excinfo.value.status_code == 500
    assert excinfo.value.time >= 0

    text_client = make_client(lambda request: httpx.Response(503, text="Unavailable"))
    with pytest.raises(ApiResponseTextError):
        await text_client.get("comp/*")


@pytest.mark.asyncio
async def test_not_found_raises_by_default(make_client):
    client = make_client(lambda request: httpx.Response(404, json=NOT_FOUND))
    with pytest.raises(ApiResponseJSONError) as excinfo:
        await client.get("customer/42/*")
    assert excinfo.value.is_valid_but_not_active is False


@pytest.mark.asyncio
async def test_not_found_downgrades_to_empty_response(make_client):
    client = make_client(lambda request: httpx.Response(404, json=NOT_FOUND))
    response = await client.get("customer/42/*", error_on_not_found=False)
    assert isinstance(response, ApiClientJSONResponse)
    assert response.get_body() == {}
    assert response.status_code == 404

    text_client = make_client(lambda request: httpx.Response(404, text="Not Found"))
    text_response = await text_client.get("customer/42/*", error_on_not_found=False)
    assert text_response.get_body() == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("error_on_not_found", [True, False])
async def test_inactive_not_found_always_raises(make_client, error_on_not_found):
    client = make_client(lambda request: httpx.Response(404, json=INACTIVE))
    with pytest.raises(ApiResponseJSONError) as excinfo:
        await client.get("customer/42/*", error_on_not_found=error_on_not_found)
    assert excinfo.value.is_valid_but_not_active is True


@pytest.mark.asyncio
async def test_missing_endpoint_fails_before_network(make_client, cache):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    client = make_client(handler, cache=cache)
    for endpoint in ("", "/"):
        with pytest.raises(ConfigurationError):
            await client.get(endpoint)
    with pytest.raises(ConfigurationError):
        await client.post("", {"a": 1})
    assert calls == []
    assert cache.get_calls == []


@pytest.mark.asyncio
async def test_client_url_requires_abbreviation(make_client):
    client = make_client(lambda request: httpx.Response(200, json={}))
    with pytest.raises(ConfigurationError):
        await client.get("deployment/search/*", use_client_url=True)


@pytest.mark.asyncio
async def test_request_logger_receives_request_details(make_client):
    logged = []
    client = make_client(
        lambda request: httpx.Response(200, json={}),
        client_abbrev="XYZ",
        request_logger=logged.append,
    )
    await client.post("/customer/*", {"a": 1}, use_client_url=True)

    assert len(logged) == 1
    entry = logged[0]
    assert entry["endpoint"] == "customer/*"
    assert entry["url"] == "https://ows.omeda.com/webservices/rest/client/XYZ/customer/*"
    assert entry["params"]["method"] == "POST"
    assert entry["params"]["body"] == json.dumps({"a": 1})
    assert entry["brand"] == "ABC"
    assert entry["client_abbrev"] == "XYZ"
    assert entry["use_staging"] is False


@pytest.mark.asyncio
async def test_async_request_logger_is_awaited_and_failures_are_logged(make_client, caplog):
    logged = []

    async def request_logger(entry):
        logged.append(entry["endpoint"])
        if entry["endpoint"] == "broken/*":
            raise RuntimeError("log sink down")

    client = make_client(lambda request: httpx.Response(200, json={}), request_logger=request_logger)

    with caplog.at_level(logging.WARNING, logger="adapters.omeda_client"):
        await client.get("comp/*")
        await client.get("broken/*")
        for _ in range(10):
            if not client._pending_logs:
                break
            await asyncio.sleep(0)

    assert logged == ["comp/*", "broken/*"]
    assert not client._pending_logs
    assert "log sink down" in caplog.text


@pytest.mark.asyncio
async def test_injected_http_client_is_reused(settings):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"Id": len(calls)})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = OmedaApiClient(app_id="app", brand="ABC", settings=settings, http_client=http_client)
        first = await client.get("comp/*")
        second = await client.get("comp/*")
        assert not http_client.is_closed

    assert (first.get("Id"), second.get("Id")) == (1, 2)


@pytest.mark.asyncio
async def test_entity_normalization_end_to_end(make_client):
    body = {"Emails": [{"Id": "5", "EmailAddress": "  ", "StatusCode": "x"}]}
    client = make_client(lambda request: httpx.Response(200, json=body))
    emails = await client.resource("customer").lookup_emails(42)
    assert emails[0].Id == 5
    assert emails[0].EmailAddress is None
    assert math.isnan(emails[0].StatusCode)
