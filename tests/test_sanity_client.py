import json

import httpx
import pytest

from errors import CMSRequestError
from sanity_client import PREVIEW_DRAFTS, PUBLISHED, ContentSources, SanityClient
from settings import Settings


def client_for(handler, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SanityClient(http, "testproj", "production", "2024-01-01", **kwargs)


@pytest.mark.asyncio
async def test_fetch_builds_query_request():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ms": 3, "result": [{"slug": "a"}]})

    client = client_for(handler)
    result = await client.fetch('*[_type == "post" && slug.current == $slug]', {"slug": "my-post", "limit": 2})

    assert result == [{"slug": "a"}]
    request = seen[0]
    assert request.url.host == "testproj.apicdn.sanity.io"
    assert request.url.path == "/v2024-01-01/data/query/production"
    assert request.url.params["perspective"] == PUBLISHED
    assert json.loads(request.url.params["$slug"]) == "my-post"
    assert request.url.params["$limit"] == "2"
    assert "authorization" not in request.headers


@pytest.mark.asyncio
async def test_token_and_live_api():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"result": None})

    client = client_for(handler, perspective=PREVIEW_DRAFTS, use_cdn=False, token="abc")
    assert await client.fetch("*[0]") is None
    assert seen[0].url.host == "testproj.api.sanity.io"
    assert seen[0].headers["authorization"] == "Bearer abc"
    assert seen[0].url.params["perspective"] == PREVIEW_DRAFTS


@pytest.mark.asyncio
async def test_error_status_raises():
    client = client_for(lambda request: httpx.Response(403, text="forbidden"))
    with pytest.raises(CMSRequestError) as excinfo:
        await client.fetch("*")
    assert excinfo.value.status_code == 403


@pytest.mark.asyncio
async def test_network_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CMSRequestError, match="CMS request failed"):
        await client_for(handler).fetch("*")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>"),
        httpx.Response(200, json={"error": "nope"}),
    ],
)
async def test_malformed_payload_raises(response):
    with pytest.raises(CMSRequestError):
        await client_for(lambda request: response).fetch("*")


def test_sources_without_token_have_no_draft():
    settings = Settings(project_id="p", dataset="d")
    sources = ContentSources.from_settings(settings, httpx.AsyncClient())
    assert sources.draft is None
    assert sources.select(preview=True) is sources.published


def test_sources_with_token():
    settings = Settings(project_id="p", dataset="d", api_token="tok", use_cdn=True)
    sources = ContentSources.from_settings(settings, httpx.AsyncClient())
    assert sources.select() is sources.published
    assert sources.select(preview=True) is sources.draft
    assert sources.published.use_cdn is True
    assert sources.published.token is None
    assert sources.draft.use_cdn is False
    assert sources.draft.token == "tok"
    assert sources.draft.perspective == PREVIEW_DRAFTS
