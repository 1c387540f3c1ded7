"""
Read client for the CMS query API and published/draft source selection.

Both sources share one ``httpx.AsyncClient`` owned by the application
lifespan; neither is a module-level singleton.
"""

import json
import logging
from typing import Any, Mapping, Optional, Protocol

import httpx

from errors import CMSRequestError
from settings import Settings

logger = logging.getLogger(__name__)

PUBLISHED = "published"
PREVIEW_DRAFTS = "previewDrafts"


class DataSource(Protocol):
    async def fetch(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        ...


class SanityClient:
    """Issues GROQ queries against one project/dataset with a fixed perspective."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        project_id: str,
        dataset: str,
        api_version: str,
        perspective: str = PUBLISHED,
        use_cdn: bool = True,
        token: Optional[str] = None,
    ):
        self._http = http
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version
        self.perspective = perspective
        self.use_cdn = use_cdn
        self.token = token

    @property
    def query_url(self) -> str:
        host = "apicdn" if self.use_cdn else "api"
        return f"https://{self.project_id}.{host}.sanity.io/v{self.api_version}/data/query/{self.dataset}"

    def _query_params(self, query: str, params: Optional[Mapping[str, Any]]) -> dict:
        query_params = {"query": query, "perspective": self.perspective}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)
        return query_params

    async def fetch(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = await self._http.get(
                self.query_url, params=self._query_params(query, params), headers=headers
            )
        except httpx.HTTPError as exc:
            raise CMSRequestError(f"CMS request failed: {exc}") from exc

        if response.status_code >= 400:
            raise CMSRequestError(
                f"CMS query failed with status {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise CMSRequestError("CMS returned a non-JSON response", status_code=response.status_code) from exc

        if not isinstance(payload, dict) or "result" not in payload:
            raise CMSRequestError("CMS response has no result", status_code=response.status_code)
        return payload["result"]


class ContentSources:
    """The published source and, when a read token is configured, the draft source."""

    def __init__(self, published: DataSource, draft: Optional[DataSource] = None):
        self.published = published
        self.draft = draft

    @classmethod
    def from_settings(cls, settings: Settings, http: httpx.AsyncClient) -> "ContentSources":
        published = SanityClient(
            http,
            settings.project_id,
            settings.dataset,
            settings.api_version,
            perspective=PUBLISHED,
            use_cdn=settings.use_cdn,
        )
        draft = None
        if settings.api_token:
            draft = SanityClient(
                http,
                settings.project_id,
                settings.dataset,
                settings.api_version,
                perspective=PREVIEW_DRAFTS,
                use_cdn=False,
                token=settings.api_token,
            )
        return cls(published, draft)

    def select(self, preview: bool = False) -> DataSource:
        if not preview:
            return self.published
        if self.draft is None:
            logger.warning(
                "Preview mode requested but SANITY_API_TOKEN is not set. Falling back to published content."
            )
            return self.published
        return self.draft
