"""
CMS data fetching layer.

Every operation picks the published or draft source from the explicit
``preview`` flag, runs one query and maps the result to view models.

Failure policy:
- list operations log and return an empty list, so a CMS outage renders
  as "no content yet";
- by-slug lookups log and return None, which pages render as not found;
- the homepage fetch logs and raises, since the home page has no empty state.
"""

import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from errors import CMSRequestError, ConfigurationError, ContentError, ContentFetchError
from images import ImageUrlBuilder
from mappers import map_homepage, map_post, map_posts, map_project, map_projects
from queries import (
    ALL_POST_SLUGS_QUERY,
    ALL_POSTS_QUERY,
    ALL_PROJECT_SLUGS_QUERY,
    ALL_PROJECTS_QUERY,
    FEATURED_PROJECTS_QUERY,
    HOMEPAGE_QUERY,
    POST_BY_SLUG_QUERY,
    PROJECT_BY_SLUG_QUERY,
    RECENT_POSTS_QUERY,
)
from sanity_client import ContentSources
from schemas import BlogPost, Homepage, Project, SanityHomepage, SanityPost, SanityProject

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 3

# Malformed documents count as a failed query for the operation that read them
FETCH_ERRORS = (ContentError, ValidationError)

RawT = TypeVar("RawT", bound=BaseModel)


class ContentContext:
    """Data sources plus image URL builder, built once and handed to every fetch."""

    def __init__(self, sources: ContentSources, images: ImageUrlBuilder):
        self.sources = sources
        self.images = images


def _as_list(data: Any) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise CMSRequestError(f"Expected a list result, got {type(data).__name__}")
    return data


def _parse_many(data: Any, model: Type[RawT]) -> List[RawT]:
    return [model.model_validate(doc) for doc in _as_list(data)]


def _newest_posts_first(docs: List[SanityPost]) -> List[SanityPost]:
    return sorted(docs, key=lambda doc: doc.published_date, reverse=True)


def _truncate(items: list, limit: int) -> list:
    return items[: max(limit, 0)]


def _slugs(data: Any) -> List[str]:
    return [item["slug"] for item in _as_list(data) if isinstance(item, dict) and item.get("slug")]


# ========
# Homepage
# ========
async def get_homepage_content(ctx: ContentContext, preview: bool = False) -> Homepage:
    try:
        data = await ctx.sources.select(preview).fetch(HOMEPAGE_QUERY)
        if not data:
            raise ContentFetchError("Homepage document not found in CMS")
        return map_homepage(SanityHomepage.model_validate(data), ctx.images)
    except ConfigurationError:
        logger.exception("Homepage content is misconfigured")
        raise
    except FETCH_ERRORS as exc:
        logger.exception("Error fetching homepage content")
        raise ContentFetchError("Failed to fetch homepage content") from exc


# ==========
# Blog posts
# ==========
async def get_all_blog_posts(ctx: ContentContext, preview: bool = False) -> List[BlogPost]:
    try:
        data = await ctx.sources.select(preview).fetch(ALL_POSTS_QUERY)
        docs = _newest_posts_first(_parse_many(data, SanityPost))
        return map_posts(docs, ctx.images)
    except FETCH_ERRORS:
        logger.exception("Error fetching all blog posts")
        return []


async def get_recent_blog_posts(
    ctx: ContentContext, limit: int = DEFAULT_LIMIT, preview: bool = False
) -> List[BlogPost]:
    try:
        data = await ctx.sources.select(preview).fetch(RECENT_POSTS_QUERY, {"limit": limit})
        docs = _truncate(_newest_posts_first(_parse_many(data, SanityPost)), limit)
        return map_posts(docs, ctx.images)
    except FETCH_ERRORS:
        logger.exception("Error fetching recent blog posts (limit=%s)", limit)
        return []


async def get_blog_post_by_slug(
    ctx: ContentContext, slug: str, preview: bool = False
) -> Optional[BlogPost]:
    try:
        data = await ctx.sources.select(preview).fetch(POST_BY_SLUG_QUERY, {"slug": slug})
        if not data:
            return None
        return map_post(SanityPost.model_validate(data), ctx.images)
    except FETCH_ERRORS:
        logger.exception('Error fetching blog post with slug "%s"', slug)
        return None


async def get_all_blog_slugs(ctx: ContentContext, preview: bool = False) -> List[str]:
    try:
        data = await ctx.sources.select(preview).fetch(ALL_POST_SLUGS_QUERY)
        return _slugs(data)
    except FETCH_ERRORS:
        logger.exception("Error fetching blog post slugs")
        return []


# ========
# Projects
# ========
async def get_all_projects(ctx: ContentContext, preview: bool = False) -> List[Project]:
    """All projects, featured first, then by completion date (newest first)."""
    try:
        data = await ctx.sources.select(preview).fetch(ALL_PROJECTS_QUERY)
        docs = sorted(
            _parse_many(data, SanityProject),
            key=lambda doc: (doc.featured, doc.completion_date),
            reverse=True,
        )
        return map_projects(docs, ctx.images)
    except FETCH_ERRORS:
        logger.exception("Error fetching all projects")
        return []


async def get_featured_projects(
    ctx: ContentContext, limit: int = DEFAULT_LIMIT, preview: bool = False
) -> List[Project]:
    try:
        data = await ctx.sources.select(preview).fetch(FEATURED_PROJECTS_QUERY, {"limit": limit})
        featured = [doc for doc in _parse_many(data, SanityProject) if doc.featured]
        # "YYYY-MM" sorts chronologically as a string
        featured.sort(key=lambda doc: doc.completion_date, reverse=True)
        return map_projects(_truncate(featured, limit), ctx.images)
    except FETCH_ERRORS:
        logger.exception("Error fetching featured projects (limit=%s)", limit)
        return []


async def get_project_by_slug(
    ctx: ContentContext, slug: str, preview: bool = False
) -> Optional[Project]:
    try:
        data = await ctx.sources.select(preview).fetch(PROJECT_BY_SLUG_QUERY, {"slug": slug})
        if not data:
            return None
        return map_project(SanityProject.model_validate(data), ctx.images)
    except FETCH_ERRORS:
        logger.exception('Error fetching project with slug "%s"', slug)
        return None


async def get_all_project_slugs(ctx: ContentContext, preview: bool = False) -> List[str]:
    try:
        data = await ctx.sources.select(preview).fetch(ALL_PROJECT_SLUGS_QUERY)
        return _slugs(data)
    except FETCH_ERRORS:
        logger.exception("Error fetching project slugs")
        return []
