"""Shared fixtures: an in-memory CMS source and raw document factories."""

import pytest

from content import ContentContext
from images import ImageUrlBuilder
from sanity_client import ContentSources
from settings import Settings

PROJECT_ID = "testproj"
DATASET = "production"
PREVIEW_SECRET = "s3cret-token"


class FakeSource:
    """DataSource returning canned results keyed by query string."""

    def __init__(self, results=None, error=None):
        self.results = dict(results or {})
        self.error = error
        self.calls = []

    async def fetch(self, query, params=None):
        self.calls.append((query, dict(params or {})))
        if self.error is not None:
            raise self.error
        return self.results.get(query)


def make_image(ref="image-abc123-800x600-jpg", alt=None, **extra):
    image = {"_type": "image", "asset": {"_ref": ref, "_type": "reference"}, **extra}
    if alt is not None:
        image["alt"] = alt
    return image


def make_homepage(**overrides):
    doc = {
        "_id": "homepage",
        "_type": "homepage",
        "name": "Jane Doe",
        "title": "Software Engineer",
        "tagline": "Building useful things",
        "headshot": make_image("image-head01-400x400-png", alt="Jane Doe headshot"),
        "bio": "Writes software.",
        "socialLinks": {"github": "https://github.com/jane"},
        "contact": {"email": "jane@example.com", "location": "Amsterdam"},
    }
    doc.update(overrides)
    return doc


def make_post(id="post-1", slug="first-post", published="2024-01-15", **overrides):
    doc = {
        "_id": id,
        "_type": "post",
        "title": f"Post {id}",
        "excerpt": "An excerpt.",
        "slug": {"current": slug},
        "publishedDate": published,
        "thumbnail": make_image("image-thumb01-1200x630-jpg"),
        "author": "Jane Doe",
        "readingTime": 5,
        "content": "Body text.",
    }
    doc.update(overrides)
    return doc


def make_project(id="project-1", slug="first-project", completed="2024-01", featured=False, **overrides):
    doc = {
        "_id": id,
        "_type": "project",
        "title": f"Project {id}",
        "description": "A project.",
        "slug": {"current": slug},
        "thumbnail": make_image("image-proj01-1600x900-webp"),
        "featured": featured,
        "technologies": ["Python", "FastAPI"],
        "link": "https://example.com",
        "content": "Case study.",
        "challenge": "Hard problem.",
        "solution": "Clever fix.",
        "outcomes": ["Shipped"],
        "completionDate": completed,
        "clientName": None,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def settings():
    return Settings(
        project_id=PROJECT_ID,
        dataset=DATASET,
        api_token="read-token",
        preview_secret=PREVIEW_SECRET,
        draft_cookie_secure=False,
    )


@pytest.fixture
def builder():
    return ImageUrlBuilder(PROJECT_ID, DATASET)


@pytest.fixture
def published():
    return FakeSource()


@pytest.fixture
def draft():
    return FakeSource()


@pytest.fixture
def sources(published, draft):
    return ContentSources(published, draft)


@pytest.fixture
def ctx(sources, builder):
    return ContentContext(sources, builder)
