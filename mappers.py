"""
Mapper functions turning raw CMS documents into the view models the pages use.

Each list mapper yields exactly one view model per input document, in order.
"""

from typing import List, Sequence

from errors import ConfigurationError
from images import ImageUrlBuilder, resolve_image
from schemas import (
    BlogPost,
    ContactInfo,
    Homepage,
    Project,
    SanityHomepage,
    SanityPost,
    SanityProject,
    SocialLinks,
)


def map_homepage(doc: SanityHomepage, builder: ImageUrlBuilder) -> Homepage:
    headshot = resolve_image(doc.headshot, "Professional headshot", builder)
    if headshot is None:
        raise ConfigurationError("Homepage headshot is required")

    return Homepage(
        name=doc.name,
        title=doc.title,
        tagline=doc.tagline,
        headshot=headshot,
        bio=doc.bio,
        social_links=doc.social_links or SocialLinks(),
        contact=doc.contact or ContactInfo(),
    )


def map_post(doc: SanityPost, builder: ImageUrlBuilder) -> BlogPost:
    return BlogPost(
        id=doc.id,
        title=doc.title,
        excerpt=doc.excerpt,
        slug=doc.slug.current,
        published_date=doc.published_date,
        thumbnail=resolve_image(doc.thumbnail, doc.title, builder),
        author=doc.author,
        reading_time=doc.reading_time,
        content=doc.content,
    )


def map_project(doc: SanityProject, builder: ImageUrlBuilder) -> Project:
    images = None
    if doc.images is not None:
        resolved = (resolve_image(img, doc.title, builder) for img in doc.images)
        images = [img for img in resolved if img is not None]

    return Project(
        id=doc.id,
        title=doc.title,
        description=doc.description,
        slug=doc.slug.current,
        thumbnail=resolve_image(doc.thumbnail, doc.title, builder),
        featured=doc.featured,
        technologies=doc.technologies or [],
        link=doc.link,
        content=doc.content,
        challenge=doc.challenge,
        solution=doc.solution,
        outcomes=doc.outcomes,
        images=images,
        completion_date=doc.completion_date,
        client_name=doc.client_name,
    )


def map_posts(docs: Sequence[SanityPost], builder: ImageUrlBuilder) -> List[BlogPost]:
    return [map_post(doc, builder) for doc in docs]


def map_projects(docs: Sequence[SanityProject], builder: ImageUrlBuilder) -> List[Project]:
    return [map_project(doc, builder) for doc in docs]
