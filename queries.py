"""
GROQ queries for fetching content from the CMS.

Slugs are returned in their ``{"current": ...}`` wrapper for full documents
and projected to plain strings for the slug-only listings.
"""

IMAGE_PROJECTION = "asset, alt, hotspot, crop"

HOMEPAGE_FIELDS = f"""
    _id,
    _type,
    name,
    title,
    tagline,
    "headshot": headshot {{ {IMAGE_PROJECTION} }},
    bio,
    socialLinks,
    contact
"""

POST_FIELDS = f"""
    _id,
    _type,
    title,
    excerpt,
    slug,
    publishedDate,
    "thumbnail": thumbnail {{ {IMAGE_PROJECTION} }},
    author,
    readingTime,
    content
"""

PROJECT_FIELDS = f"""
    _id,
    _type,
    title,
    description,
    slug,
    "thumbnail": thumbnail {{ {IMAGE_PROJECTION} }},
    featured,
    technologies,
    link,
    content,
    challenge,
    solution,
    outcomes,
    "images": images[] {{ {IMAGE_PROJECTION} }},
    completionDate,
    clientName
"""

# Homepage
HOMEPAGE_QUERY = f'*[_type == "homepage"][0] {{{HOMEPAGE_FIELDS}}}'

# Blog posts
ALL_POSTS_QUERY = f'*[_type == "post"] | order(publishedDate desc) {{{POST_FIELDS}}}'
RECENT_POSTS_QUERY = f'*[_type == "post"] | order(publishedDate desc) [0...$limit] {{{POST_FIELDS}}}'
POST_BY_SLUG_QUERY = f'*[_type == "post" && slug.current == $slug][0] {{{POST_FIELDS}}}'
ALL_POST_SLUGS_QUERY = '*[_type == "post" && defined(slug.current)] { "slug": slug.current }'

# Projects
ALL_PROJECTS_QUERY = (
    f'*[_type == "project"] | order(featured desc, completionDate desc) {{{PROJECT_FIELDS}}}'
)
FEATURED_PROJECTS_QUERY = (
    f'*[_type == "project" && featured == true] | order(completionDate desc) [0...$limit] {{{PROJECT_FIELDS}}}'
)
PROJECT_BY_SLUG_QUERY = f'*[_type == "project" && slug.current == $slug][0] {{{PROJECT_FIELDS}}}'
ALL_PROJECT_SLUGS_QUERY = '*[_type == "project" && defined(slug.current)] { "slug": slug.current }'
