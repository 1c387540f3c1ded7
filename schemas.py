"""
Content Schemas for the Portfolio CMS

Two families of pydantic models live here:
- Raw documents, exactly as the CMS query endpoint returns them
  (``_id``/``_type`` wrapper fields, slug wrappers, image references).
- View models, the immutable shapes the pages consume. They serialize
  with camelCase aliases (``publishedDate``, ``socialLinks`` ...).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class RawDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ======
# Images
# ======
class AssetReference(RawDocument):
    ref: str = Field(alias="_ref")
    type: str = Field(default="reference", alias="_type")


class ImageCrop(RawDocument):
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not (self.top or self.bottom or self.left or self.right)


class ImageHotspot(RawDocument):
    x: float = 0.5
    y: float = 0.5
    height: float = 1.0
    width: float = 1.0


class SanityImage(RawDocument):
    """Image field as stored in the CMS. ``asset`` is None for empty slots."""

    asset: Optional[AssetReference] = None
    alt: Optional[str] = None
    crop: Optional[ImageCrop] = None
    hotspot: Optional[ImageHotspot] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_dangling_asset(cls, data):
        # an upload in progress leaves an asset object without a _ref
        if isinstance(data, dict):
            asset = data.get("asset")
            if isinstance(asset, dict) and not asset.get("_ref"):
                data = {**data, "asset": None}
        return data


class ImageDimensions(ViewModel):
    width: int
    height: int
    aspect_ratio: float


class ProcessedImage(ViewModel):
    url: str
    alt: str
    srcset: Optional[str] = None
    placeholder: Optional[str] = None
    dimensions: Optional[ImageDimensions] = None


# ==============
# Shared fields
# ==============
class Slug(RawDocument):
    current: str

    @model_validator(mode="before")
    @classmethod
    def _from_projection(cls, data):
        # queries may already project slug.current to a plain string
        if isinstance(data, str):
            return {"current": data}
        return data


class SocialLinks(ViewModel):
    model_config = ConfigDict(extra="ignore")

    github: Optional[str] = None
    linkedin: Optional[str] = None


class ContactInfo(ViewModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    location: Optional[str] = None


# =============
# Raw documents
# =============
class SanityHomepage(RawDocument):
    id: str = Field(alias="_id")
    type: str = Field(default="homepage", alias="_type")
    name: str
    title: str
    tagline: str
    headshot: Optional[SanityImage] = None
    bio: str
    social_links: Optional[SocialLinks] = Field(default=None, alias="socialLinks")
    contact: Optional[ContactInfo] = None


class SanityPost(RawDocument):
    id: str = Field(alias="_id")
    type: str = Field(default="post", alias="_type")
    title: str
    excerpt: str
    slug: Slug
    published_date: str = Field(alias="publishedDate")
    thumbnail: Optional[SanityImage] = None
    author: str
    reading_time: Optional[float] = Field(default=None, alias="readingTime")
    content: str


class SanityProject(RawDocument):
    id: str = Field(alias="_id")
    type: str = Field(default="project", alias="_type")
    title: str
    description: str
    slug: Slug
    thumbnail: Optional[SanityImage] = None
    featured: bool = False
    technologies: Optional[List[str]] = None
    link: Optional[str] = None
    content: str
    challenge: str
    solution: str
    outcomes: List[str]
    images: Optional[List[Optional[SanityImage]]] = None
    completion_date: str = Field(alias="completionDate")
    client_name: Optional[str] = Field(default=None, alias="clientName")

    @field_validator("featured", mode="before")
    @classmethod
    def _unset_is_not_featured(cls, value):
        return False if value is None else value


# ===========
# View models
# ===========
class Homepage(ViewModel):
    name: str
    title: str
    tagline: str
    headshot: ProcessedImage
    bio: str
    social_links: SocialLinks = SocialLinks()
    contact: ContactInfo = ContactInfo()


class BlogPost(ViewModel):
    id: str
    title: str
    excerpt: str
    slug: str
    published_date: str
    thumbnail: Optional[ProcessedImage] = None
    author: str
    reading_time: Optional[float] = None
    content: str


class Project(ViewModel):
    id: str
    title: str
    description: str
    slug: str
    thumbnail: Optional[ProcessedImage] = None
    featured: bool
    technologies: List[str] = []
    link: Optional[str] = None
    content: str
    challenge: str
    solution: str
    outcomes: List[str]
    images: Optional[List[ProcessedImage]] = None
    completion_date: str
    client_name: Optional[str] = None


class HomeContent(ViewModel):
    """Everything the home page renders, fetched in one round."""

    homepage: Homepage
    featured_projects: List[Project] = []
    recent_posts: List[BlogPost] = []
