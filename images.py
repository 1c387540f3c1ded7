"""
Image reference resolution.

The CMS stores images as opaque asset ids of the form
``image-<id>-<width>x<height>-<format>``. The CDN serves them from a
deterministic path derived from that id, so URL building is a pure
function of (project, dataset, image, transform params).
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from schemas import ImageDimensions, ProcessedImage, SanityImage
from settings import Settings

logger = logging.getLogger(__name__)

CDN_BASE_URL = "https://cdn.sanity.io"
DEFAULT_QUALITY = 75
DEFAULT_SRCSET_WIDTHS = (640, 750, 828, 1080, 1200, 1920)

ASSET_ID_RE = re.compile(
    r"^image-(?P<id>[A-Za-z0-9]+)-(?P<width>\d+)x(?P<height>\d+)-(?P<format>[a-z0-9]+)$"
)


class AssetId:
    __slots__ = ("id", "width", "height", "format")

    def __init__(self, id: str, width: int, height: int, format: str):
        self.id = id
        self.width = width
        self.height = height
        self.format = format

    @classmethod
    def parse(cls, ref: str) -> "AssetId":
        match = ASSET_ID_RE.match(ref or "")
        if not match:
            raise ValueError(f"Malformed image asset id: {ref!r}")
        return cls(match["id"], int(match["width"]), int(match["height"]), match["format"])

    @property
    def filename(self) -> str:
        return f"{self.id}-{self.width}x{self.height}.{self.format}"


def _crop_rect(image: SanityImage, asset: AssetId) -> Optional[Tuple[int, int, int, int]]:
    crop = image.crop
    if crop is None or crop.is_empty:
        return None
    left = round(crop.left * asset.width)
    top = round(crop.top * asset.height)
    width = round(asset.width - crop.right * asset.width - left)
    height = round(asset.height - crop.bottom * asset.height - top)
    return left, top, width, height


class ImageUrlBuilder:
    """Builds CDN URLs for CMS images of one project/dataset."""

    def __init__(self, project_id: str, dataset: str, base_url: str = CDN_BASE_URL):
        self.project_id = project_id
        self.dataset = dataset
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageUrlBuilder":
        return cls(settings.project_id, settings.dataset)

    def url(
        self,
        image: SanityImage,
        width: Optional[int] = None,
        height: Optional[int] = None,
        quality: Optional[int] = None,
        auto_format: bool = False,
        blur: Optional[int] = None,
    ) -> str:
        if image.asset is None:
            raise ValueError("Image has no asset reference")
        asset = AssetId.parse(image.asset.ref)

        params: List[Tuple[str, str]] = []
        rect = _crop_rect(image, asset)
        if rect:
            params.append(("rect", ",".join(str(v) for v in rect)))
        if width:
            params.append(("w", str(width)))
        if height:
            params.append(("h", str(height)))
        if blur:
            params.append(("blur", str(blur)))
        if quality:
            params.append(("q", str(quality)))
        if auto_format:
            params.append(("auto", "format"))

        url = f"{self.base_url}/images/{self.project_id}/{self.dataset}/{asset.filename}"
        if params:
            url += "?" + "&".join(f"{key}={value}" for key, value in params)
        return url

    def optimized_url(self, image: SanityImage, width: Optional[int] = None, quality: int = DEFAULT_QUALITY) -> str:
        return self.url(image, width=width, quality=quality, auto_format=True)

    def blur_placeholder(self, image: SanityImage) -> str:
        """Low-quality placeholder for progressive loading."""
        return self.url(image, width=20, height=20, blur=10, quality=30)

    def srcset(self, image: SanityImage, widths: Sequence[int] = DEFAULT_SRCSET_WIDTHS) -> str:
        return ", ".join(f"{self.optimized_url(image, width=w)} {w}w" for w in widths)


def image_alt(image: Optional[SanityImage], fallback: str = "Image") -> str:
    if image is not None and image.alt:
        return image.alt
    return fallback


def resolve_image(
    image: Optional[SanityImage],
    fallback_alt: str,
    builder: ImageUrlBuilder,
) -> Optional[ProcessedImage]:
    """Turn a CMS image field into a fetchable URL plus alt text.

    The result also carries a responsive srcset, a blurred placeholder URL
    and the source dimensions, for pages that lay out images before load.

    Returns None for empty image slots (no image, or no asset reference).
    An asset reference that is not a valid image id is also treated as
    empty, so callers never see a half-built record.
    """
    if image is None or image.asset is None:
        return None
    try:
        url = builder.url(image)
    except ValueError:
        logger.warning("Ignoring image with malformed asset reference %r", image.asset.ref)
        return None
    return ProcessedImage(
        url=url,
        alt=image_alt(image, fallback_alt),
        srcset=builder.srcset(image),
        placeholder=builder.blur_placeholder(image),
        dimensions=image_dimensions(image),
    )


def image_dimensions(image: Optional[SanityImage]) -> Optional[ImageDimensions]:
    if image is None or image.asset is None:
        return None
    try:
        asset = AssetId.parse(image.asset.ref)
    except ValueError:
        return None
    if not asset.width or not asset.height:
        return None
    return ImageDimensions(width=asset.width, height=asset.height, aspect_ratio=asset.width / asset.height)

