import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from content import (
    DEFAULT_LIMIT,
    ContentContext,
    get_all_blog_posts,
    get_all_blog_slugs,
    get_all_project_slugs,
    get_all_projects,
    get_blog_post_by_slug,
    get_featured_projects,
    get_homepage_content,
    get_project_by_slug,
    get_recent_blog_posts,
)
from draft import disable_draft_mode, enable_draft_mode, is_draft_mode, is_relative_path, secret_matches
from errors import ContentError
from images import ImageUrlBuilder
from log_config import setup_logging
from sanity_client import ContentSources
from schemas import BlogPost, HomeContent, Project
from settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_content(request: Request) -> ContentContext:
    return request.app.state.content


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def content_error_handler(request: Request, exc: ContentError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# ======
# Routes
# ======
@router.get("/")
def root():
    return {"status": "ok", "service": "portfolio-content-api"}


@router.get("/test")
def test_configuration(settings: Settings = Depends(get_settings)):
    return {
        "backend": "running",
        "cms": {
            "project_id": settings.project_id,
            "dataset": settings.dataset,
            "api_version": settings.api_version,
            "cdn": settings.use_cdn,
        },
        "preview": "available" if settings.preview_available else "not-available",
        "draft_endpoint": "configured" if settings.preview_secret else "not-configured",
    }


# Draft mode
@router.get("/api/draft")
def enable_draft(
    secret: Optional[str] = None,
    slug: Optional[str] = None,
    settings: Settings = Depends(get_settings),
):
    if not settings.preview_secret:
        logger.error("SANITY_PREVIEW_SECRET is not configured")
        return JSONResponse(status_code=500, content={"message": "Draft mode is not configured on this server"})
    if not secret_matches(secret, settings.preview_secret):
        return JSONResponse(status_code=401, content={"message": "Invalid secret token"})
    if not slug:
        return JSONResponse(status_code=400, content={"message": "Missing slug parameter"})
    if not is_relative_path(slug):
        return JSONResponse(status_code=400, content={"message": "Invalid slug parameter"})

    response = RedirectResponse(slug, status_code=302)
    enable_draft_mode(response, settings)
    return response


@router.get("/api/disable-draft")
def disable_draft(settings: Settings = Depends(get_settings)):
    response = JSONResponse(content={"message": "Draft mode disabled"})
    disable_draft_mode(response, settings)
    return response


# Home
@router.get("/api/home", response_model=HomeContent, response_model_exclude_none=True)
async def home(ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    homepage, featured, recent = await asyncio.gather(
        get_homepage_content(ctx, preview=preview),
        get_featured_projects(ctx, DEFAULT_LIMIT, preview=preview),
        get_recent_blog_posts(ctx, DEFAULT_LIMIT, preview=preview),
    )
    return HomeContent(homepage=homepage, featured_projects=featured, recent_posts=recent)


# Blog
@router.get("/api/posts", response_model=List[BlogPost], response_model_exclude_none=True)
async def list_posts(ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    return await get_all_blog_posts(ctx, preview=preview)


@router.get("/api/recent-posts", response_model=List[BlogPost], response_model_exclude_none=True)
async def recent_posts(
    limit: int = Query(DEFAULT_LIMIT, ge=1),
    ctx: ContentContext = Depends(get_content),
    preview: bool = Depends(is_draft_mode),
):
    return await get_recent_blog_posts(ctx, limit, preview=preview)


@router.get("/api/post-slugs", response_model=List[str])
async def post_slugs(ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    return await get_all_blog_slugs(ctx, preview=preview)


@router.get("/api/posts/{slug}", response_model=BlogPost, response_model_exclude_none=True)
async def get_post(slug: str, ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    post = await get_blog_post_by_slug(ctx, slug, preview=preview)
    if post is None:
        raise HTTPException(status_code=404, detail="Not found")
    return post


# Projects
@router.get("/api/projects", response_model=List[Project], response_model_exclude_none=True)
async def list_projects(ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    return await get_all_projects(ctx, preview=preview)


@router.get("/api/featured-projects", response_model=List[Project], response_model_exclude_none=True)
async def featured_projects(
    limit: int = Query(DEFAULT_LIMIT, ge=1),
    ctx: ContentContext = Depends(get_content),
    preview: bool = Depends(is_draft_mode),
):
    return await get_featured_projects(ctx, limit, preview=preview)


@router.get("/api/project-slugs", response_model=List[str])
async def project_slugs(ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    return await get_all_project_slugs(ctx, preview=preview)


@router.get("/api/projects/{slug}", response_model=Project, response_model_exclude_none=True)
async def get_project(slug: str, ctx: ContentContext = Depends(get_content), preview: bool = Depends(is_draft_mode)):
    project = await get_project_by_slug(ctx, slug, preview=preview)
    if project is None:
        raise HTTPException(status_code=404, detail="Not found")
    return project


# ==================
# FastAPI app config
# ==================
def create_app(settings: Optional[Settings] = None, sources: Optional[ContentSources] = None) -> FastAPI:
    """Build the API. Settings come from the environment at startup unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or Settings.from_env()
        setup_logging(resolved.log_level)

        http = None
        content_sources = sources
        if content_sources is None:
            http = httpx.AsyncClient(timeout=resolved.request_timeout)
            content_sources = ContentSources.from_settings(resolved, http)
        if not resolved.preview_available:
            logger.info("SANITY_API_TOKEN not set; draft content is unavailable")

        app.state.settings = resolved
        app.state.content = ContentContext(content_sources, ImageUrlBuilder.from_settings(resolved))
        try:
            yield
        finally:
            if http is not None:
                await http.aclose()

    app = FastAPI(title="Portfolio Content API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ContentError, content_error_handler)
    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
