import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from mdblog import dependencies as deps
from mdblog.errors import BlogError
from mdblog.services.feed_service import build_robots, build_rss, build_sitemap
from mdblog.services.posts_service import PostsService
from mdblog.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"


@router.get("/feed.xml")
@router.get("/rss.xml")
def rss_feed(
    service: PostsService = Depends(deps.get_posts_service),
    current_settings: Settings = Depends(deps.get_settings),
):
    try:
        posts = service.load_posts()
    except BlogError as e:
        logger.error(f"Failed to build RSS feed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate feed")

    xml = build_rss(
        posts,
        current_settings.BLOG_TITLE,
        current_settings.base_url,
        description=current_settings.BLOG_DESCRIPTION,
    )
    return Response(
        content=xml,
        media_type=RSS_MEDIA_TYPE,
        headers={"Cache-Control": "public, max-age=3600"},
    )


@router.get("/sitemap.xml")
def sitemap(
    service: PostsService = Depends(deps.get_posts_service),
    current_settings: Settings = Depends(deps.get_settings),
):
    try:
        xml = build_sitemap(
            service.load_posts(), service.get_tags(), current_settings.base_url
        )
    except BlogError as e:
        logger.error(f"Failed to build sitemap: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate sitemap")

    return Response(content=xml, media_type="application/xml")


@router.get("/robots.txt")
def robots(current_settings: Settings = Depends(deps.get_settings)):
    return Response(
        content=build_robots(current_settings.base_url), media_type="text/plain"
    )
