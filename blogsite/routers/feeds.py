import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from blogsite import dependencies as deps
from blogsite.services import feeds
from blogsite.services.blog_data import BlogDataService
from blogsite.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/rss.xml")
async def rss_feed(
    service: BlogDataService = Depends(deps.get_blog_data_service),
    current_settings: Settings = Depends(deps.get_settings),
):
    posts = await service.get_all_summaries()
    body = feeds.build_rss(
        posts,
        site_url=current_settings.site_url,
        title=current_settings.SITE_TITLE,
        description=current_settings.SITE_DESCRIPTION,
    )
    return Response(content=body, media_type="application/rss+xml")


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt(current_settings: Settings = Depends(deps.get_settings)):
    return PlainTextResponse(
        feeds.build_robots_txt(current_settings.site_url),
        media_type="text/plain; charset=utf-8",
    )


@router.get(f"/{feeds.SITEMAP_INDEX_PATH}")
async def sitemap_index(current_settings: Settings = Depends(deps.get_settings)):
    return Response(
        content=feeds.build_sitemap_index(current_settings.site_url),
        media_type="application/xml",
    )


@router.get(f"/{feeds.SITEMAP_PATH}")
async def sitemap(
    service: BlogDataService = Depends(deps.get_blog_data_service),
    current_settings: Settings = Depends(deps.get_settings),
):
    posts = await service.get_all_summaries()
    logger.info(f"Building sitemap for {len(posts)} posts")
    return Response(
        content=feeds.build_sitemap(posts, current_settings.site_url),
        media_type="application/xml",
    )
