import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from blogsite import dependencies as deps
from blogsite.errors import NotFoundError
from blogsite.schemas.blog import BlogPostDetail, BlogPostSummary
from blogsite.services.blog_data import BlogDataService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[BlogPostSummary])
async def list_posts(service: BlogDataService = Depends(deps.get_blog_data_service)):
    """Get all post summaries, newest first."""
    try:
        return await service.get_all_summaries()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/latest", response_model=List[BlogPostSummary])
async def latest_posts(
    limit: int = Query(3, ge=0),
    service: BlogDataService = Depends(deps.get_blog_data_service),
):
    try:
        return await service.get_latest_summaries(limit)
    except Exception as e:
        logger.error(f"Unexpected error listing latest posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/categories", response_model=Dict[str, List[BlogPostSummary]])
async def posts_by_category(
    service: BlogDataService = Depends(deps.get_blog_data_service),
):
    try:
        return await service.get_summaries_by_category()
    except Exception as e:
        logger.error(f"Unexpected error grouping posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/slugs", response_model=List[str])
async def list_slugs(service: BlogDataService = Depends(deps.get_blog_data_service)):
    try:
        return await service.get_slugs()
    except Exception as e:
        logger.error(f"Unexpected error listing slugs: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve slugs")


@router.get("/posts/{slug:path}", response_model=BlogPostDetail)
async def get_post(
    slug: str,
    draft_key: Optional[str] = Query(None, alias="draftKey"),
    service: BlogDataService = Depends(deps.get_blog_data_service),
):
    """Get a single post by slug (or microCMS id)."""
    try:
        return await service.get_detail(slug, draft_key=draft_key)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Post not found")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")
