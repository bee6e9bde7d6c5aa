import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from mdblog import dependencies as deps
from mdblog.errors import BlogError
from mdblog.schemas.blog import PaginatedPosts, PostSummary, TagSummary
from mdblog.services.pagination import pagination_links
from mdblog.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/tags", response_model=List[TagSummary])
def list_tags(service: PostsService = Depends(deps.get_posts_service)):
    """All tags, most used first."""
    try:
        tags = service.get_tags()
    except BlogError as e:
        logger.error(f"Failed to list tags: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")

    return [
        TagSummary(name=t.name, count=t.count, posts=[p.slug for p in t.posts])
        for t in tags
    ]


@router.get("/tags/{tag}", response_model=PaginatedPosts)
def get_tag(
    tag: str,
    request: Request,
    page: int = 1,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        result = service.paginate(page=page, tag=tag)
    except BlogError as e:
        logger.error(f"Failed to list posts for tag {tag}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")

    if result.pagination.totalItems == 0:
        raise HTTPException(status_code=404, detail="Tag not found")

    return PaginatedPosts(
        items=[PostSummary.from_post(p) for p in result.items],
        pagination=result.pagination,
        links=pagination_links(result.pagination, str(request.url)),
        tag=tag,
    )
