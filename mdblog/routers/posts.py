import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from mdblog import dependencies as deps
from mdblog.errors import BlogError, ConflictError, ValidationError
from mdblog.schemas.blog import (
    CreatePostRequest,
    CreatePostResponse,
    PaginatedPosts,
    PostDetail,
    PostSummary,
    SearchResponse,
)
from mdblog.services.pagination import pagination_links
from mdblog.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=PaginatedPosts)
def list_posts(
    request: Request,
    page: int = 1,
    tag: Optional[str] = None,
    q: Optional[str] = None,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Paginated posts, optionally filtered by tag and search terms."""
    try:
        result = service.paginate(page=page, tag=tag, search=q)
    except BlogError as e:
        logger.error(f"Failed to list posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")

    return PaginatedPosts(
        items=[PostSummary.from_post(p) for p in result.items],
        pagination=result.pagination,
        links=pagination_links(result.pagination, str(request.url)),
        tag=tag,
        search=q,
    )


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug)
    except BlogError as e:
        logger.error(f"Failed to retrieve post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")

    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostDetail.from_post(post)


@router.post("/posts", response_model=CreatePostResponse, status_code=201)
def create_post(
    body: CreatePostRequest,
    service: PostsService = Depends(deps.get_posts_service),
):
    if not body.title.strip() or not body.content.strip():
        raise HTTPException(status_code=400, detail="Title and content are required")

    try:
        post = service.create_post(
            title=body.title,
            content=body.content,
            tags=body.tags,
            excerpt=body.excerpt,
            draft=body.draft,
        )
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except BlogError as e:
        logger.error(f"Failed to create post: {e}")
        raise HTTPException(status_code=500, detail="Failed to create post")

    return CreatePostResponse(success=True, slug=post.slug, path=f"/posts/{post.slug}")


@router.get("/search", response_model=SearchResponse)
def search_posts(
    q: str = Query(default=""),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Posts ranked by relevance to ``q``."""
    try:
        results = service.search(q)
    except BlogError as e:
        logger.error(f"Search for '{q}' failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")

    return SearchResponse(
        query=q,
        total=len(results),
        results=[PostSummary.from_post(p) for p in results],
    )
