import math
import urllib.parse
from typing import Dict, List, Optional, Sequence, TypeVar

from mdblog.schemas.blog import PaginatedResult, Pagination, Post

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, items_per_page: int) -> PaginatedResult[T]:
    """Slice ``items`` into one page.

    Out-of-range input is clamped rather than rejected: page and page size
    are at least 1, and a page past the end becomes the last page.
    """
    page = max(1, page)
    items_per_page = max(1, items_per_page)

    total_items = len(items)
    total_pages = math.ceil(total_items / items_per_page)
    current_page = min(page, max(total_pages, 1))

    start = (current_page - 1) * items_per_page
    end = min(start + items_per_page, total_items)

    return PaginatedResult(
        items=list(items[start:end]),
        pagination=Pagination(
            currentPage=current_page,
            totalPages=total_pages,
            itemsPerPage=items_per_page,
            totalItems=total_items,
            hasNextPage=current_page < total_pages,
            hasPrevPage=current_page > 1,
        ),
    )


def matches_search(post: Post, query: str) -> bool:
    """True when any whitespace-separated term occurs in a searchable field."""
    terms = query.lower().split()
    if not terms:
        return True

    fields = (
        post.title.lower(),
        post.content.lower(),
        (post.excerpt or "").lower(),
        " ".join(post.tags).lower(),
    )
    return any(term in field for term in terms for field in fields)


def paginate_posts(
    posts: Sequence[Post],
    page: int,
    items_per_page: int,
    tag: Optional[str] = None,
    search: Optional[str] = None,
) -> PaginatedResult[Post]:
    """Filter by exact tag, then by search terms, then paginate."""
    filtered: List[Post] = list(posts)

    if tag:
        filtered = [post for post in filtered if tag in post.tags]

    if search and search.strip():
        filtered = [post for post in filtered if matches_search(post, search)]

    return paginate(filtered, page, items_per_page)


def pagination_links(pagination: Pagination, base_url: str) -> Dict[str, Optional[str]]:
    """first/prev/current/next/last URLs, None where there is no such page."""

    def page_url(page: int) -> str:
        parts = urllib.parse.urlsplit(base_url)
        query = dict(urllib.parse.parse_qsl(parts.query))
        query["page"] = str(page)
        return urllib.parse.urlunsplit(
            parts._replace(query=urllib.parse.urlencode(query))
        )

    current = pagination.currentPage
    return {
        "first": page_url(1) if current > 1 else None,
        "prev": page_url(current - 1) if pagination.hasPrevPage else None,
        "current": page_url(current),
        "next": page_url(current + 1) if pagination.hasNextPage else None,
        "last": page_url(pagination.totalPages)
        if current < pagination.totalPages
        else None,
    }
