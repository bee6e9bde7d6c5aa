import logging
import time
from typing import Callable, List, NamedTuple, Sequence

from mdblog.schemas.blog import Post
from mdblog.services.cache import DEFAULT_TTL_SECONDS, QueryCache
from mdblog.utils import strip_html

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 3.0
TAG_WEIGHT = 2.0
EXCERPT_WEIGHT = 1.0
CONTENT_WEIGHT = 0.5


class SearchablePost(NamedTuple):
    post: Post
    title: str
    tags: str
    excerpt: str
    content: str


def normalize_query(query: str) -> str:
    return (query or "").lower().strip()


def prepare_post(post: Post) -> SearchablePost:
    """Lowercase every searchable field once; HTML is stripped from content."""
    return SearchablePost(
        post=post,
        title=post.title.lower(),
        tags=" ".join(post.tags).lower(),
        excerpt=(post.excerpt or "").lower(),
        content=strip_html(post.content).lower(),
    )


def score_post(searchable: SearchablePost, terms: Sequence[str]) -> tuple[float, bool]:
    """Sum the field weights of every term hit; each field counts on its own."""
    score = 0.0
    matched = False
    for term in terms:
        if term in searchable.title:
            score += TITLE_WEIGHT
            matched = True
        if term in searchable.tags:
            score += TAG_WEIGHT
            matched = True
        if term in searchable.excerpt:
            score += EXCERPT_WEIGHT
            matched = True
        if term in searchable.content:
            score += CONTENT_WEIGHT
            matched = True
    return score, matched


def search_posts(posts: Sequence[Post], query: str) -> List[Post]:
    """Posts matching ``query``, most relevant first.

    A blank query returns nothing. Posts without a single hit are left out,
    and equal scores keep the order the posts came in (newest first).
    """
    terms = normalize_query(query).split()
    if not terms:
        return []

    scored = []
    for post in posts:
        score, matched = score_post(prepare_post(post), terms)
        if matched:
            scored.append((score, post))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [post for _score, post in scored]


class SearchService:
    """``search_posts`` behind a short-lived cache keyed by the normalized query."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.cache: QueryCache[List[Post]] = QueryCache(ttl_seconds, clock=clock)

    def search(self, posts: Sequence[Post], query: str) -> List[Post]:
        normalized = normalize_query(query)
        if not normalized:
            return []

        cached = self.cache.get(normalized)
        if cached is not None:
            logger.debug(f"Search cache hit for '{normalized}'")
            return cached

        results = search_posts(posts, normalized)
        self.cache.set(normalized, results)
        logger.debug(f"Search for '{normalized}' matched {len(results)} posts")
        return results

    def clear(self) -> None:
        self.cache.clear()
