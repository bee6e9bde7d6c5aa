import datetime
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from mdblog.errors import BlogError, ConflictError, DataError, ValidationError
from mdblog.repos.posts_repo import FilePostsRepo
from mdblog.schemas.blog import PaginatedResult, Post, TagInfo
from mdblog.services.cache import TTLCache
from mdblog.services.pagination import paginate_posts
from mdblog.services.post_service import build_post_text, derive_slug, parse_post
from mdblog.services.search_service import SearchService
from mdblog.services.tags import build_tag_index, posts_with_tag, sort_tags_by_count
from mdblog.utils import slugify

logger = logging.getLogger(__name__)

MAX_LOAD_ATTEMPTS = 2  # the first load plus a single retry
DEFAULT_POSTS_PER_PAGE = 10


class PostsService:
    def __init__(
        self,
        repo: FilePostsRepo,
        cache: TTLCache[List[Post]],
        search_service: SearchService,
        *,
        posts_per_page: int = DEFAULT_POSTS_PER_PAGE,
        retry_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        today: Callable[[], datetime.date] = datetime.date.today,
    ):
        self.repo = repo
        self.cache = cache
        self.search_service = search_service
        self.posts_per_page = posts_per_page
        self.retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep
        self._today = today

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_posts(self) -> List[Post]:
        """All posts, newest first, served from the cache while it is fresh."""
        cached = self.cache.get()
        if cached is not None:
            logger.debug("Using cached posts")
            return cached

        logger.info(f"Loading posts from {self.repo.posts_dir}")
        posts = self.load_posts_from_disk()
        self.cache.set(posts)
        self.search_service.clear()
        return posts

    def load_posts_from_disk(self) -> List[Post]:
        """Parse every markdown file in the posts directory.

        Broken files are logged and skipped. When every file fails, the
        whole load is retried once after ``retry_delay_seconds`` in case a
        file was caught mid-write; if that fails too, ``DataError`` is raised
        with the first per-file error as its cause.
        """
        failures: List[Tuple[Path, BlogError]] = []
        for attempt in range(MAX_LOAD_ATTEMPTS):
            if attempt:
                logger.warning(
                    f"No posts loaded successfully. Retrying once in {self.retry_delay_seconds}s"
                )
                self._sleep(self.retry_delay_seconds)

            files = self.repo.list_post_files()
            if not files:
                logger.warning(f"No markdown files found in {self.repo.posts_dir}")
                return []

            posts, failures = self._parse_files(files)
            if posts:
                return self._order_posts(posts)

        _path, first_error = failures[0]
        logger.error(f"Failed to load any posts from {self.repo.posts_dir}")
        raise DataError(
            f"Failed to load any posts. {len(failures)} post files had errors.",
            path=str(self.repo.posts_dir),
        ) from first_error

    def _parse_files(
        self, files: Iterable[Path]
    ) -> Tuple[List[Post], List[Tuple[Path, BlogError]]]:
        posts: List[Post] = []
        failures: List[Tuple[Path, BlogError]] = []
        today = self._today()

        for path in files:
            try:
                text = self.repo.read_post(path)
                posts.append(
                    parse_post(
                        text, derive_slug(path.name), source=str(path), today=today
                    )
                )
            except BlogError as e:
                if e.path is None:
                    e.path = str(path)
                failures.append((path, e))

        if failures:
            logger.warning(
                f"Errors loading {len(failures)} out of {len(posts) + len(failures)} posts"
            )
            for path, error in failures:
                cause = f" (cause: {error.__cause__})" if error.__cause__ else ""
                logger.warning(f"- {path}: {error}{cause}")

        return posts, failures

    @staticmethod
    def _order_posts(posts: List[Post]) -> List[Post]:
        # sorted() is stable, so same-day posts keep filename order
        ordered = sorted(posts, key=lambda p: p.date, reverse=True)

        seen = set()
        unique = []
        for post in ordered:
            if post.slug in seen:
                logger.warning(f"Duplicate slug '{post.slug}', keeping the newest post")
                continue
            seen.add(post.slug)
            unique.append(post)

        logger.info(f"Loaded {len(unique)} posts")
        return unique

    def invalidate(self) -> None:
        self.cache.invalidate()
        self.search_service.clear()
        logger.info("Post cache invalidated")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_post(self, slug: str) -> Optional[Post]:
        return next((p for p in self.load_posts() if p.slug == slug), None)

    def get_posts_by_tag(self, tag: str) -> List[Post]:
        return posts_with_tag(self.load_posts(), tag)

    def get_tags(self) -> List[TagInfo]:
        return sort_tags_by_count(build_tag_index(self.load_posts()))

    def search(self, query: str) -> List[Post]:
        return self.search_service.search(self.load_posts(), query)

    def paginate(
        self,
        page: int = 1,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        items_per_page: Optional[int] = None,
    ) -> PaginatedResult[Post]:
        return paginate_posts(
            self.load_posts(),
            page=page,
            items_per_page=items_per_page or self.posts_per_page,
            tag=tag,
            search=search,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_post(
        self,
        title: str,
        content: str,
        tags: Iterable[str] = (),
        excerpt: Optional[str] = None,
        draft: bool = False,
    ) -> Post:
        """Write a new post file and drop the cached snapshot.

        The generated file is parsed before it is written, so a post that
        would fail to load is never put on disk.
        """
        slug = slugify(title or "")
        if not slug:
            raise ValidationError(
                "Title must contain at least one letter or digit",
                prefix="Post creation failed",
            )
        if self.repo.exists(slug) or self._slug_in_use(slug):
            raise ConflictError(f"A post with slug '{slug}' already exists", path=slug)

        text = build_post_text(
            title,
            content,
            date=self._today().isoformat(),
            slug=slug,
            tags=tags,
            excerpt=excerpt,
            draft=draft,
        )
        post = parse_post(text, slug, source=slug, today=self._today())

        path = self.repo.write_post(slug, text)
        logger.info(f"Wrote post to {path}")
        self.invalidate()
        return post

    def _slug_in_use(self, slug: str) -> bool:
        # Frontmatter can claim a slug under a different filename
        try:
            return self.get_post(slug) is not None
        except DataError:
            # Nothing loaded, so no post can hold the slug
            return False
