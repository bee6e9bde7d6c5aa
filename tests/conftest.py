import datetime
import textwrap
from pathlib import Path

import pytest

from mdblog.errors import ContentIOError
from mdblog.schemas.blog import Post
from mdblog.services.cache import TTLCache
from mdblog.services.posts_service import PostsService
from mdblog.services.search_service import SearchService

TODAY = datetime.date(2025, 6, 1)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRepo:
    """
    In-memory stand-in for FilePostsRepo.
    ``files`` maps filename -> raw text; a value that is an Exception is
    raised from read_post instead.
    """

    def __init__(self, files: dict, posts_dir: str = "content/posts"):
        self.files = dict(files)
        self.posts_dir = Path(posts_dir)
        self.list_calls = 0
        self.read_calls = []
        self.written = {}
        self.readable = True

    def list_post_files(self):
        self.list_calls += 1
        if not self.readable:
            raise ContentIOError("Failed to read posts directory", path=str(self.posts_dir))
        return [self.posts_dir / name for name in sorted(self.files)]

    def read_post(self, path: Path) -> str:
        self.read_calls.append(path.name)
        value = self.files[path.name]
        if isinstance(value, Exception):
            raise value
        return value

    def post_path(self, slug: str) -> Path:
        return self.posts_dir / f"{slug}.md"

    def exists(self, slug: str) -> bool:
        return f"{slug}.md" in self.files

    def write_post(self, slug: str, text: str) -> Path:
        self.files[f"{slug}.md"] = text
        self.written[slug] = text
        return self.post_path(slug)

    def is_readable(self) -> bool:
        return self.readable


class FakeSleep:
    def __init__(self, on_sleep=None):
        self.calls = []
        self.on_sleep = on_sleep

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.on_sleep:
            self.on_sleep()


def post_text(
    title="A Post",
    date="2025-01-01",
    body="This is the body of the post, long enough to pass validation.",
    **extra,
) -> str:
    """Raw markdown file with YAML frontmatter."""
    lines = ["---", f"title: {title}", f"date: {date}"]
    for key, value in extra.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"{key}:")
            lines.extend(f"  - {item}" for item in value)
        elif isinstance(value, bool):
            lines.append(f"{key}: {'true' if value else 'false'}")
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n" + textwrap.dedent(body).lstrip() + "\n"


def make_post(
    slug="a-post",
    title="A Post",
    date="2025-01-01",
    tags=(),
    excerpt=None,
    content="<p>Some content</p>",
    draft=False,
    modified=None,
) -> Post:
    return Post(
        title=title,
        date=date,
        slug=slug,
        tags=tuple(tags),
        excerpt=excerpt,
        content=content,
        formattedDate=date,
        draft=draft,
        modified=modified,
    )


def make_service(repo, clock=None, sleep=None, **kwargs) -> PostsService:
    clock = clock or FakeClock()
    return PostsService(
        repo=repo,
        cache=TTLCache(60.0, clock=clock),
        search_service=SearchService(60.0, clock=clock),
        sleep=sleep or FakeSleep(),
        today=lambda: TODAY,
        **kwargs,
    )


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, posts=None, error=None):
        self.posts = list(posts or [])
        self.error = error
        self.posts_per_page = 10
        self.created = []

    def _load(self):
        if self.error:
            raise self.error
        return self.posts

    def load_posts(self):
        return self._load()

    def get_post(self, slug):
        return next((p for p in self._load() if p.slug == slug), None)

    def get_tags(self):
        from mdblog.services.tags import build_tag_index, sort_tags_by_count

        return sort_tags_by_count(build_tag_index(self._load()))

    def search(self, query):
        from mdblog.services.search_service import search_posts

        return search_posts(self._load(), query)

    def paginate(self, page=1, tag=None, search=None, items_per_page=None):
        from mdblog.services.pagination import paginate_posts

        return paginate_posts(
            self._load(), page, items_per_page or self.posts_per_page, tag, search
        )

    def create_post(self, title, content, tags=(), excerpt=None, draft=False):
        if self.error:
            raise self.error
        post = make_post(slug=title.lower().replace(" ", "-"), title=title)
        self.created.append(post)
        return post


@pytest.fixture
def clock():
    return FakeClock()
