import logging
import math
import shutil
import urllib.parse
from pathlib import Path
from typing import List, Tuple

from pydantic import BaseModel, Field

from mdblog.services.posts_service import PostsService

logger = logging.getLogger(__name__)

FILE_ROUTES = ("/feed.xml", "/rss.xml", "/sitemap.xml", "/robots.txt")


class ExportReport(BaseModel):
    pages: int = 0
    errors: List[str] = Field(default_factory=list)


class StaticExporter:
    """Writes every known route to disk by replaying it through the app.

    ``client`` is anything with a ``get(url)`` returning a response with
    ``status_code`` and ``content`` (a FastAPI ``TestClient`` in practice).
    """

    def __init__(self, client, posts_service: PostsService, output_dir: str | Path):
        self.client = client
        self.posts_service = posts_service
        self.output_dir = Path(output_dir)

    def routes(self) -> List[Tuple[str, Path]]:
        """(url, output file) for every page the site serves."""
        posts = self.posts_service.load_posts()
        tags = self.posts_service.get_tags()
        per_page = self.posts_service.posts_per_page

        # The first page of posts doubles as the home page
        routes = [
            ("/posts?page=1", Path("index.json")),
            ("/tags", Path("tags/index.json")),
        ]
        routes.extend((route, Path(route.lstrip("/"))) for route in FILE_ROUTES)

        total_pages = max(math.ceil(len(posts) / per_page), 1)
        for page in range(1, total_pages + 1):
            routes.append((f"/posts?page={page}", Path(f"posts/page/{page}/index.json")))

        for post in posts:
            routes.append((f"/posts/{post.slug}", Path(f"posts/{post.slug}/index.json")))

        for tag in tags:
            quoted = urllib.parse.quote(tag.name, safe="")
            routes.append((f"/tags/{quoted}", Path(f"tags/{quoted}/index.json")))

        return routes

    def export(self) -> ExportReport:
        report = ExportReport()

        if self.output_dir.exists():
            logger.info(f"Cleaning {self.output_dir}/")
            shutil.rmtree(self.output_dir)
        self.output_dir.mkdir(parents=True)

        for url, relative in self.routes():
            response = self.client.get(url)
            if response.status_code != 200:
                message = f"{url} returned {response.status_code}"
                logger.warning(f"Export skipped {message}")
                report.errors.append(message)
                continue

            target = self.output_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(response.content)
            report.pages += 1
            logger.debug(f"Exported {url} -> {target}")

        logger.info(
            f"Exported {report.pages} pages to {self.output_dir}/ with {len(report.errors)} errors"
        )
        return report
