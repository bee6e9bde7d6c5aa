import argparse
import logging
import sys

from fastapi.testclient import TestClient

from mdblog import dependencies as deps
from mdblog.main import app
from mdblog.services.static_exporter import StaticExporter
from mdblog.settings import settings

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Export every route to static files")
    parser.add_argument("--out", default=settings.EXPORT_DIR, help="output directory")
    args = parser.parse_args(argv)

    service = deps.get_posts_service(
        repo=deps.get_posts_repo(settings),
        cache=app.state.posts_cache,
        search_service=app.state.search_service,
        current_settings=settings,
    )
    with TestClient(app) as client:
        report = StaticExporter(client, service, args.out).export()

    for error in report.errors:
        logger.error(f"Export error: {error}")
    logger.info(f"Static export completed: {report.pages} pages")
    return 1 if report.errors else 0


if __name__ == "__main__":
    sys.exit(main())
