import datetime
import logging
import time
from typing import Callable, List, Literal, Optional

from pydantic import BaseModel

from mdblog.repos.posts_repo import FilePostsRepo
from mdblog.services.cache import TTLCache

logger = logging.getLogger(__name__)

HealthStatus = Literal["healthy", "degraded", "unhealthy"]
_SEVERITY = {"healthy": 0, "degraded": 1, "unhealthy": 2}

VERSION = "0.1.0"


class HealthCheck(BaseModel):
    name: str
    status: HealthStatus
    message: Optional[str] = None
    durationMs: float = 0.0


class HealthReport(BaseModel):
    status: HealthStatus
    timestamp: str
    version: str
    uptimeSeconds: float
    checks: List[HealthCheck]


class HealthService:
    def __init__(
        self,
        repo: FilePostsRepo,
        cache: TTLCache,
        started_at: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.repo = repo
        self.cache = cache
        self.started_at = started_at
        self._clock = clock

    def check(self) -> HealthReport:
        checks = [self.check_filesystem(), self.check_cache()]
        status = max((c.status for c in checks), key=_SEVERITY.__getitem__)
        return HealthReport(
            status=status,
            timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
            version=VERSION,
            uptimeSeconds=round(self._clock() - self.started_at, 3),
            checks=checks,
        )

    def check_filesystem(self) -> HealthCheck:
        start = time.perf_counter()
        if not self.repo.is_readable():
            return HealthCheck(
                name="filesystem",
                status="unhealthy",
                message=f"Posts directory not found: {self.repo.posts_dir}",
                durationMs=_elapsed_ms(start),
            )
        try:
            files = self.repo.list_post_files()
        except Exception as e:
            logger.error(f"Health check could not list posts: {e}")
            return HealthCheck(
                name="filesystem",
                status="unhealthy",
                message=f"File system error: {e}",
                durationMs=_elapsed_ms(start),
            )
        return HealthCheck(
            name="filesystem",
            status="healthy" if files else "degraded",
            message=f"{len(files)} markdown files",
            durationMs=_elapsed_ms(start),
        )

    def check_cache(self) -> HealthCheck:
        start = time.perf_counter()
        if not self.cache.is_populated():
            return HealthCheck(
                name="cache",
                status="healthy",
                message="Post cache is empty",
                durationMs=_elapsed_ms(start),
            )
        return HealthCheck(
            name="cache",
            status="healthy",
            message=f"Post cache populated {self.cache.age():.1f}s ago",
            durationMs=_elapsed_ms(start),
        )


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)
