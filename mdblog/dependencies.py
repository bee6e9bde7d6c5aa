import time

from fastapi import Depends, FastAPI, Request

from mdblog.repos.posts_repo import FilePostsRepo
from mdblog.services.cache import TTLCache
from mdblog.services.health_service import HealthService
from mdblog.services.posts_service import PostsService
from mdblog.services.search_service import SearchService
from mdblog.settings import Settings, settings


def init_app_state(app: FastAPI, current_settings: Settings) -> None:
    """Create the process-wide caches once and hang them off ``app.state``."""
    app.state.posts_cache = TTLCache(current_settings.POSTS_CACHE_TTL_SECONDS)
    app.state.search_service = SearchService(current_settings.SEARCH_CACHE_TTL_SECONDS)
    app.state.started_at = time.monotonic()


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_posts_repo(current_settings: Settings = Depends(get_settings)):
    return FilePostsRepo(current_settings.POSTS_DIR)


def get_posts_cache(request: Request) -> TTLCache:
    return request.app.state.posts_cache


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_posts_service(
    repo=Depends(get_posts_repo),
    cache=Depends(get_posts_cache),
    search_service=Depends(get_search_service),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo,
        cache=cache,
        search_service=search_service,
        posts_per_page=current_settings.POSTS_PER_PAGE,
        retry_delay_seconds=current_settings.LOAD_RETRY_DELAY_SECONDS,
    )


def get_health_service(
    request: Request,
    repo=Depends(get_posts_repo),
    cache=Depends(get_posts_cache),
):
    return HealthService(repo=repo, cache=cache, started_at=request.app.state.started_at)
