import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mdblog.dependencies import init_app_state
from mdblog.routers import feeds, health, posts, tags
from mdblog.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="mdblog API", description="Markdown blog served from disk")
init_app_state(app, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Serving posts from {settings.POSTS_DIR}")
    try:
        yield
    finally:
        app.state.posts_cache.invalidate()
        logger.info("mdblog API shut down")


app.router.lifespan_context = lifespan

app.include_router(posts.router)
app.include_router(tags.router)
app.include_router(feeds.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "mdblog API is running"}
