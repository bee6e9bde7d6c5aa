from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content
    POSTS_DIR: str = "content/posts"
    POSTS_PER_PAGE: int = 10
    LOAD_RETRY_DELAY_SECONDS: float = 1.0

    # Caches
    POSTS_CACHE_TTL_SECONDS: float = 60.0
    SEARCH_CACHE_TTL_SECONDS: float = 60.0

    # Blog
    BLOG_TITLE: str = "mdblog"
    BLOG_DESCRIPTION: str = "Articles written in markdown"
    BASE_BLOG_URL: str = "http://localhost:8000"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Static export
    EXPORT_DIR: str = "dist"

    @property
    def posts_path(self) -> Path:
        return Path(self.POSTS_DIR)

    @property
    def base_url(self) -> str:
        return self.BASE_BLOG_URL.rstrip("/")


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
