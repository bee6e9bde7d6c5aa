from pathlib import Path
from typing import List

from mdblog.errors import ContentIOError

MARKDOWN_SUFFIX = ".md"


class FilePostsRepo:
    """Markdown files in a single, flat posts directory."""

    def __init__(self, posts_dir: str | Path):
        self.posts_dir = Path(posts_dir)

    def list_post_files(self) -> List[Path]:
        """Markdown files in the directory (not recursive), by filename."""
        try:
            entries = list(self.posts_dir.iterdir())
        except OSError as e:
            raise ContentIOError(
                f"Failed to read posts directory: {e}", path=str(self.posts_dir)
            ) from e

        return sorted(
            (p for p in entries if p.is_file() and p.suffix == MARKDOWN_SUFFIX),
            key=lambda p: p.name,
        )

    def read_post(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentIOError(f"Failed to read file: {e}", path=str(path)) from e

    def post_path(self, slug: str) -> Path:
        return self.posts_dir / f"{slug}{MARKDOWN_SUFFIX}"

    def exists(self, slug: str) -> bool:
        return self.post_path(slug).exists()

    def write_post(self, slug: str, text: str) -> Path:
        path = self.post_path(slug)
        try:
            self.posts_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ContentIOError(f"Failed to write file: {e}", path=str(path)) from e
        return path

    def is_readable(self) -> bool:
        return self.posts_dir.is_dir()
