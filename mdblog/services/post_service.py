import datetime
import logging
import os
from typing import Iterable, Optional

import frontmatter

from mdblog.errors import ValidationError
from mdblog.schemas.blog import Post, PostMeta
from mdblog.services.content_parser import load_frontmatter, split_frontmatter
from mdblog.services.markdown_renderer import format_date, render_markdown
from mdblog.services.validation import (
    validate_frontmatter,
    validate_image_references,
    validate_markdown_content,
)
from mdblog.utils import calculate_reading_time, markdown_to_text, slugify

logger = logging.getLogger(__name__)


def parse_post(
    raw_text: str,
    fallback_slug: Optional[str] = None,
    *,
    source: Optional[str] = None,
    today: Optional[datetime.date] = None,
) -> Post:
    """Run a raw post file through split, validate and assemble.

    Frontmatter problems raise. Body and image problems are only logged:
    a post with a questionable body is still published.
    """
    source = source or fallback_slug or "<text>"
    front, body = split_frontmatter(raw_text)
    meta = validate_frontmatter(
        load_frontmatter(front), fallback_slug=fallback_slug, today=today
    )

    try:
        validate_markdown_content(body)
    except ValidationError as e:
        logger.warning(f"Content validation issues for {source}: {e.message}")

    try:
        validate_image_references(body)
    except ValidationError as e:
        logger.warning(f"Image validation issues for {source}: {e.message}")

    return assemble_post(meta, body)


def assemble_post(meta: PostMeta, body: str) -> Post:
    """Merge validated metadata with the rendered body into an immutable Post."""
    return Post(
        **meta.model_dump(),
        content=render_markdown(body),
        formattedDate=format_date(meta.date),
        readingTime=calculate_reading_time(markdown_to_text(body)),
    )


def derive_slug(filename: str) -> str:
    """Filename without extension, as kebab-case."""
    base, _ = os.path.splitext(os.path.basename(filename))
    return slugify(base)


def build_post_text(
    title: str,
    content: str,
    *,
    date: str,
    slug: str,
    tags: Iterable[str] = (),
    excerpt: Optional[str] = None,
    draft: bool = False,
) -> str:
    """Serialize a new post as ``---`` delimited YAML frontmatter plus body."""
    metadata = {"title": title, "date": date, "slug": slug}
    tags = list(tags)
    if tags:
        metadata["tags"] = tags
    if excerpt:
        metadata["excerpt"] = excerpt
    if draft:
        metadata["draft"] = True

    post = frontmatter.Post(content.strip() + "\n", **metadata)
    return frontmatter.dumps(post, sort_keys=False) + "\n"
