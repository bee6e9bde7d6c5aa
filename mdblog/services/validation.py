"""Validation rules for post frontmatter, markdown bodies and image references.

Every rule that fails contributes one human-readable reason; all reasons for
a document are reported together in a single ``ValidationError``.
"""

import datetime
import logging
import posixpath
import re
import urllib.parse
from typing import Any, List, Optional

from mdblog.errors import ValidationError
from mdblog.schemas.blog import PostMeta

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200
EXCERPT_MAX_LENGTH = 500
TAG_MAX_LENGTH = 50
MAX_TAGS = 10
MIN_CONTENT_LENGTH = 20

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
URL_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)")

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".avif"}


def validate_frontmatter(
    data: Any,
    fallback_slug: Optional[str] = None,
    today: Optional[datetime.date] = None,
) -> PostMeta:
    """Check a parsed frontmatter mapping and coerce it into ``PostMeta``.

    ``fallback_slug`` is used when the frontmatter has no ``slug`` key
    (normally derived from the filename). ``today`` defaults to the
    current local date and only exists so tests can pin the clock.
    """
    if not isinstance(data, dict):
        raise ValidationError(
            "Frontmatter must be a mapping", prefix="Frontmatter validation failed"
        )

    today = today or datetime.date.today()
    errors: List[str] = []

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append("Title is required and must be a non-empty string")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be at most {TITLE_MAX_LENGTH} characters")

    draft = data.get("draft", False)
    if not isinstance(draft, bool):
        errors.append("Draft flag must be a boolean")
        draft = False

    date = None
    if data.get("date") is None:
        errors.append("Date is required")
    else:
        date = _normalize_date(data["date"], "Date", errors)
        if date and datetime.date.fromisoformat(date) > today and not draft:
            errors.append("Published posts cannot have future dates")

    slug = data.get("slug")
    if slug is not None:
        if not isinstance(slug, str):
            errors.append("Slug must be a string")
        elif not SLUG_RE.match(slug):
            errors.append(
                "Slug must be lowercase letters and numbers separated by single hyphens"
            )
    else:
        slug = fallback_slug
        if not slug:
            errors.append("Slug is missing and could not be derived from the filename")

    excerpt = data.get("excerpt")
    if excerpt is not None:
        if not isinstance(excerpt, str):
            errors.append("Excerpt must be a string")
        elif len(excerpt) > EXCERPT_MAX_LENGTH:
            errors.append(f"Excerpt must be at most {EXCERPT_MAX_LENGTH} characters")

    tags = data.get("tags")
    if tags is not None:
        _check_tags(tags, errors)

    modified = data.get("modified")
    if modified is not None:
        modified = _normalize_date(modified, "Modified date", errors)

    if errors:
        raise ValidationError(errors, prefix="Frontmatter validation failed")

    return PostMeta(
        title=title,
        date=date,
        slug=slug,
        excerpt=excerpt or None,
        tags=tuple(tags or ()),
        modified=modified,
        draft=draft,
    )


def _normalize_date(value: Any, label: str, errors: List[str]) -> Optional[str]:
    # YAML turns unquoted 2025-01-01 into a date object
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    if not isinstance(value, str):
        errors.append(f"{label} must be a string or date")
        return None
    if not DATE_RE.match(value):
        errors.append(f"{label} must be in YYYY-MM-DD format")
        return None
    try:
        datetime.date.fromisoformat(value)
    except ValueError:
        errors.append(f"{label} is not a valid calendar date: {value}")
        return None
    return value


def _check_tags(tags: Any, errors: List[str]) -> None:
    if not isinstance(tags, list):
        errors.append("Tags must be a list")
        return

    if len(tags) > MAX_TAGS:
        errors.append(f"Cannot have more than {MAX_TAGS} tags")

    for index, tag in enumerate(tags):
        if not isinstance(tag, str):
            errors.append(f"Tag at index {index} must be a string")
        elif not tag:
            errors.append(f"Tag at index {index} is empty")
        elif tag.strip() != tag:
            errors.append(f'Tag "{tag}" cannot have leading or trailing whitespace')
        elif "/" in tag:
            # /tags/{tag} only matches a single path segment
            errors.append(f'Tag "{tag}" cannot contain "/"')
        elif len(tag) > TAG_MAX_LENGTH:
            errors.append(f'Tag "{tag}" is too long (max {TAG_MAX_LENGTH} characters)')

    hashable = [tag for tag in tags if isinstance(tag, str)]
    if len(set(hashable)) != len(hashable):
        errors.append("Duplicate tags are not allowed")


def validate_markdown_content(body: str) -> None:
    """Reject bodies that are too short or have unbalanced code markers."""
    errors: List[str] = []

    if len(body.strip()) < MIN_CONTENT_LENGTH:
        errors.append(f"Content is too short (minimum {MIN_CONTENT_LENGTH} characters)")

    if body.count("```") % 2 != 0:
        errors.append("Unclosed code block detected")

    outside_fences = re.sub(r"```[\s\S]*?```", "", body).replace("```", "")
    if outside_fences.count("`") % 2 != 0:
        errors.append("Unclosed inline code detected")

    if errors:
        raise ValidationError(errors, prefix="Content validation failed")


def validate_image_references(body: str) -> List[str]:
    """Return every markdown image URL in order, or raise on a bad reference."""
    images: List[str] = []
    errors: List[str] = []

    for match in IMAGE_RE.finditer(body):
        url = match.group(2)
        images.append(url)

        if not url.startswith("/") and not URL_SCHEME_RE.match(url):
            errors.append(f"Image path must be absolute or a full URL: {url}")

        path = urllib.parse.urlparse(url).path if URL_SCHEME_RE.match(url) else url
        path = path.split("?", 1)[0].split("#", 1)[0]
        extension = posixpath.splitext(path)[1].lower()
        if extension not in IMAGE_EXTENSIONS:
            errors.append(f"Image has an unsupported extension: {url}")

    if errors:
        raise ValidationError(errors, prefix="Image validation failed")

    return images
