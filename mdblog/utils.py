import math
import re

HTML_TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")
FENCED_BLOCK_RE = re.compile(r"```[\s\S]*?```")
INLINE_CODE_RE = re.compile(r"`[^`]*`")
MARKDOWN_IMAGE_OR_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")


def calculate_reading_time(text: str) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / 200) or 1
    return f"{minutes} min"


def markdown_to_text(markdown_text: str) -> str:
    """Drop code and markup so only prose is left for word counting."""
    text = FENCED_BLOCK_RE.sub(" ", markdown_text)
    text = INLINE_CODE_RE.sub(" ", text)
    text = MARKDOWN_IMAGE_OR_LINK_RE.sub(r"\1", text)
    text = re.sub(r"[#>*_~]", " ", text)
    return WHITESPACE_RE.sub(" ", text).strip()


def strip_html(html: str) -> str:
    text = HTML_TAG_RE.sub(" ", html)
    return WHITESPACE_RE.sub(" ", text).strip()


def slugify(value: str) -> str:
    """Lowercase kebab-case; anything outside [a-z0-9] becomes a single hyphen."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower())
    return slug.strip("-")
