import datetime
import functools
import logging

import markdown

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


@functools.lru_cache(maxsize=None)
def render_markdown(markdown_text: str) -> str:
    """Render markdown to HTML; identical input is served from memory."""
    logger.debug(f"Rendering markdown ({len(markdown_text)} chars)")
    return markdown.markdown(markdown_text, extensions=MARKDOWN_EXTENSIONS)


def format_date(date_str: str) -> str:
    """Display form of an ISO date, e.g. 2025-01-03 -> January 3, 2025."""
    parsed = datetime.date.fromisoformat(date_str)
    return f"{parsed:%B} {parsed.day}, {parsed.year}"
