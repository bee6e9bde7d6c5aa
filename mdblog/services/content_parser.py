import logging
import re
from typing import Any, Dict, Tuple

import yaml

from mdblog.errors import ParseError, ValidationError

logger = logging.getLogger(__name__)

# Opening "---" line, YAML, closing "---" line, then the body.
FRONTMATTER_RE = re.compile(r"^---\r?\n(?:([\s\S]*?)\r?\n)?---(?:\r?\n([\s\S]*))?$")


def split_frontmatter(raw_text: str) -> Tuple[str, str]:
    """Split a post file into its raw YAML block and its markdown body."""
    if raw_text.startswith("\ufeff"):
        raw_text = raw_text[1:]

    match = FRONTMATTER_RE.match(raw_text)
    if not match:
        raise ParseError("Invalid frontmatter format")

    return match.group(1) or "", match.group(2) or ""


def load_frontmatter(frontmatter: str) -> Dict[str, Any]:
    """Parse the YAML block into an untyped mapping (validated later)."""
    try:
        data = yaml.safe_load(frontmatter)
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises ValueError for timestamps like 2025-02-30
        logger.debug(f"YAML error in frontmatter: {e}")
        raise ParseError(f"Failed to parse frontmatter YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(
            "Frontmatter must be a mapping", prefix="Frontmatter validation failed"
        )
    return data
