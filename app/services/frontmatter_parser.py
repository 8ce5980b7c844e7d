import logging
import re

import yaml
from frontmatter.default_handlers import YAMLHandler

from app.schemas.preview import ParsedContent

logger = logging.getLogger(__name__)

# First delimited block only, anchored at the very start of the document.
FRONTMATTER_RE = re.compile(r"\A---\n([\s\S]+?)\n---")

_yaml_handler = YAMLHandler()


def parse(raw: str) -> ParsedContent:
    """
    Split a markdown document into frontmatter metadata and body.

    Never raises: a document without a frontmatter block is returned untouched,
    and a block that is not a valid YAML mapping yields empty metadata.
    """
    match = FRONTMATTER_RE.match(raw)
    if not match:
        return ParsedContent(metadata={}, body=raw)

    body = raw[match.end():].strip()

    metadata = {}
    try:
        loaded = _yaml_handler.load(match.group(1))
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse frontmatter YAML: {e}")
        return ParsedContent(metadata=metadata, body=body)
    except Exception as e:
        logger.error(f"Unexpected error parsing frontmatter: {e}")
        return ParsedContent(metadata=metadata, body=body)

    if isinstance(loaded, dict):
        metadata = loaded
    else:
        logger.error(
            f"Frontmatter is not a mapping (got {type(loaded).__name__}), ignoring it"
        )

    return ParsedContent(metadata=metadata, body=body)
