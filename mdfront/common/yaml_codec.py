"""
YAML parsing and serialization for frontmatter blocks.
"""
import logging
from typing import Any, Optional, Tuple

import yaml

from .errors import FrontmatterParseError, FrontmatterSerializeError

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps dates and timestamps as plain strings."""


FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _to_structured(value: Any, parents: Tuple[int, ...] = ()) -> Any:
    # JSON Schema only knows string keys
    if isinstance(value, (dict, list)):
        if id(value) in parents:
            raise ValueError("recursive alias: a node contains itself")
        parents = parents + (id(value),)
    if isinstance(value, dict):
        return {str(k): _to_structured(v, parents) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_structured(v, parents) for v in value]
    return value


def parse_frontmatter(text: str, document: str = "<frontmatter>") -> Any:
    """
    Parse frontmatter text into a structured value.

    Empty text parses to an empty mapping.

    Raises:
        FrontmatterParseError: if the text is not valid YAML, or cannot be
            represented as a structured value
    """
    # Valid YAML can still fail to construct: oversized integers raise
    # ValueError, self-referencing aliases and very deep nesting recurse.
    try:
        value = yaml.load(text, Loader=FrontmatterLoader)
        if value is None:
            return {}
        return _to_structured(value)
    except (yaml.YAMLError, ValueError, RecursionError) as e:
        raise FrontmatterParseError(document, e) from e


def serialize_frontmatter(value: Any, document: Optional[str] = None) -> str:
    """
    Serialize a structured value as block-style YAML ending in a newline.

    Key order is preserved. The output is semantically, not textually,
    equivalent to whatever was originally parsed.
    """
    try:
        return yaml.safe_dump(
            value,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as e:
        logger.error(f"Failed to serialize frontmatter: {e}")
        raise FrontmatterSerializeError(e, document) from e
