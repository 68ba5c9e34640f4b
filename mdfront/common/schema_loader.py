"""
Schema resolution: turn a schema URI into a parsed schema value.
"""
import json
import logging
from typing import Any

import requests
import yaml

from .config import DEFAULT_SCHEMA_TIMEOUT
from .errors import InvalidSchemaUrlError, SchemaFetchError, SchemaParseError, SchemaReadError

logger = logging.getLogger(__name__)

FILE_SCHEME = "file://"
YAML_SUFFIXES = (".yaml", ".yml")


def load_schema(uri: str, timeout: float = DEFAULT_SCHEMA_TIMEOUT) -> Any:
    """
    Load a schema from an http(s):// URL or a file:// path.

    Args:
        uri: Schema identifier
        timeout: Seconds to wait for a remote schema (single attempt)

    Returns:
        Parsed schema value
    """
    if uri.startswith(("http://", "https://")):
        return load_schema_http(uri, timeout)
    if uri.startswith(FILE_SCHEME):
        return load_schema_file(uri)
    raise InvalidSchemaUrlError(uri)


def load_schema_http(url: str, timeout: float = DEFAULT_SCHEMA_TIMEOUT) -> Any:
    """Fetch a schema over HTTP. No retries."""
    logger.info(f"Fetching schema from {url}")
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to fetch schema from {url}: {e}")
        raise SchemaFetchError(url, e) from e

    try:
        return parse_schema_text(resp.text, url)
    except SchemaParseError as e:
        # A body we cannot read counts as a failed fetch
        raise SchemaFetchError(url, e.cause) from e


def load_schema_file(uri: str) -> Any:
    """Read a schema from local storage; the path is everything after file://."""
    if not uri.startswith(FILE_SCHEME):
        raise InvalidSchemaUrlError(uri)
    path = uri[len(FILE_SCHEME):]
    logger.info(f"Reading schema from {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"Failed to read schema from {path}: {e}")
        raise SchemaReadError(path, e) from e

    return parse_schema_text(content, path)


def parse_schema_text(text: str, source: str) -> Any:
    """Parse schema text as JSON, or as YAML when the source ends in .yaml/.yml."""
    try:
        if source.lower().endswith(YAML_SUFFIXES):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaParseError(source, e) from e
