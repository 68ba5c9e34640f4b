"""
IO utilities for the host's preprocessor protocol.

The host writes `[context, book]` as JSON on stdin and expects the book back
as JSON on stdout. A book is a tree of items; only chapters carry content.
"""
import json
import logging
from typing import Any, Dict, Iterator, List, TextIO, Tuple

from .errors import ProtocolError
from .processor_engine import Document

logger = logging.getLogger(__name__)

HOST_VERSION = "0.4.40"
# Older hosts call the top-level item list "sections"
ITEM_KEYS = ("sections", "items")


def read_payload(stream: TextIO) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Read the host payload from a stream.

    Returns:
        Tuple of (context, book)
    """
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as e:
        logger.error(f"Unable to parse the host payload: {e}")
        raise ProtocolError(f"Unable to parse the input: {e}") from e

    if not isinstance(payload, list) or len(payload) != 2:
        raise ProtocolError("Expected the input to be a [context, book] pair")

    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise ProtocolError("Expected the context and the book to be JSON objects")
    return context, book


def write_book(book: Dict[str, Any], stream: TextIO) -> None:
    """Write the book back to the host as JSON."""
    json.dump(book, stream)
    stream.flush()


def check_version(context: Dict[str, Any]) -> bool:
    """Warn when the host runs a different protocol version. Never fatal."""
    version = context.get("mdbook_version")
    if version != HOST_VERSION:
        logger.warning(
            f"mdbook version mismatch. Built against {HOST_VERSION} but running with {version}"
        )
        return False
    return True


def _top_level_items(book: Dict[str, Any]) -> List[Any]:
    for key in ITEM_KEYS:
        items = book.get(key)
        if isinstance(items, list):
            return items
    return []


def iter_chapters(items: List[Any]) -> Iterator[Dict[str, Any]]:
    """Yield chapter records depth-first, in book order. Separators and part titles are skipped."""
    for item in items:
        if not isinstance(item, dict) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        yield chapter
        yield from iter_chapters(chapter.get("sub_items") or [])


def collect_documents(book: Dict[str, Any]) -> List[Tuple[Dict[str, Any], Document]]:
    """Pair each chapter record with a Document view of it."""
    pairs = []
    for chapter in iter_chapters(_top_level_items(book)):
        document = Document(
            name=chapter.get("name", ""),
            content=chapter.get("content") or "",
            path=chapter.get("path"),
        )
        pairs.append((chapter, document))
    logger.debug(f"Collected {len(pairs)} chapters from book")
    return pairs


def apply_documents(pairs: List[Tuple[Dict[str, Any], Document]]) -> int:
    """Write rewritten document content back into its chapter. Returns the number updated."""
    updated = 0
    for chapter, document in pairs:
        if chapter.get("content") != document.content:
            chapter["content"] = document.content
            updated += 1
    return updated
