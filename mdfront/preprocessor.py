"""
Frontmatter preprocessor: the object the host talks to.
"""
import logging
from typing import Any, Callable, Dict

from mdfront.common.book_io import apply_documents, collect_documents
from mdfront.common.config import RunConfig
from mdfront.common.errors import ConfigError
from mdfront.common.processor_engine import FrontmatterProcessor
from mdfront.common.schema_loader import load_schema
from mdfront.common.schema_validator import compile_schema

logger = logging.getLogger(__name__)

PREPROCESSOR_NAME = "frontmatter"
UNSUPPORTED_RENDERERS = frozenset({"not-supported"})

SchemaLoader = Callable[[str, float], Any]


class FrontmatterPreprocessor:
    """Stateless preprocessor; everything a run needs comes from the context."""

    def __init__(self, schema_loader: SchemaLoader = load_schema):
        self.schema_loader = schema_loader

    def identify(self) -> str:
        return PREPROCESSOR_NAME

    def supports(self, renderer: str) -> bool:
        return renderer not in UNSUPPORTED_RENDERERS

    def load_config(self, context: Dict[str, Any]) -> RunConfig:
        """Read this preprocessor's table out of the host configuration."""
        table = (
            (context.get("config") or {})
            .get("preprocessor", {})
            .get(self.identify())
        )
        if table is None:
            raise ConfigError("Missing preprocessor configuration")
        return RunConfig.from_table(table)

    def run(self, context: Dict[str, Any], book: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate or fix the frontmatter of every chapter in the book.

        Args:
            context: Host context carrying the configuration and renderer
            book: Book to process; chapter content is rewritten in place

        Returns:
            The book, ready to hand back to the host
        """
        config = self.load_config(context)

        renderer = context.get("renderer")
        if not config.applies_to(renderer):
            logger.info(f"Skipping frontmatter check for renderer {renderer!r}")
            return book

        schema = self.schema_loader(config.schema, config.schema_timeout)
        validator = compile_schema(schema)
        logger.info(f"Loaded schema from {config.schema}")

        pairs = collect_documents(book)
        processor = FrontmatterProcessor(validator, config)
        processor.process_batch([document for _, document in pairs])

        updated = apply_documents(pairs)
        if updated:
            logger.info(f"Rewrote frontmatter in {updated} chapters")
        return book
