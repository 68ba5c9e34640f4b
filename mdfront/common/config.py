"""
Run configuration for the frontmatter preprocessor.

Read from the host's `[preprocessor.frontmatter]` table.
"""
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, Optional, Tuple

from .errors import ConfigError, InvalidSchemaUrlError

logger = logging.getLogger(__name__)

SCHEMA_SCHEMES = ("http://", "https://", "file://")
DEFAULT_SCHEMA_TIMEOUT = 5.0


class Mode(StrEnum):
    """Processing mode for frontmatter."""

    # Report errors for invalid frontmatter, don't modify content
    VALIDATE = "validate"
    # Rewrite frontmatter towards the schema
    FIX = "fix"


@dataclass(frozen=True)
class RunConfig:
    schema: str
    mode: Mode = Mode.VALIDATE
    fail_on_error: bool = True
    renderers: Optional[Tuple[str, ...]] = None
    schema_timeout: float = DEFAULT_SCHEMA_TIMEOUT

    @classmethod
    def from_table(cls, table: Dict[str, Any]) -> "RunConfig":
        """
        Build a configuration from the preprocessor's config table.

        Keys the host adds for its own use (command, before, after) are ignored.

        Raises:
            ConfigError: on a missing or mistyped key
            InvalidSchemaUrlError: when the schema is not an http(s):// or file:// URL
        """
        if not isinstance(table, dict):
            raise ConfigError(f"Invalid configuration: expected a table, got {type(table).__name__}")

        schema = table.get("schema")
        if schema is None:
            raise ConfigError("Invalid configuration: missing field `schema`")
        if not isinstance(schema, str):
            raise ConfigError(f"Invalid configuration: `schema` must be a string, got {type(schema).__name__}")

        raw_mode = table.get("mode", Mode.VALIDATE.value)
        try:
            mode = Mode(raw_mode)
        except ValueError:
            valid = ", ".join(m.value for m in Mode)
            raise ConfigError(f"Invalid configuration: unknown mode {raw_mode!r}, expected one of: {valid}") from None

        fail_on_error = table.get("fail_on_error", True)
        if not isinstance(fail_on_error, bool):
            raise ConfigError("Invalid configuration: `fail_on_error` must be a boolean")

        renderers = table.get("renderers")
        if renderers is not None:
            if not isinstance(renderers, list) or not all(isinstance(r, str) for r in renderers):
                raise ConfigError("Invalid configuration: `renderers` must be a list of strings")
            renderers = tuple(renderers)

        timeout = table.get("schema_timeout", DEFAULT_SCHEMA_TIMEOUT)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("Invalid configuration: `schema_timeout` must be a positive number of seconds")

        if not schema.startswith(SCHEMA_SCHEMES):
            raise InvalidSchemaUrlError(schema)

        config = cls(
            schema=schema,
            mode=mode,
            fail_on_error=fail_on_error,
            renderers=renderers,
            schema_timeout=float(timeout),
        )
        logger.debug(f"Loaded configuration: {config}")
        return config

    def applies_to(self, renderer: Optional[str]) -> bool:
        """Whether this run should touch the book for the given renderer."""
        if self.renderers is None or renderer is None:
            return True
        return renderer in self.renderers
