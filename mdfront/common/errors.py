"""
Error types for the frontmatter preprocessor.

Run-wide errors (configuration, schema loading) abort before any document is
touched. Document errors are collected per chapter by the batch coordinator.
"""
from typing import Any, List, Optional


class FrontmatterError(Exception):
    """Base class for every error raised by mdfront."""


class ConfigError(FrontmatterError):
    """Malformed run configuration."""


class InvalidSchemaUrlError(ConfigError):
    """Schema identifier does not use a supported URI scheme."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(
            f"Invalid schema URL: schema must be a URL (http://, https://, or file://): {uri}"
        )


class ProtocolError(FrontmatterError):
    """Host payload could not be decoded."""


class SchemaLoadError(FrontmatterError):
    """Base class for failures while resolving a schema identifier."""


class SchemaFetchError(SchemaLoadError):
    def __init__(self, url: str, cause: Any):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch schema from {url}: {cause}")


class SchemaReadError(SchemaLoadError):
    def __init__(self, path: str, cause: Any):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read schema from file {path}: {cause}")


class SchemaParseError(SchemaLoadError):
    def __init__(self, source: str, cause: Any):
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to parse schema from {source}: {cause}")


class InvalidSchemaError(FrontmatterError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid JSON schema: {reason}")


class DocumentError(FrontmatterError):
    """Error scoped to a single document; recoverable at the batch level."""

    def __init__(self, document: str, message: str):
        self.document = document
        super().__init__(message)


class FrontmatterParseError(DocumentError):
    def __init__(self, document: str, cause: Any):
        self.cause = cause
        super().__init__(document, f"Failed to parse frontmatter as YAML in {document}: {cause}")


class ValidationFailedError(DocumentError):
    def __init__(self, document: str, errors: str):
        self.errors = errors
        super().__init__(document, f"Frontmatter validation failed in {document}:\n{errors}")


class FrontmatterSerializeError(DocumentError):
    def __init__(self, cause: Any, document: Optional[str] = None):
        self.cause = cause
        super().__init__(document or "<unknown>", f"Failed to serialize fixed frontmatter: {cause}")


class BatchFailedError(FrontmatterError):
    """One or more documents failed and the run is configured to fail on error."""

    def __init__(self, errors: List[DocumentError]):
        self.errors = list(errors)
        lines = "\n".join(str(e) for e in self.errors)
        super().__init__(f"Frontmatter validation errors:\n{lines}")
