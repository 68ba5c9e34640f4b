from .config import Mode, RunConfig
from .errors import (
    BatchFailedError,
    ConfigError,
    DocumentError,
    FrontmatterError,
    FrontmatterParseError,
    FrontmatterSerializeError,
    InvalidSchemaError,
    InvalidSchemaUrlError,
    ProtocolError,
    SchemaFetchError,
    SchemaLoadError,
    SchemaParseError,
    SchemaReadError,
    ValidationFailedError,
)
from .processor_engine import BatchResult, Document, FrontmatterProcessor, Outcome, ProcessResult
