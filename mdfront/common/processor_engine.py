"""
Core engine for checking and fixing chapter frontmatter against a schema.
"""
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List, Optional

from jsonschema.protocols import Validator

from .config import Mode, RunConfig
from .errors import BatchFailedError, DocumentError, ValidationFailedError
from .extractor import extract, reassemble
from .fixer import fix_frontmatter
from .schema_validator import Violation, format_violations, validate
from .yaml_codec import parse_frontmatter, serialize_frontmatter

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """A chapter handed over by the host. Only `content` is ever changed."""

    name: str
    content: str
    path: Optional[str] = None

    @property
    def label(self) -> str:
        if self.path and self.path != self.name:
            return f"{self.name} ({self.path})"
        return self.name


class Outcome(StrEnum):
    NO_METADATA = "no_metadata"
    CONFORMANT = "conformant"
    REPORTED = "reported"
    FIXED = "fixed"
    UNRESOLVED = "unresolved"


@dataclass
class ProcessResult:
    outcome: Outcome
    violations: List[Violation] = field(default_factory=list)
    unresolved: List[Violation] = field(default_factory=list)
    changed: bool = False


@dataclass
class BatchResult:
    documents: List[Document]
    errors: List[DocumentError]
    stats: Dict[str, Any]


class FrontmatterProcessor:
    """Engine that runs the extract, parse, validate and fix steps over chapters."""

    def __init__(self, validator: Validator, config: RunConfig):
        """
        Initialize the processor.

        Args:
            validator: Compiled schema, shared read-only by every document
            config: Run configuration
        """
        self.validator = validator
        self.config = config

    def process_document(self, document: Document) -> ProcessResult:
        """
        Check, and in fix mode rewrite, a single document's frontmatter.

        Args:
            document: Document to process; its content is replaced only when a
                fix changes the serialized frontmatter

        Returns:
            ProcessResult describing the terminal state

        Raises:
            FrontmatterParseError: frontmatter is not valid YAML
            ValidationFailedError: violations found in validate mode
            FrontmatterSerializeError: fixed frontmatter could not be encoded
        """
        block = extract(document.content)
        if block is None:
            return ProcessResult(Outcome.NO_METADATA)

        frontmatter_text, body = block
        frontmatter = parse_frontmatter(frontmatter_text, document.label)

        violations = validate(self.validator, frontmatter)
        if not violations:
            return ProcessResult(Outcome.CONFORMANT)

        if self.config.mode is Mode.VALIDATE:
            raise ValidationFailedError(document.label, format_violations(violations))

        fixed = fix_frontmatter(frontmatter, self.validator)
        unresolved = validate(self.validator, fixed)
        for violation in unresolved:
            logger.warning(f"Unresolved frontmatter violation in {document.label}: {violation}")

        fixed_yaml = serialize_frontmatter(fixed, document.label)
        changed = fixed_yaml != serialize_frontmatter(frontmatter, document.label)
        if changed:
            document.content = reassemble(fixed_yaml, body)

        outcome = Outcome.UNRESOLVED if unresolved else Outcome.FIXED
        return ProcessResult(outcome, violations, unresolved, changed=changed)

    def process_batch(self, documents: List[Document]) -> BatchResult:
        """
        Process every document once, collecting per-document errors.

        Args:
            documents: Documents in host order

        Returns:
            BatchResult with the (possibly rewritten) documents, errors and stats

        Raises:
            BatchFailedError: if any document failed and fail_on_error is set
        """
        logger.info(f"Processing frontmatter of {len(documents)} documents in {self.config.mode} mode")

        stats = {
            "total_documents": len(documents),
            "changed_documents": 0,
            "failed": 0,
        }
        for outcome in Outcome:
            stats[outcome.value] = 0
        errors: List[DocumentError] = []

        for document in documents:
            try:
                result = self.process_document(document)
            except DocumentError as e:
                logger.warning(str(e))
                errors.append(e)
                stats["failed"] += 1
                if isinstance(e, ValidationFailedError):
                    stats[Outcome.REPORTED.value] += 1
                continue

            stats[result.outcome.value] += 1
            if result.changed:
                stats["changed_documents"] += 1
            logger.debug(f"{document.label}: {result.outcome}")

        logger.info(
            f"Completed frontmatter check: {stats['conformant']} conformant, "
            f"{stats['fixed'] + stats['unresolved']} fixed ({stats['unresolved']} unresolved), "
            f"{stats['failed']} failed, {stats['no_metadata']} without frontmatter"
        )

        if errors and self.config.fail_on_error:
            raise BatchFailedError(errors)

        return BatchResult(documents, errors, stats)
