"""
Schema compilation and validation utilities.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterator, List

from jsonschema import Draft202012Validator, SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from .errors import InvalidSchemaError

logger = logging.getLogger(__name__)

# Keywords whose values are instance data, not subschemas
_DATA_KEYWORDS = frozenset({"const", "default", "enum", "examples"})


@dataclass(frozen=True)
class Violation:
    """A single schema constraint failure, located by JSON path."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _local_refs(node: Any, root: bool = True) -> Iterator[str]:
    if isinstance(node, dict):
        own_id = node.get("$id", node.get("id"))
        if not root and isinstance(own_id, str) and not own_id.startswith("#"):
            # Refs below a nested $id resolve against that id
            return
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith("#"):
            yield ref
        for key, child in node.items():
            if key not in _DATA_KEYWORDS:
                yield from _local_refs(child, root=False)
    elif isinstance(node, list):
        for child in node:
            yield from _local_refs(child, root=False)


def check_local_refs(schema: Any) -> None:
    """
    Resolve every same-document `$ref` in the schema.

    Raises:
        InvalidSchemaError: if a local reference points nowhere
    """
    if not isinstance(schema, dict):
        return
    resource = Resource.from_contents(schema, default_specification=DRAFT202012)
    resolver = Registry().with_resource("", resource).resolver()
    for ref in _local_refs(schema):
        try:
            resolver.lookup(ref)
        except Unresolvable as e:
            raise InvalidSchemaError(f"unresolvable $ref {ref!r}: {e}") from e


def compile_schema(schema: Any) -> Validator:
    """
    Compile a schema value into a reusable validator.

    The draft is taken from `$schema`, falling back to Draft 2020-12.

    Raises:
        InvalidSchemaError: if the schema itself is not a valid JSON Schema,
            or one of its local references cannot be resolved
    """
    if not isinstance(schema, (dict, bool)):
        raise InvalidSchemaError(f"schema must be an object or a boolean, got {type(schema).__name__}")

    validator_cls = validator_for(schema, default=Draft202012Validator)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        raise InvalidSchemaError(e.message) from e
    check_local_refs(schema)

    logger.debug(f"Compiled schema with {validator_cls.__name__}")
    return validator_cls(schema, format_checker=validator_cls.FORMAT_CHECKER)


def validate(validator: Validator, value: Any) -> List[Violation]:
    """
    Validate a value against a compiled schema.

    Returns:
        Violations in schema-traversal order; empty when the value conforms

    Raises:
        InvalidSchemaError: if validation reaches a reference that cannot be
            resolved; this is a defect of the schema, not of the value
    """
    try:
        return [Violation(error.json_path, error.message) for error in validator.iter_errors(value)]
    except Unresolvable as e:
        logger.error(f"Schema reference could not be resolved: {e}")
        raise InvalidSchemaError(f"unresolvable reference: {e}") from e
