"""
Best-effort repair of frontmatter towards a schema.

Only two kinds of repair are attempted: inserting declared defaults for
missing required properties, and coercing a value to its declared type when
the conversion is unambiguous. Anything else is left for the caller to report.
"""
import copy
import logging
import math
import re
from typing import Any, Dict, Optional

from jsonschema.exceptions import UnknownType
from jsonschema.protocols import Validator

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_BOOLEAN_STRINGS = {"true": True, "false": False}


def fix_frontmatter(value: Any, validator: Validator) -> Any:
    """
    Return a repaired copy of `value`; the input is never modified.

    Args:
        value: Parsed frontmatter
        validator: Compiled schema; its source schema drives the repair

    Returns:
        The repaired value, which may still carry unresolved violations
    """
    return _fix_value(copy.deepcopy(value), validator.schema, validator)


def _fix_value(value: Any, schema: Any, validator: Validator) -> Any:
    if not isinstance(schema, dict):
        return value

    declared = schema.get("type")
    if isinstance(declared, str):
        value = coerce_value(value, declared, validator)

    if isinstance(value, dict):
        _fix_object(value, schema, validator)
    elif isinstance(value, list):
        items = schema.get("items")
        if isinstance(items, dict):
            value = [_fix_value(item, items, validator) for item in value]

    return value


def _fix_object(value: Dict[str, Any], schema: Dict[str, Any], validator: Validator) -> None:
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        properties = {}

    required = schema.get("required")
    if not isinstance(required, list):
        required = []

    for name in required:
        if name in value:
            continue
        prop_schema = properties.get(name)
        if isinstance(prop_schema, dict) and "default" in prop_schema:
            value[name] = copy.deepcopy(prop_schema["default"])
            logger.debug(f"Inserted default for required property {name!r}")

    for name, prop_schema in properties.items():
        if name in value:
            value[name] = _fix_value(value[name], prop_schema, validator)


def _parse_integer(text: str) -> Optional[int]:
    text = text.strip()
    if not _INTEGER_RE.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # Beyond the interpreter's digit limit
        return None


def _parse_number(text: str) -> Optional[Any]:
    integer = _parse_integer(text)
    if integer is not None:
        return integer
    text = text.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def coerce_value(value: Any, declared: str, validator: Validator) -> Any:
    """
    Coerce `value` to the JSON Schema type `declared` when unambiguous.

    Type membership follows the validator's draft. Values that already
    satisfy the type, or have no unambiguous conversion, are returned
    unchanged.
    """
    try:
        if validator.is_type(value, declared):
            return value
    except UnknownType:
        # Unknown type names are for the validator to complain about
        return value

    if declared == "integer":
        if isinstance(value, str):
            integer = _parse_integer(value)
            if integer is not None:
                return integer
        elif isinstance(value, float) and value.is_integer():
            return int(value)
    elif declared == "number":
        if isinstance(value, str):
            number = _parse_number(value)
            if number is not None:
                return number
    elif declared == "boolean":
        if isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS:
            return _BOOLEAN_STRINGS[value.strip().lower()]
    elif declared == "string":
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
    elif declared == "array":
        if value is not None and not isinstance(value, dict):
            return [value]

    return value
