"""Subschema-bearing JSON Schema keywords and how to traverse them."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, Tuple


class KeywordShape(str, Enum):
    """How a keyword holds its subschemas."""

    SCHEMA_MAP = "schema_map"  # {name: schema}
    SINGLE_SCHEMA = "single_schema"  # schema
    SCHEMA_ARRAY = "schema_array"  # [schema, ...]


KEYWORDS: Dict[str, KeywordShape] = {
    "properties": KeywordShape.SCHEMA_MAP,
    "patternProperties": KeywordShape.SCHEMA_MAP,
    "dependencies": KeywordShape.SCHEMA_MAP,
    "definitions": KeywordShape.SCHEMA_MAP,
    "$defs": KeywordShape.SCHEMA_MAP,
    "additionalProperties": KeywordShape.SINGLE_SCHEMA,
    "propertyNames": KeywordShape.SINGLE_SCHEMA,
    "items": KeywordShape.SINGLE_SCHEMA,
    "additionalItems": KeywordShape.SINGLE_SCHEMA,
    "contains": KeywordShape.SINGLE_SCHEMA,
    "if": KeywordShape.SINGLE_SCHEMA,
    "then": KeywordShape.SINGLE_SCHEMA,
    "else": KeywordShape.SINGLE_SCHEMA,
    "not": KeywordShape.SINGLE_SCHEMA,
    "allOf": KeywordShape.SCHEMA_ARRAY,
    "anyOf": KeywordShape.SCHEMA_ARRAY,
    "oneOf": KeywordShape.SCHEMA_ARRAY,
}


def is_schema_value(value: Any) -> bool:
    """Whether a value can be a schema: an object or a boolean."""
    return isinstance(value, (dict, bool))


def iter_subschemas(schema: Dict[str, Any]) -> Iterator[Tuple[str, Tuple[str, ...], Any]]:
    """
    Yield every subschema position directly below a schema object.

    Yields:
        Tuples of (keyword, pointer tokens relative to the schema, subschema).
        Entries that are not subschemas (e.g. property-name arrays under
        `dependencies`) are skipped.
    """
    for keyword, shape in KEYWORDS.items():
        if keyword not in schema:
            continue
        value = schema[keyword]

        # `items` may also be an array of schemas (tuple validation)
        if shape is KeywordShape.SINGLE_SCHEMA and isinstance(value, list):
            shape = KeywordShape.SCHEMA_ARRAY

        if shape is KeywordShape.SINGLE_SCHEMA:
            yield keyword, (keyword,), value
        elif shape is KeywordShape.SCHEMA_ARRAY:
            if not isinstance(value, list):
                continue
            for index, item in enumerate(value):
                yield keyword, (keyword, str(index)), item
        elif isinstance(value, dict):
            for name, item in value.items():
                if keyword == "dependencies" and isinstance(item, list):
                    continue
                yield keyword, (keyword, name), item
