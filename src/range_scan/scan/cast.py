"""Field type tags and conversion of raw text fields into typed values."""

from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Any

from range_scan.errors import FieldCastError


class FieldType(Enum):
    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    ANY = "any"


_TYPE_ALIASES: dict[str, FieldType] = {
    "str": FieldType.STRING,
    "string": FieldType.STRING,
    "int": FieldType.INTEGER,
    "integer": FieldType.INTEGER,
    "long": FieldType.LONG,
    "float": FieldType.DOUBLE,
    "double": FieldType.DOUBLE,
    "bool": FieldType.BOOLEAN,
    "boolean": FieldType.BOOLEAN,
    "timestamp": FieldType.TIMESTAMP,
    "any": FieldType.ANY,
}

_TRUE_TEXT = frozenset({"true", "1"})
_FALSE_TEXT = frozenset({"false", "0"})


def parse_field_types(text: str) -> list[FieldType]:
    """Parse a comma-separated list of type names, e.g. "int,string,double"."""
    types = []
    for name in text.split(","):
        key = name.strip().lower()
        if key not in _TYPE_ALIASES:
            raise ValueError(f"unknown field type {name.strip()!r}")
        types.append(_TYPE_ALIASES[key])
    return types


def cast_field(value: str, field_type: FieldType, field_index: int) -> Any:
    """
    Convert one raw text field to its declared type.

    Raises:
        FieldCastError: If the text is not a valid value of the type.
    """
    if field_type is FieldType.STRING or field_type is FieldType.ANY:
        return value

    try:
        if field_type is FieldType.INTEGER or field_type is FieldType.LONG:
            return int(value.strip())
        if field_type is FieldType.DOUBLE:
            return float(value.strip())
        if field_type is FieldType.TIMESTAMP:
            return datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise FieldCastError(field_index, field_type, value) from exc

    if field_type is FieldType.BOOLEAN:
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False

    raise FieldCastError(field_index, field_type, value)


def build_record(
    fields: Sequence[str],
    projection: Sequence[int] | None = None,
    schema: Sequence[FieldType] | None = None,
) -> tuple[Any, ...]:
    """
    Select and type the fields of one raw record.

    Fields are taken in projection order when a projection is given, else in
    source order. Each kept field is cast with the schema entry of its source
    index; without a schema the raw text is kept.
    """
    indices = range(len(fields)) if projection is None else projection

    if schema is None:
        return tuple(fields[i] for i in indices)

    record = []
    for i in indices:
        value = fields[i]
        if i >= len(schema):
            raise FieldCastError(i, None, value)
        record.append(cast_field(value, schema[i], i))
    return tuple(record)
